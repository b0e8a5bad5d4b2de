"""
Structured logging for snipforge.

Tracks registry loading, trigger matching and snippet insertion without
cluttering the suggestion code.

When enabled, logs are organized in date-stamped folders with separate
files for each log level:
  logs/YYYY-MM-DD/debug.log
  logs/YYYY-MM-DD/info.log
  logs/YYYY-MM-DD/warning.log
  logs/YYYY-MM-DD/error.log
"""

import logging
import json
from pathlib import Path
from typing import Optional
from datetime import datetime, timezone


class _ComponentFilter(logging.Filter):
    """Give records from plain module loggers a component column."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, 'component'):
            record.component = record.name.rsplit('.', 1)[-1].upper()
        return True


class SnipforgeLogger:
    """Centralized logger for suggestion lookup and insertion."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self.logger = logging.getLogger("snipforge")
            self.json_mode = False
            self.log_dir = None
            self._initialized = True

    def _get_default_log_dir(self) -> Path:
        """Get the default log directory path with today's date."""
        today = datetime.now().strftime("%Y-%m-%d")
        return Path("logs") / today

    def configure(
        self,
        level: str = "INFO",
        log_dir: Optional[str] = None,
        json_mode: bool = False,
        enable_logging: bool = True,
    ):
        """
        Configure logging output.

        Args:
            level: DEBUG, INFO, WARNING, ERROR (minimum level to log)
            log_dir: Optional directory for logs (default: logs/YYYY-MM-DD/)
            json_mode: Use JSON format for structured parsing
            enable_logging: Enable file logging
        """
        if not enable_logging:
            return

        self.json_mode = json_mode
        self.logger.handlers.clear()
        self.logger.setLevel(logging.DEBUG)

        if log_dir:
            self.log_dir = Path(log_dir)
        else:
            self.log_dir = self._get_default_log_dir()

        self.log_dir.mkdir(parents=True, exist_ok=True)

        if json_mode:
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(component)-8s] %(message)s',
                datefmt='%H:%M:%S'
            )

        min_level = getattr(logging, level.upper(), logging.INFO)

        log_levels = [
            (logging.DEBUG, 'debug.log'),
            (logging.INFO, 'info.log'),
            (logging.WARNING, 'warning.log'),
            (logging.ERROR, 'error.log'),
        ]

        for log_level, filename in log_levels:
            if log_level >= min_level:
                handler = logging.FileHandler(self.log_dir / filename, mode='a', encoding='utf-8')
                handler.setLevel(log_level)
                handler.setFormatter(formatter)
                handler.addFilter(_ComponentFilter())
                # Each file holds exactly one level
                handler.addFilter(lambda record, level=log_level: record.levelno == level)
                self.logger.addHandler(handler)

    def _log(self, level: str, component: str, msg: str, **data):
        """Core logging with structured data."""
        extra = {'component': component, **data}
        getattr(self.logger, level)(msg, extra=extra)

    # === REGISTRY ===

    def table_loaded(self, table: str, count: int, path: str):
        self._log('debug', 'LOADER', f"Loaded table {table}: {count} suggestions",
                  table=table, count=count, path=path)

    def table_missing(self, table: str, path: str):
        self._log('warning', 'LOADER', f"WARNING: table {table} not found at {path}, skipping",
                  table=table, path=path)

    def registry_loaded(self, base_count: int, languages: int, source: str):
        self._log('info', 'REGISTRY',
                  f"Registry ready: {base_count} base suggestions, {languages} languages ({source})",
                  base_count=base_count, languages=languages, source=source)

    # === MATCHING & INSERTION ===

    def suggestions_matched(self, language: Optional[str], text_tail: str, count: int):
        self._log('debug', 'MATCHER', f"{count} matches for {text_tail!r} ({language or 'base'})",
                  language=language, match_count=count)

    def snippet_applied(self, label: str, deleted: int, inserted: int):
        self._log('debug', 'INSERTER', f"Applied '{label}' (-{deleted}/+{inserted} chars)",
                  label=label, deleted=deleted, inserted=inserted)

    def stale_trigger(self, label: str, trigger: str):
        self._log('info', 'INSERTER', f"Trigger {trigger!r} for '{label}' not at cursor, inserting only",
                  label=label, trigger=trigger)

    # === ERRORS & WARNINGS ===

    def error(self, component: str, message: str, exception: Optional[Exception] = None):
        import traceback

        error_details = message
        if exception:
            tb_str = ''.join(traceback.format_exception(type(exception), exception, exception.__traceback__))
            error_details = f"{message}\n{tb_str}"

        self._log('error', component.upper(), f"ERROR: {error_details}",
                  error=str(exception) if exception else message)

    def warning(self, component: str, message: str):
        self._log('warning', component.upper(), f"WARNING: {message}")


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for machine parsing."""

    _RESERVED = {
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
        'filename', 'module', 'exc_info', 'exc_text', 'stack_info',
        'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
        'thread', 'threadName', 'processName', 'process', 'message',
        'component', 'asctime', 'taskName',
    }

    def format(self, record: logging.LogRecord) -> str:
        data = {
            'time': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'component': getattr(record, 'component', 'SYSTEM'),
            'message': record.getMessage(),
        }
        for k, v in record.__dict__.items():
            if k not in self._RESERVED:
                data[k] = v
        return json.dumps(data, default=str)


# Global instance
logger = SnipforgeLogger()
