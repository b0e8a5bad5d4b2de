"""
Configuration management for snipforge.

Loads settings from environment variables and provides configuration objects.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """snipforge configuration."""

    data_dir: Optional[str] = None
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    json_logs: bool = False
    enable_logging: bool = False
    enforce_context: bool = True

    def __init__(self):
        """Initialize config from environment variables."""
        self.data_dir = os.getenv("SNIPFORGE_DATA_DIR") or None
        self.log_level = os.getenv("SNIPFORGE_LOG_LEVEL", "INFO").upper()
        self.log_dir = os.getenv("SNIPFORGE_LOG_DIR") or None
        self.json_logs = os.getenv("SNIPFORGE_JSON_LOGS", "false").lower() == "true"
        self.enable_logging = os.getenv("SNIPFORGE_ENABLE_LOGGING", "false").lower() == "true"
        self.enforce_context = os.getenv("SNIPFORGE_ENFORCE_CONTEXT", "true").lower() == "true"

    def configure_logging(self) -> None:
        """Apply the logging settings to the global logger."""
        from snipforge.utils.logger import logger

        logger.configure(
            level=self.log_level,
            log_dir=self.log_dir,
            json_mode=self.json_logs,
            enable_logging=self.enable_logging,
        )
