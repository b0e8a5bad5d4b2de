"""
Utilities module - logging helpers.
"""

from snipforge.utils.logger import logger, JsonFormatter

__all__ = ["logger", "JsonFormatter"]
