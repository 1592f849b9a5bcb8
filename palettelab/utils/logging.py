"""
PaletteLab Structured Logging
Centralized loguru configuration shared by the API and the extraction core.
"""
import sys
from typing import Dict, Any, Optional

from loguru import logger

from palettelab.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message} | {extra}"


class StructuredLogger:
    """Thin wrapper that binds request context onto loguru records."""

    def __init__(self, level: Optional[str] = None, serialize: bool = False):
        self.level = (level or config.LOG_LEVEL).upper()
        logger.remove()
        logger.add(sys.stdout, format=LOG_FORMAT, level=self.level, serialize=serialize)

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        target = logger.bind(**extra) if extra else logger
        target.opt(depth=2).log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("DEBUG", message, extra)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create the global structured logger (configures loguru once)."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger
