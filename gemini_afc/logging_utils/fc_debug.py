"""
Function Calling Debug Logger

Module-tagged debug logging for the function calling pipeline. Records are
emitted on a child of the library logger with an ``[FC:<module>]`` prefix so
extraction, execution, response building and loop decisions can be filtered
independently. Output is gated by FUNCTION_CALLING_DEBUG.
"""

import logging
from enum import Enum
from typing import Any, Optional

from gemini_afc.config.settings import FUNCTION_CALLING_DEBUG, LOGGER_NAME


class FCModule(str, Enum):
    """Pipeline stage a debug record belongs to."""

    EXTRACT = "extract"
    EXECUTE = "execute"
    RESPONSE = "response"
    LOOP = "loop"


class FCDebugLogger:
    """Thin wrapper that prefixes records with the pipeline stage."""

    def __init__(
        self, logger: Optional[logging.Logger] = None, enabled: bool = FUNCTION_CALLING_DEBUG
    ) -> None:
        self.logger = logger or logging.getLogger(f"{LOGGER_NAME}.fc")
        self.enabled = enabled

    def _log(self, level: int, module: FCModule, message: str, **kwargs: Any) -> None:
        if not self.enabled:
            return
        self.logger.log(level, f"[FC:{module.value}] {message}", **kwargs)

    def debug(self, module: FCModule, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, module, message, **kwargs)

    def info(self, module: FCModule, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, module, message, **kwargs)

    def warning(self, module: FCModule, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, module, message, **kwargs)

    def error(self, module: FCModule, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, module, message, **kwargs)


_fc_logger: Optional[FCDebugLogger] = None


def get_fc_logger() -> FCDebugLogger:
    """Return the shared function calling debug logger."""
    global _fc_logger
    if _fc_logger is None:
        _fc_logger = FCDebugLogger()
    return _fc_logger


__all__ = ["FCModule", "FCDebugLogger", "get_fc_logger"]
