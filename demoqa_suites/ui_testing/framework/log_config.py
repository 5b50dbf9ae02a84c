"""
================================================================================
Logging Configuration
================================================================================

Centralized Loguru setup for the UI framework.

Framework components never call the global logger ad hoc. They accept a
`logger` argument (anything exposing debug/info/warning/error) and default to
a component-bound Loguru logger from `get_logger()`. Unit tests pass a
recording or silent logger instead.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Optional, Protocol

from loguru import logger


DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


class SupportsLogging(Protocol):
    """Minimal logger interface the framework depends on."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> Any: ...

    def info(self, message: str, *args: Any, **kwargs: Any) -> Any: ...

    def warning(self, message: str, *args: Any, **kwargs: Any) -> Any: ...

    def error(self, message: str, *args: Any, **kwargs: Any) -> Any: ...


def init_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    format_str: Optional[str] = None,
) -> None:
    """
    Initialize the global Loguru logger once per process.

    Args:
        level: Log level. Defaults to LOG_LEVEL env var, then INFO.
        log_file: Optional file sink path (rotated at 10 MB, kept 7 days).
        format_str: Custom format string.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_format = format_str or DEFAULT_FORMAT

    logger.remove()
    logger.configure(extra={"component": "-"})
    logger.add(
        sys.stderr,
        level=log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    log_file = log_file or os.getenv("LOG_FILE")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level,
            format=log_format.replace("{level: <8}", "{level}"),
            rotation="10 MB",
            retention="7 days",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


def get_logger(component: str) -> SupportsLogging:
    """Return the Loguru logger bound to a component name."""
    return logger.bind(component=component)


class NullLogger:
    """Logger that drops everything. Handy for silent unit tests."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass


__all__ = [
    "SupportsLogging",
    "NullLogger",
    "init_logger",
    "get_logger",
]
