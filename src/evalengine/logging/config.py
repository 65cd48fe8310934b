"""
Logging configuration for eval-engine.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Any, TextIO

from evalengine.logging.context import ContextFilter
from evalengine.logging.formatters import JSONFormatter, TextFormatter

ROOT_LOGGER_NAME = "evalengine"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    TEXT = "text"


class EvalEngineLogger:
    """
    Logger wrapper that accepts structured fields as keyword arguments.

    Example:
        logger = get_logger("evalengine.runner")
        logger.info("Suite finished", suite="checkout", duration_ms=15.2)
    """

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(
        self,
        level: int,
        msg: str,
        *args: Any,
        exc_info: bool | BaseException | None = None,
        **kwargs: Any,
    ) -> None:
        self._logger.log(level, msg, *args, exc_info=exc_info, extra=kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(
        self,
        msg: str,
        *args: Any,
        exc_info: bool | BaseException | None = None,
        **kwargs: Any,
    ) -> None:
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an error message with traceback."""
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)


def get_logger(name: str) -> EvalEngineLogger:
    """
    Get an eval-engine logger by name.

    Args:
        name: Logger name (typically ``__name__``)
    """
    return EvalEngineLogger(name)


def configure_logging(
    level: LogLevel | str = LogLevel.WARNING,
    format: LogFormat | str = LogFormat.TEXT,
    output: TextIO | None = None,
    include_context: bool = True,
    use_colors: bool = True,
) -> None:
    """
    Configure eval-engine logging.

    Should be called once at startup; the CLI calls it before discovery.
    Logs go to stderr by default so they never mix with the test report.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (json for CI, text for local runs)
        output: Output stream (defaults to stderr)
        include_context: Whether to inject suite/handle context fields
        use_colors: Whether to use colors in text format (ignored for JSON)
    """
    if isinstance(level, str):
        level = LogLevel(level.upper())
    if isinstance(format, str):
        format = LogFormat(format.lower())
    if output is None:
        output = sys.stderr

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.value))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(output)
    handler.setLevel(getattr(logging, level.value))

    if format == LogFormat.JSON:
        handler.setFormatter(JSONFormatter(include_extra=True))
    else:
        handler.setFormatter(TextFormatter(use_colors=use_colors))

    if include_context:
        handler.addFilter(ContextFilter())

    root_logger.addHandler(handler)
    root_logger.propagate = False
