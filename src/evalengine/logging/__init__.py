"""
eval-engine structured logging.
"""

from evalengine.logging.config import (
    LogFormat,
    LogLevel,
    EvalEngineLogger,
    configure_logging,
    get_logger,
)
from evalengine.logging.context import ContextFilter, get_log_context, with_log_context
from evalengine.logging.formatters import JSONFormatter, TextFormatter

__all__ = [
    # Configuration
    "configure_logging",
    "get_logger",
    "EvalEngineLogger",
    "LogLevel",
    "LogFormat",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    # Context
    "ContextFilter",
    "get_log_context",
    "with_log_context",
]
