"""
Logging context management for eval-engine.

Lets the runner attach suite, handle, and case information to every log
record emitted while that unit of work is executing.
"""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "evalengine_log_context",
    default=None,
)

CONTEXT_FIELDS = ("suite", "handle", "case_input", "assertion")


def get_log_context() -> dict[str, Any]:
    """Get the current log context."""
    ctx = _log_context.get()
    return ctx.copy() if ctx else {}


@contextmanager
def with_log_context(**kwargs: Any) -> Iterator[None]:
    """
    Context manager for adding log context within a scope.

    Fields are layered on top of the enclosing context.

    Example:
        with with_log_context(suite="product_description"):
            with with_log_context(handle="describe"):
                logger.info("Running")  # Includes suite and handle
    """
    previous = _log_context.get()

    new_context = previous.copy() if previous else {}
    new_context.update(kwargs)
    token = _log_context.set(new_context)

    try:
        yield
    finally:
        _log_context.reset(token)


class ContextFilter(logging.Filter):
    """
    Logging filter that injects context fields into log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
