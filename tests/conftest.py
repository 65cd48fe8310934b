"""
Shared test fixtures.
"""

import io
import logging
import os

import pytest
from rich.console import Console

from evalengine.core.metadata import ExecutionMetadata
from evalengine.runner.reporting import ConsoleReporter

PRODUCT_TEXT = "The Wireless Earbuds offer great sound quality."


def make_metadata(
    output: str = PRODUCT_TEXT,
    *,
    input: object = "Wireless Earbuds",
    response_time: float = 0.0,
    tools_called: tuple[str, ...] = (),
    prompt: str | None = None,
) -> ExecutionMetadata:
    """Build metadata with sensible defaults for predicate tests."""
    return ExecutionMetadata(
        input=input,
        output=output,
        response_time=response_time,
        tools_called=tools_called,
        prompt=prompt if prompt is not None else (input if isinstance(input, str) else ""),
    )


@pytest.fixture
def metadata() -> ExecutionMetadata:
    return make_metadata()


@pytest.fixture
def report_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(report_stream: io.StringIO) -> ConsoleReporter:
    """Reporter writing plain text into a buffer."""
    console = Console(file=report_stream, highlight=False, color_system=None, width=200)
    return ConsoleReporter(console)


@pytest.fixture(autouse=True)
def reset_evalengine_logger():
    """Undo configure_logging() side effects between tests."""
    root = logging.getLogger("evalengine")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


@pytest.fixture(autouse=True)
def clean_evalengine_env(monkeypatch):
    """Keep EVALENGINE_* variables from the outer environment out of tests."""
    for name in list(os.environ):
        if name.upper().startswith("EVALENGINE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def make_meta():
    """Factory fixture for ExecutionMetadata."""
    return make_metadata
