"""
Function registration and the instrumented invocation wrapper.
"""

import functools
import inspect
import time
from collections.abc import Callable
from typing import Any

from evalengine.core.metadata import extract_metadata
from evalengine.core.schema import InputSchema
from evalengine.handles.handle import TestingHandle
from evalengine.handles.registry import HandleRegistry
from evalengine.logging import get_logger

logger = get_logger(__name__)


def register(
    original_function: Callable[..., Any],
    schema: InputSchema | None = None,
    *,
    name: str | None = None,
    registry: HandleRegistry | None = None,
) -> TestingHandle:
    """
    Register an LLM-calling function for testing.

    Returns a handle whose ``run`` attribute is an instrumented version of
    the function: every call is timed, its metadata extracted, and the
    applicable rules checked before the original result is returned.

    Args:
        original_function: The function to wrap (sync or async)
        schema: Input schema used to validate declared test inputs
        name: Handle name (defaults to the function name)
        registry: Registry to add the handle to

    Returns:
        The new TestingHandle
    """
    handle = TestingHandle(original_function, schema=schema, name=name)
    handle.run = instrument(handle)
    if registry is not None:
        registry.add(handle)
    return handle


def instrument(handle: TestingHandle) -> Callable[..., Any]:
    """
    Build the instrumented wrapper for a handle's original function.

    Exceptions raised by the original function propagate unchanged and no
    assertions run. Assertion failures propagate out of the wrapper.
    """
    func = handle.original_function

    def _check(args: tuple, kwargs: dict, result: Any, started: float) -> None:
        elapsed_ms = (time.perf_counter() - started) * 1000
        metadata = extract_metadata(args, kwargs, result, elapsed_ms)
        logger.debug(
            "Invocation finished",
            handle=handle.name,
            duration_ms=elapsed_ms,
            tools=len(metadata.tools_called),
        )
        handle.execute_assertions(metadata)

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            result = await func(*args, **kwargs)
            _check(args, kwargs, result, started)
            return result

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        started = time.perf_counter()
        result = func(*args, **kwargs)
        if inspect.isawaitable(result):
            return _await_and_check(result, args, kwargs, started)
        _check(args, kwargs, result, started)
        return result

    async def _await_and_check(awaitable: Any, args: tuple, kwargs: dict, started: float) -> Any:
        result = await awaitable
        _check(args, kwargs, result, started)
        return result

    return wrapper
