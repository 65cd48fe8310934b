"""
Predicate descriptors and the checks that back them.

A predicate is data: a method name, its arguments, and an expectation
message. Calling a predicate looks its method up in the check table, so the
same descriptor can be run by the invocation wrapper and by the test runner.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from evalengine.core.errors import AssertionFailedError, UnknownPredicateError
from evalengine.core.metadata import ExecutionMetadata


class PredicateMethod(str, Enum):
    """Predicate kinds the builder can declare."""

    DOESNT_CONTAIN = "ensure_doesnt_contain"
    CONTAINS = "ensure_contains"
    MATCHES_PATTERN = "ensure_matches_pattern"
    RESPONSE_TIME_UNDER = "ensure_response_time_under"
    LENGTH_OVER = "ensure_length_over"
    TOOL_IS_USED = "tool_is_used"
    NO_TOOLS_CALLED = "ensure_no_tools_called"


@dataclass(frozen=True)
class AssertionPredicate:
    """
    One named, parameterized check against execution metadata.

    Attributes:
        method: Predicate name (a PredicateMethod value)
        args: Positional arguments for the check
        message: Expectation text used as the prefix of failure messages
    """

    method: str
    args: tuple[Any, ...]
    message: str

    @property
    def name(self) -> str:
        """Plain method name, whether declared as a string or a PredicateMethod."""
        return self.method.value if isinstance(self.method, Enum) else str(self.method)

    def __call__(self, metadata: ExecutionMetadata) -> None:
        """
        Run the check.

        Raises:
            AssertionFailedError: If the check fails
            UnknownPredicateError: If no check is registered for the method
        """
        check = CHECKS.get(self.name)
        if check is None:
            raise UnknownPredicateError(self.name)
        check(self, metadata)


def _response(metadata: ExecutionMetadata) -> str:
    return str(metadata.output)


def _tools(metadata: ExecutionMetadata) -> str:
    return f"[{', '.join(map(str, metadata.tools_called))}]"


def _fail(predicate: AssertionPredicate, detail: str) -> AssertionFailedError:
    return AssertionFailedError(f"{predicate.message}. {detail}", predicate.name)


def _check_doesnt_contain(predicate: AssertionPredicate, metadata: ExecutionMetadata) -> None:
    (text,) = predicate.args
    if text in _response(metadata):
        raise _fail(predicate, f'Found: "{text}" in response.')


def _check_contains(predicate: AssertionPredicate, metadata: ExecutionMetadata) -> None:
    (text,) = predicate.args
    if text not in _response(metadata):
        raise _fail(predicate, "Not found in response.")


def _check_matches_pattern(predicate: AssertionPredicate, metadata: ExecutionMetadata) -> None:
    (pattern,) = predicate.args
    response = _response(metadata)
    if re.search(pattern, response) is None:
        raise _fail(predicate, f'Response: "{response}"')


def _check_response_time_under(predicate: AssertionPredicate, metadata: ExecutionMetadata) -> None:
    (ms,) = predicate.args
    if metadata.response_time >= ms:
        raise _fail(predicate, f"Actual: {metadata.response_time:g}ms")


def _check_length_over(predicate: AssertionPredicate, metadata: ExecutionMetadata) -> None:
    (chars,) = predicate.args
    length = len(_response(metadata))
    if length <= chars:
        raise _fail(predicate, f"Actual: {length} characters")


def _check_tool_is_used(predicate: AssertionPredicate, metadata: ExecutionMetadata) -> None:
    (tool_name,) = predicate.args
    if tool_name not in metadata.tools_called:
        raise _fail(predicate, f"Tools called: {_tools(metadata)}")


def _check_no_tools_called(predicate: AssertionPredicate, metadata: ExecutionMetadata) -> None:
    if metadata.tools_called:
        raise _fail(predicate, f"Tools called: {_tools(metadata)}")


CHECKS: dict[str, Callable[[AssertionPredicate, ExecutionMetadata], None]] = {
    PredicateMethod.DOESNT_CONTAIN.value: _check_doesnt_contain,
    PredicateMethod.CONTAINS.value: _check_contains,
    PredicateMethod.MATCHES_PATTERN.value: _check_matches_pattern,
    PredicateMethod.RESPONSE_TIME_UNDER.value: _check_response_time_under,
    PredicateMethod.LENGTH_OVER.value: _check_length_over,
    PredicateMethod.TOOL_IS_USED.value: _check_tool_is_used,
    PredicateMethod.NO_TOOLS_CALLED.value: _check_no_tools_called,
}
