"""
Assertion builder for fluent predicate declaration.
"""

import re
from numbers import Real

from evalengine.assertions.predicates import AssertionPredicate, PredicateMethod
from evalengine.core.errors import PredicateConfigurationError


class AssertionBuilder:
    """
    Fluent builder for declaring response predicates.

    Each method appends one predicate and returns the builder, so calls chain.
    The builder knows nothing about handles; a handle reads ``assertions``
    after the declaring callback returns.

    Example:
        predicates = (
            AssertionBuilder()
            .ensure_doesnt_contain("VR")
            .ensure_length_over(50)
            .ensure_response_time_under(5000)
            .build()
        )
    """

    def __init__(self) -> None:
        self._assertions: list[AssertionPredicate] = []

    def _add(self, method: PredicateMethod, args: tuple, message: str) -> "AssertionBuilder":
        self._assertions.append(
            AssertionPredicate(method=method.value, args=args, message=message)
        )
        return self

    def ensure_doesnt_contain(self, text: str) -> "AssertionBuilder":
        """Fail when the response contains ``text`` (case-sensitive)."""
        _require_str(PredicateMethod.DOESNT_CONTAIN, text)
        return self._add(
            PredicateMethod.DOESNT_CONTAIN,
            (text,),
            f'Response should not contain "{text}"',
        )

    def ensure_contains(self, text: str) -> "AssertionBuilder":
        """Fail when the response does not contain ``text`` (case-sensitive)."""
        _require_str(PredicateMethod.CONTAINS, text)
        return self._add(
            PredicateMethod.CONTAINS,
            (text,),
            f'Response should contain "{text}"',
        )

    def ensure_matches_pattern(self, pattern: str | re.Pattern[str]) -> "AssertionBuilder":
        """
        Fail when the pattern is not found anywhere in the response.

        Accepts a compiled pattern (flags preserved) or a pattern string.
        """
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise PredicateConfigurationError(
                    PredicateMethod.MATCHES_PATTERN.value, str(e)
                ) from e
        elif not isinstance(pattern, re.Pattern):
            raise PredicateConfigurationError(
                PredicateMethod.MATCHES_PATTERN.value,
                f"expected str or re.Pattern, got {type(pattern).__name__}",
            )
        return self._add(
            PredicateMethod.MATCHES_PATTERN,
            (pattern,),
            f"Response should match pattern /{pattern.pattern}/",
        )

    def ensure_response_time_under(self, ms: float) -> "AssertionBuilder":
        """Fail when the measured response time is ``ms`` or more."""
        _require_threshold(PredicateMethod.RESPONSE_TIME_UNDER, ms)
        return self._add(
            PredicateMethod.RESPONSE_TIME_UNDER,
            (ms,),
            f"Response time should be under {ms}ms",
        )

    def ensure_length_over(self, chars: int) -> "AssertionBuilder":
        """Fail when the response is ``chars`` characters long or shorter."""
        _require_threshold(PredicateMethod.LENGTH_OVER, chars)
        return self._add(
            PredicateMethod.LENGTH_OVER,
            (chars,),
            f"Response length should be over {chars} characters",
        )

    def tool_is_used(self, tool_name: str) -> "AssertionBuilder":
        """Fail when ``tool_name`` does not appear in the tool trace."""
        _require_str(PredicateMethod.TOOL_IS_USED, tool_name)
        return self._add(
            PredicateMethod.TOOL_IS_USED,
            (tool_name,),
            f'Tool "{tool_name}" should be used',
        )

    def ensure_no_tools_called(self) -> "AssertionBuilder":
        """Fail when any tool was called."""
        return self._add(
            PredicateMethod.NO_TOOLS_CALLED,
            (),
            "No tools should be called",
        )

    @property
    def assertions(self) -> tuple[AssertionPredicate, ...]:
        """Predicates declared so far, in declaration order."""
        return tuple(self._assertions)

    def build(self) -> tuple[AssertionPredicate, ...]:
        """Return the declared predicates."""
        return self.assertions

    def __len__(self) -> int:
        return len(self._assertions)


def _require_str(method: PredicateMethod, value: object) -> None:
    if not isinstance(value, str):
        raise PredicateConfigurationError(
            method.value, f"expected str, got {type(value).__name__}"
        )


def _require_threshold(method: PredicateMethod, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise PredicateConfigurationError(
            method.value, f"expected a number, got {type(value).__name__}"
        )
    if value < 0:
        raise PredicateConfigurationError(method.value, "threshold must be non-negative")
