"""
Rule and test-case records, and deep value equality for input matching.
"""

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from evalengine.assertions.predicates import AssertionPredicate


class RuleKind(str, Enum):
    """When a rule applies."""

    ALWAYS = "for_all"
    MATCH_EXACT_INPUT = "for_input"
    MATCH_SUBSTRING = "for_containing"


@dataclass(frozen=True)
class Rule:
    """A condition paired with the predicates to run when it holds."""

    kind: RuleKind
    predicates: tuple[AssertionPredicate, ...]
    condition: Any = None


@dataclass(frozen=True)
class TestCase:
    """A declared input and the predicates expected to hold for it."""

    __test__ = False  # not a pytest class

    input: Any
    predicates: tuple[AssertionPredicate, ...]


def values_equal(left: Any, right: Any) -> bool:
    """
    Compare two values structurally.

    Mappings compare by key set and values, non-string sequences element-wise,
    pydantic models and dataclasses through their fields. Everything else
    falls back to ``==``. Self-referencing structures terminate: a pair
    already being compared higher up the stack counts as equal.
    """
    return _values_equal(left, right, {})


def _as_fields(value: Any) -> dict[str, Any] | None:
    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump) and not isinstance(value, type):
        return dict(model_dump())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    return None


def _values_equal(left: Any, right: Any, seen: dict[tuple[int, int], tuple[Any, Any]]) -> bool:
    if left is right:
        return True

    # seen holds references to both sides so their ids cannot be reused
    pair = (id(left), id(right))
    if pair in seen:
        return True

    left_fields = _as_fields(left)
    right_fields = _as_fields(right)
    if left_fields is not None or right_fields is not None:
        if type(left) is not type(right):
            return False
        if set(left_fields) != set(right_fields):
            return False
        seen[pair] = (left, right)
        return all(_values_equal(left_fields[k], right_fields[k], seen) for k in left_fields)

    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if set(left.keys()) != set(right.keys()):
            return False
        seen[pair] = (left, right)
        return all(_values_equal(left[key], right[key], seen) for key in left)

    if _is_sequence(left) and _is_sequence(right):
        if len(left) != len(right):
            return False
        seen[pair] = (left, right)
        return all(_values_equal(a, b, seen) for a, b in zip(left, right))

    if isinstance(left, Mapping) or isinstance(right, Mapping):
        return False
    if _is_sequence(left) or _is_sequence(right):
        return False

    try:
        return bool(left == right)
    except Exception:
        return False


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray)
