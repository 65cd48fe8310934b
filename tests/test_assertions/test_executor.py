"""Tests for the assertion executor."""

import pytest

from evalengine.assertions import CHECKS
from evalengine.assertions.builder import AssertionBuilder
from evalengine.assertions.executor import execute_assertions
from evalengine.assertions.predicates import AssertionPredicate
from evalengine.core.errors import AssertionFailedError, UnknownPredicateError


class TestExecuteAssertions:
    def test_all_pass(self, make_meta):
        predicates = AssertionBuilder().ensure_contains("sound").ensure_length_over(10).build()
        execute_assertions(predicates, make_meta())

    def test_empty_sequence(self, make_meta):
        execute_assertions((), make_meta())

    def test_first_failure_stops(self, make_meta, monkeypatch):
        """Predicates after the first failure are never evaluated."""
        calls = []
        original = CHECKS["ensure_length_over"]

        def recording_check(predicate, metadata):
            calls.append(predicate.args)
            original(predicate, metadata)

        monkeypatch.setitem(CHECKS, "ensure_length_over", recording_check)
        predicates = (
            AssertionBuilder()
            .ensure_length_over(1)
            .ensure_contains("missing")
            .ensure_length_over(2)
            .build()
        )

        with pytest.raises(AssertionFailedError) as exc_info:
            execute_assertions(predicates, make_meta())

        assert exc_info.value.assertion == "ensure_contains"
        assert calls == [(1,)]

    def test_unexpected_error_wrapped(self, make_meta, monkeypatch):
        def broken_check(predicate, metadata):
            raise KeyError("oops")

        monkeypatch.setitem(CHECKS, "ensure_contains", broken_check)
        predicates = AssertionBuilder().ensure_contains("x").build()

        with pytest.raises(AssertionFailedError) as exc_info:
            execute_assertions(predicates, make_meta())

        error = exc_info.value
        assert error.assertion == "ensure_contains"
        assert error.message.startswith('Assertion failed: Response should contain "x". Error:')
        assert isinstance(error.__cause__, KeyError)

    def test_unknown_predicate_not_wrapped(self, make_meta):
        predicates = (AssertionPredicate(method="ensure_vibes", args=(), message="Vibes"),)

        with pytest.raises(UnknownPredicateError):
            execute_assertions(predicates, make_meta())
