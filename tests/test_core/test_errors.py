"""Tests for the error taxonomy and input schemas."""

from typing import Annotated

import pytest
from pydantic import BaseModel, StringConstraints

from evalengine.core.errors import (
    AssertionFailedError,
    DiscoveryError,
    EvalEngineError,
    PredicateConfigurationError,
    SchemaValidationError,
    UnknownPredicateError,
)
from evalengine.core.schema import InputSchema


class TestAssertionFailedError:
    def test_is_builtin_assertion_error(self):
        error = AssertionFailedError("nope", "ensure_contains")

        assert isinstance(error, AssertionError)
        assert isinstance(error, EvalEngineError)
        assert error.assertion == "ensure_contains"
        assert error.failures == [error]

    def test_to_dict(self):
        data = AssertionFailedError("nope", "tool_is_used").to_dict()

        assert data["code"] == "ASSERTION_FAILED"
        assert data["assertion"] == "tool_is_used"
        assert data["message"] == "nope"

    def test_aggregate_single_returns_same_error(self):
        error = AssertionFailedError("one", "ensure_contains")
        assert AssertionFailedError.aggregate([error]) is error

    def test_aggregate_many(self):
        first = AssertionFailedError("first", "ensure_contains")
        second = AssertionFailedError("second", "ensure_length_over")

        combined = AssertionFailedError.aggregate([first, second])

        assert combined.message == "first; second"
        assert combined.failures == [first, second]
        assert combined.details["assertions"] == ["ensure_contains", "ensure_length_over"]


class TestOtherErrors:
    def test_unknown_predicate_is_not_an_assertion_error(self):
        error = UnknownPredicateError("ensure_vibes")

        assert not isinstance(error, AssertionError)
        assert error.code == "UNKNOWN_PREDICATE"
        assert "ensure_vibes" in error.message

    def test_configuration_error_is_value_error(self):
        error = PredicateConfigurationError("ensure_length_over", "threshold must be non-negative")
        assert isinstance(error, ValueError)
        assert error.details == {"method": "ensure_length_over"}

    def test_discovery_error(self):
        error = DiscoveryError("evals/broken_eval.py", "SyntaxError: invalid syntax")
        assert error.path == "evals/broken_eval.py"
        assert error.message.startswith("Failed to load evals/broken_eval.py")


class TestInputSchema:
    def test_valid_input_returned(self):
        schema = InputSchema(input=Annotated[str, StringConstraints(min_length=1)])
        assert schema.validate("Wireless Earbuds") == "Wireless Earbuds"

    def test_invalid_input_raises_schema_error(self):
        schema = InputSchema(input=Annotated[str, StringConstraints(min_length=1)])

        with pytest.raises(SchemaValidationError) as exc_info:
            schema.validate("")

        error = exc_info.value
        assert not isinstance(error, AssertionError)
        assert error.value == ""
        assert error.errors
        assert error.code == "SCHEMA_VALIDATION_FAILED"

    def test_model_schema(self):
        class Request(BaseModel):
            prompt: str
            max_tokens: int = 100

        schema = InputSchema(input=Request)
        validated = schema.validate({"prompt": "hi"})

        assert isinstance(validated, Request)
        assert validated.max_tokens == 100

        with pytest.raises(SchemaValidationError):
            schema.validate({"max_tokens": 5})
