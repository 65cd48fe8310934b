"""
Error taxonomy for eval-engine.

All eval-engine errors inherit from EvalEngineError and include:
- A unique error code for programmatic handling
- A human-readable message
- Optional details for reporting
"""

from typing import Any


class EvalEngineError(Exception):
    """
    Base class for all eval-engine errors.

    Attributes:
        code: Unique error code for programmatic handling
        message: Human-readable error message
        details: Additional error context
    """

    code: str = "EVALENGINE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class AssertionFailedError(EvalEngineError, AssertionError):
    """
    A declared predicate was violated.

    Subclasses the builtin AssertionError so plain ``pytest.raises(AssertionError)``
    and ``except AssertionError`` keep working for callers of a wrapped function.
    """

    code = "ASSERTION_FAILED"

    def __init__(
        self,
        message: str,
        assertion: str,
        *,
        failures: list["AssertionFailedError"] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.assertion = assertion
        self.failures = failures or [self]

    @classmethod
    def aggregate(cls, failures: list["AssertionFailedError"]) -> "AssertionFailedError":
        """Combine failures from several rules into one error."""
        if len(failures) == 1:
            return failures[0]
        return cls(
            "; ".join(f.message for f in failures),
            ",".join(f.assertion for f in failures),
            failures=list(failures),
            details={"assertions": [f.assertion for f in failures]},
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["assertion"] = self.assertion
        return data


class SchemaValidationError(EvalEngineError, ValueError):
    """A declared test-case input does not satisfy the input schema."""

    code = "SCHEMA_VALIDATION_FAILED"

    def __init__(
        self,
        value: Any,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        self.value = value
        self.errors = errors or []
        summary = "; ".join(e.get("msg", "") for e in self.errors) or "invalid input"
        super().__init__(
            f"Input {value!r} does not match schema: {summary}",
            details={"errors": self.errors},
            **kwargs,
        )


class UnknownPredicateError(EvalEngineError):
    """A predicate references a method the executor has no check for."""

    code = "UNKNOWN_PREDICATE"

    def __init__(self, method: str, **kwargs: Any) -> None:
        self.method = method
        super().__init__(
            f"Unknown assertion method: {method}",
            details={"method": method},
            **kwargs,
        )


class PredicateConfigurationError(EvalEngineError, ValueError):
    """A builder method was called with an unusable argument."""

    code = "INVALID_PREDICATE"

    def __init__(self, method: str, reason: str, **kwargs: Any) -> None:
        self.method = method
        super().__init__(
            f"Invalid arguments for {method}: {reason}",
            details={"method": method},
            **kwargs,
        )


class RegistryError(EvalEngineError):
    """A handle registry rejected a registration."""

    code = "REGISTRY_ERROR"


class DiscoveryError(EvalEngineError):
    """An eval file could not be loaded."""

    code = "DISCOVERY_FAILED"

    def __init__(self, path: str, reason: str, **kwargs: Any) -> None:
        self.path = path
        super().__init__(
            f"Failed to load {path}: {reason}",
            details={"path": path},
            **kwargs,
        )
