"""
eval-engine - unit tests for LLM-calling functions.

Register a function that calls a language model, declare predicates about
its responses ("must contain X", "must answer in under N ms", "must call
tool Y"), and have them checked on every call or by the test runner.
"""

__version__ = "0.1.0"

from evalengine.assertions import AssertionBuilder, AssertionPredicate, PredicateMethod
from evalengine.core.errors import (
    AssertionFailedError,
    DiscoveryError,
    EvalEngineError,
    PredicateConfigurationError,
    RegistryError,
    SchemaValidationError,
    UnknownPredicateError,
)
from evalengine.core.metadata import ExecutionMetadata, extract_metadata
from evalengine.core.schema import InputSchema
from evalengine.handles import HandleRegistry, TestingHandle, register

__all__ = [
    # Version
    "__version__",
    # Registration
    "register",
    "TestingHandle",
    "HandleRegistry",
    "InputSchema",
    # Assertions
    "AssertionBuilder",
    "AssertionPredicate",
    "PredicateMethod",
    # Metadata
    "ExecutionMetadata",
    "extract_metadata",
    # Errors
    "EvalEngineError",
    "AssertionFailedError",
    "SchemaValidationError",
    "UnknownPredicateError",
    "PredicateConfigurationError",
    "RegistryError",
    "DiscoveryError",
]
