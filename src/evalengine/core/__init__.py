"""
eval-engine core module.

Contains the error taxonomy, execution metadata extraction, and input schemas.
"""

from evalengine.core.errors import (
    AssertionFailedError,
    DiscoveryError,
    EvalEngineError,
    PredicateConfigurationError,
    RegistryError,
    SchemaValidationError,
    UnknownPredicateError,
)
from evalengine.core.metadata import (
    CallArguments,
    ExecutionMetadata,
    extract_metadata,
    extract_prompt,
    extract_response,
    extract_tools_called,
)
from evalengine.core.schema import InputSchema

__all__ = [
    # Errors
    "EvalEngineError",
    "AssertionFailedError",
    "SchemaValidationError",
    "UnknownPredicateError",
    "PredicateConfigurationError",
    "RegistryError",
    "DiscoveryError",
    # Metadata
    "CallArguments",
    "ExecutionMetadata",
    "extract_metadata",
    "extract_prompt",
    "extract_response",
    "extract_tools_called",
    # Schema
    "InputSchema",
]
