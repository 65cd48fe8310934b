"""
Assertion executor.

Runs an ordered predicate sequence against one ExecutionMetadata record,
stopping at the first failure.
"""

from collections.abc import Iterable

from evalengine.assertions.predicates import AssertionPredicate
from evalengine.core.errors import AssertionFailedError, UnknownPredicateError
from evalengine.core.metadata import ExecutionMetadata
from evalengine.logging import get_logger

logger = get_logger(__name__)


def execute_assertions(
    predicates: Iterable[AssertionPredicate],
    metadata: ExecutionMetadata,
) -> None:
    """
    Run predicates in order.

    Args:
        predicates: Predicate sequence, evaluated in order
        metadata: Invocation record to check

    Raises:
        AssertionFailedError: On the first failing predicate. Unexpected
            exceptions raised inside a predicate are wrapped into this type.
        UnknownPredicateError: If a predicate names a method with no check
    """
    for predicate in predicates:
        try:
            predicate(metadata)
        except (AssertionFailedError, UnknownPredicateError):
            raise
        except Exception as e:
            logger.debug(
                "Predicate raised unexpectedly",
                assertion=predicate.name,
                error=repr(e),
            )
            raise AssertionFailedError(
                f"Assertion failed: {predicate.message}. Error: {e}",
                predicate.name,
            ) from e
