"""
Predicate declaration and execution.
"""

from evalengine.assertions.builder import AssertionBuilder
from evalengine.assertions.executor import execute_assertions
from evalengine.assertions.predicates import CHECKS, AssertionPredicate, PredicateMethod

__all__ = [
    "AssertionBuilder",
    "AssertionPredicate",
    "PredicateMethod",
    "CHECKS",
    "execute_assertions",
]
