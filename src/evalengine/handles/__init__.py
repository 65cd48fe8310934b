"""
Handles, rules, and function registration.
"""

from evalengine.handles.handle import TestingHandle
from evalengine.handles.register import instrument, register
from evalengine.handles.registry import HandleRegistry
from evalengine.handles.rules import Rule, RuleKind, TestCase, values_equal

__all__ = [
    "TestingHandle",
    "HandleRegistry",
    "Rule",
    "RuleKind",
    "TestCase",
    "values_equal",
    "register",
    "instrument",
]
