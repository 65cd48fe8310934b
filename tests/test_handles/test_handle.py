"""
Tests for TestingHandle rule storage and applicability.
"""

from typing import Annotated

import pytest
from pydantic import BaseModel, StringConstraints

from evalengine.core.errors import AssertionFailedError, SchemaValidationError
from evalengine.core.schema import InputSchema
from evalengine.handles.handle import TestingHandle
from evalengine.handles.rules import Rule, RuleKind

NonEmpty = Annotated[str, StringConstraints(min_length=1)]


class Product(BaseModel):
    name: str


def _describe(product: str) -> str:
    return f"The {product} offer great sound quality."


@pytest.fixture
def handle() -> TestingHandle:
    return TestingHandle(_describe, InputSchema(input=NonEmpty))


class TestRegistration:
    def test_name_defaults_to_function_name(self, handle):
        assert handle.name == "_describe"

    def test_for_all_adds_always_rule(self, handle):
        handle.for_all(lambda a: a.ensure_doesnt_contain("VR").ensure_length_over(20))

        (rule,) = handle.rules
        assert rule.kind == RuleKind.ALWAYS
        assert [p.method for p in rule.predicates] == ["ensure_doesnt_contain", "ensure_length_over"]
        assert handle.test_cases == ()

    def test_for_input_adds_rule_and_test_case(self, handle):
        handle.for_input("Wireless Earbuds", lambda a: a.ensure_contains("wireless"))

        (rule,) = handle.rules
        (case,) = handle.test_cases
        assert rule.kind == RuleKind.MATCH_EXACT_INPUT
        assert rule.condition == "Wireless Earbuds"
        assert case.input == "Wireless Earbuds"
        assert case.predicates == rule.predicates

    def test_for_input_validates_against_schema(self, handle):
        with pytest.raises(SchemaValidationError):
            handle.for_input("", lambda a: a.ensure_contains("x"))

        assert handle.rules == ()
        assert handle.test_cases == ()

    def test_for_input_without_schema(self):
        handle = TestingHandle(_describe)
        handle.for_input({"any": "shape"}, lambda a: a.ensure_contains("x"))
        assert handle.test_cases[0].input == {"any": "shape"}

    def test_for_all_containing(self, handle):
        handle.for_all_containing("Pro", lambda a: a.ensure_contains("technology"))

        (rule,) = handle.rules
        assert rule.kind == RuleKind.MATCH_SUBSTRING
        assert rule.condition == "Pro"

    def test_registration_chains(self, handle):
        result = handle.for_all(lambda a: a.ensure_length_over(1)).for_all_containing(
            "x", lambda a: a.ensure_contains("x")
        )
        assert result is handle
        assert len(handle.rules) == 2

    def test_duplicate_rules_preserved(self, handle):
        declare = lambda a: a.ensure_doesnt_contain("VR")  # noqa: E731
        handle.for_all(declare).for_all(declare)

        assert len(handle.rules) == 2
        assert handle.rules[0] == handle.rules[1]

    def test_rules_view_is_read_only(self, handle):
        handle.for_all(lambda a: a.ensure_length_over(1))
        assert isinstance(handle.rules, tuple)

    def test_run_requires_register(self, handle):
        with pytest.raises(RuntimeError, match="register"):
            handle.run("x")


class TestShouldApplyRule:
    def test_always(self, handle, make_meta):
        rule = Rule(kind=RuleKind.ALWAYS, predicates=())
        assert handle.should_apply_rule(rule, make_meta())

    def test_exact_input_by_value(self, handle, make_meta):
        rule = Rule(kind=RuleKind.MATCH_EXACT_INPUT, predicates=(), condition={"a": [1, 2]})

        assert handle.should_apply_rule(rule, make_meta(input={"a": [1, 2]}))
        assert not handle.should_apply_rule(rule, make_meta(input={"a": [2, 1]}))

    def test_substring(self, handle, make_meta):
        rule = Rule(kind=RuleKind.MATCH_SUBSTRING, predicates=(), condition="Ear")

        assert handle.should_apply_rule(rule, make_meta(input="Wireless Earbuds"))
        assert not handle.should_apply_rule(rule, make_meta(input="iPhone 15 Pro"))

    def test_substring_requires_text_prompt(self, handle, make_meta):
        rule = Rule(kind=RuleKind.MATCH_SUBSTRING, predicates=(), condition="1")
        assert not handle.should_apply_rule(rule, make_meta(input=1, prompt=""))

    def test_unknown_kind_skipped(self, handle, make_meta):
        rule = Rule(kind="for_tuesdays", predicates=())  # type: ignore[arg-type]
        assert not handle.should_apply_rule(rule, make_meta())


class TestExecuteAssertions:
    def test_only_matching_rules_run(self, handle, make_meta):
        handle.for_input("iPhone 15 Pro", lambda a: a.ensure_contains("iPhone"))
        handle.for_all_containing("iPhone", lambda a: a.ensure_contains("technology"))
        handle.for_all(lambda a: a.ensure_length_over(20))

        handle.execute_assertions(make_meta(input="Wireless Earbuds"))

    def test_case_sensitive_rule_fails(self, handle, make_meta):
        handle.for_all(lambda a: a.ensure_doesnt_contain("VR").ensure_length_over(20))
        handle.for_input("Wireless Earbuds", lambda a: a.ensure_contains("wireless"))

        with pytest.raises(AssertionFailedError) as exc_info:
            handle.execute_assertions(make_meta(input="Wireless Earbuds"))

        assert exc_info.value.assertion == "ensure_contains"

    def test_later_rule_failure_not_masked(self, handle, make_meta):
        handle.for_all(lambda a: a.ensure_contains("missing-1"))
        handle.for_all(lambda a: a.ensure_contains("missing-2"))

        with pytest.raises(AssertionFailedError) as exc_info:
            handle.execute_assertions(make_meta())

        error = exc_info.value
        assert len(error.failures) == 2
        assert "missing-1" in error.message
        assert "missing-2" in error.message

    def test_declaration_order_does_not_change_outcome(self, make_meta):
        forward = TestingHandle(_describe)
        forward.for_all(lambda a: a.ensure_length_over(5))
        forward.for_input("Wireless Earbuds", lambda a: a.ensure_contains("Earbuds"))
        forward.for_all_containing("Ear", lambda a: a.ensure_doesnt_contain("VR"))

        backward = TestingHandle(_describe)
        backward.for_all_containing("Ear", lambda a: a.ensure_doesnt_contain("VR"))
        backward.for_input("Wireless Earbuds", lambda a: a.ensure_contains("Earbuds"))
        backward.for_all(lambda a: a.ensure_length_over(5))

        metadata = make_meta(input="Wireless Earbuds")
        assert len(forward.applicable_rules(metadata)) == 3
        assert len(backward.applicable_rules(metadata)) == 3
        forward.execute_assertions(metadata)
        backward.execute_assertions(metadata)

    def test_find_test_case(self, handle):
        handle.for_input("A", lambda a: a.ensure_contains("A"))
        handle.for_input("B", lambda a: a.ensure_contains("B"))

        assert handle.find_test_case("B").input == "B"
        assert handle.find_test_case("C") is None


class TestDeclaredInputStorage:
    def test_model_schema_keeps_declared_mapping(self):
        handle = TestingHandle(_describe, InputSchema(input=Product))
        declared = {"name": "Earbuds"}

        handle.for_input(declared, lambda a: a.ensure_contains("Earbuds"))

        assert handle.rules[0].condition == declared
        assert handle.test_cases[0].input is declared

    def test_coercing_schema_keeps_declared_scalar(self):
        handle = TestingHandle(_describe, InputSchema(input=int))

        handle.for_input("5", lambda a: a.ensure_contains("5"))

        assert handle.test_cases[0].input == "5"
        assert handle.rules[0].condition == "5"

    def test_declared_mapping_matches_call_with_same_mapping(self, make_meta):
        handle = TestingHandle(_describe, InputSchema(input=Product))
        handle.for_input({"name": "Earbuds"}, lambda a: a.ensure_contains("wireless"))

        with pytest.raises(AssertionFailedError):
            handle.execute_assertions(make_meta(input={"name": "Earbuds"}))

    def test_nonconforming_mapping_rejected(self):
        handle = TestingHandle(_describe, InputSchema(input=Product))

        with pytest.raises(SchemaValidationError):
            handle.for_input({"title": "Earbuds"}, lambda a: a.ensure_contains("x"))
