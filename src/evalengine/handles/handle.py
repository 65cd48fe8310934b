"""
Testing handle: rule storage and applicability for one registered function.
"""

from collections.abc import Callable
from typing import Any

from evalengine.assertions.builder import AssertionBuilder
from evalengine.assertions.executor import execute_assertions
from evalengine.core.errors import AssertionFailedError
from evalengine.core.metadata import ExecutionMetadata
from evalengine.core.schema import InputSchema
from evalengine.handles.rules import Rule, RuleKind, TestCase, values_equal
from evalengine.logging import get_logger

logger = get_logger(__name__)

BuildFn = Callable[[AssertionBuilder], Any]


class TestingHandle:
    """
    Rules and test cases attached to one registered function.

    Rules and test cases are append-only: there is no removal API, so
    evaluation order always equals declaration order.

    Usage:
        handle = register(describe_product, InputSchema(input=str))

        handle.for_all(lambda a: a.ensure_doesnt_contain("VR").ensure_length_over(50))
        handle.for_input("Wireless Earbuds", lambda a: a.ensure_contains("wireless"))

        text = await handle.run("Wireless Earbuds")  # raises on violation
    """

    __test__ = False  # not a pytest class

    def __init__(
        self,
        original_function: Callable[..., Any],
        schema: InputSchema | None = None,
        name: str | None = None,
    ) -> None:
        self.original_function = original_function
        self.schema = schema
        self.name = name or getattr(original_function, "__name__", "handle")
        self._rules: list[Rule] = []
        self._test_cases: list[TestCase] = []
        self.run: Callable[..., Any] = self._not_instrumented

    def _not_instrumented(self, *args: Any, **kwargs: Any) -> Any:
        raise RuntimeError(
            f"Handle '{self.name}' was not created by register(); "
            "call the original function or use the test runner"
        )

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    @property
    def test_cases(self) -> tuple[TestCase, ...]:
        return tuple(self._test_cases)

    def _compile(self, build_fn: BuildFn) -> tuple:
        builder = AssertionBuilder()
        build_fn(builder)
        return builder.build()

    def for_all(self, build_fn: BuildFn) -> "TestingHandle":
        """Declare predicates that apply to every invocation."""
        predicates = self._compile(build_fn)
        self._rules.append(Rule(kind=RuleKind.ALWAYS, predicates=predicates))
        return self

    def for_input(self, input: Any, build_fn: BuildFn) -> "TestingHandle":
        """
        Declare predicates for one exact input.

        The input is checked against the handle's schema once, here, and
        also recorded as a test case for the runner to probe. The declared
        value is stored as given, not the schema's coerced form, so it
        matches the argument the function is later called with.

        Raises:
            SchemaValidationError: If the input does not match the schema
        """
        if self.schema is not None:
            self.schema.validate(input)
        predicates = self._compile(build_fn)
        self._rules.append(
            Rule(kind=RuleKind.MATCH_EXACT_INPUT, predicates=predicates, condition=input)
        )
        self._test_cases.append(TestCase(input=input, predicates=predicates))
        return self

    def for_all_containing(self, text: str, build_fn: BuildFn) -> "TestingHandle":
        """Declare predicates for every invocation whose prompt contains ``text``."""
        predicates = self._compile(build_fn)
        self._rules.append(
            Rule(kind=RuleKind.MATCH_SUBSTRING, predicates=predicates, condition=text)
        )
        return self

    def should_apply_rule(self, rule: Rule, metadata: ExecutionMetadata) -> bool:
        """Decide whether a rule applies to an invocation."""
        if rule.kind == RuleKind.ALWAYS:
            return True
        if rule.kind == RuleKind.MATCH_EXACT_INPUT:
            return values_equal(rule.condition, metadata.input)
        if rule.kind == RuleKind.MATCH_SUBSTRING:
            return (
                isinstance(rule.condition, str)
                and isinstance(metadata.prompt, str)
                and rule.condition in metadata.prompt
            )
        logger.debug("Skipping rule of unknown kind", handle=self.name, kind=repr(rule.kind))
        return False

    def applicable_rules(self, metadata: ExecutionMetadata) -> list[Rule]:
        """Rules that apply to an invocation, in declaration order."""
        return [rule for rule in self._rules if self.should_apply_rule(rule, metadata)]

    def find_test_case(self, input: Any) -> TestCase | None:
        """Return the first declared test case whose input equals ``input``."""
        for case in self._test_cases:
            if values_equal(case.input, input):
                return case
        return None

    def execute_assertions(self, metadata: ExecutionMetadata) -> None:
        """
        Run every applicable rule against an invocation.

        Each rule stops at its first failing predicate, but all applicable
        rules run so that a later rule's failure is never masked.

        Raises:
            AssertionFailedError: One error, or an aggregate of several
            UnknownPredicateError: If a predicate has no registered check
        """
        failures: list[AssertionFailedError] = []
        for rule in self.applicable_rules(metadata):
            try:
                execute_assertions(rule.predicates, metadata)
            except AssertionFailedError as e:
                failures.append(e)
        if failures:
            raise AssertionFailedError.aggregate(failures)

    def __repr__(self) -> str:
        return (
            f"TestingHandle(name={self.name!r}, rules={len(self._rules)}, "
            f"test_cases={len(self._test_cases)})"
        )
