"""
Test runner: probes registered functions with their declared inputs.

Suites, handles within a suite, and inputs within a handle are processed
strictly one after another.
"""

import asyncio
import inspect
import io
import time
from collections.abc import Iterator
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from typing import Any

from evalengine.assertions.executor import execute_assertions
from evalengine.config import EngineSettings
from evalengine.core.errors import AssertionFailedError, DiscoveryError, UnknownPredicateError
from evalengine.core.metadata import ExecutionMetadata, extract_response
from evalengine.handles.handle import TestingHandle
from evalengine.handles.registry import HandleRegistry
from evalengine.handles.rules import RuleKind, TestCase
from evalengine.logging import get_logger, with_log_context
from evalengine.runner.discovery import TestSuite, load_handles
from evalengine.runner.models import TestResult
from evalengine.runner.reporting import ConsoleReporter

logger = get_logger(__name__)


@contextmanager
def suppressed_output() -> Iterator[io.StringIO]:
    """
    Send stdout and stderr to a private buffer for the duration of the block.

    Both streams are restored on every exit path, including exceptions.
    Because this swaps process-wide streams, probe calls must not overlap.
    """
    sink = io.StringIO()
    with redirect_stdout(sink), redirect_stderr(sink):
        yield sink


async def probe(handle: TestingHandle, input: Any) -> ExecutionMetadata:
    """
    Call a handle's original function once and build its metadata.

    Timing and tool calls are not captured on this path: response_time is
    zero and tools_called is empty.
    """
    with suppressed_output():
        response = handle.original_function(input)
        if inspect.isawaitable(response):
            response = await response

    return ExecutionMetadata(
        input=input,
        output=extract_response(response),
        response_time=0.0,
        tools_called=(),
        prompt=input if isinstance(input, str) else str(input),
    )


def check_probe(
    handle: TestingHandle,
    metadata: ExecutionMetadata,
    case: TestCase | None = None,
) -> None:
    """
    Run the always-rules, then a test case's predicates, against a probe.

    Args:
        handle: The probed handle
        metadata: Metadata built by ``probe``
        case: The test case being probed; looked up by input when omitted

    Raises:
        AssertionFailedError: With every failing rule aggregated
        UnknownPredicateError: If a predicate has no registered check
    """
    sequences = [rule.predicates for rule in handle.rules if rule.kind == RuleKind.ALWAYS]
    if case is None:
        case = handle.find_test_case(metadata.input)
    if case is not None:
        sequences.append(case.predicates)

    failures: list[AssertionFailedError] = []
    for predicates in sequences:
        try:
            execute_assertions(predicates, metadata)
        except AssertionFailedError as e:
            failures.append(e)
    if failures:
        raise AssertionFailedError.aggregate(failures)


async def run_handle(
    name: str,
    handle: TestingHandle,
    result: TestResult,
    settings: EngineSettings,
) -> None:
    """Probe one handle once per declared test case (or with the default probe)."""
    cases: list[tuple[Any, TestCase | None]] = [
        (case.input, case) for case in handle.test_cases
    ] or [(settings.default_probe_input, None)]

    for input, case in cases:
        with with_log_context(handle=name, case_input=str(input)):
            try:
                metadata = await probe(handle, input)
                check_probe(handle, metadata, case)
            except AssertionFailedError as e:
                result.failed += 1
                result.failures.append(f"{name}({input}): {e.message}")
                logger.debug("Probe failed", error=e.to_dict())
            except UnknownPredicateError as e:
                result.failed += 1
                result.failures.append(f"{name}({input}): [integration] {e.message}")
                logger.warning("Predicate without a registered check", method=e.method)
            except Exception as e:
                result.failed += 1
                result.failures.append(f"{name}({input}): {type(e).__name__}: {e}")
                logger.debug("Probe raised", error=repr(e))
            else:
                result.passed += 1


async def run_registry(
    name: str,
    registry: HandleRegistry,
    settings: EngineSettings | None = None,
) -> TestResult:
    """Run every handle of an already-populated registry as one suite."""
    settings = settings or EngineSettings()
    registry.seal()
    result = TestResult(name=name)
    started = time.perf_counter()
    with with_log_context(suite=name):
        for handle_name, handle in registry.items():
            await run_handle(handle_name, handle, result, settings)
    result.duration_ms = (time.perf_counter() - started) * 1000
    return result


async def run_suite(suite: TestSuite, settings: EngineSettings | None = None) -> TestResult:
    """Load one eval file and run its handles."""
    started = time.perf_counter()
    try:
        registry = load_handles(suite)
    except DiscoveryError as e:
        logger.warning("Could not load eval file", suite=suite.name, error=e.message)
        return TestResult(
            name=suite.name,
            failed=1,
            failures=[f"{suite.name}: {e.message}"],
            duration_ms=(time.perf_counter() - started) * 1000,
        )

    result = await run_registry(suite.name, registry, settings)
    result.duration_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "Suite finished",
        suite=suite.name,
        passed=result.passed,
        failed=result.failed,
        duration_ms=result.duration_ms,
    )
    return result


async def run_tests(
    suites: list[TestSuite],
    *,
    settings: EngineSettings | None = None,
    reporter: ConsoleReporter | None = None,
) -> list[TestResult]:
    """
    Run suites in order and report each as it finishes.

    Args:
        suites: Discovered eval files
        settings: Runner settings
        reporter: Where progress lines go (defaults to a stdout console)

    Returns:
        One TestResult per suite, in input order
    """
    settings = settings or EngineSettings()
    reporter = reporter or ConsoleReporter()
    results: list[TestResult] = []

    for suite in suites:
        reporter.suite_started(suite.name)
        result = await run_suite(suite, settings)
        reporter.suite_finished(result)
        results.append(result)

    return results


def run_tests_sync(
    suites: list[TestSuite],
    *,
    settings: EngineSettings | None = None,
    reporter: ConsoleReporter | None = None,
) -> list[TestResult]:
    """Sync wrapper for run_tests."""
    return asyncio.run(run_tests(suites, settings=settings, reporter=reporter))
