"""
Discovery and execution of eval files.
"""

from evalengine.runner.discovery import (
    TestSuite,
    collect_handles,
    find_test_files,
    load_handles,
    load_module,
    suite_name,
)
from evalengine.runner.models import RunSummary, TestResult
from evalengine.runner.reporting import ConsoleReporter
from evalengine.runner.runner import (
    check_probe,
    probe,
    run_handle,
    run_registry,
    run_suite,
    run_tests,
    run_tests_sync,
    suppressed_output,
)

__all__ = [
    # Discovery
    "TestSuite",
    "find_test_files",
    "load_module",
    "load_handles",
    "collect_handles",
    "suite_name",
    # Results
    "TestResult",
    "RunSummary",
    # Reporting
    "ConsoleReporter",
    # Execution
    "probe",
    "check_probe",
    "run_handle",
    "run_registry",
    "run_suite",
    "run_tests",
    "run_tests_sync",
    "suppressed_output",
]
