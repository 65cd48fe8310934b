"""
Console reporting for test runs.
"""

from typing import TextIO

from rich.console import Console
from rich.text import Text

from evalengine.runner.models import RunSummary, TestResult

RULE_WIDTH = 50


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


class ConsoleReporter:
    """
    Writes per-suite progress lines and a final summary.

    Output goes to the console it was given, never to a patched global
    stream, so probe-call output suppression cannot swallow the report.
    """

    def __init__(self, console: Console | None = None, *, file: TextIO | None = None) -> None:
        self.console = console or Console(file=file, highlight=False, soft_wrap=True)

    def run_started(self, suite_count: int) -> None:
        self.console.print(f"Running {_plural(suite_count, 'test suite')}...")
        self.console.print()

    def suite_started(self, name: str) -> None:
        self.console.print(Text(f"▶ {name} "), end="")

    def suite_finished(self, result: TestResult) -> None:
        duration = f"({round(result.duration_ms)}ms)"
        if result.failed > 0:
            self.console.print(
                Text(f"✗ {result.failed} failed, {result.passed} passed {duration}", style="red")
            )
            for failure in result.failures:
                self.console.print(Text(f"    {failure}"))
        else:
            self.console.print(Text(f"✓ {result.passed} passed {duration}", style="green"))

    def no_tests_found(self) -> None:
        self.console.print("No test files found.")

    def summary(self, summary: RunSummary) -> None:
        suite_count = _plural(len(summary.results), "suite")

        self.console.print()
        self.console.print("─" * RULE_WIDTH)

        if summary.all_passed:
            self.console.print(
                Text(
                    f"All tests passed! {_plural(summary.passed, 'test')} in {suite_count}",
                    style="bold green",
                )
            )
            return

        self.console.print(
            Text(
                f"{_plural(summary.failed, 'test')} failed, {summary.passed} passed",
                style="bold red",
            )
        )
        self.console.print(Text(f"   {len(summary.failed_suites)} of {suite_count} failed"))
        self.console.print()
        self.console.print("Failures:")
        for suite in summary.failed_suites:
            self.console.print(Text(f"  {suite.name}:"))
            for failure in suite.failures:
                self.console.print(Text(f"    ✗ {failure}", style="red"))

    def error(self, message: str) -> None:
        self.console.print(Text(f"Error running tests: {message}", style="bold red"))
