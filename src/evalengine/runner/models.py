"""
Result models for test runs.
"""

from dataclasses import dataclass, field


@dataclass
class TestResult:
    """Outcome of one suite: probe counts plus readable failure lines."""

    __test__ = False  # not a pytest class

    name: str
    passed: int = 0
    failed: int = 0
    failures: list[str] = field(default_factory=list)
    duration_ms: float = 0.0


@dataclass
class RunSummary:
    """Totals across every suite of a run."""

    results: list[TestResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(r.passed for r in self.results)

    @property
    def failed(self) -> int:
        return sum(r.failed for r in self.results)

    @property
    def failed_suites(self) -> list[TestResult]:
        return [r for r in self.results if r.failed > 0]

    @property
    def all_passed(self) -> bool:
        return self.failed == 0
