"""
Command-line entry point: ``eval-engine [files...]``.

Exit codes:
    0  all tests passed
    1  one or more tests failed
    2  unexpected runner error
    3  no test files found
"""

import argparse
import fnmatch
import sys
from collections.abc import Sequence

from evalengine import __version__
from evalengine.config import EngineSettings
from evalengine.logging import configure_logging, get_logger
from evalengine.runner.discovery import find_test_files
from evalengine.runner.models import RunSummary
from evalengine.runner.reporting import ConsoleReporter
from evalengine.runner.runner import run_tests_sync

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_ERROR = 2
EXIT_NO_TESTS = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eval-engine",
        description="LLM testing framework - unit tests for AI",
    )
    parser.add_argument("files", nargs="*", help="Test files to run (glob patterns supported)")
    parser.add_argument(
        "-w", "--watch", action="store_true", help="Watch mode - rerun tests on file changes"
    )
    parser.add_argument("-p", "--pattern", help="Run suites whose name matches this pattern")
    parser.add_argument("--timeout", type=int, metavar="MS", help="Test timeout in milliseconds")
    parser.add_argument("--root", default=".", help="Directory to search for eval files")
    parser.add_argument("--log-level", help="Log level (default: WARNING)")
    parser.add_argument("--log-format", choices=["text", "json"], help="Log output format")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    reporter: ConsoleReporter | None = None,
    settings: EngineSettings | None = None,
) -> int:
    """
    Run the CLI and return the process exit code.
    """
    args = build_parser().parse_args(argv)
    reporter = reporter or ConsoleReporter()

    try:
        settings = (settings or EngineSettings()).with_overrides(
            timeout_ms=args.timeout,
            log_level=args.log_level,
            log_format=args.log_format,
        )
        configure_logging(level=settings.log_level, format=settings.log_format)

        if args.watch:
            logger.warning("Watch mode is not supported; running once")

        suites = find_test_files(
            args.files or settings.test_file_patterns,
            root=args.root,
            ignore_dirs=settings.ignore_dirs,
        )
        if args.pattern:
            suites = [
                s
                for s in suites
                if fnmatch.fnmatch(s.name, args.pattern) or args.pattern in s.name
            ]

        if not suites:
            reporter.no_tests_found()
            return EXIT_NO_TESTS

        reporter.run_started(len(suites))
        summary = RunSummary(run_tests_sync(suites, settings=settings, reporter=reporter))
        reporter.summary(summary)
        return EXIT_OK if summary.all_passed else EXIT_FAILURES

    except Exception as e:
        logger.exception("Runner crashed")
        reporter.error(f"{type(e).__name__}: {e}")
        return EXIT_ERROR


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())
