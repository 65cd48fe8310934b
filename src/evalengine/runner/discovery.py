"""
Eval file discovery and handle collection.
"""

import glob
import hashlib
import importlib.util
import sys
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from evalengine.config import DEFAULT_IGNORE_DIRS, DEFAULT_TEST_FILE_PATTERNS
from evalengine.core.errors import DiscoveryError
from evalengine.handles.handle import TestingHandle
from evalengine.handles.registry import HandleRegistry
from evalengine.logging import get_logger

logger = get_logger(__name__)

# Optional hook an eval file can define to register handles explicitly
REGISTER_HOOK = "register_evals"


@dataclass(frozen=True)
class TestSuite:
    """One eval file and its display name."""

    __test__ = False  # not a pytest class

    eval_file: Path
    name: str


def suite_name(path: Path) -> str:
    """Derive a suite name from a file name: ``checkout_eval.py`` -> ``checkout``."""
    stem = path.stem
    if stem.endswith("_eval") and len(stem) > len("_eval"):
        return stem[: -len("_eval")]
    if stem.startswith("eval_") and len(stem) > len("eval_"):
        return stem[len("eval_"):]
    return stem


def find_test_files(
    patterns: Iterable[str] = (),
    root: str | Path = ".",
    ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS,
) -> list[TestSuite]:
    """
    Find eval files.

    Args:
        patterns: Glob patterns, relative to ``root`` or absolute. Defaults
            to ``**/*_eval.py`` and ``**/eval_*.py``.
        root: Directory to search from
        ignore_dirs: Directory names to skip anywhere in a match's path

    Returns:
        Suites sorted by path, without duplicates
    """
    root_path = Path(root).resolve()
    ignored = set(ignore_dirs)
    found: dict[Path, TestSuite] = {}

    for pattern in tuple(patterns) or DEFAULT_TEST_FILE_PATTERNS:
        for match in glob.glob(pattern, root_dir=root_path, recursive=True):
            path = (root_path / match).resolve()
            if not path.is_file() or path.suffix != ".py":
                continue
            try:
                relative = path.relative_to(root_path)
            except ValueError:
                relative = path
            if ignored.intersection(relative.parts[:-1]):
                continue
            found.setdefault(path, TestSuite(eval_file=path, name=suite_name(path)))

    suites = sorted(found.values(), key=lambda s: str(s.eval_file))
    logger.debug("Discovered eval files", count=len(suites), root=str(root_path))
    return suites


@contextmanager
def _import_path(directory: Path) -> Iterator[None]:
    """Make sibling modules of an eval file importable while it loads."""
    entry = str(directory)
    added = entry not in sys.path
    if added:
        sys.path.insert(0, entry)
    try:
        yield
    finally:
        if added and entry in sys.path:
            sys.path.remove(entry)


def load_module(path: Path) -> ModuleType:
    """
    Import an eval file under a private module name.

    Raises:
        DiscoveryError: If the file cannot be imported
    """
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:10]
    module_name = f"_evalengine_suite_{path.stem}_{digest}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise DiscoveryError(str(path), "not a loadable Python file")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        with _import_path(path.parent):
            spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise DiscoveryError(str(path), f"{type(e).__name__}: {e}") from e
    return module


def collect_handles(module: ModuleType) -> HandleRegistry:
    """
    Collect the testing handles a loaded eval module declares.

    If the module defines ``register_evals(registry)``, it is called with a
    fresh registry and only what it registers is used. Otherwise every
    module-level TestingHandle is collected; other values are ignored.
    """
    registry = HandleRegistry()
    hook = getattr(module, REGISTER_HOOK, None)
    if callable(hook):
        hook(registry)
    else:
        seen: set[int] = set()
        for attr, value in vars(module).items():
            if isinstance(value, TestingHandle) and id(value) not in seen:
                seen.add(id(value))
                registry.add(value, name=attr)
    registry.seal()
    return registry


def load_handles(suite: TestSuite) -> HandleRegistry:
    """
    Load an eval file and collect its handles.

    Raises:
        DiscoveryError: If the file cannot be imported or its hook fails
    """
    module = load_module(suite.eval_file)
    try:
        return collect_handles(module)
    except Exception as e:
        raise DiscoveryError(str(suite.eval_file), f"{type(e).__name__}: {e}") from e
