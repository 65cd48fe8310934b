"""
Explicit registry of testing handles.

Lifecycle: handles are added during the registration phase (module import
or a ``register_evals`` hook), then the registry is sealed and only read
while tests execute.
"""

from collections.abc import Iterator

from evalengine.core.errors import RegistryError
from evalengine.handles.handle import TestingHandle


class HandleRegistry:
    """
    Name-keyed collection of testing handles.

    Usage:
        registry = HandleRegistry()
        register(describe_product, schema, registry=registry)

        registry.seal()
        for name, handle in registry.items():
            ...
    """

    def __init__(self) -> None:
        self._handles: dict[str, TestingHandle] = {}
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def add(self, handle: TestingHandle, name: str | None = None) -> TestingHandle:
        """
        Add a handle under ``name`` (defaults to the handle's own name).

        Raises:
            RegistryError: If the registry is sealed or the name is taken
        """
        if not isinstance(handle, TestingHandle):
            raise RegistryError(
                f"Expected a TestingHandle, got {type(handle).__name__}",
                details={"type": type(handle).__name__},
            )
        key = name or handle.name
        if self._sealed:
            raise RegistryError(
                f"Cannot register '{key}': registry is sealed",
                details={"name": key},
            )
        existing = self._handles.get(key)
        if existing is not None and existing is not handle:
            raise RegistryError(
                f"A handle named '{key}' is already registered",
                details={"name": key},
            )
        self._handles[key] = handle
        return handle

    def seal(self) -> None:
        """Switch to read-only; later ``add`` calls raise."""
        self._sealed = True

    def get(self, name: str) -> TestingHandle | None:
        return self._handles.get(name)

    def items(self) -> list[tuple[str, TestingHandle]]:
        return list(self._handles.items())

    def __iter__(self) -> Iterator[TestingHandle]:
        return iter(list(self._handles.values()))

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, name: object) -> bool:
        return name in self._handles
