"""Interfaces of the collaborators the resolution engine consumes.

The engine never parses sources, runs git or touches the disk directly; it
goes through these protocols. Concrete implementations live in
``golang.imports``, ``git`` and ``fs``; tests substitute fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Protocol
from typing import runtime_checkable


@dataclass
class PackageImports:
    """Imports declared by the sources of one directory.

    Attributes:
        name: Declared package name
        imports: Imports of the production sources (sorted, unique)
        test_imports: Imports only used by test sources (sorted, unique)
        import_comment: Canonical import path declared in the package clause, if any
    """

    name: str
    imports: list[str] = field(default_factory=list)
    test_imports: list[str] = field(default_factory=list)
    import_comment: str | None = None


@runtime_checkable
class ImportLister(Protocol):
    """Lists the imports of the package in one directory."""

    def list_imports(self, directory: Path) -> PackageImports:
        """Raise NoSourceFilesError or ImportListingFailure on failure."""
        ...


@runtime_checkable
class SubmoduleInventory(Protocol):
    """Reports the submodules registered before the run starts."""

    def status(self, recursive: bool = False) -> list[str]:
        """Submodule paths relative to the project root."""
        ...


@runtime_checkable
class SubmoduleMutator(Protocol):
    """Adds, refreshes and removes submodules. Failures raise SubmoduleOperationFailure."""

    def add(self, url: str, directory: str) -> None: ...

    def update_from_remote(self, directory: str) -> None: ...

    def remove(self, directory: str) -> None: ...


@runtime_checkable
class FilesystemProbe(Protocol):
    """Read-only view of the project tree, addressed by relative paths."""

    root: Path

    def is_dir(self, path: str) -> bool: ...

    def subdirectories(self, path: str) -> list[str]: ...

    def has_source_files(self, path: str) -> bool: ...

    def is_empty(self, path: str) -> bool: ...


@runtime_checkable
class SubmoduleManager(SubmoduleInventory, SubmoduleMutator, Protocol):
    """Inventory and mutator in one, as the git implementation provides."""
