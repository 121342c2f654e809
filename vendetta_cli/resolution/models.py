"""Data types shared by the resolution engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .paths import split


@dataclass(frozen=True)
class SearchRoot:
    """One node of a per-directory search chain.

    Chains are immutable singly-linked lists, so sibling directories share
    the tail of their parent's chain. ``prefixes`` is only set on the bottom
    node, which covers the project's own source tree: an import applies there
    only when it starts with one of the project names.

    Attributes:
        base_dir: Directory (relative to the project root) holding packages
        prefixes: Import path prefixes stripped before the lookup, or None
        next: The next, farther, node in the chain
    """

    base_dir: str
    prefixes: frozenset[str] | None = None
    next: SearchRoot | None = None

    def strip_prefix(self, import_path: str) -> str | None:
        """Return the import path relative to this root, or None if it does not apply."""
        if self.prefixes is None:
            return import_path

        # Longest name first, in case one project name nests inside another
        for prefix in sorted(self.prefixes, key=len, reverse=True):
            if import_path == prefix:
                return ""
            if import_path.startswith(prefix + "/"):
                return import_path[len(prefix) + 1 :]

        return None

    def __iter__(self):
        node: SearchRoot | None = self
        while node is not None:
            yield node
            node = node.next


@dataclass
class VendoredRoot:
    """A vendored dependency checked out as a git submodule."""

    path: str
    used: bool = False
    updated: bool = False

    @property
    def parts(self) -> tuple[str, ...]:
        return split(self.path)


@dataclass(frozen=True)
class ImportEdge:
    """Directory ``from_dir`` imports ``import_path``."""

    from_dir: str
    import_path: str

    def __str__(self) -> str:
        return f"{self.from_dir or '.'} imports {self.import_path}"


class ResolutionKind(str, Enum):
    LOCAL = "local"
    STANDARD = "standard"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one import from one directory."""

    kind: ResolutionKind
    directory: str | None = None

    @classmethod
    def local(cls, directory: str) -> Resolution:
        return cls(ResolutionKind.LOCAL, directory)

    @classmethod
    def standard(cls) -> Resolution:
        return cls(ResolutionKind.STANDARD)

    @classmethod
    def unresolved(cls) -> Resolution:
        return cls(ResolutionKind.UNRESOLVED)
