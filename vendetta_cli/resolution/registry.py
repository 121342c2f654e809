"""Registry of vendored submodules.

Kept sorted by path components so that "which vendored root encloses this
directory" costs a handful of binary searches. Lookups happen once per
resolved import; inserts only when a new dependency is fetched.
"""

import bisect
import logging
from collections.abc import Iterable
from collections.abc import Iterator

from .models import VendoredRoot
from .paths import is_subpath
from .paths import split

logger = logging.getLogger(__name__)


def _parts(root: VendoredRoot) -> tuple[str, ...]:
    return root.parts


class VendorRegistry:
    """Sorted collection of VendoredRoot entries."""

    def __init__(self, roots: Iterable[VendoredRoot] = ()):
        self._roots: list[VendoredRoot] = sorted(roots, key=_parts)

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "VendorRegistry":
        """Seed from the submodule inventory; nothing is used or updated yet."""
        return cls(VendoredRoot(path=path) for path in dict.fromkeys(paths))

    def _find(self, parts: tuple[str, ...]) -> VendoredRoot | None:
        i = bisect.bisect_left(self._roots, parts, key=_parts)
        if i < len(self._roots) and self._roots[i].parts == parts:
            return self._roots[i]
        return None

    def get(self, path: str) -> VendoredRoot | None:
        """Exact lookup."""
        return self._find(split(path))

    def ancestor_of(self, path: str) -> VendoredRoot | None:
        """Return the most specific root that is ``path`` or encloses it.

        Args:
            path: Directory relative to the project root

        Returns:
            Enclosing VendoredRoot, or None if ``path`` is not vendored
        """
        parts = split(path)
        if not self._roots or not parts:
            return None

        # Cheap rejection: an enclosing root sorts at or before the path
        i = bisect.bisect_right(self._roots, parts, key=_parts)
        if i == 0:
            return None

        for length in range(len(parts), 0, -1):
            root = self._find(parts[:length])
            if root is not None:
                return root
        return None

    def mark_used(self, root: VendoredRoot) -> None:
        if not root.used:
            logger.debug(f"[registry] {root.path} is used")
        root.used = True

    def insert(self, path: str) -> VendoredRoot:
        """Register a freshly fetched submodule, already used and up to date."""
        existing = self.get(path)
        if existing is not None:
            existing.used = True
            existing.updated = True
            return existing

        root = VendoredRoot(path=path, used=True, updated=True)
        bisect.insort(self._roots, root, key=_parts)
        return root

    def discard(self, path: str) -> bool:
        """Drop the entry for ``path``. Returns False if there was none."""
        root = self.get(path)
        if root is None:
            return False
        self._roots.remove(root)
        return True

    def unused_roots_under(self, prefix: str) -> list[VendoredRoot]:
        """Entries never used in this run that live under ``prefix``."""
        return [root for root in self._roots if not root.used and is_subpath(root.path, prefix)]

    def __iter__(self) -> Iterator[VendoredRoot]:
        return iter(list(self._roots))

    def __len__(self) -> int:
        return len(self._roots)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.get(path) is not None
