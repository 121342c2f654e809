"""Per-directory search chains.

Go looks a package up in the ``vendor`` directory nearest to the importing
directory first, then in each enclosing ``vendor`` directory, and finally in
the project's own tree. ``SearchPathResolver`` builds that ordered chain for
any directory and memoizes it.

The memo assumes the tree does not change underneath it. The only mutation
during a run is adding a new submodule below the top-level ``vendor``, which
never creates a ``vendor`` directory in an already-resolved directory.
"""

import logging

from ..collaborators import FilesystemProbe
from .models import SearchRoot
from .paths import VENDOR_DIR
from .paths import join
from .paths import parent_dir

logger = logging.getLogger(__name__)


class SearchPathResolver:
    """Builds and caches the search chain of each directory."""

    def __init__(self, fs: FilesystemProbe, project_names: frozenset[str] | set[str] | list[str]):
        """Initialize with the project tree and its import prefixes.

        Args:
            fs: Filesystem probe rooted at the project
            project_names: Import paths that denote the project itself
        """
        self.fs = fs
        self.project_names = frozenset(project_names)
        project_root = SearchRoot(base_dir="", prefixes=self.project_names)
        # The root sees the top-level vendor tree, whether or not it exists yet,
        # followed by the project's own tree
        self._chains: dict[str, SearchRoot] = {"": SearchRoot(base_dir=VENDOR_DIR, next=project_root)}

    def chain_for(self, directory: str) -> SearchRoot:
        """Return the search chain for ``directory``, head first."""
        chain = self._chains.get(directory)
        if chain is not None:
            return chain

        chain = self.chain_for(parent_dir(directory))

        vendor_dir = join(directory, VENDOR_DIR)
        if self.fs.is_dir(vendor_dir):
            chain = SearchRoot(base_dir=vendor_dir, next=chain)
            logger.debug(f"[search-path] {directory} -> {vendor_dir} prepended")

        self._chains[directory] = chain
        return chain

    def __len__(self) -> int:
        return len(self._chains)

    def __repr__(self) -> str:
        return f"SearchPathResolver({sorted(self.project_names)})"
