"""Classifies an import as local, standard library, or unresolved."""

import logging

from ..collaborators import FilesystemProbe
from .models import Resolution
from .paths import join
from .search_path import SearchPathResolver

logger = logging.getLogger(__name__)


def is_standard_import(import_path: str) -> bool:
    """Heuristic for standard-library packages: no dot in the first segment."""
    return "." not in import_path.split("/", 1)[0]


class PackageResolver:
    """Walks a directory's search chain to find the package an import names."""

    def __init__(self, fs: FilesystemProbe, search_paths: SearchPathResolver):
        self.fs = fs
        self.search_paths = search_paths

    def resolve(self, origin_dir: str, import_path: str) -> Resolution:
        """Resolve ``import_path`` as imported from ``origin_dir``.

        The first root of the chain that provides the package wins, so nearer
        vendor trees shadow farther ones.

        Args:
            origin_dir: Importing directory, relative to the project root
            import_path: Import path as written in the source

        Returns:
            Local resolution with the package directory, standard resolution
            for standard-library imports, or unresolved
        """
        for root in self.search_paths.chain_for(origin_dir):
            rest = root.strip_prefix(import_path)
            if rest is None:
                continue

            candidate = join(root.base_dir, rest)
            if self.fs.has_source_files(candidate):
                logger.debug(f"[resolve] {import_path} from {origin_dir or '.'} -> {candidate or '.'}")
                return Resolution.local(candidate)

        if is_standard_import(import_path):
            return Resolution.standard()

        logger.debug(f"[resolve] {import_path} from {origin_dir or '.'} -> unresolved")
        return Resolution.unresolved()
