"""Filesystem probe over the real project directory."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".go"


class LocalFilesystem:
    """Answers directory questions for paths relative to ``root``."""

    def __init__(self, root: str | Path, source_suffix: str = SOURCE_SUFFIX):
        """Initialize with project root.

        Args:
            root: Project root directory
            source_suffix: File suffix of compilable sources
        """
        self.root = Path(root)
        self.source_suffix = source_suffix

    def real_path(self, path: str) -> Path:
        """Map a relative path onto the real filesystem."""
        return self.root / path if path else self.root

    def is_dir(self, path: str) -> bool:
        return self.real_path(path).is_dir()

    def subdirectories(self, path: str) -> list[str]:
        """Names of the directories directly inside ``path``, sorted.

        Symlinked directories are left out, so the walk never loops.
        """
        return sorted(
            entry.name for entry in self.real_path(path).iterdir() if entry.is_dir() and not entry.is_symlink()
        )

    def has_source_files(self, path: str) -> bool:
        """True if ``path`` is a directory with at least one regular source file.

        Symlinks do not count as regular files.
        """
        directory = self.real_path(path)
        if not directory.is_dir():
            return False

        return any(
            entry.suffix == self.source_suffix and entry.is_file() and not entry.is_symlink()
            for entry in directory.iterdir()
        )

    def is_empty(self, path: str) -> bool:
        """True if ``path`` is missing or has no entries at all."""
        directory = self.real_path(path)
        if not directory.exists():
            return True
        return next(directory.iterdir(), None) is None

    def __repr__(self) -> str:
        return f"LocalFilesystem({self.root})"
