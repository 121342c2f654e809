"""Pytest configuration and shared fakes for vendetta tests."""

from collections import Counter
from pathlib import Path

import pytest

from vendetta_cli.fs import LocalFilesystem
from vendetta_cli.golang import GoImportLister
from vendetta_cli.session import SyncOptions
from vendetta_cli.session import VendorSession


def write_go(directory: Path, package: str, imports=(), filename: str | None = None, comment: str = "") -> Path:
    """Write a Go file declaring ``package`` with ``imports`` into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / (filename or f"{package}.go")
    clause = f"package {package}"
    if comment:
        clause += f' // import "{comment}"'
    body = [clause, ""]
    if imports:
        body.append("import (")
        body.extend(f'\t"{imp}"' for imp in imports)
        body.append(")")
    body.append("")
    body.append("func init() {}")
    path.write_text("\n".join(body) + "\n")
    return path


class CountingLister:
    """GoImportLister that counts how often each directory is listed."""

    def __init__(self):
        self.inner = GoImportLister()
        self.calls: Counter = Counter()

    def list_imports(self, directory: Path):
        self.calls[directory] += 1
        return self.inner.list_imports(directory)


class FakeSubmodules:
    """In-memory submodule inventory and mutator.

    ``remote_packages`` maps a repository URL to the Go packages it contains
    (relative directory -> list of imports); ``add`` writes them to disk.
    """

    def __init__(self, root: Path, paths=(), nested=(), remote_packages=None):
        self.root = root
        self.paths = list(paths)
        self.nested = list(nested)
        self.remote_packages = remote_packages or {}
        self.added: list[tuple[str, str]] = []
        self.updated: list[str] = []
        self.removed: list[str] = []

    def status(self, recursive: bool = False) -> list[str]:
        if recursive:
            return self.paths + self.nested
        return list(self.paths)

    def add(self, url: str, directory: str) -> None:
        self.added.append((url, directory))
        self.paths.append(directory)
        for rel, imports in self.remote_packages.get(url, {}).items():
            target = self.root / directory / rel if rel else self.root / directory
            write_go(target, Path(rel).name.replace("-", "_") if rel else "root", imports)

    def update_from_remote(self, directory: str) -> None:
        self.updated.append(directory)

    def remove(self, directory: str) -> None:
        self.removed.append(directory)
        self.paths.remove(directory)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Empty project directory."""
    root = tmp_path / "proj"
    root.mkdir()
    return root


@pytest.fixture
def make_session():
    """Factory for sessions over a project directory with fake collaborators."""

    def _make(root: Path, submodules: FakeSubmodules | None = None, lister=None, **options) -> VendorSession:
        opts = SyncOptions(root_dir=root, project_names=options.pop("names", ["github.com/me/proj"]), **options)
        return VendorSession(
            opts,
            fs=LocalFilesystem(root),
            lister=lister or GoImportLister(),
            submodules=submodules or FakeSubmodules(root),
        )

    return _make
