"""Vendoring session: walks the project and keeps vendor/ in step with its imports.

One ``VendorSession`` holds all state of a run (search-path memo, vendor
registry, visited directories, the active import chain), so nothing lives in
module globals and tests can drive a session against fake collaborators.

Control flow:
1. Check that every registered submodule is checked out.
2. Seed the vendor registry from ``git submodule status``.
3. Walk the project tree depth-first. Each directory's imports are resolved
   through its search chain; vendored hits are marked used (and refreshed in
   update mode), misses are fetched as new submodules. Every resolved
   package directory is walked in turn.
4. Report, and optionally prune, submodules nothing used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .collaborators import FilesystemProbe
from .collaborators import ImportLister
from .collaborators import PackageImports
from .collaborators import SubmoduleManager
from .errors import ImportListingFailure
from .errors import MissingWorkingTree
from .errors import NoSourceFilesError
from .errors import VendettaError
from .resolution.hosting import ExternalLocator
from .resolution.models import ImportEdge
from .resolution.models import ResolutionKind
from .resolution.paths import VENDOR_DIR
from .resolution.paths import expected_import_path
from .resolution.paths import in_vendor_tree
from .resolution.paths import join
from .resolution.registry import VendorRegistry
from .resolution.resolver import PackageResolver
from .resolution.search_path import SearchPathResolver

logger = logging.getLogger(__name__)

# Directory names the generic traversal never enters
TESTDATA_DIR = "testdata"


@dataclass
class SyncOptions:
    """Options of one run."""

    root_dir: Path
    project_names: list[str]
    update: bool = False
    prune: bool = False
    strict_import_comments: bool = False


@dataclass
class SyncReport:
    """What a run did to the vendor tree."""

    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    unused: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    visited: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated or self.removed)


class VendorSession:
    """State and driver of one vendoring run."""

    def __init__(
        self,
        options: SyncOptions,
        fs: FilesystemProbe,
        lister: ImportLister,
        submodules: SubmoduleManager,
        locator: ExternalLocator | None = None,
    ):
        """Initialize a session.

        Args:
            options: Run options (project root, names, modes)
            fs: Filesystem probe rooted at the project
            lister: Import lister for package directories
            submodules: Submodule inventory and mutator
            locator: Repository locator for missing dependencies
        """
        self.options = options
        self.fs = fs
        self.lister = lister
        self.submodules = submodules
        self.locator = locator or ExternalLocator()

        self.search_paths = SearchPathResolver(fs, options.project_names)
        self.resolver = PackageResolver(fs, self.search_paths)
        self.registry = VendorRegistry()
        self.visited: set[str] = set()
        self.trace: list[ImportEdge] = []
        self.report = SyncReport()

    def run(self) -> SyncReport:
        """Check, populate, walk and prune. Returns the report of the run."""
        self.check_submodules()
        self.populate_registry()
        self.walk()
        self.prune()
        return self.report

    def check_submodules(self) -> None:
        """Fail early if a registered submodule is not checked out.

        Raises:
            MissingWorkingTree: A submodule directory is missing or empty
        """
        for path in self.submodules.status(recursive=True):
            if self.fs.is_empty(path):
                raise MissingWorkingTree(path)

    def populate_registry(self) -> None:
        """Seed the vendor registry from the registered submodules."""
        self.registry = VendorRegistry.from_paths(self.submodules.status())
        logger.debug(f"[session] {len(self.registry)} registered submodules")

    def walk(self) -> None:
        """Visit every directory of the project tree."""
        self._walk_tree("", is_root=True)

    def _walk_tree(self, directory: str, is_root: bool = False) -> None:
        self._process(directory, strict=False)

        for name in self.fs.subdirectories(directory):
            if name == TESTDATA_DIR or name.startswith((".", "_")):
                continue
            # The top-level vendor tree is visited on demand, as imports reach it
            if name == VENDOR_DIR and is_root:
                continue
            self._walk_tree(join(directory, name))

    def _process(self, directory: str, strict: bool) -> None:
        """Resolve the imports of one directory, at most once per run.

        Args:
            directory: Directory relative to the project root
            strict: A directory without sources is an error (it was imported)
        """
        if directory in self.visited:
            return
        self.visited.add(directory)
        self.report.visited += 1

        real_dir = self.fs.root / directory if directory else self.fs.root
        try:
            package = self.lister.list_imports(real_dir)
        except NoSourceFilesError:
            if not strict:
                return
            raise

        self._check_import_comment(directory, package)

        self._follow(directory, package.imports)
        # Tests of dependencies are not followed; only the project's own
        if not in_vendor_tree(directory):
            self._follow(directory, package.test_imports)

    def _follow(self, directory: str, imports: list[str]) -> None:
        for import_path in imports:
            self.trace.append(ImportEdge(directory, import_path))
            try:
                self._dependency(directory, import_path)
            except VendettaError as e:
                if e.import_chain is None:
                    e.import_chain = list(self.trace)
                raise
            finally:
                self.trace.pop()

    def _dependency(self, directory: str, import_path: str) -> None:
        resolution = self.resolver.resolve(directory, import_path)

        if resolution.kind is ResolutionKind.STANDARD:
            return

        if resolution.kind is ResolutionKind.LOCAL:
            package_dir = resolution.directory or ""
            root = self.registry.ancestor_of(package_dir)
            if root is not None:
                self.registry.mark_used(root)
                if self.options.update and not root.updated:
                    root.updated = True
                    logger.info(f"Updating submodule {root.path} from remote")
                    self.submodules.update_from_remote(root.path)
                    self.report.updated.append(root.path)
            self._process(package_dir, strict=True)
            return

        url, root_name = self.locator.locate(import_path)
        submodule_dir = join(VENDOR_DIR, root_name)
        logger.info(f"Adding {url} at {submodule_dir}")
        self.submodules.add(url, submodule_dir)
        # Registered before anything else can look it up
        self.registry.insert(submodule_dir)
        self.report.added.append(submodule_dir)

        self._process(join(VENDOR_DIR, import_path), strict=True)

    def _check_import_comment(self, directory: str, package: PackageImports) -> None:
        if not package.import_comment:
            return

        expected = expected_import_path(directory, self.search_paths.project_names)
        if package.import_comment in expected:
            return

        message = (
            f"Package in {directory or '.'} declares import path {package.import_comment}, "
            f"but is imported as {' or '.join(expected)}"
        )
        if self.options.strict_import_comments:
            raise ImportListingFailure(message)
        logger.warning(message)

    def prune(self) -> list[str]:
        """Report submodules nothing imported and remove them in prune mode.

        Returns:
            Paths of the unused submodules
        """
        unused = [root.path for root in self.registry.unused_roots_under(VENDOR_DIR)]

        for path in unused:
            if self.options.prune:
                logger.info(f"Removing unused submodule {path}")
                self.submodules.remove(path)
                self.registry.discard(path)
                self.report.removed.append(path)
            else:
                logger.warning(f"Unused submodule {path} (use --prune to remove)")

        self.report.unused = unused
        return unused

    def __repr__(self) -> str:
        return f"VendorSession({self.options.root_dir})"
