"""Tests for PackageResolver classification."""

from pathlib import Path

import pytest
from conftest import write_go

from vendetta_cli.fs import LocalFilesystem
from vendetta_cli.resolution.models import Resolution
from vendetta_cli.resolution.models import ResolutionKind
from vendetta_cli.resolution.resolver import PackageResolver
from vendetta_cli.resolution.resolver import is_standard_import
from vendetta_cli.resolution.search_path import SearchPathResolver

PROJECT = "github.com/x/proj"


@pytest.fixture
def resolver(tmp_path: Path) -> PackageResolver:
    fs = LocalFilesystem(tmp_path)
    return PackageResolver(fs, SearchPathResolver(fs, [PROJECT]))


def test_project_subpackage_resolves_locally(tmp_path: Path, resolver: PackageResolver):
    write_go(tmp_path / "sub", "sub")

    assert resolver.resolve("", "github.com/x/proj/sub") == Resolution.local("sub")


def test_project_name_is_matched_on_segment_boundary(tmp_path: Path, resolver: PackageResolver):
    write_go(tmp_path / "sub", "sub")
    # Would be "foo" under the project root if the prefix matched byte-wise
    write_go(tmp_path / "foo", "foo")

    result = resolver.resolve("", "github.com/x/projfoo")

    assert result.kind is ResolutionKind.UNRESOLVED


def test_project_root_package(tmp_path: Path, resolver: PackageResolver):
    write_go(tmp_path, "main")

    assert resolver.resolve("sub", "github.com/x/proj") == Resolution.local("")


def test_vendored_package_resolves_into_vendor(tmp_path: Path, resolver: PackageResolver):
    write_go(tmp_path / "vendor" / "github.com" / "a" / "b", "b")

    assert resolver.resolve("", "github.com/a/b") == Resolution.local("vendor/github.com/a/b")


def test_nearer_vendor_tree_shadows_farther(tmp_path: Path, resolver: PackageResolver):
    write_go(tmp_path / "vendor" / "github.com" / "p" / "q", "q")
    write_go(tmp_path / "d" / "vendor" / "github.com" / "p" / "q", "q")
    write_go(tmp_path / "d" / "inner", "inner")

    assert resolver.resolve("d/inner", "github.com/p/q") == Resolution.local("d/vendor/github.com/p/q")
    # Outside d the top-level copy is used
    assert resolver.resolve("", "github.com/p/q") == Resolution.local("vendor/github.com/p/q")


def test_directory_without_sources_does_not_provide(tmp_path: Path, resolver: PackageResolver):
    pkg = tmp_path / "vendor" / "github.com" / "a" / "b"
    pkg.mkdir(parents=True)
    (pkg / "README.md").write_text("docs only")

    assert resolver.resolve("", "github.com/a/b").kind is ResolutionKind.UNRESOLVED


def test_symlinked_source_does_not_count(tmp_path: Path, resolver: PackageResolver):
    real = write_go(tmp_path / "elsewhere", "b")
    pkg = tmp_path / "vendor" / "github.com" / "a" / "b"
    pkg.mkdir(parents=True)
    (pkg / "b.go").symlink_to(real)

    assert resolver.resolve("", "github.com/a/b").kind is ResolutionKind.UNRESOLVED


def test_standard_library_import(resolver: PackageResolver):
    assert resolver.resolve("", "net/http") == Resolution.standard()


def test_missing_external_import_is_unresolved(resolver: PackageResolver):
    assert resolver.resolve("", "github.com/a/b/c") == Resolution.unresolved()


@pytest.mark.parametrize(
    "import_path,expected",
    [
        ("fmt", True),
        ("net/http", True),
        ("C", True),
        ("github.com/a/b", False),
        ("gopkg.in/yaml.v2", False),
    ],
)
def test_is_standard_import(import_path, expected):
    assert is_standard_import(import_path) is expected
