"""Tests for mapping imports onto repositories."""

import httpx
import pytest

from vendetta_cli.errors import UnknownHostingConvention
from vendetta_cli.resolution.hosting import FixedRepos
from vendetta_cli.resolution.hosting import ExternalLocator
from vendetta_cli.resolution.hosting import RemoteImportProbe


class TestBuiltinSites:
    @pytest.mark.parametrize(
        "import_path,url,root",
        [
            ("github.com/a/b", "https://github.com/a/b", "github.com/a/b"),
            ("github.com/a/b/c/d", "https://github.com/a/b", "github.com/a/b"),
            ("gopkg.in/yaml.v2", "https://gopkg.in/yaml.v2", "gopkg.in/yaml.v2"),
            ("gopkg.in/check.v1/sub", "https://gopkg.in/check.v1", "gopkg.in/check.v1"),
            ("gopkg.in/foo/bar.v1", "https://gopkg.in/foo/bar.v1", "gopkg.in/foo/bar.v1"),
            ("golang.org/x/net/context", "https://go.googlesource.com/net", "golang.org/x/net"),
            ("google.golang.org/grpc/codes", "https://github.com/grpc/grpc-go", "google.golang.org/grpc"),
        ],
    )
    def test_locate(self, import_path, url, root):
        assert ExternalLocator().locate(import_path) == (url, root)

    @pytest.mark.parametrize(
        "import_path",
        [
            "github.com/a",
            "gopkg.in/foo",
            "golang.org/x/unknown",
            "google.golang.org/nope",
            "example.com/a/b",
            "localhost/a/b",
        ],
    )
    def test_unknown_or_too_short(self, import_path):
        with pytest.raises(UnknownHostingConvention, match="Don't know how to handle package"):
            ExternalLocator().locate(import_path)


def test_extra_site_from_settings():
    locator = ExternalLocator(extra_sites={"example.com": FixedRepos(2, {"lib": "https://git.example.com/lib"})})

    assert locator.locate("example.com/lib/sub") == ("https://git.example.com/lib", "example.com/lib")


def test_extra_repos_extend_builtin_site():
    locator = ExternalLocator(extra_sites={"golang.org": FixedRepos(3, {"exp": "https://go.googlesource.com/exp"})})

    assert locator.locate("golang.org/x/exp/slices") == ("https://go.googlesource.com/exp", "golang.org/x/exp")
    assert locator.locate("golang.org/x/net/context") == ("https://go.googlesource.com/net", "golang.org/x/net")
    assert locator.locate("golang.org/x/crypto/ssh")[1] == "golang.org/x/crypto"


def test_extra_repo_url_wins_per_name():
    locator = ExternalLocator(extra_sites={"golang.org": FixedRepos(3, {"net": "https://mirror.local/net"})})

    assert locator.locate("golang.org/x/net/html") == ("https://mirror.local/net", "golang.org/x/net")
    assert locator.locate("golang.org/x/text")[0] == "https://go.googlesource.com/text"


def test_extra_repos_with_other_root_length_fall_back_to_builtin():
    locator = ExternalLocator(extra_sites={"github.com": FixedRepos(2, {"tool": "https://git.example.com/tool"})})

    assert locator.locate("github.com/tool/sub") == ("https://git.example.com/tool", "github.com/tool")
    assert locator.locate("github.com/a/b/c") == ("https://github.com/a/b", "github.com/a/b")


def test_builtin_table_is_not_modified():
    ExternalLocator(extra_sites={"golang.org": FixedRepos(3, {"exp": "https://go.googlesource.com/exp"})})

    with pytest.raises(UnknownHostingConvention):
        ExternalLocator().locate("golang.org/x/exp")


def _probe_with(handler) -> RemoteImportProbe:
    return RemoteImportProbe(client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestRemoteImportProbe:
    def test_git_meta_tag(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["go-get"] == "1"
            return httpx.Response(
                200,
                html='<html><head><meta name="go-import" content="example.com/lib git https://git.example.com/lib">'
                "</head></html>",
            )

        locator = ExternalLocator(probe=_probe_with(handler))

        assert locator.locate("example.com/lib/sub") == ("https://git.example.com/lib", "example.com/lib")

    def test_non_git_vcs_is_ignored(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, html='<meta name="go-import" content="example.com/lib hg https://hg.example.com/lib">')

        assert _probe_with(handler).probe("example.com/lib") is None

    def test_prefix_must_match_import(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, html='<meta name="go-import" content="example.com/other git https://x/other">')

        assert _probe_with(handler).probe("example.com/lib") is None

    def test_http_error_is_a_miss(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        locator = ExternalLocator(probe=_probe_with(handler))

        with pytest.raises(UnknownHostingConvention):
            locator.locate("example.com/lib")

    def test_builtin_site_does_not_probe(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("probe should not be consulted")

        locator = ExternalLocator(probe=_probe_with(handler))

        assert locator.locate("github.com/a/b")[1] == "github.com/a/b"
