"""Map an unresolved import onto a repository to fetch.

A rough approximation of how the go tool turns an import path into a
repository: a table keyed by the hosting site (the first path segment). Each
rule yields the repository URL and how many leading segments form the
repository root, i.e. the directory the submodule is added at under vendor/.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from html.parser import HTMLParser

import httpx

from ..errors import UnknownHostingConvention

logger = logging.getLogger(__name__)

# A rule returns (url, root length) or None when the import does not fit it
HostRule = Callable[[list[str]], tuple[str, int] | None]


@dataclass(frozen=True)
class FixedRepos:
    """Hosting site whose packages live at fixed upstream URLs.

    The segment at position ``segments`` (1-based) names the repository, and
    the first ``segments`` segments form the root.
    """

    segments: int
    repos: Mapping[str, str]

    def __call__(self, bits: list[str]) -> tuple[str, int] | None:
        if len(bits) < self.segments:
            return None

        url = self.repos.get(bits[self.segments - 1])
        if url is None:
            return None
        return url, self.segments


def _github(bits: list[str]) -> tuple[str, int] | None:
    if len(bits) < 3:
        return None
    return "https://" + "/".join(bits[:3]), 3


def _gopkg_in(bits: list[str]) -> tuple[str, int] | None:
    if len(bits) < 2:
        return None

    # Most gopkg.in names are like gopkg.in/pkg.v3, some like gopkg.in/user/pkg.v3
    n = 2
    if "." not in bits[1]:
        n = 3
        if len(bits) < 3:
            return None

    return "https://" + "/".join(bits[:n]), n


HOSTING_SITES: dict[str, HostRule] = {
    "github.com": _github,
    "gopkg.in": _gopkg_in,
    "google.golang.org": FixedRepos(
        2,
        {
            "cloud": "https://code.googlesource.com/gocloud",
            "grpc": "https://github.com/grpc/grpc-go",
            "appengine": "https://github.com/golang/appengine",
            "api": "https://code.googlesource.com/google-api-go-client",
        },
    ),
    "golang.org": FixedRepos(
        3,
        {
            "net": "https://go.googlesource.com/net",
            "crypto": "https://go.googlesource.com/crypto",
            "text": "https://go.googlesource.com/text",
            "oauth2": "https://go.googlesource.com/oauth2",
            "tools": "https://go.googlesource.com/tools",
            "sys": "https://go.googlesource.com/sys",
        },
    ),
}


@dataclass(frozen=True)
class FirstMatch:
    """Tries each rule in order; the first one that fits the import wins."""

    rules: tuple[HostRule, ...]

    def __call__(self, bits: list[str]) -> tuple[str, int] | None:
        for rule in self.rules:
            found = rule(bits)
            if found is not None:
                return found
        return None


def extend_rule(builtin: HostRule | None, configured: HostRule) -> HostRule:
    """Combine a configured rule with the built-in rule of the same site.

    Fixed repository tables with the same root length are merged, the
    configured URL winning per name. Any other combination consults the
    configured rule first and the built-in one when it does not fit.
    """
    if builtin is None:
        return configured
    if isinstance(builtin, FixedRepos) and isinstance(configured, FixedRepos):
        if builtin.segments == configured.segments:
            return FixedRepos(configured.segments, {**builtin.repos, **configured.repos})
    return FirstMatch((configured, builtin))


def describe_rule(rule: HostRule) -> str:
    """Short human description of a rule, for listings."""
    if isinstance(rule, FixedRepos):
        return f"{rule.segments} segments, {len(rule.repos)} fixed repositories"
    if isinstance(rule, FirstMatch):
        return " then ".join(describe_rule(r) for r in rule.rules)
    if rule is _github:
        return "3 segments, https://<root>"
    if rule is _gopkg_in:
        return "2 or 3 segments, https://<root>"
    return "custom"


class _GoImportMetaParser(HTMLParser):
    """Collects the content of <meta name="go-import"> tags."""

    def __init__(self):
        super().__init__()
        self.entries: list[tuple[str, str, str]] = []

    def handle_starttag(self, tag, attrs):
        if tag != "meta":
            return
        attributes = dict(attrs)
        if attributes.get("name") != "go-import":
            return
        fields = (attributes.get("content") or "").split()
        if len(fields) == 3:
            self.entries.append((fields[0], fields[1], fields[2]))


class RemoteImportProbe:
    """Ask the import path's own server where its repository lives.

    Implements the ``?go-get=1`` convention: the server answers with an HTML
    page carrying ``<meta name="go-import" content="prefix vcs repo">``.
    Only git repositories can become submodules.
    """

    def __init__(self, timeout: float = 10.0, client: httpx.Client | None = None):
        self.timeout = timeout
        self._client = client

    def probe(self, import_path: str) -> tuple[str, int] | None:
        """Return (repository URL, root length) or None if the server does not say."""
        url = f"https://{import_path}?go-get=1"
        logger.debug(f"[probe] GET {url}")
        try:
            if self._client is not None:
                response = self._client.get(url, follow_redirects=True)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Remote import probe for {import_path} failed: {e}")
            return None

        parser = _GoImportMetaParser()
        parser.feed(response.text)

        for prefix, vcs, repo in parser.entries:
            if vcs != "git":
                logger.debug(f"[probe] {prefix}: unsupported vcs '{vcs}'")
                continue
            if import_path == prefix or import_path.startswith(prefix + "/"):
                return repo, len(prefix.split("/"))

        return None


_DOMAIN_RE = re.compile(r"^[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+(:\d+)?$")


class ExternalLocator:
    """Locates the repository providing an unresolved import."""

    def __init__(
        self,
        extra_sites: Mapping[str, HostRule] | None = None,
        probe: RemoteImportProbe | None = None,
    ):
        """Initialize with the built-in hosting table.

        Args:
            extra_sites: Additional hosting rules (from settings), combined with
                the built-in rule of the same site by ``extend_rule``
            probe: Remote import probe consulted for unknown hosting sites
        """
        self.sites: dict[str, HostRule] = dict(HOSTING_SITES)
        for domain, rule in (extra_sites or {}).items():
            self.sites[domain] = extend_rule(self.sites.get(domain), rule)
        self.probe = probe

    def locate(self, import_path: str) -> tuple[str, str]:
        """Find the repository for ``import_path``.

        Args:
            import_path: An import path with a domain-like first segment

        Returns:
            Tuple of (repository URL, repository root import path)

        Raises:
            UnknownHostingConvention: No rule knows the hosting site, or the
                path is too short for the rule
        """
        bits = import_path.split("/")
        if not _DOMAIN_RE.match(bits[0]):
            raise UnknownHostingConvention(import_path)

        found = None
        rule = self.sites.get(bits[0])
        if rule is not None:
            found = rule(bits)
        elif self.probe is not None:
            found = self.probe.probe(import_path)

        if found is None:
            raise UnknownHostingConvention(import_path)

        url, root_len = found
        return url, "/".join(bits[:root_len])
