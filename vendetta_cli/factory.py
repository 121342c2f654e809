"""Wiring of a vendoring session from command-line options and settings.

Command modules call these helpers instead of constructing collaborators
themselves, so tests can patch a single seam.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ConfigurationError
from .fs import LocalFilesystem
from .git import GitSubmodules
from .git import infer_project_names
from .golang import GoImportLister
from .resolution.hosting import ExternalLocator
from .resolution.hosting import FixedRepos
from .resolution.hosting import RemoteImportProbe
from .schema import VendettaSettings
from .session import SyncOptions
from .session import VendorSession

logger = logging.getLogger(__name__)


def create_locator(settings: VendettaSettings, probe_remote: bool | None = None) -> ExternalLocator:
    """Locator with the built-in table plus the hosting sites from settings.

    Args:
        settings: Merged settings
        probe_remote: Overrides ``resolution.remote_probe`` when not None
    """
    extra = {domain: FixedRepos(entry.segments, dict(entry.repos)) for domain, entry in settings.hosting.items()}

    use_probe = settings.resolution.remote_probe if probe_remote is None else probe_remote
    probe = RemoteImportProbe(timeout=settings.resolution.probe_timeout) if use_probe else None

    return ExternalLocator(extra_sites=extra, probe=probe)


def resolve_project_names(names: list[str], settings: VendettaSettings, git: GitSubmodules) -> list[str]:
    """Project import paths: command line, else settings, else git remotes.

    Raises:
        ConfigurationError: No name given and none can be inferred
    """
    if names:
        return list(dict.fromkeys(names))
    if settings.project.names:
        return list(dict.fromkeys(settings.project.names))

    inferred = infer_project_names(git)
    if not inferred:
        raise ConfigurationError("Unable to infer project name; specify it explicitly with the '-n' option.")
    return inferred


def create_session(
    root_dir: Path,
    settings: VendettaSettings,
    *,
    names: list[str] | None = None,
    update: bool | None = None,
    prune: bool | None = None,
    probe_remote: bool | None = None,
    strict_import_comments: bool | None = None,
) -> VendorSession:
    """Build a session for the project at ``root_dir``.

    Options left as None fall back to the settings.
    """
    git = GitSubmodules(root_dir)
    options = SyncOptions(
        root_dir=root_dir,
        project_names=resolve_project_names(names or [], settings, git),
        update=settings.vendor.update if update is None else update,
        prune=settings.vendor.prune if prune is None else prune,
        strict_import_comments=(
            settings.resolution.strict_import_comments if strict_import_comments is None else strict_import_comments
        ),
    )
    logger.debug(f"[factory] project names: {', '.join(options.project_names)}")

    return VendorSession(
        options,
        fs=LocalFilesystem(root_dir),
        lister=GoImportLister(),
        submodules=git,
        locator=create_locator(settings, probe_remote),
    )
