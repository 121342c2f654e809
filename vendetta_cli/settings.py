"""Settings manager for vendetta settings.yaml files.

Manages three-scope settings system:
- User global (~/.vendetta/settings.yaml)
- Project (<project>/.vendetta/settings.yaml)
- Local (<project>/.vendetta/settings.local.yaml)
"""

import logging
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import ValidationError

from .errors import ConfigurationError
from .schema import HostingEntry
from .schema import VendettaSettings

logger = logging.getLogger(__name__)

ScopeType = Literal["local", "project", "global"]

SETTINGS_DIR = ".vendetta"


class SettingsManager:
    """Manages settings across user/project/local scopes."""

    def __init__(self, project_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            project_dir: Project root holding .vendetta/. If None, uses the current directory.
            user_dir: Directory holding user settings (for testing). If None, uses ~/.vendetta.
        """
        if project_dir is None:
            project_dir = Path(".")
        if user_dir is None:
            user_dir = Path.home() / SETTINGS_DIR

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = project_dir / SETTINGS_DIR / "settings.yaml"
        self.local_settings_file = project_dir / SETTINGS_DIR / "settings.local.yaml"

    def _scope_file(self, scope: ScopeType) -> Path:
        file_map = {
            "global": self.user_settings_file,
            "project": self.project_settings_file,
            "local": self.local_settings_file,
        }
        return file_map.get(scope, self.project_settings_file)

    def load(self) -> VendettaSettings:
        """Load and validate the merged settings.

        Raises:
            ConfigurationError: Merged settings do not match the schema
        """
        merged = self.get_merged_settings()
        try:
            return VendettaSettings.model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Merge order (later overrides earlier):
        1. User settings
        2. Project settings
        3. Local settings

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}

        for path in (self.user_settings_file, self.project_settings_file, self.local_settings_file):
            settings = self._read_settings(path)
            if settings:
                merged = self._deep_merge(merged, settings)

        return merged

    def get_hosting_entries(self) -> dict[str, HostingEntry]:
        """Hosting table entries declared in settings, by domain."""
        return self.load().hosting

    def add_hosting_repo(
        self, domain: str, name: str, url: str, segments: int, scope: ScopeType = "project"
    ) -> None:
        """Declare that ``<domain>/.../<name>`` is fetched from ``url``.

        Args:
            domain: Hosting site (first import path segment)
            name: Last segment of the repository root
            url: Repository URL
            segments: Number of segments forming the repository root
            scope: "global", "project", or "local"
        """
        target_file = self._scope_file(scope)
        self._update_settings(target_file, {"hosting": {domain: {"segments": segments, "repos": {name: url}}}})
        logger.info(f"Added {scope} hosting entry {domain} {name}: {url}")

    def remove_hosting_repo(self, domain: str, name: str, scope: ScopeType = "project") -> bool:
        """Remove a hosting repository entry.

        Returns:
            True if removed, False if not found
        """
        target_file = self._scope_file(scope)
        settings = self._read_settings(target_file)

        entry = (settings or {}).get("hosting", {}).get(domain)
        if not entry or name not in entry.get("repos", {}):
            return False

        del entry["repos"][name]

        # Clean up empty sections
        if not entry["repos"]:
            del settings["hosting"][domain]
        if not settings["hosting"]:
            del settings["hosting"]

        self._write_settings(target_file, settings)
        logger.info(f"Removed {scope} hosting entry {domain} {name}")
        return True

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist or cannot be read
        """
        if not path.exists():
            return None

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings in {path}: expected a mapping")
            return None
        return data

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        """Write settings to YAML file.

        Args:
            path: Path to settings file
            settings: Settings dictionary
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, "w") as f:
                yaml.dump(settings, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to write settings to {path}: {e}")
            raise

    def _update_settings(self, path: Path, updates: dict[str, Any]) -> None:
        """Update settings file with new values (deep merge)."""
        existing = self._read_settings(path) or {}
        merged = self._deep_merge(existing, updates)
        self._write_settings(path, merged)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            overlay: Overlay dictionary (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
