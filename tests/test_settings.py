"""Tests for the three-scope settings manager."""

from pathlib import Path

import pytest
import yaml

from vendetta_cli.errors import ConfigurationError
from vendetta_cli.settings import SettingsManager


@pytest.fixture
def manager(tmp_path: Path) -> SettingsManager:
    return SettingsManager(project_dir=tmp_path / "proj", user_dir=tmp_path / "home" / ".vendetta")


def _write(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data))


def test_defaults_without_files(manager: SettingsManager):
    settings = manager.load()

    assert settings.project.names == []
    assert settings.vendor.update is False
    assert settings.resolution.remote_probe is False
    assert settings.hosting == {}
    assert settings.logging.path is None


def test_scopes_merge_in_order(manager: SettingsManager):
    _write(manager.user_settings_file, {"vendor": {"update": True}, "resolution": {"probe_timeout": 3}})
    _write(manager.project_settings_file, {"project": {"names": ["github.com/me/proj"]}, "vendor": {"prune": True}})
    _write(manager.local_settings_file, {"vendor": {"update": False}})

    settings = manager.load()

    assert settings.project.names == ["github.com/me/proj"]
    assert settings.vendor.update is False
    assert settings.vendor.prune is True
    assert settings.resolution.probe_timeout == 3


def test_hosting_entries_merge_per_domain(manager: SettingsManager):
    _write(manager.user_settings_file, {"hosting": {"example.com": {"segments": 2, "repos": {"a": "https://x/a"}}}})
    _write(manager.project_settings_file, {"hosting": {"example.com": {"repos": {"b": "https://x/b"}}}})

    entry = manager.get_hosting_entries()["example.com"]

    assert entry.segments == 2
    assert entry.repos == {"a": "https://x/a", "b": "https://x/b"}


def test_invalid_settings_raise(manager: SettingsManager):
    _write(manager.project_settings_file, {"hosting": {"example.com": {"segments": 0}}})

    with pytest.raises(ConfigurationError, match="Invalid settings"):
        manager.load()


def test_unreadable_yaml_is_skipped(manager: SettingsManager, caplog):
    manager.project_settings_file.parent.mkdir(parents=True)
    manager.project_settings_file.write_text("vendor: [unclosed\n")

    assert manager.get_merged_settings() == {}
    assert "Failed to read settings" in caplog.text


def test_non_mapping_is_ignored(manager: SettingsManager):
    _write(manager.project_settings_file, ["not", "a", "mapping"])

    assert manager.get_merged_settings() == {}


def test_add_hosting_repo_writes_scope_file(manager: SettingsManager):
    manager.add_hosting_repo("golang.org", "exp", "https://go.googlesource.com/exp", 3, scope="local")
    manager.add_hosting_repo("golang.org", "mod", "https://go.googlesource.com/mod", 3, scope="local")

    data = yaml.safe_load(manager.local_settings_file.read_text())
    assert data == {
        "hosting": {
            "golang.org": {
                "segments": 3,
                "repos": {"exp": "https://go.googlesource.com/exp", "mod": "https://go.googlesource.com/mod"},
            }
        }
    }
    assert not manager.project_settings_file.exists()


def test_remove_hosting_repo(manager: SettingsManager):
    manager.add_hosting_repo("example.com", "a", "https://x/a", 2)
    manager.add_hosting_repo("example.com", "b", "https://x/b", 2)

    assert manager.remove_hosting_repo("example.com", "a") is True
    assert manager.get_hosting_entries()["example.com"].repos == {"b": "https://x/b"}

    assert manager.remove_hosting_repo("example.com", "b") is True
    assert "hosting" not in (yaml.safe_load(manager.project_settings_file.read_text()) or {})


def test_remove_missing_hosting_repo(manager: SettingsManager):
    assert manager.remove_hosting_repo("example.com", "a") is False

    manager.add_hosting_repo("example.com", "a", "https://x/a", 2, scope="global")
    assert manager.remove_hosting_repo("example.com", "a", scope="project") is False
