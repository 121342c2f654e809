"""Tests for console and JSONL logging bootstrap."""

import json
import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from vendetta_cli.logging_setup import JsonlHandler
from vendetta_cli.logging_setup import has_json_logging
from vendetta_cli.logging_setup import init_console_logging
from vendetta_cli.logging_setup import init_json_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def _make_record(message, level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="vendetta_cli.session",
        level=level,
        pathname="session.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


class TestJsonlHandler:
    def test_writes_one_json_object_per_record(self, tmp_path: Path):
        handler = JsonlHandler(str(tmp_path / "logs" / "vendetta.jsonl"))

        handler.emit(_make_record("Adding https://github.com/a/b at vendor/github.com/a/b"))
        handler.emit(_make_record("Unused submodule vendor/x", level=logging.WARNING, event="prune"))

        lines = (tmp_path / "logs" / "vendetta.jsonl").read_text().splitlines()
        first, second = (json.loads(line) for line in lines)
        assert first["lvl"] == "INFO"
        assert first["logger"] == "vendetta_cli.session"
        assert first["schema"]["name"] == "vendetta.log"
        assert first["message"].startswith("Adding")
        assert second["event"] == "prune"

    def test_dict_messages_are_merged(self, tmp_path: Path):
        handler = JsonlHandler(str(tmp_path / "out.jsonl"))

        handler.emit(_make_record({"event": "submodule_added", "path": "vendor/a"}))

        data = json.loads((tmp_path / "out.jsonl").read_text())
        assert data["path"] == "vendor/a"


class TestInit:
    def test_json_logging_is_noop_without_path(self, monkeypatch):
        monkeypatch.setattr("vendetta_cli.logging_setup.DEFAULT_PATH", None)

        init_json_logging()

        assert not has_json_logging()

    def test_json_logging_replaces_previous_sink(self, tmp_path: Path):
        init_json_logging(str(tmp_path / "a.jsonl"), "debug")
        init_json_logging(str(tmp_path / "b.jsonl"), "debug")

        sinks = [h for h in logging.getLogger().handlers if isinstance(h, JsonlHandler)]
        assert len(sinks) == 1
        assert sinks[0].path == tmp_path / "b.jsonl"
        assert sinks[0].level == logging.DEBUG

    def test_console_logging_installs_single_rich_handler(self):
        init_console_logging()
        init_console_logging(verbose=True)

        handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert handlers[0].level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG
