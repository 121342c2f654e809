"""
App-layer logging bootstrap.
Installs the console handler (Rich, on stderr) and the optional JSONL sink
early in CLI startup.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

from rich.logging import RichHandler

from .console import err_console

DEFAULT_PATH = os.environ.get("VENDETTA_LOG_PATH")
DEFAULT_LEVEL = os.environ.get("VENDETTA_LOG_LEVEL", "INFO").upper()

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset(
    {
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    }
)


class JsonlHandler(logging.Handler):
    def __init__(self, path: str):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Build a structured payload
            base = {
                "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
                "lvl": record.levelname,
                "schema": {"name": "vendetta.log", "ver": "1.0.0"},
                "logger": record.name,
                "event": getattr(record, "event", None),
                "message": record.getMessage(),
            }
            # Merge extras if the message is a dict
            msg = record.msg
            if isinstance(msg, dict):
                base.update(msg)
            # Attach any extra fields on the record
            for k, v in record.__dict__.items():
                if k in _RESERVED_ATTRS:
                    continue
                base.setdefault(k, v)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(base, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | None = None, level: str | None = None) -> None:
    """Attach the JSONL sink to the root logger. No-op without a path."""
    path = path or DEFAULT_PATH
    if not path:
        return
    level = (level or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    handler_level = getattr(logging, level, logging.INFO)
    root.setLevel(min(root.level or logging.WARNING, handler_level))
    # Remove existing handlers of the same kind to avoid duplicates
    for h in list(root.handlers):
        if isinstance(h, JsonlHandler):
            root.removeHandler(h)
    handler = JsonlHandler(path)
    handler.setLevel(handler_level)
    root.addHandler(handler)


def init_console_logging(verbose: bool = False) -> None:
    """Show progress messages on stderr; DEBUG with ``verbose``."""
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        if isinstance(h, RichHandler):
            root.removeHandler(h)
    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    root.addHandler(handler)


def has_json_logging() -> bool:
    """True if a JSONL sink is already attached."""
    return any(isinstance(h, JsonlHandler) for h in logging.getLogger().handlers)
