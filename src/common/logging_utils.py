"""
Logging and JSON helpers shared by the benchmark CLI and tools.

The harness core never writes files; exports go through :py:func:`write_json`
from the CLI layer.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Optional


LOGGER_NAMESPACE = "frame_bench"
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def _ensure_handler(base: logging.Logger) -> None:
    # Leave output to the application when it has configured logging itself.
    if base.handlers or logging.getLogger().handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    base.addHandler(handler)
    base.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return ``frame_bench.<name>``, attaching a stderr handler on first use."""

    base = logging.getLogger(LOGGER_NAMESPACE)
    _ensure_handler(base)
    return base.getChild(name)


def dumps_json(record: Any) -> str:
    """Serialize a document with stable formatting for export files."""

    return json.dumps(record, sort_keys=True, indent=2)


def write_json(path: Path, record: Any) -> None:
    """Write a JSON document to ``path`` with UTF-8 encoding."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_json(record), encoding="utf-8")


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def export_filename(timestamp_ms: Optional[int] = None) -> str:
    """Return ``benchmark-results-<epoch ms>.json``."""

    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"benchmark-results-{timestamp_ms}.json"
