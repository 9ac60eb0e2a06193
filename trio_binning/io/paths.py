"""Filesystem helpers for summary outputs and CLI inputs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

PathLike = Union[str, Path]


def ensure_dir(path: PathLike) -> Path:
    """Create ``path`` (and parents) when missing; return it as a Path."""

    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_json(path: Path, payload: Any) -> Path:
    """Dump ``payload`` as indented, key-sorted UTF-8 JSON ending in a newline."""

    ensure_dir(path.parent)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return path


def now_iso() -> str:
    """UTC timestamp with second precision, e.g. ``2024-01-01T00:00:00+00:00``."""

    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def require_input(path: PathLike) -> Path:
    resolved = Path(path)
    if not resolved.exists():
        raise FileNotFoundError(f"Input file not found: {resolved}")
    return resolved
