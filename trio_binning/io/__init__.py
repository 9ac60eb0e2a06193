"""IO helpers for trio-binning."""

from .paths import ensure_dir, now_iso, require_input, write_json

__all__ = [
    "ensure_dir",
    "now_iso",
    "require_input",
    "write_json",
]
