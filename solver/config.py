"""
FormulaFold — settings defaults and JSON persistence.

Settings live in ``<project>/data/formulafold.json`` unless a path is given.
Stored values are merged over :data:`DEFAULT_SETTINGS`, so new keys are
always present.
"""

import json
import os
from typing import Optional

_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data")
_DATA_FILE = os.path.join(_DATA_DIR, "formulafold.json")

# ── Default settings ────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "tolerance": 1e-9,       # same-axis consistency and verification
    "mode": "exact",         # "exact" (resolver) or "numerical" (NumPy)
    "log_level": "WARNING",
    "show_steps": False,     # CLI prints the full trail
}

MODES = ("exact", "numerical")


def _resolve(path: Optional[str]) -> str:
    return path if path else _DATA_FILE


def load_settings(path: Optional[str] = None) -> dict:
    """Return the stored settings merged over the defaults.

    A missing, unreadable or malformed file yields the defaults.
    """
    merged = dict(DEFAULT_SETTINGS)
    target = _resolve(path)
    if os.path.exists(target):
        try:
            with open(target, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (json.JSONDecodeError, OSError):
            return merged
        if isinstance(stored, dict):
            merged.update(stored)
    return merged


def save_settings(settings: dict, path: Optional[str] = None) -> None:
    """Persist *settings*; unknown keys are written as given."""
    target = _resolve(path)
    os.makedirs(os.path.dirname(os.path.abspath(target)), exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2, ensure_ascii=False)


def check_mode(mode: str) -> str:
    if mode not in MODES:
        raise ValueError(
            f"Unknown mode {mode!r}. Choose one of: {', '.join(MODES)}.")
    return mode
