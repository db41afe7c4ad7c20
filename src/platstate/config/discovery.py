"""Locate ``platstate.toml``.

``PLATSTATE_CONFIG`` names the file outright. Otherwise the nearest file in
the start directory or one of its parents is used.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "platstate.toml"
CONFIG_ENV_VAR = "PLATSTATE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the settings file for *start* (default: cwd), or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
