"""Config file discovery.

``logicem.toml`` is found by walking up from the working directory; the
directory holding it becomes the data directory (where ``.logicem/``
lives). ``LOGICEM_CONFIG`` pins an explicit file and disables the walk.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "logicem.toml"
CONFIG_ENV_VAR = "LOGICEM_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``logicem.toml`` at or above *start* (default: cwd).

    When ``LOGICEM_CONFIG`` is set, only that file is considered; a missing
    file there yields None rather than falling back to the walk.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
