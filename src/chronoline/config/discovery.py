"""Locate ``chronoline.toml``.

``CHRONOLINE_CONFIG`` pins the file outright. Otherwise the search starts
in the given directory (default: the working directory) and climbs toward
the filesystem root, the way git looks for ``.git/``. Reading the file is
left to :class:`~chronoline.config.settings.ChronoSettings`.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "chronoline.toml"
CONFIG_ENV_VAR = "CHRONOLINE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start*, or None.

    A ``CHRONOLINE_CONFIG`` value that does not name a file disables the
    walk-up rather than falling back to it.
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
