"""Locate the project's ``shutterlog.toml``.

The file marks the project root: ``[dirs]`` paths resolve against its
directory, so ``shutterlog build`` works from anywhere inside the tree.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "shutterlog.toml"
CONFIG_ENV_VAR = "SHUTTERLOG_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect, or None.

    ``$SHUTTERLOG_CONFIG`` wins when set; if it names a file that does not
    exist, no config is used (there is no fallback to the walk-up).
    Otherwise the nearest ``shutterlog.toml`` in *start* (default: cwd) or
    one of its ancestors is returned.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
