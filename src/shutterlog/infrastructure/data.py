"""Global data — ``_data/*.json`` and ``_data/*.yaml`` exposed to every template."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from shutterlog.domain.errors import ContentError

logger = logging.getLogger(__name__)

DATA_SUFFIXES = (".json", ".yaml", ".yml")


def load_global_data(data_dir: Path) -> dict[str, Any]:
    """Load every data file in *data_dir*, keyed by file stem.

    Raises:
        ContentError: If a data file cannot be parsed.
    """
    if not data_dir.is_dir():
        return {}

    data: dict[str, Any] = {}
    for path in sorted(data_dir.iterdir()):
        if not path.is_file() or path.suffix not in DATA_SUFFIXES:
            continue
        if path.stem in data:
            logger.warning("Duplicate global data key %r from %s", path.stem, path.name)
        data[path.stem] = _load_file(path)
    return data


def _load_file(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            return json.loads(raw)
        return YAML(typ="safe", pure=True).load(raw)
    except (UnicodeDecodeError, json.JSONDecodeError, YAMLError) as exc:
        raise ContentError(path, f"invalid data file: {exc}") from exc
