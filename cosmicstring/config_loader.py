"""
YAML defaults for the transition-probability sweep, plus a content hash that
is stored in the run manifest.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml


CONFIG_PATH = Path(__file__).resolve().with_name("config.yaml")
REQUIRED_SWEEP_KEYS = ("N", "M", "T")


def load_config(path: Path | None = None) -> dict[str, Any]:
    """
    Read the sweep configuration.

    The file must hold a mapping with a ``sweep`` section naming at least the
    charges ``N``, ``M`` and the switching time ``T``; axis bounds, ``lambda4``
    and the ``output`` section are optional.

    Parameters
    ----------
    path:
        YAML file to read instead of the bundled cosmicstring/config.yaml.
    """
    config_path = Path(path) if path is not None else CONFIG_PATH
    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration at {config_path} must be a mapping.")
    sweep = data.get("sweep")
    if not isinstance(sweep, dict):
        raise ValueError(f"Configuration at {config_path} needs a 'sweep' mapping.")
    missing = [key for key in REQUIRED_SWEEP_KEYS if key not in sweep]
    if missing:
        raise ValueError(f"'sweep' section in {config_path} lacks {', '.join(missing)}.")
    return data


def config_hash(config: dict[str, Any]) -> str:
    """SHA256 of the mapping dumped as compact JSON with sorted keys."""
    normalized = json.dumps(config, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def load_config_with_hash(path: Path | None = None) -> tuple[dict[str, Any], str]:
    config = load_config(path)
    return config, config_hash(config)
