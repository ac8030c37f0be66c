"""Loading of the YAML configuration file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

DEFAULT_PATH = "config.yaml"

_config: dict[str, Any] | None = None


def load_config(path: str | Path = DEFAULT_PATH) -> dict[str, Any]:
    """Read and parse the YAML configuration at ``path``."""
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"configuration {path} must hold a mapping at the top level")
    return data


def init_config(path: str | Path = DEFAULT_PATH) -> dict[str, Any]:
    """Load the configuration and make it the current one."""
    global _config
    _config = load_config(path)
    return _config


def get_config() -> dict[str, Any]:
    """Return the current configuration."""
    if _config is None:
        raise RuntimeError("configuration has not been initialised")
    return _config