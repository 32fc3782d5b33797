"""Configuration loader with environment variable expansion and defaults."""

from __future__ import annotations

import copy
import os
import re
from pathlib import Path
from typing import Any

import yaml

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

# Default config path relative to project root
_DEFAULT_CONFIG = Path(__file__).resolve().parent.parent.parent / "config" / "config.yaml"

DEFAULTS: dict[str, Any] = {
    "arxiv": {
        "categories": ["cs.AI", "cs.LG", "cs.CV", "cs.CL", "cs.NE", "cs.RO", "stat.ML"],
        "max_results": 50,
        "search_query": "",
        "min_score": 5,
        "max_workers": 1,
    },
    "overlay": {
        "path": "~/.paper-topics/keywords.json",
    },
    "output_dir": "digests",
}


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(value, str):
        def _replace(match: re.Match) -> str:
            var_name = match.group(1)
            return os.environ.get(var_name, match.group(0))
        return _ENV_VAR_PATTERN.sub(_replace, value)
    if isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge override into a copy of base. Lists are replaced, not joined."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Path | str | None = None) -> dict[str, Any]:
    """Load YAML config over the built-in defaults, expanding ${VAR} references.

    Args:
        path: Path to config file. Defaults to config/config.yaml in the project root.

    Returns:
        Parsed configuration dictionary.

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        # Fall back to example config if main config missing
        example = config_path.parent / "config.example.yaml"
        if path is None and example.exists():
            config_path = example
        else:
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Copy config/config.example.yaml to config/config.yaml and adjust it."
            )

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    return _merge(DEFAULTS, _expand_env_vars(raw or {}))


def get_project_root() -> Path:
    """Return the project root directory (where pyproject.toml lives)."""
    return Path(__file__).resolve().parent.parent.parent
