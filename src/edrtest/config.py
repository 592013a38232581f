"""Configuration loading for the edrtest runner.

Settings come from a YAML mapping. The first of these that applies is used:

- An explicit path passed to ``load_settings`` (must exist)
- The file named by the ``EDRTEST_CONFIG`` environment variable (must exist)
- ``~/.config/edrtest/config.yaml`` (optional)

Command-line flags override whatever the file provides.

Example config.yaml:
    log_file: /var/log/edrtest/activity.log
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

__all__ = [
    "EDRTEST_CONFIG",
    "DEFAULT_LOG_FILE",
    "Settings",
    "default_config_path",
    "load_settings",
]

# Environment variable naming a config file
EDRTEST_CONFIG = "EDRTEST_CONFIG"

DEFAULT_LOG_FILE = "activity.log"


@dataclass
class Settings:
    """Runner settings."""
    log_file: str = DEFAULT_LOG_FILE

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = "<dict>") -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown setting(s) {unknown} in {source}. "
                f"Expected: {sorted(known)}"
            )
        return cls(**{k: str(v) for k, v in data.items()})


def default_config_path() -> Path:
    """User config location (~/.config/edrtest/config.yaml)."""
    return Path.home() / ".config" / "edrtest" / "config.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML config file, requiring a mapping at the root."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config format in {path}: expected mapping at root")
    return data


def load_settings(path: Optional[Path | str] = None) -> Settings:
    """
    Load runner settings.

    Args:
        path: Explicit config file; overrides the environment and user config

    Returns:
        Settings, with defaults for anything the file does not set

    Raises:
        FileNotFoundError: If an explicit or environment-named file is missing
        ValueError: If the file is not a mapping or names unknown settings
    """
    if path is None and os.environ.get(EDRTEST_CONFIG):
        path = os.environ[EDRTEST_CONFIG]

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"config file not found: {config_path}")
    else:
        config_path = default_config_path()
        if not config_path.exists():
            return Settings()

    return Settings.from_dict(_load_yaml(config_path), str(config_path))
