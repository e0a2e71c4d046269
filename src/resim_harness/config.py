"""Harness configuration.

Values come from ./resim-harness.yaml (or an explicit --config path), and
environment variables override the file.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .shared.paths import LOCK_FILE

# Default values
DEFAULT_RESIM_BIN = "resim"
DEFAULT_PACKAGE_DIR = "."
DEFAULT_ACTOR_COUNT = 3
DEFAULT_LOG_LEVEL = "warning"
DEFAULT_CONFIG_FILE = "resim-harness.yaml"

# Environment variable mappings
ENV_VARS = {
    "resim_bin": "RESIM_HARNESS_BIN",
    "package_dir": "RESIM_HARNESS_PACKAGE_DIR",
    "actor_count": "RESIM_HARNESS_ACTOR_COUNT",
    "lock_file": "RESIM_HARNESS_LOCK_FILE",
    "log_level": "RESIM_HARNESS_LOG_LEVEL",
}

_INT_KEYS = {"actor_count"}


@dataclass
class HarnessConfig:
    """Harness configuration."""

    resim_bin: str = DEFAULT_RESIM_BIN
    package_dir: str = DEFAULT_PACKAGE_DIR
    actor_count: int = DEFAULT_ACTOR_COUNT
    lock_file: str = str(LOCK_FILE)
    log_level: str = DEFAULT_LOG_LEVEL

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    def command(self, *args: str) -> str:
        """Build a resim command line, e.g. ``command("show-ledger")``."""
        return " ".join([self.resim_bin, *args])

    def as_dict(self) -> dict[str, Any]:
        """Public values keyed by name."""
        return {key: getattr(self, key) for key in ENV_VARS}


def get_config_path(path: str | Path | None = None) -> Path:
    """Resolve the config file path, defaulting to ./resim-harness.yaml."""
    return Path(path) if path else Path.cwd() / DEFAULT_CONFIG_FILE


def _coerce(key: str, value: Any) -> Any:
    if key in _INT_KEYS:
        return int(value)
    return str(value)


def load_config(path: str | Path | None = None) -> HarnessConfig:
    """Load harness configuration.

    Precedence (highest to lowest):
    1. Environment variables
    2. Config file
    3. Defaults

    Args:
        path: Optional explicit config file path

    Returns:
        HarnessConfig with values and sources
    """
    config = HarnessConfig()
    sources = {key: "default" for key in ENV_VARS}

    config_path = get_config_path(path)
    if config_path.exists():
        try:
            with open(config_path) as f:
                file_config = yaml.safe_load(f) or {}
            if not isinstance(file_config, dict):
                file_config = {}  # Scalar or list document, nothing to read

            for key in ENV_VARS:
                if key in file_config:
                    setattr(config, key, _coerce(key, file_config[key]))
                    sources[key] = "config file"
        except (OSError, ValueError, yaml.YAMLError):
            pass  # Broken config file, keep defaults

    for key, env_name in ENV_VARS.items():
        raw = os.environ.get(env_name)
        if not raw:
            continue
        try:
            setattr(config, key, _coerce(key, raw))
            sources[key] = "environment"
        except ValueError:
            pass

    config._sources = sources
    return config
