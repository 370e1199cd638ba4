"""Environment variable and configuration file loading."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".domainsweep"


def get_data_dir() -> Path:
    """Return the storage directory (``DOMAINSWEEP_DATA_DIR`` or ``~/.domainsweep``)."""
    data_root = os.environ.get("DOMAINSWEEP_DATA_DIR")
    if data_root:
        return Path(data_root).expanduser()
    return DEFAULT_DATA_DIR


def get_global_config_path() -> Path:
    return get_data_dir() / "config.yml"


def get_env_path() -> Path:
    return get_data_dir() / ".env"


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from .env file."""
    env_vars = {}
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    # Remove quotes if present
                    value = value.strip().strip("\"'")
                    env_vars[key.strip()] = value
    return env_vars


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ``config.yml`` in the data directory."""
    config_path = get_global_config_path()
    if not config_path.exists():
        return {}
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError:
        logger.warning("Ignoring unreadable config file %s", config_path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level is not a mapping", config_path)
        return {}
    return data
