"""
Configuration management for domainsweep.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. ``.env`` file in the data directory (~/.domainsweep/.env)
3. Global config file (~/.domainsweep/config.yml)
4. Default values (lowest priority)

Scan settings additionally read the ``settings`` key of the key-value
store, which sits between the environment and the files.
"""

from .env_loader import (
    get_data_dir,
    get_env_path,
    get_global_config_path,
    load_env_file,
    load_global_config,
)
from .getters import (
    coerce_bool,
    coerce_positive_float,
    coerce_positive_int,
    get_bool,
    get_config,
    is_verbose,
)
from .settings import (
    API_KEY_SETTING,
    AUTO_SCAN_SETTING,
    STORE_SETTINGS,
    WORDLIST_SETTING,
    ScanSettings,
    is_auto_scan_enabled,
    load_scan_settings,
    save_setting,
    stored_settings,
)
from .storage import create_global_config, ensure_data_dir, get_db_path

__all__ = [
    # env_loader
    "get_data_dir",
    "get_env_path",
    "get_global_config_path",
    "load_env_file",
    "load_global_config",
    # getters
    "coerce_bool",
    "coerce_positive_float",
    "coerce_positive_int",
    "get_bool",
    "get_config",
    "is_verbose",
    # settings
    "API_KEY_SETTING",
    "AUTO_SCAN_SETTING",
    "STORE_SETTINGS",
    "WORDLIST_SETTING",
    "ScanSettings",
    "is_auto_scan_enabled",
    "load_scan_settings",
    "save_setting",
    "stored_settings",
    # storage
    "create_global_config",
    "ensure_data_dir",
    "get_db_path",
]
