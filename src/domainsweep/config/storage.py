"""Data directory setup and the global config template."""

import logging
from pathlib import Path

from .env_loader import get_data_dir, get_global_config_path

logger = logging.getLogger(__name__)

DB_FILENAME = "domainsweep.db"

GLOBAL_CONFIG_TEMPLATE = """\
# domainsweep global configuration
# Environment variables with the same names take precedence.

# ViewDNS API key used for subdomain discovery (optional)
# DOMAINSWEEP_VIEWDNS_API_KEY: your-key

# Enqueue visited URLs automatically (domainsweep visit)
# DOMAINSWEEP_AUTO_SCAN: false

# Path to a custom JSON wordlist
# DOMAINSWEEP_WORDLIST: ~/wordlists/paths.json

# Probes per concurrent batch and per-request timeout in seconds
# DOMAINSWEEP_BATCH_SIZE: 10
# DOMAINSWEEP_TIMEOUT: 8

# Skip domains that already have history
# DOMAINSWEEP_DEDUPE_HISTORY: true
"""


def ensure_data_dir() -> Path:
    """Create the data directory if needed and return it."""
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    return get_data_dir() / DB_FILENAME


def create_global_config() -> Path:
    """Write the commented config template unless a config already exists."""
    config_path = get_global_config_path()
    if config_path.exists():
        return config_path
    ensure_data_dir()
    config_path.write_text(GLOBAL_CONFIG_TEMPLATE)
    logger.info("Created global config at %s", config_path)
    return config_path
