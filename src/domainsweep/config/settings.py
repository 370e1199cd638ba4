"""Resolved scan settings.

Each value is taken from, in order: the environment, the ``settings`` key
of the key-value store, the config files, then the default.
"""

import os
from dataclasses import dataclass, field
from typing import Any

from domainsweep.modules.recon.engine import DEFAULT_BATCH_SIZE
from domainsweep.modules.recon.models import Wordlist
from domainsweep.modules.recon.wordlist import load_wordlist
from domainsweep.modules.store.base import SETTINGS_KEY, KeyValueStore

from .getters import coerce_bool, coerce_positive_float, coerce_positive_int, get_config

API_KEY_SETTING = "viewdns-key"
AUTO_SCAN_SETTING = "auto-scan-enabled"
WORDLIST_SETTING = "wordlist"

STORE_SETTINGS = (API_KEY_SETTING, AUTO_SCAN_SETTING, WORDLIST_SETTING)

DEFAULT_TIMEOUT = 8.0


@dataclass
class ScanSettings:
    """Everything a scan run needs from configuration."""

    api_key: str = ""
    auto_scan_enabled: bool = False
    wordlist: Wordlist = field(default_factory=load_wordlist)
    wordlist_source: str = "default"
    batch_size: int = DEFAULT_BATCH_SIZE
    timeout: float = DEFAULT_TIMEOUT
    shuffle: bool = False
    dedupe_history: bool = True


def _resolve(env_key: str, stored: Any, default: Any = None) -> Any:
    env_value = os.environ.get(env_key)
    if env_value:
        return env_value
    if stored not in (None, ""):
        return stored
    return get_config(env_key, default)


def stored_settings(store: KeyValueStore | None) -> dict[str, Any]:
    if store is None:
        return {}
    value = store.get(SETTINGS_KEY, {})
    return value if isinstance(value, dict) else {}


def save_setting(store: KeyValueStore, name: str, value: Any) -> None:
    """Update one entry of the stored ``settings`` mapping."""
    if name not in STORE_SETTINGS:
        raise KeyError(f"Unknown setting {name!r}. Known: {', '.join(STORE_SETTINGS)}")
    settings = stored_settings(store)
    if value is None:
        settings.pop(name, None)
    else:
        settings[name] = value
    store.set(SETTINGS_KEY, settings)


def load_scan_settings(store: KeyValueStore | None = None) -> ScanSettings:
    """Resolve settings for the next scan.

    Raises :class:`~domainsweep.errors.WordlistError` if the configured
    wordlist cannot be loaded.
    """
    stored = stored_settings(store)

    wordlist_value = _resolve("DOMAINSWEEP_WORDLIST", stored.get(WORDLIST_SETTING))
    if not wordlist_value:
        source = "default"
    elif isinstance(wordlist_value, str) and not wordlist_value.lstrip().startswith(("{", "[")):
        source = wordlist_value
    else:
        source = "stored"

    return ScanSettings(
        api_key=str(_resolve("DOMAINSWEEP_VIEWDNS_API_KEY", stored.get(API_KEY_SETTING), "")),
        auto_scan_enabled=coerce_bool(
            _resolve("DOMAINSWEEP_AUTO_SCAN", stored.get(AUTO_SCAN_SETTING)), False
        ),
        wordlist=load_wordlist(wordlist_value or None),
        wordlist_source=source,
        batch_size=coerce_positive_int(get_config("DOMAINSWEEP_BATCH_SIZE"), DEFAULT_BATCH_SIZE),
        timeout=coerce_positive_float(get_config("DOMAINSWEEP_TIMEOUT"), DEFAULT_TIMEOUT),
        shuffle=coerce_bool(get_config("DOMAINSWEEP_SHUFFLE"), False),
        dedupe_history=coerce_bool(get_config("DOMAINSWEEP_DEDUPE_HISTORY"), True),
    )


def is_auto_scan_enabled(store: KeyValueStore | None = None) -> bool:
    """Resolve only the auto-scan flag, without loading the wordlist."""
    stored = stored_settings(store)
    return coerce_bool(_resolve("DOMAINSWEEP_AUTO_SCAN", stored.get(AUTO_SCAN_SETTING)), False)
