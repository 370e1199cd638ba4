"""Persistence: key-value stores plus history and ignore-list management."""

from .base import HISTORY_KEY, IGNORED_KEY, SETTINGS_KEY, KeyValueStore
from .history import HistoryItem, HistoryManager
from .memory import MemoryStore
from .sqlite import SQLiteStore

__all__ = [
    "HISTORY_KEY",
    "IGNORED_KEY",
    "SETTINGS_KEY",
    "HistoryItem",
    "HistoryManager",
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
]
