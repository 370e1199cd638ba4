"""Key-value store contract with change notification."""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

WatchCallback = Callable[[Any], None]

HISTORY_KEY = "scan-history"
IGNORED_KEY = "ignored-domains"
SETTINGS_KEY = "settings"


class KeyValueStore(ABC):
    """Opaque get/set/remove/watch persistence.

    Values must be JSON-serializable. Watchers receive the new value, or
    ``None`` when the key is removed.
    """

    def __init__(self) -> None:
        self._watchers: dict[str, list[WatchCallback]] = defaultdict(list)

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value or *default*."""

    def set(self, key: str, value: Any) -> None:
        if self._write(key, value):
            self._notify(key, value)

    def remove(self, key: str) -> None:
        if self._delete(key):
            self._notify(key, None)

    def watch(self, key: str, callback: WatchCallback) -> Callable[[], None]:
        """Register *callback* for changes to *key*; returns an unwatch function."""
        self._watchers[key].append(callback)

        def unwatch() -> None:
            callbacks = self._watchers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unwatch

    @abstractmethod
    def _write(self, key: str, value: Any) -> bool:
        """Persist *value*; return False when the write was dropped."""

    @abstractmethod
    def _delete(self, key: str) -> bool:
        """Delete *key*; return False when the delete was dropped."""

    def _notify(self, key: str, value: Any) -> None:
        for callback in list(self._watchers.get(key, [])):
            try:
                callback(value)
            except Exception:
                logger.warning("Store watcher for %r failed", key, exc_info=True)
