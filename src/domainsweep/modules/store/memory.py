"""In-process key-value store."""

import copy
from typing import Any

from .base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dictionary-backed store; values are copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None):
        super().__init__()
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def _write(self, key: str, value: Any) -> bool:
        self._data[key] = copy.deepcopy(value)
        return True

    def _delete(self, key: str) -> bool:
        self._data.pop(key, None)
        return True
