"""Scan history and ignore-list bookkeeping over a key-value store."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from domainsweep.modules.recon.domains import get_root_domain
from domainsweep.modules.recon.models import ScanResult

from .base import HISTORY_KEY, IGNORED_KEY, KeyValueStore

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


@dataclass
class HistoryItem:
    """Results of the latest completed scan of one root domain."""

    root_domain: str
    results: list[ScanResult] = field(default_factory=list)
    scanned_at: str = field(default_factory=_utc_now_iso)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryItem":
        return cls(
            root_domain=data["root_domain"],
            results=[ScanResult.from_dict(item) for item in data.get("results", [])],
            scanned_at=data.get("scanned_at", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "root_domain": self.root_domain,
            "results": [result.to_dict() for result in self.results],
            "scanned_at": self.scanned_at,
        }


class HistoryManager:
    """Reads and updates scan history and the ignore list.

    Also tracks which root domains were scanned during this process
    ("session"), so callers can show only fresh results.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.session_domains: list[str] = []

    # History

    def items(self) -> list[HistoryItem]:
        """Return history, newest first. Corrupt entries are skipped."""
        raw = self.store.get(HISTORY_KEY, []) or []
        items: list[HistoryItem] = []
        for entry in raw:
            try:
                items.append(HistoryItem.from_dict(entry))
            except (KeyError, TypeError, AttributeError):
                logger.warning("Skipping malformed history entry: %r", entry)
        return items

    def get(self, root_domain: str) -> HistoryItem | None:
        root = get_root_domain(root_domain)
        for item in self.items():
            if item.root_domain == root:
                return item
        return None

    def has(self, root_domain: str) -> bool:
        return self.get(root_domain) is not None

    def record(self, results: list[ScanResult], root_domain: str | None = None) -> HistoryItem | None:
        """Store *results*, replacing any earlier entry for the same root."""
        if not results:
            return None
        root = get_root_domain(root_domain or results[0].domain)
        if not root:
            return None

        item = HistoryItem(root_domain=root, results=list(results))
        remaining = [existing for existing in self.items() if existing.root_domain != root]
        self._save([item, *remaining])
        self.mark_session(root)
        return item

    def delete(self, root_domain: str) -> bool:
        root = get_root_domain(root_domain)
        items = self.items()
        remaining = [item for item in items if item.root_domain != root]
        if len(remaining) == len(items):
            return False
        self._save(remaining)
        return True

    def clear(self) -> None:
        self.store.remove(HISTORY_KEY)

    def _save(self, items: list[HistoryItem]) -> None:
        self.store.set(HISTORY_KEY, [item.to_dict() for item in items])

    # Session

    def mark_session(self, root_domain: str) -> None:
        if root_domain and root_domain not in self.session_domains:
            self.session_domains.append(root_domain)

    def session_results(self) -> list[ScanResult]:
        """Flattened results for root domains scanned in this session."""
        return [
            result
            for item in self.items()
            if item.root_domain in self.session_domains
            for result in item.results
        ]

    def clear_session(self) -> None:
        self.session_domains = []

    # Ignore list

    def ignored(self) -> list[str]:
        return list(self.store.get(IGNORED_KEY, []) or [])

    def is_ignored(self, domain: str) -> bool:
        return get_root_domain(domain) in self.ignored()

    def ignore(self, domain: str) -> str:
        """Add the root of *domain* to the ignore list and return it."""
        root = get_root_domain(domain)
        if not root:
            raise ValueError(f"Cannot derive a root domain from {domain!r}")
        ignored = self.ignored()
        if root not in ignored:
            ignored.append(root)
            self.store.set(IGNORED_KEY, ignored)
        return root

    def unignore(self, domain: str) -> bool:
        root = get_root_domain(domain)
        ignored = self.ignored()
        if root not in ignored:
            return False
        self.store.set(IGNORED_KEY, [item for item in ignored if item != root])
        return True
