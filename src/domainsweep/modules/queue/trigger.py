"""Navigation-driven auto-scan."""

import logging

from domainsweep.config.settings import is_auto_scan_enabled
from domainsweep.modules.recon.domains import get_root_domain
from domainsweep.modules.store.base import SETTINGS_KEY

from .orchestrator import ScanQueue

logger = logging.getLogger(__name__)


class AutoScanTrigger:
    """Enqueue the root domain of every visited URL while auto-scan is on.

    The flag is cached and refreshed whenever the stored settings change.
    """

    def __init__(self, queue: ScanQueue):
        self.queue = queue
        self.store = queue.history.store
        self.enabled = is_auto_scan_enabled(self.store)
        self._unwatch = self.store.watch(SETTINGS_KEY, self._on_settings_changed)

    def _on_settings_changed(self, _value) -> None:
        self.enabled = is_auto_scan_enabled(self.store)
        logger.debug("Auto-scan %s", "enabled" if self.enabled else "disabled")

    def on_navigate(self, url: str) -> bool:
        """Handle a page visit; returns True if a scan was queued."""
        if not self.enabled:
            return False
        root = get_root_domain(url)
        if not root:
            return False
        if self.queue.history.is_ignored(root):
            logger.debug("Ignoring navigation to %s", root)
            return False
        return self.queue.enqueue(root)

    def close(self) -> None:
        self._unwatch()
