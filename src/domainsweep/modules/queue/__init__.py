"""Scan queue: serial orchestration, session tokens and auto-scan."""

from .models import QueueEvent, QueueEventType, QueueState
from .orchestrator import QueueListener, ScanQueue, ScanRunner
from .sessions import ScanSessionRegistry
from .trigger import AutoScanTrigger

__all__ = [
    "AutoScanTrigger",
    "QueueEvent",
    "QueueEventType",
    "QueueListener",
    "QueueState",
    "ScanQueue",
    "ScanRunner",
    "ScanSessionRegistry",
]
