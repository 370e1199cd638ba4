"""Queue state snapshots and observer events."""

from dataclasses import dataclass, field
from enum import Enum

from domainsweep.modules.recon.models import ScanResult


class QueueEventType(str, Enum):
    QUEUED = "queued"
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"
    CLEARED = "cleared"
    IDLE = "idle"


@dataclass
class QueueState:
    """Point-in-time view of the queue for progress display."""

    queued: list[str] = field(default_factory=list)
    current: str | None = None
    initial_length: int = 0

    @property
    def processing(self) -> bool:
        return self.current is not None

    @property
    def position(self) -> int:
        """1-based index of the current domain within this drain run."""
        return max(0, self.initial_length - len(self.queued))


@dataclass
class QueueEvent:
    """Something observable happened to a queue entry."""

    type: QueueEventType
    domain: str | None = None
    results: list[ScanResult] = field(default_factory=list)
    message: str = ""
    state: QueueState = field(default_factory=QueueState)
