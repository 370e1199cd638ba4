"""Scan CLI helper functions."""

from domainsweep.modules.queue import QueueEvent, QueueEventType, ScanQueue
from domainsweep.modules.recon.domains import get_root_domain
from domainsweep.modules.recon.models import ScanOutput
from domainsweep.modules.store import HistoryManager
from domainsweep.utils.cancellation import CancellationToken

from .render import print_results
from .shared import console


def build_runner(
    cli,
    history: HistoryManager,
    *,
    batch_size: int | None = None,
    timeout: float | None = None,
    shuffle: bool | None = None,
):
    """Return a queue runner that reloads settings for every scan.

    Command-line overrides win over the resolved settings.
    """

    async def runner(domain: str, token: CancellationToken) -> ScanOutput:
        settings = cli.load_scan_settings(history.store)
        return await cli.perform_scan(
            domain,
            settings.wordlist,
            settings.api_key,
            token,
            timeout=timeout or settings.timeout,
            batch_size=batch_size or settings.batch_size,
            shuffle=settings.shuffle if shuffle is None else shuffle,
        )

    return runner


def rejection_reason(queue: ScanQueue, domain: str) -> str:
    """Explain why :meth:`ScanQueue.enqueue` refused *domain*."""
    root = get_root_domain(domain)
    if not root:
        return "not a valid domain"
    if queue.history.is_ignored(root):
        return "on the ignore list"
    if root in queue.state.queued or root == queue.state.current:
        return "already queued"
    if queue.dedupe_history and queue.history.has(root):
        return "already in history (use --force to rescan)"
    return "rejected"


class QueuePrinter:
    """Queue listener that reports progress on the console."""

    def __init__(self) -> None:
        self.completed = 0
        self.failed = 0
        self.stopped = 0

    def __call__(self, event: QueueEvent) -> None:
        state = event.state
        if event.type is QueueEventType.STARTED:
            console.print(
                f"[blue][{state.position}/{state.initial_length}] "
                f"Scanning {event.domain}...[/blue]"
            )
        elif event.type is QueueEventType.COMPLETED:
            self.completed += 1
            print_results(event.domain or "", event.results)
        elif event.type is QueueEventType.FAILED:
            self.failed += 1
            console.print(f"[red]Scan of {event.domain} failed: {event.message}[/red]")
        elif event.type is QueueEventType.SKIPPED:
            self.stopped += 1
            console.print(f"[yellow]Skipped {event.domain}; results discarded.[/yellow]")
        elif event.type is QueueEventType.CANCELLED:
            self.stopped += 1
            console.print(f"[yellow]Cancelled scan of {event.domain}; nothing saved.[/yellow]")
        elif event.type is QueueEventType.CLEARED:
            self.stopped += 1
            console.print(f"[yellow]Scan queue cleared ({event.message}).[/yellow]")

    def summary(self) -> str:
        parts = [f"{self.completed} completed"]
        if self.failed:
            parts.append(f"{self.failed} failed")
        if self.stopped:
            parts.append("cancelled")
        return ", ".join(parts)


async def drain(queue: ScanQueue, domains: list[str]) -> list[str]:
    """Enqueue *domains* and wait for the queue to go idle.

    Returns the domains that were admitted.
    """
    accepted: list[str] = []
    async with queue:
        for domain in domains:
            if queue.enqueue(domain):
                accepted.append(get_root_domain(domain))
            else:
                console.print(f"[dim]Skipping {domain}: {rejection_reason(queue, domain)}[/dim]")
        await queue.join()
    return accepted
