"""Serial scan queue driving one domain at a time through the pipeline."""

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable

from domainsweep.config.settings import load_scan_settings
from domainsweep.errors import ScanCancelled
from domainsweep.modules.recon.domains import get_root_domain
from domainsweep.modules.recon.models import ScanOutput
from domainsweep.modules.recon.pipeline import perform_scan
from domainsweep.modules.store.history import HistoryManager
from domainsweep.utils.cancellation import CancellationToken
from domainsweep.utils.debug import debug_queue_event

from .models import QueueEvent, QueueEventType, QueueState
from .sessions import ScanSessionRegistry

logger = logging.getLogger(__name__)

ScanRunner = Callable[[str, CancellationToken], Awaitable[ScanOutput]]
QueueListener = Callable[[QueueEvent], None]


class ScanQueue:
    """FIFO of root domains scanned strictly one at a time.

    Domains are admitted once: never while queued or in flight, never when
    ignored, and (with ``dedupe_history``) never when history already holds
    them. Results are persisted only if the scan that produced them is still
    the current session for its domain, so a skipped or cancelled run can
    never overwrite history.

    Usage::

        async with ScanQueue(history) as queue:
            queue.enqueue("example.com")
            await queue.join()
    """

    def __init__(
        self,
        history: HistoryManager,
        runner: ScanRunner | None = None,
        *,
        dedupe_history: bool = True,
    ):
        self.history = history
        self.dedupe_history = dedupe_history
        self.sessions = ScanSessionRegistry()
        self._runner = runner or self._default_runner
        self._queue: deque[str] = deque()
        self._current: str | None = None
        self._current_token: CancellationToken | None = None
        self._initial_length = 0
        self._listeners: list[QueueListener] = []
        self._drain_task: asyncio.Task | None = None
        self._idle = asyncio.Event()
        self._idle.set()
        self._started = False
        self._closed = False

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # Observation

    @property
    def state(self) -> QueueState:
        return QueueState(
            queued=list(self._queue),
            current=self._current,
            initial_length=self._initial_length,
        )

    def subscribe(self, listener: QueueListener) -> Callable[[], None]:
        """Register *listener* for queue events; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event_type: QueueEventType, domain: str | None = None, **kwargs) -> None:
        event = QueueEvent(type=event_type, domain=domain, state=self.state, **kwargs)
        debug_queue_event(event_type.value, domain, event.state.queued, event.message)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.warning("Queue listener failed on %s", event_type.value, exc_info=True)

    # Lifecycle

    def start(self) -> None:
        """Begin draining. Must be called from inside the event loop."""
        if self._closed:
            raise RuntimeError("Queue is closed")
        self._started = True
        self._kick()

    async def close(self) -> None:
        """Abort all work and wait for the drain task to finish."""
        self._closed = True
        self.cancel_all()
        task = self._drain_task
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def join(self) -> None:
        """Wait until the queue is empty and nothing is in flight."""
        await self._idle.wait()

    # Commands

    def enqueue(self, domain: str) -> bool:
        """Admit the root of *domain*; returns False when it is rejected."""
        root = get_root_domain(domain)
        if not root or self._closed:
            return False
        if root in self._queue or root == self._current:
            logger.debug("%s is already queued", root)
            return False
        if self.history.is_ignored(root):
            logger.info("Not queueing ignored domain %s", root)
            return False
        if self.dedupe_history and self.history.has(root):
            logger.info("Not queueing %s: already in history", root)
            return False

        self._queue.append(root)
        if self._current is None and self._drain_task is None:
            self._initial_length = len(self._queue)
        else:
            self._initial_length += 1
        self._emit(QueueEventType.QUEUED, root)
        self._kick()
        return True

    def skip_current(self) -> bool:
        """Abort the in-flight scan, discard its results and move on."""
        domain = self._current
        if domain is None:
            return False
        self.sessions.cancel(domain, "skipped")
        self._release_current()
        logger.info("Skipping scan of %s", domain)
        self._emit(QueueEventType.SKIPPED, domain)
        return True

    def cancel_all(self) -> int:
        """Drop every pending domain and abort the in-flight scan.

        Returns the number of pending domains removed.
        """
        pending = len(self._queue)
        had_current = self._current is not None
        self._queue.clear()
        self.sessions.cancel_all("cancelled")
        self._release_current()
        if not pending and not had_current:
            return 0
        self._initial_length = 1 if had_current else 0
        logger.info("Cancelled %d pending scans", pending)
        self._emit(QueueEventType.CLEARED, message=f"{pending} pending scans dropped")
        return pending

    def _release_current(self) -> None:
        # The aborted run unwinds in the background; its token is already stale
        self._current = None
        self._current_token = None

    # Draining

    def _kick(self) -> None:
        if not self._started or self._closed or self._drain_task is not None:
            return
        if not self._queue:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._idle.clear()
        self._drain_task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        try:
            while self._queue and not self._closed:
                await self._process(self._queue.popleft())
        finally:
            self._drain_task = None
            self._current = None
            self._current_token = None
            self._initial_length = 0
            self._idle.set()
            self._emit(QueueEventType.IDLE)

    def _is_current(self, domain: str, token: CancellationToken) -> bool:
        return (
            self._current == domain
            and self._current_token is token
            and self.sessions.is_current(token)
        )

    async def _process(self, domain: str) -> None:
        token = self.sessions.start(domain)
        self._current = domain
        self._current_token = token
        self._emit(QueueEventType.STARTED, domain)

        try:
            try:
                output = await token.guard(self._runner(domain, token))
            except ScanCancelled as exc:
                logger.info("Scan of %s stopped: %s", domain, exc.reason)
                if exc.reason != "skipped":
                    self._emit(QueueEventType.CANCELLED, domain, message=exc.reason)
                return
            except Exception as exc:
                if not self._is_current(domain, token):
                    logger.debug("Ignoring failure of stale scan for %s: %s", domain, exc)
                    return
                logger.exception("Scan of %s failed", domain)
                self._emit(QueueEventType.FAILED, domain, message=str(exc))
                return

            if not self._is_current(domain, token):
                logger.info("Discarding stale results for %s", domain)
                return

            if output.results:
                self.history.record(output.results, domain)
            else:
                self.history.mark_session(domain)
            self._emit(
                QueueEventType.COMPLETED,
                domain,
                results=list(output.results),
                message="" if output.has_live_hosts else "no live hosts",
            )
        finally:
            self.sessions.end(token)
            if self._current_token is token:
                self._current = None
                self._current_token = None

    async def _default_runner(self, domain: str, token: CancellationToken) -> ScanOutput:
        settings = load_scan_settings(self.history.store)
        return await perform_scan(
            domain,
            settings.wordlist,
            settings.api_key,
            token,
            timeout=settings.timeout,
            batch_size=settings.batch_size,
            shuffle=settings.shuffle,
        )
