"""Cooperative cancellation tokens for scan sessions."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from domainsweep.errors import ScanCancelled

T = TypeVar("T")


class CancellationToken:
    """Cancellation signal threaded through every suspending scan call.

    A token belongs to one domain name and one session generation. Once
    cancelled it stays cancelled; a new session gets a new token.
    """

    def __init__(self, name: str = "", generation: int = 0):
        self.name = name
        self.generation = generation
        self.reason: str | None = None
        self._event = asyncio.Event()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"CancellationToken({self.name!r}, generation={self.generation}, {state})"

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        """Fire the token. Repeated calls keep the first reason."""
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ScanCancelled(self.name, self.reason or "cancelled")

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await *awaitable* unless the token fires first.

        When the token fires mid-flight the underlying task is cancelled, so
        any socket it holds is closed rather than left to finish in the
        background. Raises :class:`ScanCancelled` in that case.
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            waiter.cancel()
            raise

        if task in done:
            waiter.cancel()
            return task.result()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise ScanCancelled(self.name, self.reason or "cancelled")
