"""Event loop helpers for running scans from synchronous CLI code."""

import asyncio
import signal
import sys
import threading
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar, cast

T = TypeVar("T")

InterruptHandler = Callable[[], None]


def _cancel_all_tasks(loop: asyncio.AbstractEventLoop) -> None:
    """Cancel all pending tasks on the event loop and let them unwind."""
    tasks = asyncio.all_tasks(loop)
    for task in tasks:
        task.cancel()

    if tasks:
        loop.run_until_complete(asyncio.gather(*tasks, return_exceptions=True))


def _finalize_loop(loop: asyncio.AbstractEventLoop) -> None:
    try:
        _cancel_all_tasks(loop)
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.run_until_complete(loop.shutdown_default_executor())
    finally:
        asyncio.set_event_loop(None)
        loop.close()


def _can_install_signals() -> bool:
    return sys.platform != "win32" and threading.current_thread() is threading.main_thread()


def _run_in_fresh_loop[T](
    coro: Coroutine[Any, Any, T],
    on_interrupt: InterruptHandler | None = None,
) -> T:
    """Run *coro* in a new loop.

    The first Ctrl-C calls *on_interrupt* (when given) so the coroutine can
    wind down on its own; without a handler, or on a second Ctrl-C, every
    task is cancelled and ``KeyboardInterrupt`` is raised.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    interrupts = 0

    def handle_interrupt() -> None:
        nonlocal interrupts
        interrupts += 1
        if on_interrupt is not None and interrupts == 1:
            on_interrupt()
            return
        for task in asyncio.all_tasks(loop):
            task.cancel()

    installed = False
    if _can_install_signals():
        loop.add_signal_handler(signal.SIGINT, handle_interrupt)
        loop.add_signal_handler(signal.SIGTERM, handle_interrupt)
        installed = True

    try:
        return loop.run_until_complete(coro)
    except asyncio.CancelledError:
        if interrupts:
            raise KeyboardInterrupt from None
        raise
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)
            loop.remove_signal_handler(signal.SIGTERM)
        _finalize_loop(loop)


def safe_async_run[T](
    coro: Coroutine[Any, Any, T],
    on_interrupt: InterruptHandler | None = None,
) -> T:
    """
    Run an async coroutine to completion with clean loop shutdown.

    If an event loop is already running in this thread (e.g. pytest-asyncio),
    the coroutine is executed in a separate thread with its own event loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return _run_in_fresh_loop(coro, on_interrupt)

    result: T | None = None
    error: BaseException | None = None

    def _runner() -> None:
        nonlocal result, error
        try:
            result = _run_in_fresh_loop(coro, on_interrupt)
        except BaseException as exc:
            error = exc

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    if error is not None:
        raise error

    return cast(T, result)
