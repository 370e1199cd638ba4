"""Debug tracing for scan sessions.

Thread-safe debug output with rich formatting for console sessions.
"""

import json
import threading
from typing import Any

from rich.console import Console
from rich.syntax import Syntax

# Thread-local storage for debug state
_debug_state = threading.local()


def set_debug_enabled(enabled: bool) -> None:
    """Set debug mode for the current thread/session."""
    _debug_state.enabled = enabled


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled for the current thread/session."""
    return getattr(_debug_state, "enabled", False)


def debug_print(category: str, message: str, **data: Any) -> None:
    """Print debug information if debug mode is enabled.

    Args:
        category: Debug category (probe, queue, scan)
        message: Main message to display
        **data: Additional key-value pairs to display
    """
    if not is_debug_enabled():
        return
    console = Console(stderr=True)
    console.print(f"[DEBUG:{category}] {message}", style="bold cyan", markup=False)
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            try:
                json_str = json.dumps(value, indent=2)
                syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)
                console.print(f"  {key}:", style="dim", markup=False)
                console.print(syntax)
            except (TypeError, ValueError):
                console.print(f"  {key}: {value}", style="dim", markup=False)
        elif isinstance(value, list):
            console.print(f"  {key}: {', '.join(str(v) for v in value)}", style="dim", markup=False)
        elif isinstance(value, str) and len(value) > 100:
            console.print(
                f"  {key}: {value[:100]}... ({len(value)} chars)", style="dim", markup=False
            )
        else:
            console.print(f"  {key}: {value}", style="dim", markup=False)


def debug_probe(
    url: str,
    status: int | None = None,
    elapsed: float | None = None,
    error: str | None = None,
) -> None:
    """Log one completed HTTP probe in debug mode.

    The query string is dropped so API keys never reach the console.
    """
    if not is_debug_enabled():
        return
    debug_print(
        "probe",
        f"GET {url.split('?', 1)[0]}",
        Status=status or None,
        Time=f"{elapsed:.2f}s" if elapsed is not None else None,
        Error=error,
    )


def debug_queue_event(
    event_type: str,
    domain: str | None,
    queued: list[str] | None = None,
    message: str = "",
) -> None:
    """Log a queue transition in debug mode."""
    if not is_debug_enabled():
        return
    debug_print(
        "queue",
        f"{event_type} {domain or ''}".rstrip(),
        Pending=queued or None,
        Detail=message or None,
    )
