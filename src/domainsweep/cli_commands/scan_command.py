"""Scan CLI command."""

import typer

from domainsweep.errors import WordlistError
from domainsweep.modules.queue import ScanQueue

from .deps import cli_module
from .scan_helpers import QueuePrinter, build_runner, drain
from .shared import app, console


@app.command()
def scan(
    domains: list[str] = typer.Argument(..., help="Domains or URLs to scan"),
    force: bool = typer.Option(False, "--force", "-f", help="Rescan domains already in history"),
    batch_size: int = typer.Option(
        0, "--batch-size", "-b", help="Concurrent path probes per host (0 = configured)"
    ),
    timeout: float = typer.Option(
        0.0, "--timeout", "-t", help="Per-request timeout in seconds (0 = configured)"
    ),
    shuffle: bool = typer.Option(False, "--shuffle", help="Probe wordlist paths in random order"),
) -> None:
    """Queue domains and scan them one at a time.

    Press Ctrl-C once to cancel the queue; nothing from an interrupted scan
    is saved.
    """
    cli = cli_module()
    history = cli.open_history()

    try:
        settings = cli.load_scan_settings(history.store)
    except WordlistError as exc:
        console.print(f"[red]Invalid wordlist: {exc}[/red]")
        raise typer.Exit(1) from exc

    if not settings.api_key:
        console.print(
            "[dim]No ViewDNS API key configured; scanning root domains only. "
            "Set one with 'domainsweep config set viewdns-key <key>'.[/dim]"
        )

    runner = build_runner(
        cli,
        history,
        batch_size=batch_size if batch_size > 0 else None,
        timeout=timeout if timeout > 0 else None,
        shuffle=True if shuffle else None,
    )
    queue = ScanQueue(history, runner, dedupe_history=settings.dedupe_history and not force)
    printer = QueuePrinter()
    queue.subscribe(printer)

    try:
        accepted = cli.safe_async_run(drain(queue, domains), on_interrupt=queue.cancel_all)
    except KeyboardInterrupt:
        console.print("[yellow]Scan interrupted.[/yellow]")
        raise typer.Exit(130) from None

    if not accepted:
        console.print("[yellow]Nothing to scan.[/yellow]")
        return
    console.print(f"[green]Done:[/green] {printer.summary()}")
    if printer.failed:
        raise typer.Exit(1)
