"""Navigation-triggered scanning."""

import typer

from domainsweep.errors import WordlistError
from domainsweep.modules.queue import AutoScanTrigger, ScanQueue

from .deps import cli_module
from .scan_helpers import QueuePrinter, build_runner
from .shared import app, console


@app.command()
def visit(
    urls: list[str] = typer.Argument(..., help="Visited page URLs"),
) -> None:
    """Report page visits; their domains are scanned when auto-scan is on."""
    cli = cli_module()
    history = cli.open_history()
    try:
        settings = cli.load_scan_settings(history.store)
    except WordlistError as exc:
        console.print(f"[red]Invalid wordlist: {exc}[/red]")
        raise typer.Exit(1) from exc

    queue = ScanQueue(
        history, build_runner(cli, history), dedupe_history=settings.dedupe_history
    )
    trigger = AutoScanTrigger(queue)
    printer = QueuePrinter()
    queue.subscribe(printer)

    if not trigger.enabled:
        trigger.close()
        console.print(
            "[yellow]Auto-scan is disabled.[/yellow] "
            "Enable it with 'domainsweep config set auto-scan-enabled true'."
        )
        return

    async def run() -> int:
        queued = 0
        async with queue:
            for url in urls:
                if trigger.on_navigate(url):
                    queued += 1
                else:
                    console.print(f"[dim]Not scanning {url}[/dim]")
            await queue.join()
        return queued

    try:
        queued = cli.safe_async_run(run(), on_interrupt=queue.cancel_all)
    except KeyboardInterrupt:
        console.print("[yellow]Scan interrupted.[/yellow]")
        raise typer.Exit(130) from None
    finally:
        trigger.close()

    if queued:
        console.print(f"[green]Done:[/green] {printer.summary()}")
