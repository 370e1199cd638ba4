"""Scan history CLI command."""

import typer

from .deps import cli_module
from .render import print_history, print_results
from .shared import app, console


@app.command()
def history(
    domain: str | None = typer.Argument(None, help="Show results for one root domain"),
    delete: bool = typer.Option(False, "--delete", help="Delete the given domain's history"),
    clear: bool = typer.Option(False, "--clear", help="Wipe all scan history"),
) -> None:
    """Show or manage stored scan results."""
    cli = cli_module()
    mgr = cli.open_history()

    if clear:
        mgr.clear()
        console.print("[green]Scan history cleared.[/green]")
        return

    if delete:
        if not domain:
            console.print("[red]--delete needs a domain.[/red]")
            raise typer.Exit(1)
        if mgr.delete(domain):
            console.print(f"[green]Deleted history for {domain}.[/green]")
        else:
            console.print(f"[yellow]No history for {domain}.[/yellow]")
        return

    if domain:
        item = mgr.get(domain)
        if item is None:
            console.print(f"[dim]No history for {domain}.[/dim]")
            return
        console.print(f"[dim]Scanned at {item.scanned_at}[/dim]")
        print_results(item.root_domain, item.results)
        return

    items = mgr.items()
    if not items:
        console.print("[dim]No scan history yet. Run 'domainsweep scan <domain>'.[/dim]")
        return
    print_history(items)
