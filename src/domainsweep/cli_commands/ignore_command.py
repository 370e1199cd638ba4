"""Ignore-list CLI command."""

import typer

from .deps import cli_module
from .shared import app, console


@app.command()
def ignore(
    action: str = typer.Argument("list", help="Action: list, add, remove"),
    domain: str | None = typer.Argument(None, help="Domain or URL"),
) -> None:
    """Manage root domains that are never scanned."""
    cli = cli_module()
    mgr = cli.open_history()

    if action == "list":
        ignored = mgr.ignored()
        if not ignored:
            console.print("[dim]Ignore list is empty.[/dim]")
            return
        console.print("[bold]Ignored domains:[/bold]")
        for root in ignored:
            console.print(f"  {root}")
        return

    if action not in ("add", "remove"):
        console.print(f"[red]Unknown action: {action}. Use 'list', 'add', or 'remove'.[/red]")
        raise typer.Exit(1)

    if not domain:
        console.print(f"[red]'ignore {action}' needs a domain.[/red]")
        raise typer.Exit(1)

    if action == "add":
        try:
            root = mgr.ignore(domain)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(1) from exc
        console.print(f"[green]Ignoring {root}.[/green]")
        return

    if mgr.unignore(domain):
        console.print(f"[green]No longer ignoring {cli.get_root_domain(domain)}.[/green]")
    else:
        console.print(f"[yellow]{domain} is not on the ignore list.[/yellow]")
