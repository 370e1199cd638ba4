"""Configuration CLI command."""

import typer

from domainsweep.errors import WordlistError

from .deps import cli_module
from .shared import app, console

_CLEAR_VALUES = {"", "none", "unset"}


def _mask(value: str) -> str:
    if not value:
        return "[dim]not set[/dim]"
    return value[:4] + "..." + value[-4:] if len(value) > 12 else "***"


@app.command()
def config(
    action: str = typer.Argument("show", help="Action: show, set, init"),
    name: str | None = typer.Argument(None, help="Setting name (for 'set')"),
    value: str | None = typer.Argument(None, help="Setting value; 'none' clears it"),
) -> None:
    """Show or change domainsweep settings."""
    cli = cli_module()

    if action == "init":
        config_path = cli.create_global_config()
        console.print(f"[green]Global config:[/green] {config_path}")
        console.print("[dim]Edit the file and uncomment the settings you want to use.[/dim]")
        return

    if action == "set":
        if not name:
            console.print(f"[red]Usage: config set <{'|'.join(cli.STORE_SETTINGS)}> <value>[/red]")
            raise typer.Exit(1)
        store = cli.open_store()
        new_value = None if value is None or value.strip().lower() in _CLEAR_VALUES else value
        if name == cli.AUTO_SCAN_SETTING and new_value is not None:
            new_value = cli.coerce_bool(new_value, False)
        try:
            cli.save_setting(store, name, new_value)
        except KeyError as exc:
            console.print(f"[red]{exc.args[0]}[/red]")
            raise typer.Exit(1) from exc
        if new_value is None:
            console.print(f"[green]Cleared {name}.[/green]")
        else:
            shown = _mask(new_value) if name == cli.API_KEY_SETTING else new_value
            console.print(f"[green]Set {name} = {shown}[/green]")
        return

    if action == "show":
        store = cli.open_store()
        try:
            settings = cli.load_scan_settings(store)
        except WordlistError as exc:
            console.print(f"[red]Invalid wordlist: {exc}[/red]")
            raise typer.Exit(1) from exc

        console.print("[bold]Effective settings:[/bold]")
        console.print(f"  data dir:          {cli.get_data_dir()}")
        console.print(f"  viewdns key:       {_mask(settings.api_key)}")
        console.print(f"  auto-scan:         {settings.auto_scan_enabled}")
        console.print(
            f"  wordlist:          {settings.wordlist_source} ({len(settings.wordlist)} entries)"
        )
        console.print(f"  batch size:        {settings.batch_size}")
        console.print(f"  timeout:           {settings.timeout}s")
        console.print(f"  shuffle:           {settings.shuffle}")
        console.print(f"  skip scanned:      {settings.dedupe_history}")
        return

    console.print(f"[red]Unknown action: {action}. Use 'show', 'set', or 'init'.[/red]")
    raise typer.Exit(1)
