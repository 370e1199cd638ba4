"""Shared CLI app objects and storage helpers."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from domainsweep.config import ensure_data_dir, get_db_path, is_verbose
from domainsweep.modules.store import HistoryManager, SQLiteStore
from domainsweep.utils.debug import set_debug_enabled

app = typer.Typer(
    name="domainsweep",
    help="Subdomain discovery and sensitive-path exposure scanner",
    no_args_is_help=True,
)
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through rich; INFO when verbose, WARNING otherwise."""
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress logging"),
    debug: bool = typer.Option(False, "--debug", help="Trace probes and queue events"),
) -> None:
    """Subdomain discovery and sensitive-path exposure scanner."""
    setup_logging(verbose or debug or is_verbose())
    set_debug_enabled(debug)


def open_store() -> SQLiteStore:
    """Open the key-value store in the data directory."""
    ensure_data_dir()
    return SQLiteStore(get_db_path())


def open_history() -> HistoryManager:
    return HistoryManager(open_store())
