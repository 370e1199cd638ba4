"""domainsweep CLI facade.

Command implementations live in ``domainsweep.cli_commands``. Commands look
up their collaborators on this module at call time, so tests patch them here.
"""

from domainsweep.cli_commands import (  # noqa: F401
    config_command,
    history_command,
    ignore_command,
    scan_command,
    visit_command,
)
from domainsweep.cli_commands.shared import app, console, open_history, open_store
from domainsweep.config import (
    API_KEY_SETTING,
    AUTO_SCAN_SETTING,
    STORE_SETTINGS,
    coerce_bool,
    create_global_config,
    get_data_dir,
    load_scan_settings,
    save_setting,
)
from domainsweep.modules.recon import get_root_domain, perform_scan
from domainsweep.utils.async_utils import safe_async_run


@app.command()
def version() -> None:
    """Show the installed domainsweep version."""
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as pkg_version

    try:
        current_version = pkg_version("domainsweep")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"domainsweep {current_version}")


__all__ = [
    "API_KEY_SETTING",
    "AUTO_SCAN_SETTING",
    "STORE_SETTINGS",
    "app",
    "coerce_bool",
    "console",
    "create_global_config",
    "get_data_dir",
    "get_root_domain",
    "load_scan_settings",
    "main",
    "open_history",
    "open_store",
    "perform_scan",
    "safe_async_run",
    "save_setting",
]


def main() -> None:
    """Entry point for the CLI."""
    app()
