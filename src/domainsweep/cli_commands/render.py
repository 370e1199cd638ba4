"""Rich rendering of scan results and history."""

from rich.table import Table

from domainsweep.modules.recon.models import ScanResult, ScanStatus
from domainsweep.modules.store.history import HistoryItem

from .shared import console

STATUS_STYLES = {
    ScanStatus.VULNERABLE: "bold red",
    ScanStatus.POTENTIALLY_VULNERABLE: "yellow",
    ScanStatus.SCANNED: "cyan",
    ScanStatus.SECURE: "green",
}

SEVERITY_STYLES = {
    "Critical": "bold red",
    "High": "red",
    "Medium": "yellow",
    "Low": "cyan",
    "Info": "dim",
}


def overall_status(results: list[ScanResult]) -> ScanStatus:
    """Worst status across *results*."""
    order = list(STATUS_STYLES)
    statuses = [result.status for result in results]
    for status in order:
        if status in statuses:
            return status
    return ScanStatus.SECURE


def styled_status(status: ScanStatus) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.value}[/{style}]"


def print_results(root_domain: str, results: list[ScanResult]) -> None:
    """Print one table of findings per root domain."""
    if not results:
        console.print(f"[dim]{root_domain}: no live hosts.[/dim]")
        return

    table = Table(title=f"{root_domain} ({styled_status(overall_status(results))})")
    table.add_column("Domain", style="cyan")
    table.add_column("Status")
    table.add_column("Severity")
    table.add_column("Path")
    table.add_column("Type")
    table.add_column("Details", style="dim")

    for result in results:
        if not result.findings:
            table.add_row(result.domain, styled_status(result.status), "", "", "", "")
            continue
        for index, finding in enumerate(result.findings):
            style = SEVERITY_STYLES.get(finding.severity, "white")
            table.add_row(
                result.domain if index == 0 else "",
                styled_status(result.status) if index == 0 else "",
                f"[{style}]{finding.severity}[/{style}]",
                finding.path,
                finding.type,
                finding.details,
            )

    console.print(table)


def print_history(items: list[HistoryItem]) -> None:
    table = Table(title="Scan History")
    table.add_column("Root Domain", style="cyan")
    table.add_column("Status")
    table.add_column("Hosts", justify="right")
    table.add_column("Findings", justify="right")
    table.add_column("Scanned At", style="dim")

    for item in items:
        findings = sum(len(result.findings) for result in item.results)
        table.add_row(
            item.root_domain,
            styled_status(overall_status(item.results)),
            str(len(item.results)),
            str(findings),
            item.scanned_at,
        )

    console.print(table)
