"""Rich terminal renderer for oracle reports, listings, and address maps.

Color scheme
------------
- green     : PASSED
- red       : FAILED
- dim       : SKIPPED
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from nftmarket.models.listing import format_ether
from nftmarket.oracle.runner import ScenarioStatus

if TYPE_CHECKING:
    from nftmarket.deploy.update_front_end import AddressMap
    from nftmarket.models.chain import TxReceipt
    from nftmarket.models.listing import Listing
    from nftmarket.oracle.runner import OracleReport


_STATUS_ICONS: dict[ScenarioStatus, str] = {
    ScenarioStatus.PASSED: "[green]PASSED[/green]",
    ScenarioStatus.FAILED: "[bold red]FAILED[/bold red]",
    ScenarioStatus.SKIPPED: "[dim]SKIPPED[/dim]",
}


class MarketRenderer:
    """Renders marketplace state and oracle results as Rich output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Oracle report
    # ------------------------------------------------------------------

    def render_report(self, report: OracleReport) -> Panel:
        """Render an OracleReport as a Panel containing a scenario table."""
        table = Table(
            show_header=True,
            header_style="bold cyan",
            expand=True,
            show_lines=False,
        )
        table.add_column("#", style="dim", width=4, justify="right")
        table.add_column("Scenario", min_width=28)
        table.add_column("Result", min_width=10, justify="center")
        table.add_column("Details", min_width=20)
        table.add_column("ms", justify="right", width=8)

        for i, result in enumerate(report.results, start=1):
            details = escape(result.detail or result.description or "-")
            style = "red" if result.status == ScenarioStatus.FAILED else "dim"
            table.add_row(
                str(i),
                result.name,
                _STATUS_ICONS[result.status],
                f"[{style}]{details}[/{style}]",
                f"{result.duration_ms:.1f}",
            )

        chain = report.chain_id if report.chain_id is not None else "unknown chain"

        verdict = (
            "[bold green]all scenarios passed[/bold green]"
            if report.all_passed
            else "[bold red]acceptance NOT met[/bold red]"
        )
        summary = "  |  ".join([
            f"[bold]Network:[/bold] {report.network} ({chain})",
            f"[bold]Passed:[/bold] {report.passed}",
            f"[bold]Failed:[/bold] {report.failed}",
            f"[bold]Skipped:[/bold] {report.skipped}",
            verdict,
        ])

        return Panel(
            Group(table, Text(""), Text.from_markup(summary)),
            title="[bold]Marketplace Behaviour Oracle[/bold]",
            border_style="green" if report.all_passed else "red",
            padding=(1, 2),
        )

    def print_report(self, report: OracleReport) -> None:
        self.console.print(self.render_report(report))

    # ------------------------------------------------------------------
    # Listings and receipts
    # ------------------------------------------------------------------

    def render_listings(self, listings: list[Listing]) -> Table:
        table = Table(title="Active Listings", header_style="bold cyan")
        table.add_column("NFT", style="cyan")
        table.add_column("Token", justify="right")
        table.add_column("Price (ETH)", justify="right", style="green")
        table.add_column("Seller")
        for listing in listings:
            table.add_row(
                listing.nft_address,
                str(listing.token_id),
                format_ether(listing.price),
                listing.seller,
            )
        return table

    def print_receipt(self, label: str, receipt: TxReceipt) -> None:
        """One-line summary of a mined transaction and its events."""
        events = ", ".join(log.event_name for log in receipt.logs) or "no events"
        self.console.print(
            f"[bold]{label}[/bold] [dim]block #{receipt.block_number} "
            f"gas {receipt.gas_used:,}[/dim] -> {events}"
        )

    # ------------------------------------------------------------------
    # Address map
    # ------------------------------------------------------------------

    def render_address_map(self, address_map: AddressMap) -> Table:
        table = Table(title="Front-end Contract Addresses", header_style="bold cyan")
        table.add_column("Chain", style="cyan", justify="right")
        table.add_column("Contract", style="green")
        table.add_column("Addresses")
        for chain_id in sorted(address_map, key=lambda c: (len(c), c)):
            for name, addresses in sorted(address_map[chain_id].items()):
                table.add_row(chain_id, name, "\n".join(addresses) or "[dim]-[/dim]")
        return table
