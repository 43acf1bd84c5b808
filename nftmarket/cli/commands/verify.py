"""``nftmarket verify`` — run the behavioural oracle.

Exits non-zero when any scenario fails, so it can gate CI.
"""

from __future__ import annotations

import typer
from rich.console import Console

from nftmarket.config import MarketConfig
from nftmarket.monitor.renderer import MarketRenderer
from nftmarket.oracle import SCENARIOS, run_oracle

console = Console()


def verify_cmd(
    scenario: list[str] = typer.Option(
        None,
        "--scenario",
        "-s",
        help="Run only these scenarios (repeatable). Default: all.",
    ),
    network: str = typer.Option(
        "hardhat",
        "--network",
        "-n",
        help="Network name; non-development networks skip every scenario.",
    ),
) -> None:
    """Run the marketplace acceptance scenarios and show the results."""
    unknown = [s for s in scenario or [] if s not in SCENARIOS]
    if unknown:
        console.print(f"[bold red]Unknown scenario(s):[/bold red] {', '.join(unknown)}")
        console.print(f"[dim]Available: {', '.join(SCENARIOS)}[/dim]")
        raise typer.Exit(code=2)

    report = run_oracle(MarketConfig(network=network), scenarios=scenario or None)
    console.print()
    MarketRenderer(console=console).print_report(report)

    if report.failed:
        raise typer.Exit(code=1)
