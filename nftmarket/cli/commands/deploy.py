"""``nftmarket deploy`` — run the deploy scripts against a fresh chain.

The development chain lives in-process, so the deployment only exists for
the lifetime of the command.  Contract addresses are deterministic, which
is what makes publishing them to the front end meaningful.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from nftmarket.config import MarketConfig
from nftmarket.core.chain import LocalChain
from nftmarket.deploy import run_deploy

console = Console()


def deploy_cmd(
    network: str = typer.Option(
        "hardhat",
        "--network",
        "-n",
        help="Network name (must be a development chain).",
    ),
    tags: list[str] = typer.Option(
        ["all"],
        "--tag",
        "-t",
        help="Deploy script tags to run (repeatable).",
    ),
    update_front_end: bool = typer.Option(
        False,
        "--update-front-end/--no-update-front-end",
        help="Publish the marketplace address to the front-end address map.",
    ),
    addresses_file: str = typer.Option(
        None,
        "--addresses-file",
        "-f",
        help="Path to the front-end networkMapping.json.",
    ),
) -> None:
    """Deploy NftMarketplace and BasicNft and print their addresses."""
    overrides: dict[str, object] = {
        "network": network,
        "update_front_end": update_front_end,
    }
    if addresses_file:
        overrides["front_end_addresses_file"] = Path(addresses_file)
    config = MarketConfig(**overrides)

    if not config.is_development:
        console.print(
            f"[bold red]{network} is not a development chain; "
            f"only in-process deployment is supported.[/bold red]"
        )
        raise typer.Exit(code=1)

    chain = LocalChain.from_config(config)
    try:
        deployments = run_deploy(chain, tags=tags, config=config)
    except KeyError as exc:
        console.print(f"[bold red]Deploy failed:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    table = Table(title="Deployments", header_style="bold cyan")
    table.add_column("Contract", style="cyan")
    table.add_column("Address", style="green")
    for name, address in deployments.addresses().items():
        table.add_row(name, address)

    console.print()
    console.print(table)
    console.print()
    lines = [
        f"[bold]Network:[/bold]  {config.network} (chain {chain.chain_id})",
        f"[bold]Deployer:[/bold] {chain.accounts[0]}",
        f"[bold]Blocks:[/bold]   {chain.blocks.height}",
    ]
    if config.update_front_end:
        lines.append(f"[bold]Front end:[/bold] {config.front_end_addresses_file}")
    console.print(
        Panel(
            "\n".join(lines),
            title="[bold]Deploy complete[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
