"""``nftmarket update-front-end`` and ``nftmarket addresses``.

Manual access to the front-end address map: record an address for a chain,
or print what is currently recorded.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from nftmarket.config import MarketConfig
from nftmarket.deploy.update_front_end import (
    AddressMapError,
    load_address_map,
    update_contract_addresses,
)
from nftmarket.monitor.renderer import MarketRenderer

console = Console()


def update_front_end_cmd(
    address: str = typer.Argument(..., help="Deployed contract address."),
    chain_id: int = typer.Option(
        None,
        "--chain-id",
        "-c",
        help="Chain id to record under (default: configured network).",
    ),
    contract_name: str = typer.Option(
        None,
        "--contract",
        help="Contract name key (default: NftMarketplace).",
    ),
    addresses_file: str = typer.Option(
        None,
        "--addresses-file",
        "-f",
        help="Path to the front-end networkMapping.json.",
    ),
) -> None:
    """Record a contract address in the front-end address map."""
    config = MarketConfig()
    path = Path(addresses_file) if addresses_file else config.front_end_addresses_file
    name = contract_name or config.front_end_contract_name
    try:
        chain = chain_id if chain_id is not None else config.resolved_chain_id
    except ValueError as exc:
        console.print(f"[bold red]Cannot resolve chain id:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2)

    try:
        address_map = update_contract_addresses(path, chain, name, address)
    except AddressMapError as exc:
        console.print(f"[bold red]Cannot update address map:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    console.print(f"[green]Recorded {name} for chain {chain} in {path}.[/green]")
    console.print(MarketRenderer(console=console).render_address_map(address_map))


def addresses_cmd(
    addresses_file: str = typer.Option(
        None,
        "--addresses-file",
        "-f",
        help="Path to the front-end networkMapping.json.",
    ),
) -> None:
    """Print the front-end address map."""
    config = MarketConfig()
    path = Path(addresses_file) if addresses_file else config.front_end_addresses_file
    try:
        address_map = load_address_map(path)
    except AddressMapError as exc:
        console.print(f"[bold red]Cannot read address map:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if not address_map:
        console.print(f"[dim]No addresses recorded in {path}.[/dim]")
        return
    console.print(MarketRenderer(console=console).render_address_map(address_map))
