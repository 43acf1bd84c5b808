"""``nftmarket demo`` — list, buy, and withdraw on a fresh chain.

Walks one token through the whole marketplace lifecycle, printing each
transaction and the resulting balances.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from nftmarket.config import MarketConfig
from nftmarket.contracts.basic_nft import BasicNft
from nftmarket.contracts.marketplace import NftMarketplace
from nftmarket.core.chain import LocalChain
from nftmarket.deploy import run_deploy
from nftmarket.models.listing import format_ether, parse_ether
from nftmarket.monitor.renderer import MarketRenderer

console = Console()


def demo_cmd(
    price: str = typer.Option(
        "0.1",
        "--price",
        "-p",
        help="Listing price in ether.",
    ),
) -> None:
    """Mint, list, buy, and withdraw with sample accounts."""
    try:
        price_wei = parse_ether(price)
    except (ValueError, ArithmeticError) as exc:
        console.print(f"[bold red]Invalid price {price!r}:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2)
    if price_wei <= 0:
        console.print("[bold red]Price must be above zero.[/bold red]")
        raise typer.Exit(code=2)

    config = MarketConfig(network="hardhat", update_front_end=False)
    chain = LocalChain.from_config(config)
    deployments = run_deploy(chain, tags=("main", "basicnft"), config=config)
    marketplace = deployments.get_typed("NftMarketplace", NftMarketplace)
    nft = deployments.get_typed("BasicNft", BasicNft)

    seller, buyer = chain.accounts[0], chain.accounts[1]
    renderer = MarketRenderer(console=console)

    console.print()
    console.print(
        Panel(
            "[bold]nftmarket demo[/bold]\n\n"
            f"Seller: {seller}\nBuyer:  {buyer}\nPrice:  {format_ether(price_wei)} ETH",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    receipt = chain.connect(nft, seller).mint_nft()
    token_id = receipt.return_value
    renderer.print_receipt(f"mint_nft -> token #{token_id}", receipt)
    renderer.print_receipt(
        "approve", chain.connect(nft, seller).approve(marketplace.address, token_id)
    )
    renderer.print_receipt(
        "list_item",
        chain.connect(marketplace, seller).list_item(nft.address, token_id, price_wei),
    )
    console.print(renderer.render_listings(marketplace.listings()))

    renderer.print_receipt(
        "buy_item",
        chain.connect(marketplace, buyer).buy_item(nft.address, token_id, value=price_wei),
    )
    proceeds = marketplace.get_proceeds(seller)
    console.print(
        f"Owner of #{token_id}: [cyan]{nft.owner_of(token_id)}[/cyan]  "
        f"Seller proceeds: [green]{format_ether(proceeds)} ETH[/green]"
    )

    before = chain.balance_of(seller)
    withdraw = chain.connect(marketplace, seller).withdraw_proceeds()
    renderer.print_receipt("withdraw_proceeds", withdraw)
    after = chain.balance_of(seller)

    console.print()
    console.print(
        Panel(
            "\n".join([
                f"[bold]Withdrawn:[/bold]  {format_ether(proceeds)} ETH",
                f"[bold]Gas cost:[/bold]   {format_ether(withdraw.gas_cost)} ETH",
                f"[bold]Net change:[/bold] {format_ether(after - before)} ETH",
                f"[bold]Chain:[/bold]      {'valid' if chain.verify_chain() else 'BROKEN'}",
            ]),
            title="[bold green]Demo complete[/bold green]",
            border_style="green",
            padding=(1, 2),
        )
    )
