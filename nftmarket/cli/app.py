"""Main Typer application — imports and registers all CLI commands.

Entry point: ``nftmarket`` (configured via pyproject.toml console_scripts).

Commands: deploy, update-front-end, addresses, verify, demo.
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from nftmarket.cli.commands.addresses import addresses_cmd, update_front_end_cmd
from nftmarket.cli.commands.demo import demo_cmd
from nftmarket.cli.commands.deploy import deploy_cmd
from nftmarket.cli.commands.verify import verify_cmd
from nftmarket.config import MarketConfig

app = typer.Typer(
    name="nftmarket",
    help="nftmarket: NFT marketplace contracts, deploy scripts, and behaviour oracle.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="deploy", help="Deploy the contracts to a development chain.")(deploy_cmd)
app.command(name="update-front-end", help="Record an address in the front-end map.")(update_front_end_cmd)
app.command(name="addresses", help="Show the front-end address map.")(addresses_cmd)
app.command(name="verify", help="Run the marketplace behaviour oracle.")(verify_cmd)
app.command(name="demo", help="Walk one NFT through list, buy, and withdraw.")(demo_cmd)


def configure_logging(level: str) -> None:
    """Route ``nftmarket.*`` loggers through a Rich handler at ``level``."""
    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root = logging.getLogger("nftmarket")
    root.handlers[:] = [handler]
    root.setLevel(level.upper())
    root.propagate = False


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: NFTMARKET_LOG_LEVEL or INFO).",
    ),
) -> None:
    """nftmarket: NFT marketplace contracts, deploy scripts, and behaviour oracle."""
    configure_logging(log_level or MarketConfig().log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
