"""Runtime configuration — env-driven, network-aware.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and NFTMARKET_* environment variables.

Network helpers (``NETWORK_CONFIG``, ``DEVELOPMENT_CHAINS``) describe which
networks the deploy scripts and the behavioural oracle may run against.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from nftmarket.models.listing import WEI_PER_ETHER


class NetworkInfo(BaseModel):
    """Static facts about a named network."""

    model_config = ConfigDict(frozen=True)

    name: str
    chain_id: int
    block_confirmations: int = 1


# Networks where contracts can be deployed to the in-process chain and the
# behavioural oracle is allowed to run.
DEVELOPMENT_CHAINS: tuple[str, ...] = ("hardhat", "localhost")

NETWORK_CONFIG: dict[str, NetworkInfo] = {
    "hardhat": NetworkInfo(name="hardhat", chain_id=31337),
    "localhost": NetworkInfo(name="localhost", chain_id=31337),
    "sepolia": NetworkInfo(name="sepolia", chain_id=11155111, block_confirmations=6),
}


def is_development_chain(network: str) -> bool:
    return network in DEVELOPMENT_CHAINS


class MarketConfig(BaseSettings):
    """Configuration with environment variable overrides.

    All settings can be overridden via NFTMARKET_* environment variables
    or a .env file in the project root.

    Examples
    --------
    Override via environment::

        export NFTMARKET_NETWORK=localhost
        export NFTMARKET_LOG_LEVEL=DEBUG
        export NFTMARKET_UPDATE_FRONT_END=true
        export NFTMARKET_FRONT_END_ADDRESSES_FILE=../web/constants/networkMapping.json
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NFTMARKET_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"

    # Network
    network: str = "hardhat"
    chain_id: int | None = None  # falls back to NETWORK_CONFIG[network]
    gas_price_wei: int = 1_000_000_000
    account_count: int = 20
    initial_balance_wei: int = 10_000 * WEI_PER_ETHER

    # Front-end address map
    update_front_end: bool = False
    front_end_addresses_file: Path = Path(
        "../../nextjs-nft-marketplace/constants/networkMapping.json"
    )
    front_end_contract_name: str = "NftMarketplace"

    @property
    def resolved_chain_id(self) -> int:
        """Explicit ``chain_id`` or the known id of ``network``."""
        if self.chain_id is not None:
            return self.chain_id
        info = NETWORK_CONFIG.get(self.network)
        if info is None:
            raise ValueError(
                f"Unknown network {self.network!r}; set NFTMARKET_CHAIN_ID explicitly"
            )
        return info.chain_id

    @property
    def is_development(self) -> bool:
        """Whether the configured network is a development chain."""
        return is_development_chain(self.network)


# Module-level singleton: import as `from nftmarket.config import config`
config = MarketConfig()
