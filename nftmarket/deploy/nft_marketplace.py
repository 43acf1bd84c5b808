"""01 — deploy the NftMarketplace contract."""

from __future__ import annotations

import logging

from nftmarket.config import MarketConfig
from nftmarket.contracts.marketplace import NftMarketplace
from nftmarket.deploy.deployments import Deployments

logger = logging.getLogger(__name__)

TAGS: frozenset[str] = frozenset({"all", "nftmarketplace", "main"})


def deploy_nft_marketplace(
    deployments: Deployments, deployer: str, config: MarketConfig
) -> None:
    logger.info("Deploying NftMarketplace from %s on %s...", deployer, config.network)
    marketplace = deployments.chain.deploy(NftMarketplace(), deployer)
    deployments.save("NftMarketplace", marketplace)
