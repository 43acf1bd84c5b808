"""02 — deploy the BasicNft companion contract."""

from __future__ import annotations

import logging

from nftmarket.config import MarketConfig
from nftmarket.contracts.basic_nft import BasicNft
from nftmarket.deploy.deployments import Deployments

logger = logging.getLogger(__name__)

TAGS: frozenset[str] = frozenset({"all", "basicnft"})


def deploy_basic_nft(
    deployments: Deployments, deployer: str, config: MarketConfig
) -> None:
    logger.info("Deploying BasicNft from %s on %s...", deployer, config.network)
    nft = deployments.chain.deploy(BasicNft(), deployer)
    deployments.save("BasicNft", nft)
