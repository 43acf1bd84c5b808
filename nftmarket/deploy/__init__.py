"""Deploy scripts — registry mapping script id to (tags, function).

Usage::

    from nftmarket.deploy import run_deploy

    deployments = run_deploy(chain, tags=["all"])
    marketplace = deployments.get_contract("NftMarketplace")

Scripts run in ``DEPLOY_ORDER``; a script runs when any of its tags is
requested.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from nftmarket.config import MarketConfig
from nftmarket.config import config as default_config
from nftmarket.core.chain import LocalChain
from nftmarket.deploy import basic_nft, nft_marketplace, update_front_end
from nftmarket.deploy.deployments import DeploymentNotFoundError, Deployments

logger = logging.getLogger(__name__)

DeployFn = Callable[[Deployments, str, MarketConfig], None]

# ---------------------------------------------------------------------------
# Script registry: script_id -> (tags, function)
# ---------------------------------------------------------------------------

DEPLOY_REGISTRY: dict[str, tuple[frozenset[str], DeployFn]] = {
    "01-deploy-nft-marketplace": (nft_marketplace.TAGS, nft_marketplace.deploy_nft_marketplace),
    "02-deploy-basic-nft": (basic_nft.TAGS, basic_nft.deploy_basic_nft),
    "99-update-front-end": (update_front_end.TAGS, update_front_end.update_front_end),
}

DEPLOY_ORDER: list[str] = [
    "01-deploy-nft-marketplace",
    "02-deploy-basic-nft",
    "99-update-front-end",
]


def scripts_for_tags(tags: Iterable[str]) -> list[str]:
    """Script ids selected by ``tags``, in execution order."""
    wanted = set(tags)
    unknown = wanted - {t for tags_, _ in DEPLOY_REGISTRY.values() for t in tags_}
    if unknown:
        raise KeyError(f"Unknown deploy tag(s): {sorted(unknown)}")
    return [sid for sid in DEPLOY_ORDER if DEPLOY_REGISTRY[sid][0] & wanted]


def run_deploy(
    chain: LocalChain,
    tags: Iterable[str] = ("all",),
    config: MarketConfig | None = None,
    deployer: str | None = None,
    deployments: Deployments | None = None,
) -> Deployments:
    """Run every deploy script matching ``tags`` against ``chain``.

    Parameters
    ----------
    chain:
        Target chain.
    tags:
        Tags selecting which scripts run.
    config:
        Settings passed to each script; defaults to the module-level config.
    deployer:
        Deploying account; defaults to ``chain.accounts[0]``.
    deployments:
        Existing registry to extend (e.g. to run ``frontend`` after ``main``).
    """
    cfg = config or default_config
    account = deployer or chain.accounts[0]
    registry = deployments or Deployments(chain)
    for script_id in scripts_for_tags(tags):
        _, fn = DEPLOY_REGISTRY[script_id]
        logger.debug("Running deploy script %s.", script_id)
        fn(registry, account, cfg)
    return registry


__all__ = [
    "DEPLOY_REGISTRY",
    "DEPLOY_ORDER",
    "DeploymentNotFoundError",
    "Deployments",
    "run_deploy",
    "scripts_for_tags",
]
