"""Shared test fixtures for nftmarket."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from nftmarket.config import MarketConfig
from nftmarket.contracts.basic_nft import BasicNft
from nftmarket.contracts.marketplace import NftMarketplace
from nftmarket.core.chain import ContractHandle, LocalChain
from nftmarket.deploy import Deployments, run_deploy
from nftmarket.oracle.scenarios import PRICE


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def addresses_file(tmp_dir: Path) -> Path:
    """Location of a front-end address map that does not exist yet."""
    return tmp_dir / "constants" / "networkMapping.json"


@pytest.fixture
def config(addresses_file: Path) -> MarketConfig:
    """Development-chain config that never touches the real front end."""
    return MarketConfig(
        network="hardhat",
        update_front_end=False,
        front_end_addresses_file=addresses_file,
    )


@pytest.fixture
def chain(config: MarketConfig) -> LocalChain:
    """Provide a fresh development chain with funded accounts."""
    return LocalChain.from_config(config)


@pytest.fixture
def deployer(chain: LocalChain) -> str:
    return chain.accounts[0]


@pytest.fixture
def player(chain: LocalChain) -> str:
    return chain.accounts[1]


@pytest.fixture
def deployments(chain: LocalChain, config: MarketConfig) -> Deployments:
    """Marketplace and BasicNft deployed by the default deployer."""
    return run_deploy(chain, tags=("main", "basicnft"), config=config)


@pytest.fixture
def marketplace(deployments: Deployments) -> NftMarketplace:
    contract = deployments.get_contract("NftMarketplace")
    assert isinstance(contract, NftMarketplace)
    return contract


@pytest.fixture
def nft(deployments: Deployments) -> BasicNft:
    contract = deployments.get_contract("BasicNft")
    assert isinstance(contract, BasicNft)
    return contract


@pytest.fixture
def market_as(
    chain: LocalChain, marketplace: NftMarketplace
) -> Callable[[str], ContractHandle]:
    """Factory fixture: the marketplace connected to a given account."""

    def _factory(account: str) -> ContractHandle:
        return chain.connect(marketplace, account)

    return _factory


@pytest.fixture
def nft_as(chain: LocalChain, nft: BasicNft) -> Callable[[str], ContractHandle]:
    """Factory fixture: the NFT connected to a given account."""

    def _factory(account: str) -> ContractHandle:
        return chain.connect(nft, account)

    return _factory


@pytest.fixture
def minted(
    nft_as: Callable[[str], ContractHandle],
    marketplace: NftMarketplace,
    deployer: str,
) -> int:
    """Token ``TOKEN_ID`` minted by the deployer and approved for the marketplace."""
    receipt = nft_as(deployer).mint_nft()
    token_id = receipt.return_value
    nft_as(deployer).approve(marketplace.address, token_id)
    return token_id


@pytest.fixture
def listed(
    minted: int,
    market_as: Callable[[str], ContractHandle],
    nft: BasicNft,
    deployer: str,
) -> int:
    """``minted`` token listed by the deployer at ``PRICE``."""
    market_as(deployer).list_item(nft.address, minted, PRICE)
    return minted
