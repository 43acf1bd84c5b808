"""Behavioural scenarios a marketplace deployment must satisfy.

Each scenario receives a fresh ``OracleFixture`` (marketplace and NFT
deployed, token ``TOKEN_ID`` minted by the deployer and approved for the
marketplace), drives it through its public call surface, and raises
``AssertionError`` on the first violated expectation.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from nftmarket.config import MarketConfig
from nftmarket.contracts.basic_nft import BasicNft
from nftmarket.contracts.marketplace import NftMarketplace
from nftmarket.core.chain import ContractHandle, LocalChain
from nftmarket.core.errors import (
    AlreadyListed,
    ContractRevert,
    NoProceeds,
    NotApprovedForMarketplace,
    NotListed,
    NotOwner,
    PriceMustBeAboveZero,
    PriceNotMet,
)
from nftmarket.deploy import run_deploy
from nftmarket.models.events import ItemBought, ItemCanceled, ItemListed
from nftmarket.models.listing import ZERO_ADDRESS, parse_ether

PRICE = parse_ether("0.1")
TOKEN_ID = 0


@dataclass
class OracleFixture:
    """Deployed contracts plus the two actors used by every scenario."""

    chain: LocalChain
    marketplace: NftMarketplace
    nft: BasicNft
    deployer: str
    player: str

    def market_as(self, account: str) -> ContractHandle:
        return self.chain.connect(self.marketplace, account)

    def nft_as(self, account: str) -> ContractHandle:
        return self.chain.connect(self.nft, account)


def build_fixture(config: MarketConfig | None = None) -> OracleFixture:
    """Deploy the ``main`` and ``basicnft`` scripts onto a fresh chain."""
    cfg = config or MarketConfig()
    chain = LocalChain.from_config(cfg)
    deployments = run_deploy(chain, tags=("main", "basicnft"), config=cfg)
    marketplace = deployments.get_typed("NftMarketplace", NftMarketplace)
    nft = deployments.get_typed("BasicNft", BasicNft)

    deployer, player = chain.accounts[0], chain.accounts[1]
    fixture = OracleFixture(chain, marketplace, nft, deployer, player)
    fixture.nft_as(deployer).mint_nft()
    fixture.nft_as(deployer).approve(marketplace.address, TOKEN_ID)
    return fixture


@contextmanager
def reverts(expected: type[ContractRevert]) -> Iterator[None]:
    """Assert that the block raises ``expected`` (or a subclass)."""
    try:
        yield
    except expected:
        return
    except ContractRevert as exc:
        raise AssertionError(
            f"expected revert {expected.__name__}, got {type(exc).__name__}: {exc}"
        ) from exc
    raise AssertionError(f"expected revert {expected.__name__}, call succeeded")


def _assert_equal(actual: object, expected: object, what: str) -> None:
    if actual != expected:
        raise AssertionError(f"{what}: expected {expected!r}, got {actual!r}")


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


def lists_and_can_be_bought(fx: OracleFixture) -> None:
    """A listed token sold at its price moves to the buyer and credits the seller."""
    receipt = fx.market_as(fx.deployer).list_item(fx.nft.address, TOKEN_ID, PRICE)
    listed = receipt.events_named("ItemListed")
    _assert_equal(
        listed,
        [ItemListed(seller=fx.deployer, nft_address=fx.nft.address, token_id=TOKEN_ID, price=PRICE)],
        "ItemListed events",
    )
    listing = fx.marketplace.get_listing(fx.nft.address, TOKEN_ID)
    _assert_equal((listing.price, listing.seller), (PRICE, fx.deployer), "listing")

    receipt = fx.market_as(fx.player).buy_item(fx.nft.address, TOKEN_ID, value=PRICE)
    _assert_equal(
        receipt.events_named("ItemBought"),
        [ItemBought(buyer=fx.player, nft_address=fx.nft.address, token_id=TOKEN_ID, price=PRICE)],
        "ItemBought events",
    )
    _assert_equal(fx.nft.owner_of(TOKEN_ID), fx.player, "new owner")
    _assert_equal(fx.marketplace.get_proceeds(fx.deployer), PRICE, "seller proceeds")
    after = fx.marketplace.get_listing(fx.nft.address, TOKEN_ID)
    _assert_equal((after.price, after.seller), (0, ZERO_ADDRESS), "listing after sale")


def rejects_zero_price(fx: OracleFixture) -> None:
    """Listing at price zero is rejected."""
    with reverts(PriceMustBeAboveZero):
        fx.market_as(fx.deployer).list_item(fx.nft.address, TOKEN_ID, 0)
    _assert_equal(fx.marketplace.get_listing(fx.nft.address, TOKEN_ID).price, 0, "listing price")


def rejects_without_approval(fx: OracleFixture) -> None:
    """Listing is rejected once the marketplace's approval is revoked."""
    fx.nft_as(fx.deployer).approve(ZERO_ADDRESS, TOKEN_ID)
    with reverts(NotApprovedForMarketplace):
        fx.market_as(fx.deployer).list_item(fx.nft.address, TOKEN_ID, PRICE)


def rejects_non_owner_listing(fx: OracleFixture) -> None:
    """Only the token owner may list it."""
    with reverts(NotOwner):
        fx.market_as(fx.player).list_item(fx.nft.address, TOKEN_ID, PRICE)


def rejects_duplicate_listing(fx: OracleFixture) -> None:
    """Relisting an already-listed token is rejected and leaves the listing intact."""
    fx.market_as(fx.deployer).list_item(fx.nft.address, TOKEN_ID, PRICE)
    with reverts(AlreadyListed):
        fx.market_as(fx.deployer).list_item(fx.nft.address, TOKEN_ID, PRICE * 2)
    _assert_equal(fx.marketplace.get_listing(fx.nft.address, TOKEN_ID).price, PRICE, "listing price")


def rejects_underpayment(fx: OracleFixture) -> None:
    """Paying less than the price is rejected; listing and ownership are untouched."""
    fx.market_as(fx.deployer).list_item(fx.nft.address, TOKEN_ID, PRICE)
    with reverts(PriceNotMet):
        fx.market_as(fx.player).buy_item(fx.nft.address, TOKEN_ID, value=PRICE - 1)
    _assert_equal(fx.marketplace.get_listing(fx.nft.address, TOKEN_ID).price, PRICE, "listing price")
    _assert_equal(fx.nft.owner_of(TOKEN_ID), fx.deployer, "owner")
    _assert_equal(fx.marketplace.get_proceeds(fx.deployer), 0, "seller proceeds")


def cancel_listing_rules(fx: OracleFixture) -> None:
    """Cancel rejects missing listings and non-sellers; the seller may cancel."""
    with reverts(NotListed):
        fx.market_as(fx.deployer).cancel_listing(fx.nft.address, TOKEN_ID)

    fx.market_as(fx.deployer).list_item(fx.nft.address, TOKEN_ID, PRICE)
    with reverts(NotOwner):
        fx.market_as(fx.player).cancel_listing(fx.nft.address, TOKEN_ID)

    receipt = fx.market_as(fx.deployer).cancel_listing(fx.nft.address, TOKEN_ID)
    _assert_equal(
        receipt.events_named("ItemCanceled"),
        [ItemCanceled(seller=fx.deployer, nft_address=fx.nft.address, token_id=TOKEN_ID)],
        "ItemCanceled events",
    )
    _assert_equal(fx.marketplace.get_listing(fx.nft.address, TOKEN_ID).price, 0, "listing price")


def update_listing_rules(fx: OracleFixture) -> None:
    """Update rejects missing listings and non-sellers; the seller re-lists at a new price."""
    new_price = parse_ether("0.2")
    with reverts(NotListed):
        fx.market_as(fx.deployer).update_listing(fx.nft.address, TOKEN_ID, new_price)

    fx.market_as(fx.deployer).list_item(fx.nft.address, TOKEN_ID, PRICE)
    with reverts(NotOwner):
        fx.market_as(fx.player).update_listing(fx.nft.address, TOKEN_ID, new_price)

    receipt = fx.market_as(fx.deployer).update_listing(fx.nft.address, TOKEN_ID, new_price)
    _assert_equal(
        receipt.events_named("ItemListed"),
        [ItemListed(seller=fx.deployer, nft_address=fx.nft.address, token_id=TOKEN_ID, price=new_price)],
        "ItemListed events",
    )
    _assert_equal(fx.marketplace.get_listing(fx.nft.address, TOKEN_ID).price, new_price, "listing price")


def withdraw_proceeds_accounting(fx: OracleFixture) -> None:
    """Withdrawal needs a balance and pays out exactly the proceeds minus gas."""
    with reverts(NoProceeds):
        fx.market_as(fx.deployer).withdraw_proceeds()

    fx.market_as(fx.deployer).list_item(fx.nft.address, TOKEN_ID, PRICE)
    fx.market_as(fx.player).buy_item(fx.nft.address, TOKEN_ID, value=PRICE)

    proceeds_before = fx.marketplace.get_proceeds(fx.deployer)
    balance_before = fx.chain.balance_of(fx.deployer)
    receipt = fx.market_as(fx.deployer).withdraw_proceeds()
    balance_after = fx.chain.balance_of(fx.deployer)

    _assert_equal(
        balance_after + receipt.gas_cost,
        balance_before + proceeds_before,
        "balance after withdrawal + gas",
    )
    _assert_equal(fx.marketplace.get_proceeds(fx.deployer), 0, "proceeds after withdrawal")


Scenario = Callable[[OracleFixture], None]

# Ordered: the default run executes them top to bottom.
SCENARIOS: dict[str, Scenario] = {
    "lists_and_can_be_bought": lists_and_can_be_bought,
    "rejects_zero_price": rejects_zero_price,
    "rejects_without_approval": rejects_without_approval,
    "rejects_non_owner_listing": rejects_non_owner_listing,
    "rejects_duplicate_listing": rejects_duplicate_listing,
    "rejects_underpayment": rejects_underpayment,
    "cancel_listing_rules": cancel_listing_rules,
    "update_listing_rules": update_listing_rules,
    "withdraw_proceeds_accounting": withdraw_proceeds_accounting,
}
