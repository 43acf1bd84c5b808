"""NFT marketplace — fixed-price listings with escrowed seller proceeds.

Listings are keyed by ``(nft_address, token_id)``.  The marketplace never
takes custody of the NFT while it is listed; it only needs transfer
approval, and moves the token seller -> buyer at purchase time.  Sale
revenue is held by the marketplace as per-seller proceeds until the seller
withdraws it.

Storage mutations always happen before any outgoing call (NFT transfer or
value transfer), and ``buy_item`` is additionally guarded against re-entry.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from nftmarket.contracts.base import Contract, external, non_reentrant
from nftmarket.core.errors import (
    AlreadyListed,
    NoProceeds,
    NotAnNft,
    NotApprovedForMarketplace,
    NotListed,
    NotOwner,
    PriceMustBeAboveZero,
    PriceNotMet,
)
from nftmarket.models.events import ItemBought, ItemCanceled, ItemListed
from nftmarket.models.listing import Listing

logger = logging.getLogger(__name__)

ListingKey = tuple[str, int]

NFT_INTERFACE = ("owner_of", "get_approved", "is_approved_for_all", "safe_transfer_from")


class NftMarketplace(Contract):
    """Fixed-price marketplace for any ERC-721 style contract on the chain.

    Entry points: ``list_item``, ``cancel_listing``, ``update_listing``,
    ``buy_item`` (payable), ``withdraw_proceeds``.  Views: ``get_listing``,
    ``get_proceeds``.

    Every entry point is all-or-nothing: a revert raised anywhere inside it,
    including inside the NFT transfer, discards the whole call.
    """

    NAME: ClassVar[str] = "NftMarketplace"
    DEPLOY_GAS: ClassVar[int] = 1_600_000
    STATE_FIELDS: ClassVar[tuple[str, ...]] = ("_listings", "_proceeds")

    def __init__(self) -> None:
        super().__init__()
        self._listings: dict[ListingKey, Listing] = {}
        self._proceeds: dict[str, int] = {}

    @staticmethod
    def _key(nft_address: str, token_id: int) -> ListingKey:
        return nft_address.lower(), token_id

    def _require_listed(self, nft_address: str, token_id: int) -> Listing:
        listing = self._listings.get(self._key(nft_address, token_id))
        if listing is None:
            raise NotListed(nft_address=nft_address, token_id=token_id)
        return listing

    def _require_seller(self, listing: Listing) -> None:
        if self.msg.sender != listing.seller:
            raise NotOwner(caller=self.msg.sender, seller=listing.seller)

    # -- Listing lifecycle --------------------------------------------------

    @external(gas=80_000)
    def list_item(self, nft_address: str, token_id: int, price: int) -> None:
        """List ``token_id`` of ``nft_address`` for ``price`` wei.

        Reverts
        -------
        AlreadyListed
            A listing already exists for this token.
        NotAnNft
            ``nft_address`` is a contract without the NFT call surface.
        NotOwner
            The caller does not own the token.
        PriceMustBeAboveZero
            ``price`` is zero or negative.
        NotApprovedForMarketplace
            The marketplace is neither the token's approved address nor an
            approved operator of the owner.
        """
        key = self._key(nft_address, token_id)
        if key in self._listings:
            raise AlreadyListed(nft_address=nft_address, token_id=token_id)

        nft = self.chain.get_contract_at(nft_address)
        if not all(callable(getattr(nft, name, None)) for name in NFT_INTERFACE):
            raise NotAnNft(nft_address=nft_address)
        owner = nft.owner_of(token_id)  # type: ignore[attr-defined]
        seller = self.msg.sender
        if owner != seller:
            raise NotOwner(caller=seller, owner=owner)
        if price <= 0:
            raise PriceMustBeAboveZero()
        approved = nft.get_approved(token_id) == self.address  # type: ignore[attr-defined]
        if not approved and not nft.is_approved_for_all(owner, self.address):  # type: ignore[attr-defined]
            raise NotApprovedForMarketplace(nft_address=nft_address, token_id=token_id)

        self._listings[key] = Listing(
            nft_address=key[0], token_id=token_id, price=price, seller=seller
        )
        self.emit(ItemListed(
            seller=seller, nft_address=key[0], token_id=token_id, price=price
        ))
        logger.info("Listed %s #%d at %d wei by %s.", key[0], token_id, price, seller)

    @external(gas=35_000)
    def cancel_listing(self, nft_address: str, token_id: int) -> None:
        """Remove the caller's listing."""
        listing = self._require_listed(nft_address, token_id)
        self._require_seller(listing)

        del self._listings[self._key(nft_address, token_id)]
        self.emit(ItemCanceled(
            seller=listing.seller, nft_address=listing.nft_address, token_id=token_id
        ))
        logger.info("Canceled listing %s #%d.", listing.nft_address, token_id)

    @external(gas=40_000)
    def update_listing(self, nft_address: str, token_id: int, new_price: int) -> None:
        """Change the price of the caller's listing.

        Emits ``ItemListed`` again rather than a dedicated update event.
        """
        listing = self._require_listed(nft_address, token_id)
        self._require_seller(listing)
        if new_price <= 0:
            raise PriceMustBeAboveZero()

        updated = listing.model_copy(update={"price": new_price})
        self._listings[self._key(nft_address, token_id)] = updated
        self.emit(ItemListed(
            seller=updated.seller,
            nft_address=updated.nft_address,
            token_id=token_id,
            price=new_price,
        ))
        logger.info(
            "Updated listing %s #%d: %d -> %d wei.",
            updated.nft_address, token_id, listing.price, new_price,
        )

    # -- Purchase -----------------------------------------------------------

    @external(payable=True, gas=110_000)
    @non_reentrant
    def buy_item(self, nft_address: str, token_id: int) -> None:
        """Buy a listed token with the attached value.

        The full attached value is credited to the seller's proceeds, so an
        overpayment is not refunded.  The listing is deleted and the proceeds
        credited before the token is transferred; if the transfer fails the
        whole purchase reverts.
        """
        listing = self._require_listed(nft_address, token_id)
        buyer = self.msg.sender
        paid = self.msg.value
        if paid < listing.price:
            raise PriceNotMet(
                nft_address=nft_address, token_id=token_id, price=listing.price
            )

        self._proceeds[listing.seller] = self._proceeds.get(listing.seller, 0) + paid
        del self._listings[self._key(nft_address, token_id)]
        self.chain.internal_call(
            self.address,
            listing.nft_address,
            "safe_transfer_from",
            listing.seller,
            buyer,
            token_id,
        )
        self.emit(ItemBought(
            buyer=buyer,
            nft_address=listing.nft_address,
            token_id=token_id,
            price=listing.price,
        ))
        logger.info(
            "Sold %s #%d to %s for %d wei.", listing.nft_address, token_id, buyer, paid
        )

    # -- Proceeds -----------------------------------------------------------

    @external(gas=35_000)
    def withdraw_proceeds(self) -> int:
        """Send the caller's whole proceeds balance to the caller.

        The balance is zeroed before the value leaves the contract, so a
        re-entrant withdrawal from the recipient sees nothing to withdraw.
        Returns the amount withdrawn.
        """
        seller = self.msg.sender
        proceeds = self._proceeds.get(seller, 0)
        if proceeds <= 0:
            raise NoProceeds(seller=seller)

        self._proceeds[seller] = 0
        self.chain.send_value(self.address, seller, proceeds)
        logger.info("Withdrew %d wei of proceeds to %s.", proceeds, seller)
        return proceeds

    # -- Views --------------------------------------------------------------

    def get_listing(self, nft_address: str, token_id: int) -> Listing:
        """Return the listing, or the empty listing (price 0, zero seller)."""
        listing = self._listings.get(self._key(nft_address, token_id))
        if listing is None:
            return Listing.empty(nft_address.lower(), token_id)
        return listing

    def get_proceeds(self, seller: str) -> int:
        return self._proceeds.get(seller.lower(), 0)

    def listings(self) -> list[Listing]:
        """All active listings, ordered by (nft_address, token_id)."""
        return [self._listings[k] for k in sorted(self._listings)]
