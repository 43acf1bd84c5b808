"""Events emitted by the marketplace and NFT contracts.

Events are frozen records attached to transaction receipts in emission
order.  ``update_listing`` re-emits ``ItemListed``; there is no separate
update event.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ContractEvent(BaseModel):
    """Base for all emitted events."""

    model_config = ConfigDict(frozen=True)

    @property
    def event_name(self) -> str:
        return type(self).__name__


# ---------------------------------------------------------------------------
# Marketplace events
# ---------------------------------------------------------------------------


class ItemListed(ContractEvent):
    seller: str
    nft_address: str
    token_id: int
    price: int


class ItemCanceled(ContractEvent):
    seller: str
    nft_address: str
    token_id: int


class ItemBought(ContractEvent):
    buyer: str
    nft_address: str
    token_id: int
    price: int


# ---------------------------------------------------------------------------
# NFT events
# ---------------------------------------------------------------------------


class Transfer(ContractEvent):
    from_address: str
    to_address: str
    token_id: int


class Approval(ContractEvent):
    owner: str
    approved: str
    token_id: int


class ApprovalForAll(ContractEvent):
    owner: str
    operator: str
    approved: bool


class DogMinted(ContractEvent):
    token_id: int
