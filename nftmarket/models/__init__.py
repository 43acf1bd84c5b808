"""nftmarket data models — all Pydantic v2, all frozen (immutable)."""

from nftmarket.models.chain import Block, LogEntry, TxReceipt
from nftmarket.models.events import (
    Approval,
    ApprovalForAll,
    ContractEvent,
    DogMinted,
    ItemBought,
    ItemCanceled,
    ItemListed,
    Transfer,
)
from nftmarket.models.listing import (
    WEI_PER_ETHER,
    ZERO_ADDRESS,
    Listing,
    format_ether,
    parse_ether,
)

__all__ = [
    # listing
    "Listing",
    "ZERO_ADDRESS",
    "WEI_PER_ETHER",
    "parse_ether",
    "format_ether",
    # events
    "ContractEvent",
    "ItemListed",
    "ItemCanceled",
    "ItemBought",
    "Transfer",
    "Approval",
    "ApprovalForAll",
    "DogMinted",
    # chain
    "LogEntry",
    "TxReceipt",
    "Block",
]
