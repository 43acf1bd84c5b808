"""Contracts executed by the development chain.

``NftMarketplace`` is the fixed-price marketplace; ``BasicNft`` is the
companion ERC-721 used to mint tokens for it.
"""

from nftmarket.contracts.base import Contract, external, non_reentrant
from nftmarket.contracts.basic_nft import TOKEN_URI, BasicNft
from nftmarket.contracts.marketplace import NftMarketplace

__all__ = [
    "Contract",
    "external",
    "non_reentrant",
    "BasicNft",
    "TOKEN_URI",
    "NftMarketplace",
]
