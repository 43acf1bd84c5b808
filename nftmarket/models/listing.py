"""Marketplace listing model and host-currency units.

A listing exists from a successful ``list_item`` until it is cancelled or
bought.  Absence is represented by the empty listing: ``price == 0`` and
``seller == ZERO_ADDRESS``, which is what ``get_listing`` returns for an
unknown key.
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from pydantic import BaseModel, ConfigDict, Field

ZERO_ADDRESS = "0x" + "0" * 40

WEI_PER_ETHER = 10**18


def parse_ether(amount: str | int | Decimal) -> int:
    """Convert a decimal ether amount to integer wei.

    >>> parse_ether("0.1")
    100000000000000000
    """
    value = Decimal(str(amount))
    with localcontext() as ctx:
        # Wide enough that scaling by 10**18 is exact for any input.
        ctx.prec = len(value.as_tuple().digits) + 19
        wei = value * WEI_PER_ETHER
        fractional = wei != wei.to_integral_value()
    if fractional:
        raise ValueError(f"{amount!r} has more precision than 1 wei")
    return int(wei)


def format_ether(wei: int) -> str:
    """Render integer wei as a decimal ether string without trailing zeros."""
    whole, frac = divmod(abs(wei), WEI_PER_ETHER)
    text = f"-{whole}" if wei < 0 else str(whole)
    if frac:
        text += "." + f"{frac:018d}".rstrip("0")
    return text


class Listing(BaseModel):
    """An active offer to sell one NFT at a fixed price.

    Keyed by ``(nft_address, token_id)``; at most one listing per key.
    """

    model_config = ConfigDict(frozen=True)

    nft_address: str = ZERO_ADDRESS
    token_id: int = 0
    price: int = Field(default=0, ge=0)  # wei
    seller: str = ZERO_ADDRESS

    @property
    def exists(self) -> bool:
        return self.price > 0 and self.seller != ZERO_ADDRESS

    @classmethod
    def empty(cls, nft_address: str, token_id: int) -> Listing:
        """The value reported for a key that has no listing."""
        return cls(nft_address=nft_address, token_id=token_id)
