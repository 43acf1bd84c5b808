"""Companion NFT contract: a minimal ERC-721 that anyone can mint.

Every token shares the same metadata URI.  Supports per-token approval and
operator approval, which is all the marketplace needs to take custody of a
sale.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from nftmarket.contracts.base import Contract, external
from nftmarket.core.errors import NonexistentToken, NotAuthorized
from nftmarket.models.events import Approval, ApprovalForAll, DogMinted, Transfer
from nftmarket.models.listing import ZERO_ADDRESS

logger = logging.getLogger(__name__)

TOKEN_URI = (
    "ipfs://bafybeig37ioir76s7mg5oobetncojcm3c3hxasyd4rvid4jqhy4gkaheg4"
    "/?filename=0-PUG.json"
)


class BasicNft(Contract):
    """ERC-721 style token with open minting.

    Examples
    --------
    >>> nft = BasicNft()
    >>> nft.name, nft.symbol
    ('Dogie', 'DOG')
    >>> nft.get_token_counter()
    0
    """

    NAME: ClassVar[str] = "BasicNft"
    DEPLOY_GAS: ClassVar[int] = 1_200_000
    STATE_FIELDS: ClassVar[tuple[str, ...]] = (
        "_owners",
        "_balances",
        "_token_approvals",
        "_operator_approvals",
        "_token_counter",
    )

    def __init__(self, name: str = "Dogie", symbol: str = "DOG") -> None:
        super().__init__()
        self.name = name
        self.symbol = symbol
        self._owners: dict[int, str] = {}
        self._balances: dict[str, int] = {}
        self._token_approvals: dict[int, str] = {}
        self._operator_approvals: dict[str, set[str]] = {}
        self._token_counter = 0

    # -- Minting ------------------------------------------------------------

    @external(gas=90_000)
    def mint_nft(self) -> int:
        """Mint the next token to the caller and return its id."""
        token_id = self._token_counter
        self._mint(self.msg.sender, token_id)
        self._token_counter += 1
        self.emit(DogMinted(token_id=token_id))
        logger.debug("Minted %s #%d to %s.", self.symbol, token_id, self.msg.sender)
        return token_id

    def _mint(self, to: str, token_id: int) -> None:
        self._owners[token_id] = to
        self._balances[to] = self._balances.get(to, 0) + 1
        self.emit(Transfer(from_address=ZERO_ADDRESS, to_address=to, token_id=token_id))

    # -- Approvals ----------------------------------------------------------

    @external(gas=25_000)
    def approve(self, to: str, token_id: int) -> None:
        owner = self.owner_of(token_id)
        caller = self.msg.sender
        if caller != owner and not self.is_approved_for_all(owner, caller):
            raise NotAuthorized(caller=caller, token_id=token_id)
        self._token_approvals[token_id] = to.lower()
        self.emit(Approval(owner=owner, approved=to.lower(), token_id=token_id))

    @external(gas=25_000)
    def set_approval_for_all(self, operator: str, approved: bool) -> None:
        owner = self.msg.sender
        operators = self._operator_approvals.setdefault(owner, set())
        if approved:
            operators.add(operator.lower())
        else:
            operators.discard(operator.lower())
        self.emit(ApprovalForAll(owner=owner, operator=operator.lower(), approved=approved))

    # -- Transfers ----------------------------------------------------------

    @external(gas=55_000)
    def transfer_from(self, from_address: str, to: str, token_id: int) -> None:
        from_address, to = from_address.lower(), to.lower()
        owner = self.owner_of(token_id)
        if owner != from_address:
            raise NotAuthorized(reason="from is not owner", token_id=token_id)
        if to == ZERO_ADDRESS:
            raise NotAuthorized(reason="transfer to the zero address", token_id=token_id)
        if not self._is_approved_or_owner(self.msg.sender, token_id):
            raise NotAuthorized(caller=self.msg.sender, token_id=token_id)

        self._token_approvals.pop(token_id, None)
        self._balances[from_address] -= 1
        self._balances[to] = self._balances.get(to, 0) + 1
        self._owners[token_id] = to
        self.emit(Transfer(from_address=from_address, to_address=to, token_id=token_id))

    @external(gas=60_000)
    def safe_transfer_from(self, from_address: str, to: str, token_id: int) -> None:
        # Receivers are plain accounts here, so there is no onERC721Received check.
        self.transfer_from(from_address, to, token_id)

    def _is_approved_or_owner(self, spender: str, token_id: int) -> bool:
        owner = self.owner_of(token_id)
        return (
            spender == owner
            or self.get_approved(token_id) == spender
            or self.is_approved_for_all(owner, spender)
        )

    # -- Views --------------------------------------------------------------

    def owner_of(self, token_id: int) -> str:
        owner = self._owners.get(token_id)
        if owner is None:
            raise NonexistentToken(token_id=token_id)
        return owner

    def balance_of(self, owner: str) -> int:
        return self._balances.get(owner.lower(), 0)

    def get_approved(self, token_id: int) -> str:
        self.owner_of(token_id)
        return self._token_approvals.get(token_id, ZERO_ADDRESS)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return operator.lower() in self._operator_approvals.get(owner.lower(), set())

    def token_uri(self, token_id: int) -> str:
        self.owner_of(token_id)
        return TOKEN_URI

    def get_token_counter(self) -> int:
        return self._token_counter
