"""Contract revert taxonomy.

A revert aborts the whole call: the chain restores every balance and every
piece of contract storage touched by the transaction, then re-raises the
revert to the caller.  Nothing is returned as an error value.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class RevertCategory(str, Enum):
    """Why an operation was rejected.

    * ``precondition``: zero price, missing approval, non-NFT target, missing or duplicate listing.
    * ``authorization``: caller is not the seller or owner.
    * ``payment``: insufficient value attached.
    * ``balance``: nothing to withdraw, or the sender cannot cover value + gas.
    """

    PRECONDITION = "precondition"
    AUTHORIZATION = "authorization"
    PAYMENT = "payment"
    BALANCE = "balance"


class ContractRevert(RuntimeError):
    """Base class for every rejected contract call.

    Subclasses set ``category``; keyword arguments are kept on ``fields``
    so callers can inspect the custom-error payload.
    """

    category: RevertCategory = RevertCategory.PRECONDITION

    def __init__(self, message: str = "", **fields: Any) -> None:
        self.fields = fields
        if not message:
            message = type(self).__name__
            if fields:
                rendered = ", ".join(f"{k}={v!r}" for k, v in fields.items())
                message = f"{message}({rendered})"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Marketplace
# ---------------------------------------------------------------------------


class PriceMustBeAboveZero(ContractRevert):
    category = RevertCategory.PRECONDITION


class NotApprovedForMarketplace(ContractRevert):
    category = RevertCategory.PRECONDITION


class NotAnNft(ContractRevert):
    """Raised when the target contract lacks the ERC-721 call surface."""

    category = RevertCategory.PRECONDITION


class AlreadyListed(ContractRevert):
    category = RevertCategory.PRECONDITION


class NotListed(ContractRevert):
    category = RevertCategory.PRECONDITION


class NotOwner(ContractRevert):
    category = RevertCategory.AUTHORIZATION


class PriceNotMet(ContractRevert):
    category = RevertCategory.PAYMENT


class NoProceeds(ContractRevert):
    category = RevertCategory.BALANCE


class TransferFailed(ContractRevert):
    category = RevertCategory.BALANCE


class ReentrantCall(ContractRevert):
    """Raised when a ``nonReentrant`` entry point is entered twice."""

    category = RevertCategory.PRECONDITION


# ---------------------------------------------------------------------------
# NFT
# ---------------------------------------------------------------------------


class NonexistentToken(ContractRevert):
    category = RevertCategory.PRECONDITION


class NotAuthorized(ContractRevert):
    category = RevertCategory.AUTHORIZATION


# ---------------------------------------------------------------------------
# Host ledger
# ---------------------------------------------------------------------------


class InsufficientFunds(ContractRevert):
    category = RevertCategory.BALANCE


class UnknownContract(ContractRevert):
    category = RevertCategory.PRECONDITION


class ValueNotAccepted(ContractRevert):
    """Raised when value is attached to a non-payable entry point."""

    category = RevertCategory.PAYMENT
