"""Base class and decorators shared by every contract.

A contract is a plain Python object whose mutable storage lives in the
attributes named by ``STATE_FIELDS``.  The chain snapshots exactly those
attributes before each transaction and restores them on revert.

Entry points that may be invoked as transactions are marked with
``@external``; everything else is a read-only view.
"""

from __future__ import annotations

import copy
import functools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from nftmarket.core.errors import ReentrantCall
from nftmarket.models.events import ContractEvent

if TYPE_CHECKING:
    from nftmarket.core.chain import CallContext, LocalChain

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_METHOD_GAS = 30_000


def external(*, payable: bool = False, gas: int = DEFAULT_METHOD_GAS) -> Callable[[F], F]:
    """Mark a method as a transaction entry point.

    ``gas`` is the fixed execution cost charged on success, on top of the
    chain's intrinsic transaction cost.
    """

    def decorate(fn: F) -> F:
        fn._external = True  # type: ignore[attr-defined]
        fn._payable = payable  # type: ignore[attr-defined]
        fn._gas = gas  # type: ignore[attr-defined]
        return fn

    return decorate


def non_reentrant(fn: F) -> F:
    """Reject nested entry into any ``non_reentrant`` method of the same contract."""

    @functools.wraps(fn)
    def wrapper(self: Contract, *args: Any, **kwargs: Any) -> Any:
        if self._entered:
            raise ReentrantCall(method=fn.__name__)
        self._entered = True
        try:
            return fn(self, *args, **kwargs)
        finally:
            self._entered = False

    return wrapper  # type: ignore[return-value]


class Contract:
    """Common plumbing: address binding, message context, events, snapshots."""

    NAME: ClassVar[str] = "Contract"
    DEPLOY_GAS: ClassVar[int] = 1_000_000
    STATE_FIELDS: ClassVar[tuple[str, ...]] = ()

    def __init__(self) -> None:
        self._chain: LocalChain | None = None
        self.address: str = ""
        self._entered = False

    def bind(self, chain: LocalChain, address: str) -> None:
        """Attach the contract to ``chain`` at ``address`` (called by deploy)."""
        self._chain = chain
        self.address = address

    @property
    def chain(self) -> LocalChain:
        if self._chain is None:
            raise RuntimeError(f"{self.NAME} is not deployed")
        return self._chain

    @property
    def msg(self) -> CallContext:
        """Sender and value of the innermost call currently executing."""
        return self.chain.current_context()

    def emit(self, event: ContractEvent) -> None:
        self.chain.emit(self.address, event)

    # -- Snapshots ----------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        return {name: copy.deepcopy(getattr(self, name)) for name in self.STATE_FIELDS}

    def restore(self, state: dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)

    def __repr__(self) -> str:
        return f"<{self.NAME} at {self.address or 'undeployed'}>"
