"""In-process development chain (the host ledger).

Executes contract calls as sequential, isolated, all-or-nothing
transactions:

- Every transaction runs under a single re-entrant lock; the chain is the
  only writer of contract storage and account balances.
- Before a transaction runs, all balances, nonces and contract storage are
  snapshotted.  Any exception restores the snapshot and is re-raised, so a
  failed call leaves no observable partial state.
- Reverted calls are not charged gas (they fail at estimation, as on a
  development node).  Successful calls are charged
  ``(INTRINSIC_GAS + method gas) * gas_price`` and mined into their own block.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

from nftmarket.config import MarketConfig
from nftmarket.contracts.base import Contract
from nftmarket.core.block_log import BlockLog
from nftmarket.core.errors import (
    ContractRevert,
    InsufficientFunds,
    TransferFailed,
    UnknownContract,
    ValueNotAccepted,
)
from nftmarket.core.hasher import (
    compute_account_address,
    compute_contract_address,
    compute_tx_hash,
)
from nftmarket.models.chain import Block, LogEntry, TxReceipt
from nftmarket.models.events import ContractEvent
from nftmarket.models.listing import WEI_PER_ETHER

logger = logging.getLogger(__name__)

INTRINSIC_GAS = 21_000
DEFAULT_ACCOUNT_SEED = "test test test test test test test test test test test junk"

C = TypeVar("C", bound=Contract)

ReceiveHook = Callable[["LocalChain", str, int], None]


@dataclass(frozen=True)
class CallContext:
    """The ``msg`` of a call frame: who called and how much value came along."""

    sender: str
    value: int = 0


class LocalChain:
    """Single-writer development chain with funded accounts.

    Parameters
    ----------
    chain_id:
        Numeric chain id reported to deploy scripts and the address publisher.
    gas_price:
        Wei per unit of gas.
    account_count:
        Number of pre-funded accounts to create.
    initial_balance:
        Starting balance of each account, in wei.
    network_name:
        Name used to decide whether this is a development network.

    Examples
    --------
    >>> chain = LocalChain()
    >>> deployer = chain.accounts[0]
    >>> chain.balance_of(deployer) == 10_000 * 10**18
    True
    """

    def __init__(
        self,
        chain_id: int = 31337,
        gas_price: int = 1_000_000_000,
        account_count: int = 20,
        initial_balance: int = 10_000 * WEI_PER_ETHER,
        network_name: str = "hardhat",
        seed: str = DEFAULT_ACCOUNT_SEED,
    ) -> None:
        self.chain_id = chain_id
        self.gas_price = gas_price
        self.network_name = network_name
        self._lock = threading.RLock()
        self._balances: dict[str, int] = {}
        self._nonces: dict[str, int] = {}
        self._contracts: dict[str, Contract] = {}
        self._receive_hooks: dict[str, ReceiveHook] = {}
        self._context_stack: list[CallContext] = []
        self._pending_logs: list[LogEntry] = []
        self._receipts: list[TxReceipt] = []
        self.blocks = BlockLog()

        self.accounts: list[str] = [
            compute_account_address(seed, i) for i in range(account_count)
        ]
        for address in self.accounts:
            self._balances[address] = initial_balance
            self._nonces[address] = 0

    @classmethod
    def from_config(cls, config: MarketConfig) -> LocalChain:
        """Build a chain from the network and account settings in ``config``."""
        return cls(
            chain_id=config.resolved_chain_id,
            gas_price=config.gas_price_wei,
            account_count=config.account_count,
            initial_balance=config.initial_balance_wei,
            network_name=config.network,
        )

    # ------------------------------------------------------------------
    # Accounts and balances
    # ------------------------------------------------------------------

    def balance_of(self, address: str) -> int:
        return self._balances.get(address.lower(), 0)

    def nonce_of(self, address: str) -> int:
        return self._nonces.get(address.lower(), 0)

    def set_balance(self, address: str, amount: int) -> None:
        """Overwrite an account balance (test helper, like ``hardhat_setBalance``)."""
        with self._lock:
            self._balances[address.lower()] = amount

    def set_receive_hook(self, address: str, hook: ReceiveHook | None) -> None:
        """Run ``hook(chain, sender, amount)`` whenever ``address`` receives value.

        Models a contract account with a ``receive()`` function.  A hook that
        raises ``ContractRevert`` makes the sending call fail with
        ``TransferFailed``.
        """
        if hook is None:
            self._receive_hooks.pop(address.lower(), None)
        else:
            self._receive_hooks[address.lower()] = hook

    def send_value(self, sender: str, recipient: str, amount: int) -> None:
        """Move ``amount`` wei from ``sender`` to ``recipient`` inside a call.

        Runs the recipient's receive hook, if any, in a frame whose sender is
        ``sender``.
        """
        self._move(sender, recipient, amount)
        hook = self._receive_hooks.get(recipient.lower())
        if hook is None:
            return
        with self._frame(CallContext(sender=sender, value=amount)):
            try:
                hook(self, sender, amount)
            except ContractRevert as exc:
                raise TransferFailed(recipient=recipient, amount=amount) from exc

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("amount must be non-negative")
        if amount == 0:
            return
        sender, recipient = sender.lower(), recipient.lower()
        available = self._balances.get(sender, 0)
        if available < amount:
            raise InsufficientFunds(account=sender, needed=amount, available=available)
        self._balances[sender] = available - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    def deploy(self, contract: C, deployer: str) -> C:
        """Deploy an already-constructed contract instance from ``deployer``.

        The address is derived from the deployer and its nonce.  Deployment
        is a transaction: it is charged ``DEPLOY_GAS`` and mined.
        """
        with self._lock:
            deployer = deployer.lower()
            cost = (INTRINSIC_GAS + contract.DEPLOY_GAS) * self.gas_price
            available = self._balances.get(deployer, 0)
            if available < cost:
                raise InsufficientFunds(account=deployer, needed=cost, available=available)

            nonce = self._nonces.get(deployer, 0)
            address = compute_contract_address(deployer, nonce)
            contract.bind(self, address)
            self._contracts[address] = contract
            self._balances.setdefault(address, 0)
            self._balances[deployer] = available - cost
            self._nonces[deployer] = nonce + 1

            tx_hash = compute_tx_hash({
                "chain_id": self.chain_id,
                "from": deployer,
                "nonce": nonce,
                "create": contract.NAME,
            })
            block = self.blocks.append(Block(number=0, tx_hash=tx_hash))
            self._receipts.append(TxReceipt(
                tx_hash=tx_hash,
                block_number=block.number,
                sender=deployer,
                to=address,
                method="constructor",
                gas_used=INTRINSIC_GAS + contract.DEPLOY_GAS,
                gas_price=self.gas_price,
            ))
            logger.info("Deployed %s at %s (block #%d).", contract.NAME, address, block.number)
            return contract

    def get_contract_at(self, address: str) -> Contract:
        contract = self._contracts.get(address.lower())
        if contract is None:
            raise UnknownContract(address=address)
        return contract

    # ------------------------------------------------------------------
    # Call frames
    # ------------------------------------------------------------------

    def current_context(self) -> CallContext:
        if not self._context_stack:
            raise RuntimeError("No call is executing")
        return self._context_stack[-1]

    @contextmanager
    def _frame(self, ctx: CallContext) -> Iterator[CallContext]:
        self._context_stack.append(ctx)
        try:
            yield ctx
        finally:
            self._context_stack.pop()

    def emit(self, address: str, event: ContractEvent) -> None:
        self._pending_logs.append(
            LogEntry(address=address, log_index=len(self._pending_logs), event=event)
        )

    def internal_call(
        self,
        sender: str,
        target: Contract | str,
        method: str,
        *args: Any,
        value: int = 0,
    ) -> Any:
        """Call another contract from inside a running transaction.

        ``sender`` becomes ``msg.sender`` of the nested frame.  Value moves
        from ``sender`` to the target before the method runs.
        """
        contract = target if isinstance(target, Contract) else self.get_contract_at(target)
        fn = self._resolve_entry_point(contract, method, value)
        self._move(sender, contract.address, value)
        with self._frame(CallContext(sender=sender.lower(), value=value)):
            return fn(*args)

    @staticmethod
    def _resolve_entry_point(contract: Contract, method: str, value: int) -> Callable[..., Any]:
        fn = getattr(contract, method, None)
        if fn is None or not getattr(fn, "_external", False):
            raise AttributeError(f"{contract.NAME} has no external method {method!r}")
        if value and not getattr(fn, "_payable", False):
            raise ValueNotAccepted(method=method, value=value)
        return fn

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def transact(
        self,
        sender: str,
        target: Contract | str,
        method: str,
        *args: Any,
        value: int = 0,
    ) -> TxReceipt:
        """Execute ``target.method(*args)`` as a transaction from ``sender``.

        Returns the receipt on success.  On failure every balance, nonce and
        contract storage field is restored and the exception is re-raised.
        """
        with self._lock:
            sender = sender.lower()
            contract = target if isinstance(target, Contract) else self.get_contract_at(target)
            fn = self._resolve_entry_point(contract, method, value)
            gas_used = INTRINSIC_GAS + getattr(fn, "_gas")
            gas_cost = gas_used * self.gas_price

            available = self._balances.get(sender, 0)
            if available < value + gas_cost:
                raise InsufficientFunds(
                    account=sender, needed=value + gas_cost, available=available
                )

            snapshot = self._snapshot()
            self._pending_logs = []
            try:
                self._move(sender, contract.address, value)
                with self._frame(CallContext(sender=sender, value=value)):
                    result = fn(*args)
            except Exception as exc:
                self._restore(snapshot)
                self._pending_logs = []
                logger.debug(
                    "Reverted %s.%s from %s: %s", contract.NAME, method, sender, exc
                )
                raise

            logs, self._pending_logs = self._pending_logs, []
            self._balances[sender] -= gas_cost
            nonce = self._nonces.get(sender, 0)
            self._nonces[sender] = nonce + 1

            tx_hash = compute_tx_hash({
                "chain_id": self.chain_id,
                "from": sender,
                "to": contract.address,
                "nonce": nonce,
                "method": method,
                "args": [repr(a) for a in args],
                "value": value,
            })
            block = self.blocks.append(Block(number=0, tx_hash=tx_hash))
            receipt = TxReceipt(
                tx_hash=tx_hash,
                block_number=block.number,
                sender=sender,
                to=contract.address,
                method=method,
                value=value,
                gas_used=gas_used,
                gas_price=self.gas_price,
                logs=logs,
                return_value=result,
            )
            self._receipts.append(receipt)
            logger.debug(
                "Mined %s.%s from %s in block #%d.", contract.NAME, method, sender, block.number
            )
            return receipt

    def call(self, target: Contract | str, method: str, *args: Any) -> Any:
        """Invoke a read-only view without creating a transaction."""
        with self._lock:
            contract = target if isinstance(target, Contract) else self.get_contract_at(target)
            fn = getattr(contract, method)
            if getattr(fn, "_external", False):
                raise AttributeError(f"{method!r} is not a view; use transact()")
            return fn(*args)

    def connect(self, contract: C, sender: str) -> ContractHandle:
        """Return a handle that sends every external call from ``sender``."""
        return ContractHandle(self, contract, sender)

    @property
    def receipts(self) -> list[TxReceipt]:
        return list(self._receipts)

    def verify_chain(self) -> bool:
        return self.blocks.verify_chain()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def _snapshot(self) -> dict[str, Any]:
        return {
            "balances": dict(self._balances),
            "nonces": dict(self._nonces),
            "contracts": {addr: c.snapshot() for addr, c in self._contracts.items()},
        }

    def _restore(self, snapshot: dict[str, Any]) -> None:
        self._balances = snapshot["balances"]
        self._nonces = snapshot["nonces"]
        for addr, state in snapshot["contracts"].items():
            self._contracts[addr].restore(state)


class ContractHandle:
    """A contract bound to a default sender, in the style of ``contract.connect(signer)``.

    External methods become transactions returning receipts (pass
    ``value=`` for payable ones); views pass straight through.
    """

    def __init__(self, chain: LocalChain, contract: Contract, sender: str) -> None:
        self._chain = chain
        self.contract = contract
        self.sender = sender.lower()

    @property
    def address(self) -> str:
        return self.contract.address

    def connect(self, sender: str) -> ContractHandle:
        return ContractHandle(self._chain, self.contract, sender)

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self.contract, name)
        if not getattr(attr, "_external", False):
            return attr

        def send(*args: Any, value: int = 0) -> TxReceipt:
            return self._chain.transact(self.sender, self.contract, name, *args, value=value)

        return send
