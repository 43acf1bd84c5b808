"""Receipt, log and block models for the development chain."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from nftmarket.models.events import ContractEvent


class LogEntry(BaseModel):
    """One emitted event, tagged with the emitting contract address."""

    model_config = ConfigDict(frozen=True)

    address: str
    log_index: int
    event: SerializeAsAny[ContractEvent]

    @property
    def event_name(self) -> str:
        return self.event.event_name


class TxReceipt(BaseModel):
    """Result of a mined transaction.

    Only successful transactions produce receipts; reverted calls raise.
    """

    model_config = ConfigDict(frozen=True)

    tx_hash: str
    block_number: int
    sender: str
    to: str
    method: str
    value: int = 0
    gas_used: int
    gas_price: int
    logs: list[LogEntry] = Field(default_factory=list)
    return_value: Any = None

    @property
    def gas_cost(self) -> int:
        """Wei paid by the sender for gas."""
        return self.gas_used * self.gas_price

    def events_named(self, name: str) -> list[ContractEvent]:
        """Return every event named ``name``, in emission order."""
        return [log.event for log in self.logs if log.event_name == name]

    def emitted(self, name: str) -> bool:
        return any(log.event_name == name for log in self.logs)


class Block(BaseModel):
    """A mined block.  One transaction per block (automine)."""

    model_config = ConfigDict(frozen=True)

    number: int
    parent_hash: str = ""
    tx_hash: str = ""
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    block_hash: str = ""  # computed after construction, seals this block
