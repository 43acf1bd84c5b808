"""Append-only, hash-chained block log for the development chain.

Design:
- Append-only: only `append()` method; no update, no delete.
- Hash-chained: each block records the hash of its parent.
- Blocks are sealed on append; `verify_chain()` re-derives every seal.
"""

from __future__ import annotations

from nftmarket.core.hasher import compute_block_hash
from nftmarket.models.chain import Block


class ChainIntegrityError(RuntimeError):
    """Raised when the block hash chain is broken."""


class BlockLog:
    """In-memory, append-only sequence of sealed blocks.

    Block 0 is a genesis block sealed at construction time.
    """

    def __init__(self) -> None:
        self._blocks: list[Block] = []
        self.append(Block(number=0))

    # ------------------------------------------------------------------
    # Core: append-only write
    # ------------------------------------------------------------------

    def append(self, block: Block) -> Block:
        """Seal ``block`` onto the tip of the chain and return it.

        ``number`` and ``parent_hash`` are assigned here; whatever the
        caller passed is overwritten.
        """
        parent_hash = self._blocks[-1].block_hash if self._blocks else ""
        number = len(self._blocks)

        block_dict = block.model_dump(mode="json")
        block_dict["number"] = number
        block_dict["parent_hash"] = parent_hash
        block_dict["block_hash"] = ""

        sealed = block.model_copy(
            update={
                "number": number,
                "parent_hash": parent_hash,
                "block_hash": compute_block_hash(block_dict),
            }
        )
        self._blocks.append(sealed)
        return sealed

    # ------------------------------------------------------------------
    # Query methods (read-only)
    # ------------------------------------------------------------------

    @property
    def height(self) -> int:
        """Number of the latest block."""
        return len(self._blocks) - 1

    def latest(self) -> Block:
        return self._blocks[-1]

    def get_block(self, number: int) -> Block:
        if number < 0 or number >= len(self._blocks):
            raise IndexError(f"No block #{number} (height {self.height})")
        return self._blocks[number]

    def blocks(self) -> list[Block]:
        return list(self._blocks)

    # ------------------------------------------------------------------
    # Chain verification
    # ------------------------------------------------------------------

    def verify_chain(self) -> bool:
        """Walk all blocks, recompute each seal, and check parent links.

        Returns True if the chain is valid, raises ChainIntegrityError otherwise.
        """
        prev_hash = ""
        for block in self._blocks:
            if block.parent_hash != prev_hash:
                raise ChainIntegrityError(
                    f"Chain broken at block #{block.number}: "
                    f"expected parent_hash={prev_hash!r}, "
                    f"got {block.parent_hash!r}"
                )

            expected_hash = compute_block_hash(block.model_dump(mode="json"))
            if block.block_hash != expected_hash:
                raise ChainIntegrityError(
                    f"Tampered block #{block.number}: "
                    f"expected hash={expected_hash!r}, "
                    f"got {block.block_hash!r}"
                )

            prev_hash = block.block_hash

        return True
