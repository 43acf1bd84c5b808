"""Tests for the BlockLog — append-only, hash-chained, tamper-evident."""

from __future__ import annotations

import pytest

from nftmarket.core.block_log import BlockLog, ChainIntegrityError
from nftmarket.models.chain import Block


@pytest.fixture
def log() -> BlockLog:
    return BlockLog()


class TestBlockLog:
    def test_starts_with_genesis(self, log: BlockLog):
        assert log.height == 0
        genesis = log.latest()
        assert genesis.number == 0
        assert genesis.parent_hash == ""
        assert genesis.block_hash.startswith("0x")

    def test_append_assigns_number_and_parent(self, log: BlockLog):
        sealed = log.append(Block(number=99, parent_hash="bogus", tx_hash="0x1"))
        assert sealed.number == 1
        assert sealed.parent_hash == log.get_block(0).block_hash
        assert sealed.tx_hash == "0x1"

    def test_hash_chain_links(self, log: BlockLog):
        b1 = log.append(Block(number=0, tx_hash="0x1"))
        b2 = log.append(Block(number=0, tx_hash="0x2"))
        assert b2.parent_hash == b1.block_hash
        assert log.height == 2

    def test_verify_chain_valid(self, log: BlockLog):
        for i in range(5):
            log.append(Block(number=0, tx_hash=f"0x{i}"))
        assert log.verify_chain() is True

    def test_get_block_out_of_range(self, log: BlockLog):
        with pytest.raises(IndexError):
            log.get_block(1)
        with pytest.raises(IndexError):
            log.get_block(-1)

    def test_blocks_returns_copy(self, log: BlockLog):
        blocks = log.blocks()
        blocks.clear()
        assert log.height == 0


class TestBlockLogTampering:
    def test_tampered_tx_hash_detected(self, log: BlockLog):
        log.append(Block(number=0, tx_hash="0xreal"))
        log._blocks[1] = log._blocks[1].model_copy(update={"tx_hash": "0xforged"})
        with pytest.raises(ChainIntegrityError, match="Tampered block #1"):
            log.verify_chain()

    def test_broken_parent_link_detected(self, log: BlockLog):
        log.append(Block(number=0, tx_hash="0x1"))
        log.append(Block(number=0, tx_hash="0x2"))
        log._blocks[2] = log._blocks[2].model_copy(update={"parent_hash": "0xdead"})
        with pytest.raises(ChainIntegrityError, match="Chain broken at block #2"):
            log.verify_chain()

    def test_deleted_block_detected(self, log: BlockLog):
        log.append(Block(number=0, tx_hash="0x1"))
        log.append(Block(number=0, tx_hash="0x2"))
        del log._blocks[1]
        with pytest.raises(ChainIntegrityError):
            log.verify_chain()
