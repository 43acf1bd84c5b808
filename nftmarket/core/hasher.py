"""Canonical hashing helpers for addresses, transaction hashes, and blocks.

Every identifier on the development chain is derived from canonical JSON so
that the same deployment sequence always yields the same addresses.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact.

    - sorted keys
    - no whitespace separators (",", ":")
    - ensure_ascii=True
    - UTF-8 encoding
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def to_address(digest_hex: str) -> str:
    """Take the low 20 bytes of a hex digest as a ``0x`` address."""
    return "0x" + digest_hex[-40:]


def compute_account_address(seed: str, index: int) -> str:
    """Address of the ``index``-th funded account derived from ``seed``."""
    payload = {"seed": seed, "index": index}
    return to_address(sha256_hex(canonical_json_bytes(payload)))


def compute_contract_address(deployer: str, nonce: int) -> str:
    """Address of a contract created by ``deployer`` at ``nonce``.

    Deterministic in (deployer, nonce) only, so redeploying the same
    sequence on a fresh chain reproduces the same addresses.
    """
    payload = {"deployer": deployer.lower(), "nonce": nonce}
    return to_address(sha256_hex(canonical_json_bytes(payload)))


def compute_tx_hash(tx_dict: dict[str, Any]) -> str:
    """``0x``-prefixed SHA-256 of a canonical transaction payload."""
    return "0x" + sha256_hex(canonical_json_bytes(tx_dict))


def compute_block_hash(block_dict: dict[str, Any]) -> str:
    """SHA-256 of a block (excluding the block_hash field itself).

    This is the seal that makes each block tamper-evident.
    """
    d = {k: v for k, v in block_dict.items() if k != "block_hash"}
    return "0x" + sha256_hex(canonical_json_bytes(d))
