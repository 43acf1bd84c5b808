"""99 — publish deployed contract addresses to the front-end address map.

The address map is a JSON object consumed by the web application::

    {
      "31337": {"NftMarketplace": ["0x...", "0x..."]},
      "11155111": {"NftMarketplace": ["0x..."]}
    }

Keys are chain ids as strings.  Each contract's address list is
append-only and deduplicated by a membership check before the append.
The script only runs when the front-end update flag is set.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from nftmarket.config import MarketConfig
from nftmarket.deploy.deployments import Deployments

logger = logging.getLogger(__name__)

TAGS: frozenset[str] = frozenset({"all", "frontend"})

AddressMap = dict[str, dict[str, list[str]]]

_ADDRESS_MAP_ADAPTER: TypeAdapter[AddressMap] = TypeAdapter(AddressMap)


class AddressMapError(ValueError):
    """Raised when the address map file is not a valid address map."""


def load_address_map(path: Path) -> AddressMap:
    """Read and validate the address map; a missing or empty file is ``{}``."""
    if not path.exists():
        logger.debug("No address map at %s; starting fresh.", path)
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise AddressMapError(f"Invalid JSON in {path}: {exc}") from exc
    try:
        return _ADDRESS_MAP_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise AddressMapError(f"Malformed address map in {path}: {exc}") from exc


def write_address_map(path: Path, address_map: AddressMap) -> None:
    """Write the address map, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(address_map, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    logger.debug("Persisted address map to %s.", path)


def add_address(
    address_map: AddressMap, chain_id: int | str, contract_name: str, address: str
) -> bool:
    """Append ``address`` under ``chain_id``/``contract_name`` if absent.

    Creates the chain entry or the contract list when missing.  Returns
    ``True`` if the map changed.
    """
    chain_key = str(chain_id)
    contracts = address_map.setdefault(chain_key, {})
    addresses = contracts.setdefault(contract_name, [])
    if address in addresses:
        return False
    addresses.append(address)
    return True


def update_contract_addresses(
    path: Path, chain_id: int | str, contract_name: str, address: str
) -> AddressMap:
    """Load, update and write back the address map at ``path``.

    The file is only rewritten when the address was not already present.
    Returns the resulting map.
    """
    address_map = load_address_map(path)
    if add_address(address_map, chain_id, contract_name, address):
        write_address_map(path, address_map)
        logger.info(
            "Recorded %s at %s for chain %s in %s.", contract_name, address, chain_id, path
        )
    else:
        logger.info(
            "%s at %s already recorded for chain %s.", contract_name, address, chain_id
        )
    return address_map


def update_front_end(
    deployments: Deployments, deployer: str, config: MarketConfig
) -> None:
    """Deploy-script entry point: publish the marketplace address if enabled."""
    if not config.update_front_end:
        logger.debug("Front-end update disabled; skipping.")
        return
    logger.info("Updating front end...")
    contract = deployments.get_contract(config.front_end_contract_name)
    update_contract_addresses(
        config.front_end_addresses_file,
        deployments.chain.chain_id,
        config.front_end_contract_name,
        contract.address,
    )
