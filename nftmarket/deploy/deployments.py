"""Registry of contracts deployed by the deploy scripts, keyed by name."""

from __future__ import annotations

from typing import TypeVar

from nftmarket.contracts.base import Contract
from nftmarket.core.chain import LocalChain

C = TypeVar("C", bound=Contract)


class DeploymentNotFoundError(KeyError):
    """Raised when a named deployment does not exist."""


class Deployments:
    """Name -> deployed contract lookup for one chain.

    Parameters
    ----------
    chain:
        The chain every registered contract lives on.
    """

    def __init__(self, chain: LocalChain) -> None:
        self.chain = chain
        self._contracts: dict[str, Contract] = {}

    def save(self, name: str, contract: Contract) -> None:
        """Record ``contract`` under ``name``, replacing an earlier deployment."""
        self._contracts[name] = contract

    def get_contract(self, name: str) -> Contract:
        """Return the deployed contract registered as ``name``."""
        try:
            return self._contracts[name]
        except KeyError:
            raise DeploymentNotFoundError(
                f"No deployment named {name!r}. "
                f"Deployed: {sorted(self._contracts)}"
            ) from None

    def get_typed(self, name: str, kind: type[C]) -> C:
        """Return the deployment ``name``, which must be an instance of ``kind``.

        Raises
        ------
        DeploymentNotFoundError
            Nothing is registered as ``name``.
        TypeError
            The registered contract is not a ``kind``.
        """
        contract = self.get_contract(name)
        if not isinstance(contract, kind):
            raise TypeError(
                f"Deployment {name!r} is a {type(contract).__name__}, "
                f"expected {kind.__name__}"
            )
        return contract

    def get_or_none(self, name: str) -> Contract | None:
        return self._contracts.get(name)

    def addresses(self) -> dict[str, str]:
        """Name -> address for every deployment."""
        return {name: c.address for name, c in sorted(self._contracts.items())}

    def __contains__(self, name: object) -> bool:
        return name in self._contracts
