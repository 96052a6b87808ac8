"""In-process chain for running the whitelist contracts locally.

Calls are executed one at a time; contracts get deterministic addresses
derived from the deployer and its deployment count.
"""

import logging
from typing import Any, Callable, Dict, List, TypeVar

from eth_abi import encode
from eth_utils import keccak, to_checksum_address

from ..whitelist.errors import UnknownContract
from ..whitelist.utils import require_address

logger = logging.getLogger(__name__)

HARDHAT_CHAIN_ID = 31337

C = TypeVar("C")


class LocalChain:
    """Registry of deployed contracts plus an event log."""

    def __init__(self, chain_id: int = HARDHAT_CHAIN_ID):
        self.chain_id = chain_id
        self._contracts: Dict[str, Any] = {}
        self._deploy_nonces: Dict[str, int] = {}
        self.events: List[Any] = []

    def next_address(self, deployer: str) -> str:
        """Address the next contract deployed by ``deployer`` will get."""
        deployer = require_address(deployer, "deployer")
        nonce = self._deploy_nonces.get(deployer, 0)
        digest = keccak(encode(["address", "uint256"], [deployer, nonce]))
        return to_checksum_address(digest[12:])

    def deploy(self, deployer: str, factory: Callable[..., C], *args: Any, **kwargs: Any) -> C:
        """Deploy a contract.

        ``factory`` is called as ``factory(chain, address, *args, **kwargs)``.
        """
        deployer = require_address(deployer, "deployer")
        address = self.next_address(deployer)
        contract = factory(self, address, *args, **kwargs)
        self._deploy_nonces[deployer] = self._deploy_nonces.get(deployer, 0) + 1
        self._contracts[address] = contract
        logger.debug("Deployed %s at %s", type(contract).__name__, address)
        return contract

    def contract_at(self, address: str) -> Any:
        """Look up a deployed contract.

        Raises:
            UnknownContract: If nothing is deployed at ``address``
        """
        try:
            return self._contracts[require_address(address, "contract address")]
        except KeyError:
            raise UnknownContract(f"No contract deployed at {address}")

    def emit(self, event: Any) -> None:
        self.events.append(event)

    def events_of(self, event_type: type) -> List[Any]:
        return [e for e in self.events if isinstance(e, event_type)]
