"""Mock fungible token used as the whitelist payment asset.

ERC-20 balance/allowance semantics. Every transfer conserves total supply.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from ..whitelist.errors import InsufficientAllowanceOrBalance
from ..whitelist.utils import DEFAULT_DECIMALS, MAX_UINT256, ZERO_ADDRESS, require_address
from .chain import LocalChain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transfer:
    token: str
    sender: str
    recipient: str
    amount: int


@dataclass(frozen=True)
class Approval:
    token: str
    owner: str
    spender: str
    amount: int


class MockToken:
    """Freely mintable ERC-20 token."""

    def __init__(
        self,
        chain: LocalChain,
        address: str,
        name: str = "MockToken",
        symbol: str = "MOCK",
        decimals: int = DEFAULT_DECIMALS,
    ):
        self.chain = chain
        self.address = address
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply = 0

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(require_address(account, "account"), 0)

    def allowance(self, owner: str, spender: str) -> int:
        key = (require_address(owner, "owner"), require_address(spender, "spender"))
        return self._allowances.get(key, 0)

    def mint(self, to: str, amount: int) -> None:
        to = require_address(to, "recipient")
        _check_amount(amount)
        if self._total_supply + amount > MAX_UINT256:
            raise ValueError("Total supply overflow")
        self._total_supply += amount
        self._balances[to] = self._balances.get(to, 0) + amount
        self.chain.emit(Transfer(self.address, ZERO_ADDRESS, to, amount))

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Set ``spender``'s allowance over ``owner``'s tokens (``owner`` is the caller)."""
        owner = require_address(owner, "owner")
        spender = require_address(spender, "spender")
        _check_amount(amount)
        self._allowances[(owner, spender)] = amount
        self.chain.emit(Approval(self.address, owner, spender, amount))
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Move ``amount`` from the caller ``sender`` to ``recipient``."""
        self._move(require_address(sender, "sender"), require_address(recipient, "recipient"), amount)
        return True

    def transfer_from(self, spender: str, sender: str, recipient: str, amount: int) -> bool:
        """Move ``amount`` from ``sender`` to ``recipient`` using ``spender``'s allowance.

        Raises:
            InsufficientAllowanceOrBalance: If the allowance or balance is too low
        """
        spender = require_address(spender, "spender")
        sender = require_address(sender, "sender")
        recipient = require_address(recipient, "recipient")
        _check_amount(amount)

        allowed = self._allowances.get((sender, spender), 0)
        if allowed < amount:
            raise InsufficientAllowanceOrBalance(
                f"Insufficient allowance: {allowed} < {amount}"
            )
        self._move(sender, recipient, amount)
        # An unlimited approval is never decreased
        if allowed != MAX_UINT256:
            self._allowances[(sender, spender)] = allowed - amount
        return True

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        _check_amount(amount)
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientAllowanceOrBalance(
                f"Insufficient balance: {balance} < {amount}"
            )
        self._balances[sender] = balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        self.chain.emit(Transfer(self.address, sender, recipient, amount))


def _check_amount(amount: int) -> None:
    if amount < 0 or amount > MAX_UINT256:
        raise ValueError(f"Invalid amount: {amount}. Must fit in uint256")
