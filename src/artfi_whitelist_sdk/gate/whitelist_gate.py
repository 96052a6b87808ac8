"""Artfi whitelist contract.

The whitelister signs ``Fraction{walletAddress, fractionInfo, price}``
off-chain. A buyer redeems the signature once per fraction slot: the
contract checks the signer and pulls ``price`` units of an accepted token
from the buyer into its own balance.

Checks run before any state change; the slot is marked consumed before the
external token transfer and released again if that transfer fails.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Set

from ..whitelist.errors import (
    AssetNotAccepted,
    NotAdministrator,
    ReentrantCall,
    SlotAlreadyUsed,
    Unauthorized,
)
from ..whitelist.fraction_id import FractionIdLike, to_fraction_id
from ..whitelist.signing import (
    SignatureLike,
    create_eip712_domain,
    create_fraction,
    recover_fraction_signer,
)
from ..whitelist.types import EIP712Domain, SlotState
from ..whitelist.utils import require_address, same_address
from .chain import LocalChain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenUpdated:
    """Emitted when the administrator changes a token's accepted flag."""

    whitelist: str
    token: str
    accepted: bool


@dataclass(frozen=True)
class Whitelisted:
    """Emitted when a buyer redeems a fraction slot."""

    whitelist: str
    buyer: str
    token: str
    amount: int
    fraction_id: str
    fraction_info: str


class ArtfiWhitelist:
    """Signature-gated custody of whitelist payments.

    Args:
        chain: Chain the contract lives on (gives chain id and token lookup)
        address: Contract address, used as the EIP-712 verifying contract
        nft_address: Artfi NFT contract the fractions belong to
        whitelister: Address whose signatures are accepted
        owner: Administrator allowed to call ``update_token``
            (defaults to the whitelister)
    """

    def __init__(
        self,
        chain: LocalChain,
        address: str,
        nft_address: str,
        whitelister: str,
        owner: Optional[str] = None,
    ):
        self.chain = chain
        self.address = require_address(address, "whitelist address")
        self.nft_address = require_address(nft_address, "nft address")
        self._whitelister = require_address(whitelister, "whitelister")
        self.owner = require_address(owner or whitelister, "owner")
        self._tokens: Dict[str, bool] = {}
        self._consumed: Set[str] = set()
        self._entered = False

    @property
    def domain(self) -> EIP712Domain:
        return create_eip712_domain(self.address, self.chain.chain_id)

    def whitelister(self) -> str:
        """Address whose signatures the contract trusts."""
        return self._whitelister

    def is_token_accepted(self, token: str) -> bool:
        return self._tokens.get(require_address(token, "token"), False)

    def slot_state(self, fraction_id: FractionIdLike) -> SlotState:
        if to_fraction_id(fraction_id) in self._consumed:
            return SlotState.CONSUMED
        return SlotState.UNUSED

    def verify(
        self,
        wallet_address: str,
        price: int,
        fraction_info: str,
        signature: SignatureLike,
    ) -> str:
        """Recover the signer of ``Fraction{wallet_address, fraction_info, price}``.

        Read-only. Exposed on-chain as ``verify1``.

        Raises:
            MalformedSignature: If the signature cannot be recovered
        """
        fraction = create_fraction(wallet_address, fraction_info, price)
        return recover_fraction_signer(self.domain, fraction, signature)

    def update_token(self, caller: str, token: str, accepted: bool) -> TokenUpdated:
        """Set whether ``token`` is accepted as payment.

        Returns:
            The recorded ``TokenUpdated`` event

        Raises:
            NotAdministrator: If ``caller`` is not the owner
            InvalidAddress: If ``token`` is not a well-formed address
        """
        if not same_address(require_address(caller, "caller"), self.owner):
            raise NotAdministrator(f"{caller} is not the owner of {self.address}")
        token = require_address(token, "token")

        self._tokens[token] = bool(accepted)
        event = TokenUpdated(self.address, token, bool(accepted))
        self.chain.emit(event)
        logger.info("Token %s accepted=%s on whitelist %s", token, bool(accepted), self.address)
        return event

    def do_whitelist(
        self,
        caller: str,
        token: str,
        amount: int,
        fraction_id: FractionIdLike,
        fraction_info: str,
        signature: SignatureLike,
    ) -> None:
        """Redeem a signed fraction, paying ``amount`` of ``token``.

        The signature must cover ``Fraction{caller, fraction_info, amount}``,
        so neither the buyer nor the price can be swapped.

        Raises:
            ReentrantCall: If called while another call is executing
            AssetNotAccepted: If ``token`` is not accepted
            SlotAlreadyUsed: If ``fraction_id`` was already redeemed
            MalformedSignature: If the signature cannot be recovered
            Unauthorized: If the signer is not the whitelister
            InsufficientAllowanceOrBalance: If the token transfer fails
        """
        if self._entered:
            raise ReentrantCall(f"Re-entrant call into {self.address}")
        self._entered = True
        try:
            self._do_whitelist(caller, token, amount, fraction_id, fraction_info, signature)
        finally:
            self._entered = False

    def _do_whitelist(
        self,
        caller: str,
        token: str,
        amount: int,
        fraction_id: FractionIdLike,
        fraction_info: str,
        signature: SignatureLike,
    ) -> None:
        caller = require_address(caller, "caller")
        token = require_address(token, "token")
        slot = to_fraction_id(fraction_id)

        if not self._tokens.get(token, False):
            logger.warning("Rejected fraction %s: token %s not accepted", slot, token)
            raise AssetNotAccepted(f"Token {token} is not accepted")

        if slot in self._consumed:
            logger.warning("Rejected fraction %s: slot already used", slot)
            raise SlotAlreadyUsed(f"Fraction {slot} has already been whitelisted")

        signer = self.verify(caller, amount, fraction_info, signature)
        if not same_address(signer, self._whitelister):
            logger.warning("Rejected fraction %s: signed by %s", slot, signer)
            raise Unauthorized(signer, self._whitelister)

        asset = self.chain.contract_at(token)
        self._consumed.add(slot)
        try:
            asset.transfer_from(self.address, caller, self.address, amount)
        except Exception:
            self._consumed.discard(slot)
            raise

        self.chain.emit(
            Whitelisted(self.address, caller, token, amount, slot, fraction_info)
        )
        logger.info("Whitelisted fraction %s for %s (%d of %s)", slot, caller, amount, token)
