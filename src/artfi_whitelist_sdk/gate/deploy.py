"""Deployment sequencing for the local whitelist contracts."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..whitelist.utils import require_address
from .chain import LocalChain
from .token import MockToken
from .whitelist_gate import ArtfiWhitelist

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    """Contracts deployed by ``deploy_local``."""

    chain: LocalChain
    owner: str
    token: MockToken
    whitelist: ArtfiWhitelist

    @property
    def nft_address(self) -> str:
        return self.whitelist.nft_address


def deploy_local(
    chain: LocalChain,
    owner: str,
    nft_address: Optional[str] = None,
    accepted_tokens: Iterable[str] = (),
    accept_mock_token: bool = False,
) -> Deployment:
    """Deploy the mock token and the whitelist, the whitelister being ``owner``.

    Args:
        chain: Chain to deploy on
        owner: Deployer, administrator and whitelister
        nft_address: Existing Artfi NFT contract. A fresh address from the
            owner's deployment sequence is reserved when omitted.
        accepted_tokens: Tokens to register right after deployment
        accept_mock_token: Also register the freshly deployed mock token

    Returns:
        Deployment with every contract
    """
    owner = require_address(owner, "owner")

    token = chain.deploy(owner, MockToken)
    logger.info("MockToken: %s", token.address)

    if nft_address is None:
        nft_address = chain.next_address(owner)
        chain.deploy(owner, _ReservedAddress)
    nft_address = require_address(nft_address, "nft address")
    logger.info("ArtfiNFT: %s", nft_address)

    whitelist = chain.deploy(owner, ArtfiWhitelist, nft_address, owner, owner)
    logger.info("ArtfiWhitelist: %s", whitelist.address)

    tokens = list(accepted_tokens)
    if accept_mock_token:
        tokens.append(token.address)
    for address in tokens:
        whitelist.update_token(owner, address, True)
        if not whitelist.is_token_accepted(address):
            raise RuntimeError(f"Token {address} was not accepted")

    return Deployment(chain=chain, owner=owner, token=token, whitelist=whitelist)


class _ReservedAddress:
    """Placeholder occupying the NFT contract's address slot."""

    def __init__(self, chain: LocalChain, address: str):
        self.chain = chain
        self.address = address
