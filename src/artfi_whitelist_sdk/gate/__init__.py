"""Local (in-process) Artfi contracts."""

from .chain import LocalChain, HARDHAT_CHAIN_ID
from .token import MockToken, Transfer, Approval
from .whitelist_gate import ArtfiWhitelist, TokenUpdated, Whitelisted
from .deploy import Deployment, deploy_local

__all__ = [
    "LocalChain",
    "HARDHAT_CHAIN_ID",
    "MockToken",
    "Transfer",
    "Approval",
    "ArtfiWhitelist",
    "TokenUpdated",
    "Whitelisted",
    "Deployment",
    "deploy_local",
]
