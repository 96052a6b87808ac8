"""Artfi whitelist SDK.

Sign, verify and redeem Artfi whitelist fractions, either against the
in-process contracts in ``artfi_whitelist_sdk.gate`` or against a deployed
contract through ``WhitelistClient``.
"""

from .whitelist import (
    Fraction,
    SignedFraction,
    SlotState,
    WhitelistError,
    MalformedSignature,
    Unauthorized,
    AssetNotAccepted,
    SlotAlreadyUsed,
    InsufficientAllowanceOrBalance,
    NotAdministrator,
    InvalidAddress,
    create_fraction,
    sign_fraction,
    sign_fraction_with_signer,
    recover_fraction_signer,
    verify_fraction_signature,
    to_fraction_id,
    parse_units,
    format_units,
)
from .gate import LocalChain, MockToken, ArtfiWhitelist, deploy_local
from .client import WhitelistClient
from .config import NETWORKS, load_config_from_env, load_private_key_from_env
from .logging_utils import configure_logging

__version__ = "0.1.0"

__all__ = [
    "Fraction",
    "SignedFraction",
    "SlotState",
    "WhitelistError",
    "MalformedSignature",
    "Unauthorized",
    "AssetNotAccepted",
    "SlotAlreadyUsed",
    "InsufficientAllowanceOrBalance",
    "NotAdministrator",
    "InvalidAddress",
    "create_fraction",
    "sign_fraction",
    "sign_fraction_with_signer",
    "recover_fraction_signer",
    "verify_fraction_signature",
    "to_fraction_id",
    "parse_units",
    "format_units",
    "LocalChain",
    "MockToken",
    "ArtfiWhitelist",
    "deploy_local",
    "WhitelistClient",
    "NETWORKS",
    "load_config_from_env",
    "load_private_key_from_env",
    "configure_logging",
]
