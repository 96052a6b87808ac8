"""Whitelist Types for the Artfi whitelist.

User-facing types for fraction signing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TypedDict


class EIP712Domain(TypedDict):
    """EIP-712 domain separator."""

    name: str
    version: str
    chainId: int
    verifyingContract: str


@dataclass
class Fraction:
    """Whitelist allocation to be signed by the whitelister."""

    wallet_address: str
    """Wallet that may claim the allocation."""

    fraction_info: str
    """Free-form allocation description (e.g. "1,3,5")."""

    price: int
    """Token amount in base units (18 decimals for the mock token)."""


@dataclass
class SignedFraction(Fraction):
    """Fraction with signature."""

    signature: str
    """EIP-712 signature (65 bytes packed hex string)."""


class SlotState(str, Enum):
    """Lifecycle of a fraction slot."""

    UNUSED = "unused"
    CONSUMED = "consumed"


# EIP-712 domain constants
DOMAIN_NAME = "ARTFI"
DOMAIN_VERSION = "1.0.0"

EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# EIP-712 types for a fraction
FRACTION_TYPES = {
    "Fraction": [
        {"name": "walletAddress", "type": "address"},
        {"name": "fractionInfo", "type": "string"},
        {"name": "price", "type": "uint256"},
    ],
}
