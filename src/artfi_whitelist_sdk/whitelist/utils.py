"""Utility functions for the Artfi whitelist."""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from eth_utils import is_address, to_checksum_address

from .errors import InvalidAddress

# Zero address
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Decimals of the mock token (and ether)
DEFAULT_DECIMALS = 18

MAX_UINT256 = 2**256 - 1


def parse_units(amount: Union[str, int, Decimal], decimals: int = DEFAULT_DECIMALS) -> int:
    """Parse a human readable amount to base units.

    Args:
        amount: Human readable amount (e.g., "100" or "1.5")
        decimals: Token decimals (default: 18)

    Returns:
        Amount in base units (e.g., parse_units("1.5", 6) == 1500000)

    Raises:
        ValueError: If the amount is not a number, is negative, or has more
            fractional digits than the token supports
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")

    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount: {amount!r}")

    with localcontext() as ctx:
        ctx.prec = 100
        scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Too many decimals in {amount!r}. Maximum: {decimals}")
    return int(scaled)


def format_units(amount: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Format base units to a human readable string.

    Args:
        amount: Amount in base units
        decimals: Token decimals (default: 18)

    Returns:
        Human readable string (e.g., "100" or "1.5")
    """
    with localcontext() as ctx:
        ctx.prec = 100
        text = format(Decimal(amount).scaleb(-decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def require_address(value: str, name: str = "address") -> str:
    """Validate an address and return it checksummed.

    Raises:
        InvalidAddress: If the value is not a 20-byte hex address
    """
    if not isinstance(value, str) or not is_address(value):
        raise InvalidAddress(f"Invalid {name}: {value!r}")
    return to_checksum_address(value)


def same_address(a: str, b: str) -> bool:
    """Compare two addresses ignoring checksum case."""
    return a.lower() == b.lower()
