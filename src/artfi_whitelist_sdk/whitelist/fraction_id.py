"""Fraction slot identifiers.

A fraction id is a caller-chosen bytes32 value naming one whitelist
allocation. Callers usually pick a small integer; on the wire it is the
integer left-padded with zeros to 32 bytes.
"""

from typing import Union

from eth_utils import is_hex, keccak, to_bytes

FractionIdLike = Union[int, bytes, str]

FRACTION_ID_BYTES = 32


def to_fraction_id(value: FractionIdLike) -> str:
    """Normalize a slot identifier to a zero-padded bytes32 hex string.

    Args:
        value: Non-negative integer, up to 32 raw bytes, or a hex string

    Returns:
        Lowercase "0x" + 64 hex chars

    Raises:
        ValueError: If the value is negative, not hex, or longer than 32 bytes
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid fraction id: {value!r}")

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Invalid fraction id: {value}. Must be non-negative")
        if value >= 2 ** (8 * FRACTION_ID_BYTES):
            raise ValueError(f"Invalid fraction id: {value}. Does not fit in bytes32")
        raw = value.to_bytes(FRACTION_ID_BYTES, "big")
    elif isinstance(value, (bytes, bytearray)):
        if len(value) > FRACTION_ID_BYTES:
            raise ValueError(
                f"Invalid fraction id: {len(value)} bytes. Maximum: {FRACTION_ID_BYTES}"
            )
        raw = bytes(value).rjust(FRACTION_ID_BYTES, b"\x00")
    elif isinstance(value, str):
        if not is_hex(value):
            raise ValueError(f"Invalid fraction id: {value}")
        raw = to_bytes(hexstr=value)
        if len(raw) > FRACTION_ID_BYTES:
            raise ValueError(
                f"Invalid fraction id: {len(raw)} bytes. Maximum: {FRACTION_ID_BYTES}"
            )
        raw = raw.rjust(FRACTION_ID_BYTES, b"\x00")
    else:
        raise ValueError(f"Invalid fraction id type: {type(value).__name__}")

    return "0x" + raw.hex()


def fraction_id_to_bytes(value: FractionIdLike) -> bytes:
    """Return the 32 raw bytes of a slot identifier."""
    return to_bytes(hexstr=to_fraction_id(value))


def fraction_id_from_label(label: str) -> str:
    """Derive a slot id from a human label (keccak256 of its UTF-8 bytes).

    Useful when allocations are named rather than numbered.
    """
    return "0x" + keccak(text=label).hex()
