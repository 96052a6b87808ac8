"""Artfi Whitelist Module.

This module provides the off-chain half of the Artfi whitelist: the
whitelister signs a ``Fraction`` allocation, the buyer presents it to the
whitelist contract together with a fraction slot id.

Key components:
- Fraction slot id normalization (bytes32)
- Fraction creation, signing and signer recovery (EIP-712)
- Utility functions for token unit formatting

Example usage:
    ```python
    from artfi_whitelist_sdk.whitelist import (
        create_fraction,
        sign_fraction,
        to_fraction_id,
        parse_units,
    )

    fraction = create_fraction(
        wallet_address="0x...",  # buyer
        fraction_info="1,3,5",
        price=parse_units("100"),
    )

    signed = sign_fraction(
        private_key="0x...",  # whitelister key
        whitelist_address="0x...",
        fraction=fraction,
        chain_id=31337,
    )
    slot = to_fraction_id(1)
    ```
"""

from .types import (
    EIP712Domain,
    Fraction,
    SignedFraction,
    SlotState,
    DOMAIN_NAME,
    DOMAIN_VERSION,
    FRACTION_TYPES,
)
from .errors import (
    WhitelistError,
    MalformedSignature,
    Unauthorized,
    AssetNotAccepted,
    SlotAlreadyUsed,
    InsufficientAllowanceOrBalance,
    NotAdministrator,
    ReentrantCall,
    UnknownContract,
    InvalidAddress,
)
from .fraction_id import to_fraction_id, fraction_id_to_bytes, fraction_id_from_label
from .signing import (
    create_eip712_domain,
    create_fraction,
    hash_domain,
    hash_fraction,
    encode_fraction,
    fraction_digest,
    build_typed_data,
    sign_fraction,
    sign_fraction_with_signer,
    decode_signature,
    recover_fraction_signer,
    verify_fraction_signature,
    TypedDataSigner,
)
from .utils import (
    ZERO_ADDRESS,
    DEFAULT_DECIMALS,
    MAX_UINT256,
    parse_units,
    format_units,
    require_address,
    same_address,
)

__all__ = [
    # Types
    "EIP712Domain",
    "Fraction",
    "SignedFraction",
    "SlotState",
    "DOMAIN_NAME",
    "DOMAIN_VERSION",
    "FRACTION_TYPES",
    "TypedDataSigner",
    # Errors
    "WhitelistError",
    "MalformedSignature",
    "Unauthorized",
    "AssetNotAccepted",
    "SlotAlreadyUsed",
    "InsufficientAllowanceOrBalance",
    "NotAdministrator",
    "ReentrantCall",
    "UnknownContract",
    "InvalidAddress",
    # Fraction ID
    "to_fraction_id",
    "fraction_id_to_bytes",
    "fraction_id_from_label",
    # Signing
    "create_eip712_domain",
    "create_fraction",
    "hash_domain",
    "hash_fraction",
    "encode_fraction",
    "fraction_digest",
    "build_typed_data",
    "sign_fraction",
    "sign_fraction_with_signer",
    "decode_signature",
    "recover_fraction_signer",
    "verify_fraction_signature",
    # Utils
    "ZERO_ADDRESS",
    "DEFAULT_DECIMALS",
    "MAX_UINT256",
    "parse_units",
    "format_units",
    "require_address",
    "same_address",
]
