"""Fraction Signing for the Artfi whitelist.

Provides EIP-712 encoding, signing and signer recovery for the
``Fraction`` message checked by the whitelist contract:
- eth_account.Account (direct signing)
- TypedDataSigner (remote wallets)
"""

from typing import Any, Dict, Protocol, Union

from eth_abi import encode
from eth_account import Account
from eth_account.messages import SignableMessage
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import is_hex, keccak, to_bytes, to_hex

from .errors import MalformedSignature
from .types import (
    DOMAIN_NAME,
    DOMAIN_VERSION,
    EIP712_DOMAIN_TYPE,
    FRACTION_TYPES,
    EIP712Domain,
    Fraction,
    SignedFraction,
)
from .utils import require_address

SignatureLike = Union[str, bytes]

DOMAIN_TYPEHASH = keccak(
    text="EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
FRACTION_TYPEHASH = keccak(
    text="Fraction(address walletAddress,string fractionInfo,uint256 price)"
)

SIGNATURE_LENGTH = 65

# secp256k1 group order; signatures with s above half of it are malleable
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N = SECP256K1_N // 2


def create_eip712_domain(whitelist_address: str, chain_id: int) -> EIP712Domain:
    """Create EIP-712 domain for the whitelist contract.

    Args:
        whitelist_address: Address of the whitelist contract
        chain_id: Chain ID (31337 for a local hardhat node)

    Returns:
        EIP-712 domain dictionary

    Raises:
        InvalidAddress: If whitelist address is invalid
    """
    return {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": require_address(whitelist_address, "whitelist address"),
    }


def create_fraction(wallet_address: str, fraction_info: str, price: int) -> Fraction:
    """Create a fraction object.

    Raises:
        InvalidAddress: If wallet address is invalid
        ValueError: If price does not fit in uint256
    """
    if price < 0 or price >= 2**256:
        raise ValueError(f"Invalid price: {price}. Must fit in uint256")

    return Fraction(
        wallet_address=require_address(wallet_address, "wallet address"),
        fraction_info=fraction_info,
        price=price,
    )


def hash_domain(domain: EIP712Domain) -> bytes:
    """Return the EIP-712 domain separator."""
    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                DOMAIN_TYPEHASH,
                keccak(text=domain["name"]),
                keccak(text=domain["version"]),
                domain["chainId"],
                domain["verifyingContract"],
            ],
        )
    )


def hash_fraction(fraction: Fraction) -> bytes:
    """Return the EIP-712 struct hash of a fraction.

    Dynamic ``string`` members are hashed, per EIP-712 encodeData.
    """
    return keccak(
        encode(
            ["bytes32", "address", "bytes32", "uint256"],
            [
                FRACTION_TYPEHASH,
                fraction.wallet_address,
                keccak(text=fraction.fraction_info),
                fraction.price,
            ],
        )
    )


def encode_fraction(domain: EIP712Domain, fraction: Fraction) -> SignableMessage:
    """Build the signable EIP-712 message (0x19 0x01 || domain || struct)."""
    return SignableMessage(
        version=b"\x01",
        header=hash_domain(domain),
        body=hash_fraction(fraction),
    )


def fraction_digest(domain: EIP712Domain, fraction: Fraction) -> bytes:
    """Return the 32-byte digest that the whitelister signs."""
    message = encode_fraction(domain, fraction)
    return keccak(b"\x19" + message.version + message.header + message.body)


def build_typed_data(domain: EIP712Domain, fraction: Fraction) -> Dict[str, Any]:
    """Build the full typed data structure for wallets and ``encode_typed_data``."""
    return {
        "types": {
            "EIP712Domain": EIP712_DOMAIN_TYPE,
            **FRACTION_TYPES,
        },
        "primaryType": "Fraction",
        "domain": domain,
        "message": {
            "walletAddress": fraction.wallet_address,
            "fractionInfo": fraction.fraction_info,
            "price": fraction.price,
        },
    }


def sign_fraction(
    private_key: str,
    whitelist_address: str,
    fraction: Fraction,
    chain_id: int = 31337,
) -> SignedFraction:
    """Sign a fraction with EIP-712 using a private key.

    Use this when you hold the whitelister key directly.

    Args:
        private_key: Private key (hex string with or without 0x prefix)
        whitelist_address: Address of the whitelist contract
        fraction: Fraction to sign
        chain_id: Chain ID (default: 31337 for a local hardhat node)

    Returns:
        SignedFraction with signature
    """
    domain = create_eip712_domain(whitelist_address, chain_id)

    account = Account.from_key(private_key)
    signed_message = account.sign_message(encode_fraction(domain, fraction))

    return SignedFraction(
        wallet_address=fraction.wallet_address,
        fraction_info=fraction.fraction_info,
        price=fraction.price,
        signature=to_hex(signed_message.signature),
    )


class TypedDataSigner(Protocol):
    """Protocol for signers that can sign EIP-712 typed data."""

    async def get_address(self) -> str:
        """Get the signer's address."""
        ...

    async def sign_typed_data(self, params: Dict[str, Any]) -> str:
        """Sign EIP-712 typed data.

        Args:
            params: Dict with domain, types, primaryType, and message

        Returns:
            Signature as hex string
        """
        ...


async def sign_fraction_with_signer(
    signer: TypedDataSigner,
    whitelist_address: str,
    fraction: Fraction,
    chain_id: int = 31337,
) -> SignedFraction:
    """Sign a fraction with EIP-712 using any compatible signer.

    Args:
        signer: Signer that implements TypedDataSigner protocol
        whitelist_address: Address of the whitelist contract
        fraction: Fraction to sign
        chain_id: Chain ID (default: 31337)

    Returns:
        SignedFraction with signature
    """
    domain = create_eip712_domain(whitelist_address, chain_id)

    typed_data = build_typed_data(domain, fraction)
    # Wallet RPCs take uint256 values as decimal strings
    typed_data["message"]["price"] = str(fraction.price)
    del typed_data["types"]["EIP712Domain"]

    signature = await signer.sign_typed_data(typed_data)

    return SignedFraction(
        wallet_address=fraction.wallet_address,
        fraction_info=fraction.fraction_info,
        price=fraction.price,
        signature=signature,
    )


def decode_signature(signature: SignatureLike) -> bytes:
    """Decode a packed ``r || s || v`` signature and check it is recoverable.

    The recovery id may be given as 0/1 or 27/28. High-s signatures are
    rejected, as OpenZeppelin's ECDSA library does.

    Raises:
        MalformedSignature: On wrong length, bad recovery id or high s
    """
    if isinstance(signature, str):
        if not is_hex(signature):
            raise MalformedSignature("Signature is not a hex string")
        raw = to_bytes(hexstr=signature)
    elif isinstance(signature, (bytes, bytearray)):
        raw = bytes(signature)
    else:
        raise MalformedSignature(f"Unsupported signature type: {type(signature).__name__}")

    if len(raw) != SIGNATURE_LENGTH:
        raise MalformedSignature(
            f"Invalid signature length: {len(raw)}. Expected: {SIGNATURE_LENGTH}"
        )

    v = raw[64]
    if v in (0, 1):
        v += 27
    if v not in (27, 28):
        raise MalformedSignature(f"Invalid recovery id: {raw[64]}")

    s = int.from_bytes(raw[32:64], "big")
    if s == 0 or s > SECP256K1_HALF_N:
        raise MalformedSignature("Invalid signature 's' value")

    return raw[:64] + bytes([v])


def recover_fraction_signer(
    domain: EIP712Domain,
    fraction: Fraction,
    signature: SignatureLike,
) -> str:
    """Recover the address that signed a fraction under a domain.

    Any well-formed signature recovers to *some* address; callers compare
    it against the address they trust.

    Returns:
        Checksummed signer address

    Raises:
        MalformedSignature: If the signature cannot be recovered
    """
    raw = decode_signature(signature)
    try:
        return Account.recover_message(encode_fraction(domain, fraction), signature=raw)
    except (BadSignature, ValidationError, ValueError) as e:
        raise MalformedSignature(f"Signature recovery failed: {e}") from e


def verify_fraction_signature(
    signed_fraction: SignedFraction,
    whitelist_address: str,
    chain_id: int,
    expected_signer: str,
) -> bool:
    """Verify a fraction signature locally (for EOA signatures).

    Args:
        signed_fraction: Signed fraction
        whitelist_address: Address of the whitelist contract
        chain_id: Chain ID
        expected_signer: Expected signer address

    Returns:
        True if signature is valid and from expected signer
    """
    domain = create_eip712_domain(whitelist_address, chain_id)
    try:
        recovered = recover_fraction_signer(domain, signed_fraction, signed_fraction.signature)
    except MalformedSignature:
        return False
    return recovered.lower() == expected_signer.lower()
