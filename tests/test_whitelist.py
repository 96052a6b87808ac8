"""Tests for the whitelist module."""

import asyncio

import pytest
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import to_bytes, to_hex

from artfi_whitelist_sdk.whitelist import (
    FRACTION_TYPES,
    Fraction,
    InvalidAddress,
    MalformedSignature,
    SignedFraction,
    build_typed_data,
    create_eip712_domain,
    create_fraction,
    encode_fraction,
    fraction_digest,
    fraction_id_from_label,
    fraction_id_to_bytes,
    format_units,
    parse_units,
    recover_fraction_signer,
    sign_fraction,
    sign_fraction_with_signer,
    to_fraction_id,
    verify_fraction_signature,
)
from artfi_whitelist_sdk.whitelist.signing import SECP256K1_N


# Test wallets (DO NOT use in production)
TEST_PRIVATE_KEY = "0x" + "ab" * 32  # Deterministic whitelister key
TEST_ACCOUNT = Account.from_key(TEST_PRIVATE_KEY)
TEST_ADDRESS = TEST_ACCOUNT.address

BUYER_ADDRESS = Account.from_key("0x" + "cd" * 32).address
WHITELIST_ADDRESS = Account.from_key("0x" + "12" * 32).address  # stands in for a deployed contract
CHAIN_ID = 31337


def _signed(price=None, fraction_info="1,3,5", chain_id=CHAIN_ID):
    fraction = create_fraction(
        BUYER_ADDRESS,
        fraction_info,
        parse_units("100") if price is None else price,
    )
    return sign_fraction(
        private_key=TEST_PRIVATE_KEY,
        whitelist_address=WHITELIST_ADDRESS,
        fraction=fraction,
        chain_id=chain_id,
    )


class TestFractionId:
    """Tests for fraction slot ids."""

    def test_integer_is_zero_padded(self):
        """Test that small integers become bytes32 like hexZeroPad(hexlify(1), 32)."""
        assert to_fraction_id(1) == "0x" + "00" * 31 + "01"

    def test_equivalent_forms(self):
        """Test that int, hex and bytes forms normalize to the same id."""
        expected = to_fraction_id(258)
        assert to_fraction_id("0x0102") == expected
        assert to_fraction_id("0x" + "00" * 30 + "0102") == expected
        assert to_fraction_id(b"\x01\x02") == expected
        assert fraction_id_to_bytes(258) == (258).to_bytes(32, "big")

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="Invalid fraction id"):
            to_fraction_id(-1)

    def test_too_long_rejected(self):
        with pytest.raises(ValueError, match="Maximum: 32"):
            to_fraction_id("0x" + "ff" * 33)
        with pytest.raises(ValueError, match="Does not fit"):
            to_fraction_id(2**256)

    def test_not_hex_rejected(self):
        with pytest.raises(ValueError, match="Invalid fraction id"):
            to_fraction_id("slot-1")

    def test_from_label(self):
        """Test that labels hash deterministically to distinct ids."""
        assert fraction_id_from_label("artwork-7") == fraction_id_from_label("artwork-7")
        assert fraction_id_from_label("artwork-7") != fraction_id_from_label("artwork-8")
        assert len(fraction_id_from_label("artwork-7")) == 66


class TestFraction:
    """Tests for fraction creation."""

    def test_create_fraction(self):
        fraction = create_fraction(BUYER_ADDRESS.lower(), "1,3,5", 100)

        assert fraction.wallet_address == BUYER_ADDRESS
        assert fraction.fraction_info == "1,3,5"
        assert fraction.price == 100

    def test_create_fraction_invalid_wallet(self):
        with pytest.raises(InvalidAddress, match="Invalid wallet address"):
            create_fraction("invalid", "1,3,5", 100)

    def test_create_fraction_invalid_price(self):
        with pytest.raises(ValueError, match="Invalid price"):
            create_fraction(BUYER_ADDRESS, "1,3,5", -1)

    def test_domain_rejects_doubled_prefix(self):
        """Test that a malformed contract address is refused."""
        with pytest.raises(InvalidAddress):
            create_eip712_domain("0x0x" + WHITELIST_ADDRESS[2:], CHAIN_ID)


class TestEncoding:
    """Tests for EIP-712 encoding of a fraction."""

    def test_matches_eth_account_encoding(self):
        """Test that the domain separator and struct hash match eth_account."""
        domain = create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID)
        fraction = create_fraction(BUYER_ADDRESS, "1,3,5", parse_units("100"))

        reference = encode_typed_data(full_message=build_typed_data(domain, fraction))
        ours = encode_fraction(domain, fraction)

        assert ours.version == reference.version
        assert ours.header == reference.header
        assert ours.body == reference.body

    def test_signature_matches_sign_typed_data(self):
        """Test that signing matches eth_account's typed data signing."""
        signed = _signed()

        reference = TEST_ACCOUNT.sign_typed_data(
            domain_data=create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID),
            message_types=FRACTION_TYPES,
            message_data={
                "walletAddress": BUYER_ADDRESS,
                "fractionInfo": "1,3,5",
                "price": parse_units("100"),
            },
        )

        assert signed.signature == to_hex(reference.signature)

    def test_digest_depends_on_domain(self):
        """Test that chain id and contract address are bound into the digest."""
        fraction = create_fraction(BUYER_ADDRESS, "1,3,5", 100)
        base = fraction_digest(create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID), fraction)

        other_chain = fraction_digest(create_eip712_domain(WHITELIST_ADDRESS, 137), fraction)
        other_contract = fraction_digest(
            create_eip712_domain(Account.create().address, CHAIN_ID), fraction
        )

        assert len(base) == 32
        assert base != other_chain
        assert base != other_contract


class TestSigning:
    """Tests for signing and signer recovery."""

    def test_sign_fraction(self):
        signed = _signed()

        assert isinstance(signed, SignedFraction)
        assert signed.signature.startswith("0x")
        assert len(signed.signature) == 2 + 65 * 2

    def test_recover_signer(self):
        """Test that the whitelister is recovered from its own signature."""
        signed = _signed()
        domain = create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID)

        assert recover_fraction_signer(domain, signed, signed.signature) == TEST_ADDRESS

    def test_verify_fraction_signature(self):
        signed = _signed()

        assert verify_fraction_signature(
            signed_fraction=signed,
            whitelist_address=WHITELIST_ADDRESS,
            chain_id=CHAIN_ID,
            expected_signer=TEST_ADDRESS,
        ) is True

        wrong_address = Account.create().address
        assert verify_fraction_signature(
            signed_fraction=signed,
            whitelist_address=WHITELIST_ADDRESS,
            chain_id=CHAIN_ID,
            expected_signer=wrong_address,
        ) is False

    def test_tampered_price_recovers_other_address(self):
        """Test that changing the price without re-signing breaks the signature."""
        signed = _signed(price=parse_units("100"))
        domain = create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID)
        tampered = Fraction(signed.wallet_address, signed.fraction_info, parse_units("200"))

        assert recover_fraction_signer(domain, tampered, signed.signature) != TEST_ADDRESS

    def test_other_chain_recovers_other_address(self):
        signed = _signed(chain_id=80001)
        domain = create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID)

        assert recover_fraction_signer(domain, signed, signed.signature) != TEST_ADDRESS

    def test_recovery_id_zero_one_accepted(self):
        """Test that v given as 0/1 recovers the same address as 27/28."""
        signed = _signed()
        raw = bytearray(to_bytes(hexstr=signed.signature))
        raw[64] -= 27
        domain = create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID)

        assert recover_fraction_signer(domain, signed, bytes(raw)) == TEST_ADDRESS

    def test_wrong_length_rejected(self):
        signed = _signed()
        domain = create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID)

        with pytest.raises(MalformedSignature, match="Invalid signature length"):
            recover_fraction_signer(domain, signed, signed.signature[:-2])

    def test_bad_recovery_id_rejected(self):
        signed = _signed()
        raw = bytearray(to_bytes(hexstr=signed.signature))
        raw[64] = 29
        domain = create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID)

        with pytest.raises(MalformedSignature, match="Invalid recovery id"):
            recover_fraction_signer(domain, signed, bytes(raw))

    def test_high_s_rejected(self):
        """Test that the malleable twin of a valid signature is refused."""
        signed = _signed()
        raw = to_bytes(hexstr=signed.signature)
        s = int.from_bytes(raw[32:64], "big")
        flipped_v = 55 - raw[64]  # 27 <-> 28
        malleable = raw[:32] + (SECP256K1_N - s).to_bytes(32, "big") + bytes([flipped_v])
        domain = create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID)

        with pytest.raises(MalformedSignature):
            recover_fraction_signer(domain, signed, malleable)

    def test_not_hex_rejected(self):
        domain = create_eip712_domain(WHITELIST_ADDRESS, CHAIN_ID)
        fraction = create_fraction(BUYER_ADDRESS, "1,3,5", 100)

        with pytest.raises(MalformedSignature):
            recover_fraction_signer(domain, fraction, "not-a-signature")

    def test_verify_returns_false_for_garbage(self):
        signed = _signed()
        signed.signature = "0x" + "00" * 65

        assert verify_fraction_signature(
            signed_fraction=signed,
            whitelist_address=WHITELIST_ADDRESS,
            chain_id=CHAIN_ID,
            expected_signer=TEST_ADDRESS,
        ) is False


class _LocalTypedDataSigner:
    """TypedDataSigner backed by a local key, behaving like a wallet RPC."""

    def __init__(self, private_key):
        self._account = Account.from_key(private_key)
        self.requests = []

    async def get_address(self):
        return self._account.address

    async def sign_typed_data(self, params):
        self.requests.append(params)
        message = dict(params["message"], price=int(params["message"]["price"]))
        signed = self._account.sign_typed_data(
            domain_data=params["domain"],
            message_types=params["types"],
            message_data=message,
        )
        return to_hex(signed.signature)


class TestSignWithSigner:
    """Tests for signing through a TypedDataSigner."""

    def test_sign_fraction_with_signer(self):
        signer = _LocalTypedDataSigner(TEST_PRIVATE_KEY)
        fraction = create_fraction(BUYER_ADDRESS, "1,3,5", parse_units("100"))

        signed = asyncio.run(
            sign_fraction_with_signer(signer, WHITELIST_ADDRESS, fraction, CHAIN_ID)
        )

        request = signer.requests[0]
        assert request["primaryType"] == "Fraction"
        assert request["message"]["price"] == str(parse_units("100"))
        assert "EIP712Domain" not in request["types"]
        assert signed.signature == _signed().signature


class TestUtils:
    """Tests for utility functions."""

    def test_parse_units(self):
        assert parse_units("100") == 100 * 10**18
        assert parse_units("1.5", 6) == 1_500_000
        assert parse_units(1000) == 1000 * 10**18
        assert parse_units("0.000000000000000001") == 1

    def test_parse_units_invalid(self):
        with pytest.raises(ValueError, match="Too many decimals"):
            parse_units("1.0000001", 6)
        with pytest.raises(ValueError, match="Invalid amount"):
            parse_units("-1")
        with pytest.raises(ValueError, match="Invalid amount"):
            parse_units("abc")

    def test_format_units(self):
        assert format_units(100 * 10**18) == "100"
        assert format_units(1_500_000, 6) == "1.5"
        assert format_units(1) == "0.000000000000000001"
        assert format_units(0) == "0"
        assert format_units(123456789 * 10**30) == "123456789" + "0" * 12
