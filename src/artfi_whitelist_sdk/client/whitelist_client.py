"""JSON-RPC client for a deployed ArtfiWhitelist contract.

Talks to any Ethereum JSON-RPC node (hardhat, Polygon, ...) over HTTP:
- read calls (``whitelister()``, ``verify1(...)``) through ``eth_call``
- administrative and buyer transactions signed locally with eth_account

Example:
    ```python
    client = WhitelistClient({
        "network": "hardhat",
        "whitelist_address": "0x...",
    })

    signer = await client.verify(buyer, parse_units("100"), "1,3,5", signature)
    assert signer == await client.whitelister()

    tx_hash = await client.do_whitelist(
        private_key=buyer_key,
        token=token_address,
        amount=parse_units("100"),
        fraction_id=1,
        fraction_info="1,3,5",
        signature=signature,
    )
    receipt = await client.wait_for_receipt(tx_hash)
    await client.close()
    ```
"""

import asyncio
import itertools
import logging
import time
from typing import Any, Dict, List, Optional

import httpx
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_account import Account
from eth_utils import function_signature_to_4byte_selector, is_hex, to_bytes, to_checksum_address, to_hex

from ..config import ResolvedClientConfig, WhitelistClientConfig, resolve_config
from ..whitelist.errors import WhitelistError
from ..whitelist.fraction_id import FractionIdLike, fraction_id_to_bytes
from ..whitelist.signing import SignatureLike, decode_signature
from ..whitelist.utils import require_address

logger = logging.getLogger(__name__)

WHITELISTER_SIGNATURE = "whitelister()"
VERIFY_SIGNATURE = "verify1(address,uint256,string,bytes)"
UPDATE_TOKEN_SIGNATURE = "updateToken(address,bool)"
DO_WHITELIST_SIGNATURE = "doWhitelist(address,uint256,bytes32,string,bytes)"

# Selector of Solidity's Error(string)
ERROR_STRING_SELECTOR = function_signature_to_4byte_selector("Error(string)")


class RpcError(WhitelistError):
    """JSON-RPC request failed."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        super().__init__(message if code is None else f"{message} (code: {code})")
        self.code = code
        self.data = data


class ContractRevert(RpcError):
    """Contract call reverted."""

    def __init__(self, reason: str, code: Optional[int] = None, data: Any = None):
        super().__init__(f"Execution reverted: {reason}", code, data)
        self.reason = reason


class TransactionFailed(WhitelistError):
    """Transaction was mined with status 0."""

    def __init__(self, tx_hash: str, receipt: Dict[str, Any]):
        super().__init__(f"Transaction {tx_hash} failed")
        self.tx_hash = tx_hash
        self.receipt = receipt


class ReceiptTimeout(WhitelistError):
    """Transaction was not mined in time."""


def encode_call(signature: str, types: List[str], args: List[Any]) -> str:
    """ABI-encode a contract call as ``0x`` + selector + arguments."""
    return to_hex(function_signature_to_4byte_selector(signature) + encode(types, args))


def decode_revert_reason(data: Any) -> Optional[str]:
    """Extract the ``Error(string)`` reason from revert data, if any."""
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, str) or not is_hex(data):
        return None
    raw = to_bytes(hexstr=data)
    if raw[:4] != ERROR_STRING_SELECTOR:
        return None
    try:
        (reason,) = decode(["string"], raw[4:])
    except DecodingError:
        return None
    return reason


class WhitelistClient:
    """Async client for a deployed ArtfiWhitelist contract."""

    def __init__(
        self,
        config: Optional[WhitelistClientConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the client.

        Args:
            config: Optional configuration (defaults to the local hardhat node)
            http_client: Optional pre-built HTTP client (for custom transports)
        """
        self._config = resolve_config(config)
        self._http_client = http_client or httpx.AsyncClient(timeout=self._config.timeout)
        self._request_ids = itertools.count(1)

    def get_config(self) -> ResolvedClientConfig:
        """Get the client configuration."""
        return self._config

    @property
    def whitelist_address(self) -> str:
        if not self._config.whitelist_address:
            raise ValueError(
                "Whitelist address not set. Pass whitelist_address to the client config."
            )
        return self._config.whitelist_address

    async def close(self) -> None:
        await self._http_client.aclose()

    async def _rpc(self, method: str, params: List[Any]) -> Any:
        request = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._request_ids),
        }
        logger.debug("RPC %s -> %s", method, self._config.rpc_url)

        response = await self._http_client.post(
            self._config.rpc_url,
            headers={"Content-Type": "application/json"},
            json=request,
        )

        try:
            server_response = response.json()
        except ValueError:
            raise RpcError(
                f"RPC request failed: {response.status_code} {response.text}"
            )

        if "error" in server_response:
            error = server_response["error"]
            if isinstance(error, str):
                raise RpcError(error)
            data = error.get("data")
            reason = decode_revert_reason(data)
            if reason is not None:
                raise ContractRevert(reason, error.get("code"), data)
            raise RpcError(error.get("message", "Unknown error"), error.get("code"), data)

        if not response.is_success:
            raise RpcError(f"RPC request failed: {response.status_code} {response.text}")

        return server_response.get("result")

    async def _call(self, data: str) -> bytes:
        result = await self._rpc(
            "eth_call", [{"to": self.whitelist_address, "data": data}, "latest"]
        )
        return to_bytes(hexstr=result)

    async def chain_id(self) -> int:
        """Chain ID reported by the node."""
        return int(await self._rpc("eth_chainId", []), 16)

    async def whitelister(self) -> str:
        """Address whose signatures the contract trusts."""
        raw = await self._call(encode_call(WHITELISTER_SIGNATURE, [], []))
        (address,) = decode(["address"], raw)
        return to_checksum_address(address)

    async def verify(
        self,
        wallet_address: str,
        price: int,
        fraction_info: str,
        signature: SignatureLike,
    ) -> str:
        """Ask the contract which address signed a fraction (``verify1``).

        Raises:
            MalformedSignature: If the signature is malformed (checked locally)
        """
        data = encode_call(
            VERIFY_SIGNATURE,
            ["address", "uint256", "string", "bytes"],
            [
                require_address(wallet_address, "wallet address"),
                price,
                fraction_info,
                decode_signature(signature),
            ],
        )
        (address,) = decode(["address"], await self._call(data))
        return to_checksum_address(address)

    async def update_token(self, private_key: str, token: str, accepted: bool) -> str:
        """Send ``updateToken(token, accepted)``; the key must be the owner's.

        Returns:
            Transaction hash
        """
        data = encode_call(
            UPDATE_TOKEN_SIGNATURE,
            ["address", "bool"],
            [require_address(token, "token"), accepted],
        )
        return await self._send_transaction(private_key, data)

    async def do_whitelist(
        self,
        private_key: str,
        token: str,
        amount: int,
        fraction_id: FractionIdLike,
        fraction_info: str,
        signature: SignatureLike,
    ) -> str:
        """Send ``doWhitelist(...)`` from the buyer's key.

        The buyer must have approved the whitelist contract for ``amount``.

        Returns:
            Transaction hash
        """
        data = encode_call(
            DO_WHITELIST_SIGNATURE,
            ["address", "uint256", "bytes32", "string", "bytes"],
            [
                require_address(token, "token"),
                amount,
                fraction_id_to_bytes(fraction_id),
                fraction_info,
                decode_signature(signature),
            ],
        )
        return await self._send_transaction(private_key, data)

    async def _send_transaction(self, private_key: str, data: str) -> str:
        account = Account.from_key(private_key)
        to = self.whitelist_address

        nonce = int(await self._rpc("eth_getTransactionCount", [account.address, "pending"]), 16)
        gas_price = int(await self._rpc("eth_gasPrice", []), 16)
        gas = int(
            await self._rpc("eth_estimateGas", [{"from": account.address, "to": to, "data": data}]),
            16,
        )

        signed = account.sign_transaction(
            {
                "to": to,
                "data": data,
                "value": 0,
                "gas": gas,
                "gasPrice": gas_price,
                "nonce": nonce,
                "chainId": self._config.chain_id,
            }
        )
        tx_hash = await self._rpc("eth_sendRawTransaction", [to_hex(signed.raw_transaction)])
        logger.info("Sent transaction %s from %s to %s", tx_hash, account.address, to)
        return tx_hash

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120.0,
        poll_interval: float = 1.0,
    ) -> Dict[str, Any]:
        """Poll until the transaction is mined.

        Raises:
            TransactionFailed: If the receipt status is 0
            ReceiptTimeout: If no receipt appears within ``timeout`` seconds
        """
        deadline = time.monotonic() + timeout
        while True:
            receipt = await self._rpc("eth_getTransactionReceipt", [tx_hash])
            if receipt is not None:
                if int(receipt.get("status", "0x1"), 16) == 0:
                    raise TransactionFailed(tx_hash, receipt)
                return receipt
            if time.monotonic() >= deadline:
                raise ReceiptTimeout(f"Transaction {tx_hash} not mined after {timeout}s")
            await asyncio.sleep(poll_interval)
