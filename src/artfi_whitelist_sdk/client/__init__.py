"""Client modules for the Artfi whitelist SDK."""

from .whitelist_client import (
    WhitelistClient,
    RpcError,
    ContractRevert,
    TransactionFailed,
    ReceiptTimeout,
    encode_call,
    decode_revert_reason,
)

__all__ = [
    "WhitelistClient",
    "RpcError",
    "ContractRevert",
    "TransactionFailed",
    "ReceiptTimeout",
    "encode_call",
    "decode_revert_reason",
]
