"""Errors raised by the Artfi whitelist gate.

Every failure aborts the whole call; nothing is retried here.
"""


class WhitelistError(Exception):
    """Base class for whitelist gate failures."""


class MalformedSignature(WhitelistError):
    """Signature cannot be decoded to a recoverable form."""


class Unauthorized(WhitelistError):
    """Recovered signer is not the configured whitelister."""

    def __init__(self, recovered: str, expected: str):
        super().__init__(
            f"Signer {recovered} is not the whitelister {expected}"
        )
        self.recovered = recovered
        self.expected = expected


class AssetNotAccepted(WhitelistError):
    """Token is not registered (or registered as not accepted)."""


class SlotAlreadyUsed(WhitelistError):
    """Fraction slot has already been consumed."""


class InsufficientAllowanceOrBalance(WhitelistError):
    """Token transfer could not be completed."""


class NotAdministrator(WhitelistError):
    """Caller is not allowed to run an administrative entry point."""


class ReentrantCall(WhitelistError):
    """Gate was re-entered while a call was still executing."""


class UnknownContract(WhitelistError):
    """No contract is deployed at the given address."""


class InvalidAddress(WhitelistError, ValueError):
    """Address argument is not a well-formed 20-byte hex address."""
