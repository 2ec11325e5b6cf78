"""
Ledger Error Taxonomy

Every failure the ledger can report to a caller is one of the exceptions
defined here. They are all recoverable: operations raise them and leave the
ledger untouched, and callers are expected to report and continue.
"""


class LedgerError(Exception):
    """Base class for all ledger failures."""

    def __eq__(self, other: object) -> bool:
        """Errors are equal when they are the same kind with the same payload."""
        if type(self) is not type(other):
            return NotImplemented
        return self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class AccountNotFound(LedgerError):
    """The referenced public key is not in the ledger."""

    def __init__(self, pubkey: str):
        super().__init__(pubkey)
        self.pubkey = pubkey

    def __str__(self) -> str:
        return f"{self.pubkey} was not found"


class InsufficientFunds(LedgerError):
    """The transfer amount exceeds the source account's lamports."""

    def __init__(self, require: int, available: int):
        super().__init__(require, available)
        self.require = require
        self.available = available

    def __str__(self) -> str:
        return (f"Insufficient funds to make the transfer: "
                f"requires: {self.require}, account has: {self.available}")


class DuplicateAccount(LedgerError):
    """An account with the same public key is already stored."""

    def __init__(self, pubkey: str):
        super().__init__(pubkey)
        self.pubkey = pubkey

    def __str__(self) -> str:
        return f"account {self.pubkey} already exists"


class InvalidTransfer(LedgerError):
    """A transfer endpoint cannot take part in a transfer (e.g. not a Wallet)."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def __str__(self) -> str:
        return f"invalid transfer for: {self.reason}"


class SerializationError(LedgerError):
    """Encoding, decoding or the underlying file I/O failed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
