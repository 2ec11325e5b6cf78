"""
Ledger Implementation

The ledger is the single owner of account state. It keeps accounts in the
order they were added, enforces unique public keys at insertion time, and
moves lamports between wallets without ever creating or destroying them:
total supply before a successful transfer equals total supply after it.

Persistence is an explicit boundary: save() writes the whole account
collection as one blob and load() replaces it wholesale.

Not thread-safe. Callers sharing a ledger across threads must serialize
access themselves.
"""

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .accounts import Account, CATEGORY_ALL, U64_MAX, kind_for_category
from .errors import (
    AccountNotFound, DuplicateAccount, InsufficientFunds, InvalidTransfer, SerializationError
)
from . import storage


class Ledger:
    """
    Ordered, in-memory collection of accounts.

    Lookups hand back the stored Account objects themselves; treat them as
    read-only and valid until the next mutating call.
    """

    def __init__(self, accounts: Optional[Iterable[Account]] = None, verbose: bool = False):
        """
        Create a ledger.

        Args:
            accounts: Initial accounts, added in order (duplicates are rejected)
            verbose: Print a line for every mutation
        """
        self._accounts: List[Account] = []
        self.verbose = verbose
        for account in accounts or ():
            self.add_account(account)

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)

    # ========================================================================
    # QUERIES
    # ========================================================================

    @property
    def accounts(self) -> Tuple[Account, ...]:
        """Snapshot of the stored accounts in insertion order."""
        return tuple(self._accounts)

    def account_exists(self, pubkey: str) -> bool:
        """Check if an account with this key is stored."""
        return any(account.pubkey == pubkey for account in self._accounts)

    def find_account(self, pubkey: str) -> Optional[Account]:
        """Get account by public key, or None."""
        for account in self._accounts:
            if account.pubkey == pubkey:
                return account
        return None

    def get_account(self, pubkey: str) -> Account:
        """Get account by public key."""
        account = self.find_account(pubkey)
        if account is None:
            raise AccountNotFound(pubkey)
        return account

    def accounts_by_type(self, category: str) -> List[Account]:
        """
        Get every account of a category, in insertion order.

        Args:
            category: "wallet", "program", "token_account", "stake" or "all"

        Returns:
            Matching accounts; empty for an unrecognized category
        """
        if category == CATEGORY_ALL:
            return list(self._accounts)

        kind = kind_for_category(category)
        if kind is None:
            return []
        probe = kind()
        return [account for account in self._accounts if account.matches_kind_tag(probe)]

    def total_supply(self) -> int:
        """Get total lamports across all accounts."""
        return sum(account.lamports for account in self._accounts)

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def add_account(self, account: Account) -> Account:
        """
        Store a new account.

        Returns:
            The stored account

        Raises:
            DuplicateAccount: If the key is already present (nothing is stored)
        """
        if self.account_exists(account.pubkey):
            raise DuplicateAccount(account.pubkey)

        self._accounts.append(account)
        self._log(f"Added {account.summary()}")
        return account

    def transfer(self, from_pubkey: str, to_pubkey: str, amount: int) -> None:
        """
        Move lamports from one wallet to another.

        Every check runs before anything is touched, so a failed transfer
        leaves the ledger exactly as it was.

        Raises:
            AccountNotFound: If either key is not stored
            InvalidTransfer: If either account is not a Wallet, or the
                destination balance would overflow
            InsufficientFunds: If the source holds fewer lamports than amount
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise TypeError(f"amount must be an int, got {type(amount).__name__}")
        if not 0 <= amount <= U64_MAX:
            raise ValueError(f"amount must fit in an unsigned 64-bit integer, got {amount}")

        source = self.find_account(from_pubkey)
        if source is None:
            raise AccountNotFound(from_pubkey)

        destination = self.find_account(to_pubkey)
        if destination is None:
            raise AccountNotFound(to_pubkey)

        if not source.is_wallet:
            raise InvalidTransfer(f"key: {from_pubkey} is not a Wallet")
        if not destination.is_wallet:
            raise InvalidTransfer(f"key: {to_pubkey} is not a Wallet")

        if source.lamports < amount:
            raise InsufficientFunds(require=amount, available=source.lamports)

        # A self-transfer nets out, so only distinct destinations can overflow
        if source is not destination and destination.lamports + amount > U64_MAX:
            raise InvalidTransfer(f"key: {to_pubkey} balance would overflow")

        source.lamports -= amount
        source.account_type.balance -= amount
        destination.lamports += amount
        destination.account_type.balance += amount

        self._log(f"Transferred {amount:,} lamports {source.short_key()} -> {destination.short_key()}")

    # ========================================================================
    # PERSISTENCE
    # ========================================================================

    def save(self, path: Union[str, Path]) -> None:
        """Write every account to path, replacing its previous content."""
        storage.save_accounts(path, self._accounts)
        self._log(f"Saved {len(self._accounts)} accounts to {path}")

    @classmethod
    def load(cls, path: Union[str, Path], verbose: bool = False) -> 'Ledger':
        """
        Build a new ledger from a file written by save().

        Raises:
            SerializationError: If the file cannot be read or decoded, or
                holds the same key twice
        """
        try:
            ledger = cls(storage.load_accounts(path), verbose=verbose)
        except DuplicateAccount as e:
            raise SerializationError(f"Corrupt ledger file {path}: {e}") from e
        ledger._log(f"Loaded {len(ledger)} accounts from {path}")
        return ledger

    # ========================================================================
    # CONTAINER PROTOCOL
    # ========================================================================

    def __len__(self) -> int:
        """Number of accounts in the ledger."""
        return len(self._accounts)

    def __contains__(self, pubkey: str) -> bool:
        """Check if account exists using 'in' operator."""
        return self.account_exists(pubkey)

    def __iter__(self) -> Iterator[Account]:
        return iter(list(self._accounts))

    def __getitem__(self, pubkey: str) -> Account:
        """Get account using bracket notation."""
        return self.get_account(pubkey)
