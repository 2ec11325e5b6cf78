"""
Ledger Core Components

Account model, ledger state and persistence for a Solana-style account
ledger.
"""

from .errors import (
    LedgerError,
    AccountNotFound,
    InsufficientFunds,
    DuplicateAccount,
    InvalidTransfer,
    SerializationError,
)
from .keys import KeyGenerator, generate_keypair, generate_pubkey
from .accounts import (
    Account,
    AccountKind,
    AccountType,
    Wallet,
    Program,
    TokenAccount,
    Stake,
    ACCOUNT_KINDS,
    CATEGORY_ALL,
    LAMPORTS_PER_SOL,
    kind_for_category,
    format_sol,
)
from .ledger import Ledger
from .storage import encode_accounts, decode_accounts, save_accounts, load_accounts

__all__ = [
    'LedgerError', 'AccountNotFound', 'InsufficientFunds', 'DuplicateAccount',
    'InvalidTransfer', 'SerializationError',
    'KeyGenerator', 'generate_keypair', 'generate_pubkey',
    'Account', 'AccountKind', 'AccountType', 'Wallet', 'Program', 'TokenAccount', 'Stake',
    'ACCOUNT_KINDS', 'CATEGORY_ALL', 'LAMPORTS_PER_SOL', 'kind_for_category', 'format_sol',
    'Ledger',
    'encode_accounts', 'decode_accounts', 'save_accounts', 'load_accounts',
]
