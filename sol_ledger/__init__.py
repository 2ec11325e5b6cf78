"""
Solana-style Account Ledger in Python

An in-process ledger of typed accounts modelled on Solana's account model:
- Wallets, programs, token accounts and stake accounts as a closed set of kinds
- Lamport transfers between wallets that always conserve total supply
- Category lookups by account kind
- Whole-ledger binary persistence to a single file
- A small CLI for driving a ledger file from the shell
"""

__version__ = "1.0.0"

from .core import *
from .ledger_cli import LedgerCLI

__all__ = [
    # Account model
    'Account',
    'Wallet',
    'Program',
    'TokenAccount',
    'Stake',

    # Ledger and persistence
    'Ledger',
    'save_accounts',
    'load_accounts',

    # Errors
    'LedgerError',
    'AccountNotFound',
    'InsufficientFunds',
    'DuplicateAccount',
    'InvalidTransfer',
    'SerializationError',

    # Command line
    'LedgerCLI',
]
