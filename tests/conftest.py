"""
conftest.py - Shared pytest fixtures for ledger tests

Provides:
- Deterministic key generation and clock so accounts are reproducible
- An account factory bound to those
- Empty and funded ledgers
"""

import itertools

import pytest

from sol_ledger import Account, Ledger, Wallet, Program, TokenAccount, Stake


FIXED_TIME = 1_700_000_000


class SequentialKeys:
    """Key generator handing out distinct, predictable 64-character keys."""

    def __init__(self, prefix: str = "acct"):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter):060d}"


@pytest.fixture
def keys():
    return SequentialKeys()


@pytest.fixture
def make_account(keys):
    """Factory creating accounts with sequential keys and a fixed clock."""
    def _make(account_type) -> Account:
        return Account.create(account_type, key_generator=keys, clock=lambda: FIXED_TIME)
    return _make


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def funded_ledger(make_account):
    """
    Ledger holding two wallets, a program, a token account and a stake.

    Returns:
        (ledger, dict of name -> account)
    """
    ledger = Ledger()
    accounts = {
        'alice': make_account(Wallet(balance=10_000)),
        'bob': make_account(Wallet(balance=50_000_000)),
        'program': make_account(Program(executable=True, program_data=b"\x00\x01")),
        'token': make_account(TokenAccount(mint="mint-1", token_balance=500)),
        'stake': make_account(Stake(validator="validator-1", staked_amount=7_000)),
    }
    for account in accounts.values():
        ledger.add_account(account)
    return ledger, accounts
