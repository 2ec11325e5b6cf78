#!/usr/bin/env python3
"""
Ledger CLI

A command-line interface for working with a ledger file. Every command loads
the ledger (starting empty if the file does not exist yet), performs one
operation and saves the result when anything changed.

Usage:
    sol-ledger create wallet --balance 10000          # Create a wallet
    sol-ledger create stake --validator V --amount 5  # Create a stake account
    sol-ledger transfer <from> <to> <lamports>        # Move lamports between wallets
    sol-ledger list [category]                        # List accounts
    sol-ledger supply                                 # Show total supply
    sol-ledger demo                                   # Run the walkthrough

Accounts can be referred to by any unique prefix of their public key.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Union

from .core import (
    Account, Ledger, LedgerError, AccountNotFound,
    Wallet, Program, TokenAccount, Stake,
    CATEGORY_ALL, format_sol,
)


DEFAULT_LEDGER_DIR = Path.home() / ".sol-ledger"
DEFAULT_LEDGER_PATH = DEFAULT_LEDGER_DIR / "ledger.bin"
DEFAULT_DEMO_PATH = DEFAULT_LEDGER_DIR / "demo.bin"

CATEGORIES = ["wallet", "program", "token_account", "stake", CATEGORY_ALL]


class LedgerCLI:
    """
    Command-line operations over a single ledger file.

    Failures are reported to the caller as LedgerError; main() turns them
    into a message and a non-zero exit status.
    """

    def __init__(self, ledger_path: Union[str, Path] = DEFAULT_LEDGER_PATH, verbose: bool = False):
        self.ledger_path = Path(ledger_path)
        self.verbose = verbose

    def open_ledger(self) -> Ledger:
        """Load the ledger file, or start an empty ledger if there is none."""
        if not self.ledger_path.exists():
            return Ledger(verbose=self.verbose)
        return Ledger.load(self.ledger_path, verbose=self.verbose)

    def resolve(self, ledger: Ledger, key: str) -> str:
        """Expand a public key prefix to the one stored key it matches."""
        if ledger.account_exists(key):
            return key

        matches = [account.pubkey for account in ledger if account.pubkey.startswith(key)]
        if not matches:
            raise AccountNotFound(key)
        if len(matches) > 1:
            raise ValueError(f"Key prefix {key} is ambiguous ({len(matches)} accounts match)")
        return matches[0]

    def create(self, account_type) -> Account:
        """Create an account of the given kind and store it."""
        ledger = self.open_ledger()
        account = ledger.add_account(Account.create(account_type))
        ledger.save(self.ledger_path)

        print(f"🆕 Created {account.account_type.category_name()} account")
        print(f"   Address: {account.pubkey}")
        print(f"   Balance: {format_sol(account.lamports)} SOL ({account.lamports:,} lamports)")
        return account

    def transfer(self, from_key: str, to_key: str, lamports: int):
        """Transfer lamports between two wallets."""
        ledger = self.open_ledger()
        from_pubkey = self.resolve(ledger, from_key)
        to_pubkey = self.resolve(ledger, to_key)

        ledger.transfer(from_pubkey, to_pubkey, lamports)
        ledger.save(self.ledger_path)

        print(f"💸 Transferred {lamports:,} lamports")
        print(f"   {ledger[from_pubkey].summary()}")
        print(f"   {ledger[to_pubkey].summary()}")

    def list_accounts(self, category: str = CATEGORY_ALL) -> List[Account]:
        """Print a summary line for every account in a category."""
        ledger = self.open_ledger()
        accounts = ledger.accounts_by_type(category)

        if not accounts:
            print(f"No accounts matching '{category}' in {self.ledger_path}")
        for account in accounts:
            print(account.summary())
        return accounts

    def show(self, key: str):
        """Print every field of one account."""
        ledger = self.open_ledger()
        account = ledger[self.resolve(ledger, key)]

        print(f"📄 {account.account_type.category_name()} account")
        print(f"   Address:  {account.pubkey}")
        print(f"   Owner:    {account.owner or '-'}")
        print(f"   Lamports: {account.lamports:,} ({format_sol(account.lamports)} SOL)")
        print(f"   Kind:     {account.account_type!r}")
        print(f"   Created:  {account.created_at}")

    def supply(self) -> int:
        """Print the total lamports held in the ledger."""
        ledger = self.open_ledger()
        total = ledger.total_supply()
        print(f"💰 Total supply: {format_sol(total)} SOL ({total:,} lamports) "
              f"across {len(ledger)} accounts")
        return total

    def demo(self, path: Union[str, Path] = DEFAULT_DEMO_PATH) -> Ledger:
        """
        Walk through the ledger's operations on a fresh ledger.

        Failing operations are reported and the walkthrough carries on, the
        way any caller of the ledger is expected to handle errors.
        """
        print("🎮 Ledger Demo")
        print("=" * 40)

        ledger = Ledger(verbose=True)

        alice = ledger.add_account(Account.create(Wallet(balance=10_000)))
        bob = ledger.add_account(Account.create(Wallet(balance=50_000_000)))
        program = ledger.add_account(Account.create(Program(executable=True, program_data=b"\x01\x02")))
        ledger.add_account(Account.create(TokenAccount(mint=program.pubkey, token_balance=1_000)))
        ledger.add_account(Account.create(Stake(validator=bob.pubkey, staked_amount=2_000_000_000)))

        print(f"\n💰 Total supply: {ledger.total_supply():,} lamports")

        steps = [
            ("transfer 100 lamports alice -> bob",
             lambda: ledger.transfer(alice.pubkey, bob.pubkey, 100)),
            ("transfer 1 lamport alice -> program",
             lambda: ledger.transfer(alice.pubkey, program.pubkey, 1)),
            ("transfer 1,000,000 lamports alice -> bob",
             lambda: ledger.transfer(alice.pubkey, bob.pubkey, 1_000_000)),
            ("add alice a second time",
             lambda: ledger.add_account(alice)),
        ]
        for description, step in steps:
            print(f"\n▶ {description}")
            try:
                step()
                print("   ✅ ok")
            except LedgerError as e:
                print(f"   ❌ the action fails cause: {e}")

        print(f"\n📁 Saving and reloading {path}")
        ledger.save(path)
        reloaded = Ledger.load(path)

        print("\nWallets:")
        for account in reloaded.accounts_by_type("wallet"):
            print(f"   {account.summary()}")
        print("All accounts:")
        for account in reloaded.accounts_by_type(CATEGORY_ALL):
            print(f"   {account.summary()}")
        print(f"\n💰 Total supply after reload: {reloaded.total_supply():,} lamports")

        return reloaded


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sol-ledger",
        description="Solana-style account ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sol-ledger create wallet --balance 10000          # Wallet holding 10,000 lamports
  sol-ledger create program --executable            # Executable program account
  sol-ledger transfer 3f2a 9bc1 250                 # Send 250 lamports by key prefix
  sol-ledger list wallet                            # List wallets
  sol-ledger supply                                 # Total lamports in the ledger
        """
    )
    parser.add_argument('--ledger', type=Path, default=DEFAULT_LEDGER_PATH,
                        help=f'Ledger file (default: {DEFAULT_LEDGER_PATH})')
    parser.add_argument('--verbose', action='store_true', help='Print every ledger mutation')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Create command, one sub-command per account kind
    create_parser = subparsers.add_parser('create', help='Create an account')
    kinds = create_parser.add_subparsers(dest='kind', required=True)

    wallet_parser = kinds.add_parser('wallet', help='Plain lamport balance')
    wallet_parser.add_argument('--balance', type=int, default=0, help='Starting lamports')

    program_parser = kinds.add_parser('program', help='Executable code holder')
    program_parser.add_argument('--executable', action='store_true', help='Mark as executable')
    program_parser.add_argument('--data', default='', help='Program data as hex')

    token_parser = kinds.add_parser('token', help='Fungible token balance')
    token_parser.add_argument('--mint', required=True, help='Mint identifier')
    token_parser.add_argument('--balance', type=int, default=0, help='Token balance')
    token_parser.add_argument('--delegate', default=None, help='Optional delegate')

    stake_parser = kinds.add_parser('stake', help='Stake delegated to a validator')
    stake_parser.add_argument('--validator', required=True, help='Validator identifier')
    stake_parser.add_argument('--amount', type=int, default=0, help='Staked lamports')

    # Transfer command
    transfer_parser = subparsers.add_parser('transfer', help='Transfer lamports between wallets')
    transfer_parser.add_argument('from_account', help='Source key (or unique prefix)')
    transfer_parser.add_argument('to_account', help='Destination key (or unique prefix)')
    transfer_parser.add_argument('lamports', type=int, help='Amount in lamports')

    # List command
    list_parser = subparsers.add_parser('list', help='List accounts by category')
    list_parser.add_argument('category', nargs='?', default=CATEGORY_ALL,
                             help=f"One of {', '.join(CATEGORIES)} (default: {CATEGORY_ALL})")

    # Show command
    show_parser = subparsers.add_parser('show', help='Show one account')
    show_parser.add_argument('account', help='Key (or unique prefix)')

    # Supply command
    subparsers.add_parser('supply', help='Show total supply')

    # Demo command
    demo_parser = subparsers.add_parser('demo', help='Run the walkthrough')
    demo_parser.add_argument('--output', type=Path, default=DEFAULT_DEMO_PATH,
                             help=f'Where the demo ledger is saved (default: {DEFAULT_DEMO_PATH})')

    return parser


def kind_from_args(args: argparse.Namespace):
    """Build the account kind requested on the command line."""
    if args.kind == 'wallet':
        return Wallet(balance=args.balance)
    if args.kind == 'program':
        return Program(executable=args.executable, program_data=bytes.fromhex(args.data))
    if args.kind == 'token':
        return TokenAccount(mint=args.mint, token_balance=args.balance, delegate=args.delegate)
    return Stake(validator=args.validator, staked_amount=args.amount)


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    cli = LedgerCLI(args.ledger, verbose=args.verbose)

    try:
        if args.command == 'create':
            cli.create(kind_from_args(args))

        elif args.command == 'transfer':
            cli.transfer(args.from_account, args.to_account, args.lamports)

        elif args.command == 'list':
            cli.list_accounts(args.category)

        elif args.command == 'show':
            cli.show(args.account)

        elif args.command == 'supply':
            cli.supply()

        elif args.command == 'demo':
            cli.demo(args.output)

        else:
            parser.print_help()

    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        sys.exit(0)

    except (LedgerError, ValueError, TypeError) as e:
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
