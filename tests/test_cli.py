"""
test_cli.py - Command-line front end tests

Each test drives main() against a ledger file in a temporary directory.
"""

import pytest

from sol_ledger import Ledger, LedgerCLI
from sol_ledger.ledger_cli import main


@pytest.fixture
def ledger_path(tmp_path):
    return tmp_path / "state" / "ledger.bin"


def run(ledger_path, *args):
    main(['--ledger', str(ledger_path), *args])


def test_create_wallet_saves_ledger(ledger_path, capsys):
    run(ledger_path, 'create', 'wallet', '--balance', '10000')

    ledger = Ledger.load(ledger_path)
    assert len(ledger) == 1
    wallet = ledger.accounts[0]
    assert wallet.lamports == 10_000
    assert wallet.owner == "system"
    assert "Created Wallet account" in capsys.readouterr().out


def test_create_each_kind(ledger_path):
    run(ledger_path, 'create', 'program', '--executable', '--data', '0102')
    run(ledger_path, 'create', 'token', '--mint', 'mint-1', '--balance', '5', '--delegate', 'd')
    run(ledger_path, 'create', 'stake', '--validator', 'v', '--amount', '7')

    ledger = Ledger.load(ledger_path)
    program, token, stake = ledger.accounts
    assert program.account_type.executable
    assert program.account_type.program_data == b"\x01\x02"
    assert token.account_type.delegate == 'd'
    assert stake.lamports == 7
    assert ledger.total_supply() == 1 + 5 + 7


def test_transfer_by_prefix(ledger_path, capsys):
    run(ledger_path, 'create', 'wallet', '--balance', '10000')
    run(ledger_path, 'create', 'wallet', '--balance', '50000000')
    alice, bob = Ledger.load(ledger_path).accounts

    from_prefix = alice.pubkey[:16]
    cli = LedgerCLI(ledger_path)
    assert cli.resolve(cli.open_ledger(), from_prefix) == alice.pubkey

    run(ledger_path, 'transfer', from_prefix, bob.pubkey, '100')

    alice, bob = Ledger.load(ledger_path).accounts
    assert alice.lamports == 9_900
    assert bob.lamports == 50_000_100
    assert "Transferred 100 lamports" in capsys.readouterr().out


def test_failed_transfer_exits_nonzero(ledger_path, capsys):
    run(ledger_path, 'create', 'wallet', '--balance', '10')
    run(ledger_path, 'create', 'program')
    wallet, program = Ledger.load(ledger_path).accounts

    with pytest.raises(SystemExit) as exc_info:
        run(ledger_path, 'transfer', wallet.pubkey, program.pubkey, '1')

    assert exc_info.value.code == 1
    assert "is not a Wallet" in capsys.readouterr().out
    assert Ledger.load(ledger_path).accounts[0].lamports == 10


def test_unknown_account(ledger_path, capsys):
    run(ledger_path, 'create', 'wallet')
    with pytest.raises(SystemExit):
        run(ledger_path, 'show', 'zz-no-such-key')
    assert "was not found" in capsys.readouterr().out


def test_list_and_supply(ledger_path, capsys):
    run(ledger_path, 'create', 'wallet', '--balance', '1000000000')
    run(ledger_path, 'create', 'stake', '--validator', 'v', '--amount', '500000000')
    capsys.readouterr()

    run(ledger_path, 'list', 'wallet')
    out = capsys.readouterr().out
    assert "|Wallet|1 SOL" in out
    assert "Stake" not in out

    run(ledger_path, 'list')
    assert len(capsys.readouterr().out.strip().splitlines()) == 2

    run(ledger_path, 'supply')
    assert "1.5 SOL (1,500,000,000 lamports)" in capsys.readouterr().out


def test_list_without_ledger_file(ledger_path, capsys):
    run(ledger_path, 'list')
    assert "No accounts matching 'all'" in capsys.readouterr().out
    assert not ledger_path.exists()


def test_list_unknown_category_is_empty(ledger_path, capsys):
    run(ledger_path, 'create', 'wallet', '--balance', '5')
    capsys.readouterr()

    run(ledger_path, 'list', 'toke_account')
    assert "No accounts matching 'toke_account'" in capsys.readouterr().out


def test_corrupt_ledger_file(ledger_path, capsys):
    ledger_path.parent.mkdir(parents=True)
    ledger_path.write_bytes(b"\xff")
    with pytest.raises(SystemExit) as exc_info:
        run(ledger_path, 'supply')
    assert exc_info.value.code == 1
    assert "Error" in capsys.readouterr().out


def test_demo(tmp_path, capsys):
    output = tmp_path / "demo" / "demo.bin"
    main(['demo', '--output', str(output)])

    out = capsys.readouterr().out
    assert "is not a Wallet" in out
    assert "Insufficient funds" in out
    assert "already exists" in out

    reloaded = Ledger.load(output)
    assert len(reloaded) == 5
    assert reloaded.total_supply() == 10_000 + 50_000_000 + 1 + 1_000 + 2_000_000_000
