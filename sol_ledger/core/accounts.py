"""
Account Model Implementation

Every account in the ledger wraps exactly one account kind, which says what
the account economically is:
- Wallet: a plain lamport balance owned by the system program
- Program: executable code (holds a fixed placeholder of 1 lamport)
- TokenAccount: a fungible-token balance for some mint
- Stake: lamports staked with a validator

The kinds form a closed set. Categorical filtering compares the kind's tag
only, never its payload, so two wallets with different balances are the
same category.

Accounts serialize to a deterministic little-endian binary layout (the same
shape Borsh produces): fixed-width integers, u32 length prefixes for strings
and byte arrays, a u8 tag for options and for the kind variant.
"""

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, ClassVar, Optional, Type, Union

from .errors import SerializationError
from .keys import KeyGenerator, generate_pubkey


U64_MAX = 2**64 - 1
U32_MAX = 2**32 - 1
LAMPORTS_PER_SOL = 1_000_000_000

SYSTEM_OWNER = "system"              # Owner label of every wallet
PROGRAM_PLACEHOLDER_LAMPORTS = 1     # Kinds without a natural balance hold this

CATEGORY_ALL = "all"


def _check_u64(name: str, value: int) -> None:
    """Validate an unsigned 64-bit field."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{name} must fit in an unsigned 64-bit integer, got {value}")


def _check_bool(name: str, value: bool) -> None:
    if not isinstance(value, bool):
        raise TypeError(f"{name} must be a bool, got {type(value).__name__}")


def _check_str(name: str, value: str) -> None:
    """Validate a text field; it must be encodable as UTF-8."""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {type(value).__name__}")
    try:
        value.encode('utf-8')
    except UnicodeEncodeError as e:
        raise ValueError(f"{name} is not valid UTF-8 text: {e}") from e


# ============================================================================
# BINARY CODEC PRIMITIVES
# ============================================================================

def _u8(value: int) -> bytes:
    return value.to_bytes(1, 'little')


def _u32(value: int) -> bytes:
    if value > U32_MAX:
        raise SerializationError(f"length {value} does not fit in u32")
    return value.to_bytes(4, 'little')


def _u64(value: int) -> bytes:
    return value.to_bytes(8, 'little')


def _bool(value: bool) -> bytes:
    return _u8(1 if value else 0)


def _bytes(value: bytes) -> bytes:
    return _u32(len(value)) + value


def _string(value: str) -> bytes:
    try:
        return _bytes(value.encode('utf-8'))
    except (AttributeError, UnicodeEncodeError) as e:
        raise SerializationError(f"Cannot encode string {value!r}: {e}") from e


def _option_string(value: Optional[str]) -> bytes:
    if value is None:
        return _u8(0)
    return _u8(1) + _string(value)


class ByteReader:
    """
    Cursor over an encoded buffer.

    Every read is bounds-checked, so malformed input surfaces as a
    SerializationError instead of a misparse.
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def take(self, size: int) -> bytes:
        if size > self.remaining:
            raise SerializationError(
                f"Unexpected end of data: needed {size} bytes at offset "
                f"{self._offset}, {self.remaining} remaining"
            )
        chunk = self._data[self._offset:self._offset + size]
        self._offset += size
        return chunk

    def read_u8(self) -> int:
        return self.take(1)[0]

    def read_u32(self) -> int:
        return int.from_bytes(self.take(4), 'little')

    def read_u64(self) -> int:
        return int.from_bytes(self.take(8), 'little')

    def read_bool(self) -> bool:
        value = self.read_u8()
        if value > 1:
            raise SerializationError(f"Invalid bool representation: {value}")
        return value == 1

    def read_bytes(self) -> bytes:
        return self.take(self.read_u32())

    def read_string(self) -> str:
        raw = self.read_bytes()
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise SerializationError(f"Invalid UTF-8 in string: {e}") from e

    def read_option_string(self) -> Optional[str]:
        tag = self.read_u8()
        if tag == 0:
            return None
        if tag == 1:
            return self.read_string()
        raise SerializationError(f"Invalid Option representation: {tag}")

    def finish(self) -> None:
        """Fail if anything is left over after decoding."""
        if self.remaining:
            raise SerializationError(f"Not all bytes read: {self.remaining} left over")


# ============================================================================
# ACCOUNT KINDS
# ============================================================================

class AccountKind:
    """
    Common behaviour of the closed set of account kinds.

    Concrete kinds are the dataclasses below; ACCOUNT_KINDS lists them in
    their wire order and nothing outside this module adds to it.
    """
    tag: ClassVar[str] = ""      # Discriminant, also the filter category
    label: ClassVar[str] = ""    # Human-readable name

    def owner(self) -> str:
        """Owner label an account of this kind is created with."""
        return ""

    def intrinsic_balance(self) -> int:
        """Natural lamport amount of this kind (placeholder when it has none)."""
        return PROGRAM_PLACEHOLDER_LAMPORTS

    def category_name(self) -> str:
        return self.label

    def same_kind(self, other: 'AccountKind') -> bool:
        """True when both kinds share a variant, whatever their payload."""
        return type(self) is type(other)

    def __str__(self) -> str:
        return self.label

    def encode(self) -> bytes:
        """Variant index followed by the variant's fields."""
        return _u8(ACCOUNT_KINDS.index(type(self))) + self._encode_fields()

    @staticmethod
    def decode(reader: ByteReader) -> 'AccountType':
        index = reader.read_u8()
        if index >= len(ACCOUNT_KINDS):
            raise SerializationError(f"Unknown account kind variant: {index}")
        return ACCOUNT_KINDS[index]._decode_fields(reader)

    def _encode_fields(self) -> bytes:
        raise NotImplementedError

    @classmethod
    def _decode_fields(cls, reader: ByteReader) -> 'AccountType':
        raise NotImplementedError


@dataclass
class Wallet(AccountKind):
    """Plain lamport balance; the only kind allowed to take part in transfers."""
    balance: int = 0

    tag: ClassVar[str] = "wallet"
    label: ClassVar[str] = "Wallet"

    def __post_init__(self):
        _check_u64("balance", self.balance)

    def owner(self) -> str:
        return SYSTEM_OWNER

    def intrinsic_balance(self) -> int:
        return self.balance

    def _encode_fields(self) -> bytes:
        return _u64(self.balance)

    @classmethod
    def _decode_fields(cls, reader: ByteReader) -> 'Wallet':
        return cls(balance=reader.read_u64())


@dataclass
class Program(AccountKind):
    """Executable code holder."""
    executable: bool = False
    program_data: bytes = b""

    tag: ClassVar[str] = "program"
    label: ClassVar[str] = "Program"

    def __post_init__(self):
        _check_bool("executable", self.executable)
        if not isinstance(self.program_data, (bytes, bytearray, memoryview)):
            raise TypeError(f"program_data must be bytes, got {type(self.program_data).__name__}")
        self.program_data = bytes(self.program_data)

    def _encode_fields(self) -> bytes:
        return _bool(self.executable) + _bytes(self.program_data)

    @classmethod
    def _decode_fields(cls, reader: ByteReader) -> 'Program':
        executable = reader.read_bool()
        return cls(executable=executable, program_data=reader.read_bytes())


@dataclass
class TokenAccount(AccountKind):
    """Balance of a fungible token, optionally delegated."""
    mint: str = ""
    token_balance: int = 0
    delegate: Optional[str] = None

    tag: ClassVar[str] = "token_account"
    label: ClassVar[str] = "Token Account"

    def __post_init__(self):
        _check_str("mint", self.mint)
        _check_u64("token_balance", self.token_balance)
        if self.delegate is not None:
            _check_str("delegate", self.delegate)

    def intrinsic_balance(self) -> int:
        return self.token_balance

    def _encode_fields(self) -> bytes:
        return _string(self.mint) + _u64(self.token_balance) + _option_string(self.delegate)

    @classmethod
    def _decode_fields(cls, reader: ByteReader) -> 'TokenAccount':
        mint = reader.read_string()
        token_balance = reader.read_u64()
        return cls(mint=mint, token_balance=token_balance, delegate=reader.read_option_string())


@dataclass
class Stake(AccountKind):
    """Lamports delegated to a validator."""
    validator: str = ""
    staked_amount: int = 0

    tag: ClassVar[str] = "stake"
    label: ClassVar[str] = "Stake"

    def __post_init__(self):
        _check_str("validator", self.validator)
        _check_u64("staked_amount", self.staked_amount)

    def intrinsic_balance(self) -> int:
        return self.staked_amount

    def _encode_fields(self) -> bytes:
        return _string(self.validator) + _u64(self.staked_amount)

    @classmethod
    def _decode_fields(cls, reader: ByteReader) -> 'Stake':
        validator = reader.read_string()
        return cls(validator=validator, staked_amount=reader.read_u64())


# Wire order matters: a kind's index here is its encoded variant tag
ACCOUNT_KINDS = (Wallet, Program, TokenAccount, Stake)

AccountType = Union[Wallet, Program, TokenAccount, Stake]

_KINDS_BY_CATEGORY = {kind.tag: kind for kind in ACCOUNT_KINDS}


def kind_for_category(category: str) -> Optional[Type[AccountKind]]:
    """Map a filter category ("wallet", "stake", ...) to its kind, if any."""
    return _KINDS_BY_CATEGORY.get(category)


def format_sol(lamports: int) -> str:
    """Render lamports as an exact SOL amount, e.g. 9900 -> '0.0000099'."""
    sol = Decimal(lamports) / LAMPORTS_PER_SOL
    return format(sol.normalize(), 'f')


# ============================================================================
# ACCOUNT
# ============================================================================

@dataclass
class Account:
    """
    An identity-bearing account in the ledger.

    `owner` and `lamports` are derived from the kind when the account is
    created. For wallets, `lamports` mirrors `account_type.balance` and the
    ledger updates both together; for every other kind `lamports` is set once
    and never touched again.
    """
    pubkey: str                  # Unique account identifier
    owner: str                   # Derived from the kind at creation
    lamports: int                # Unit balance used for supply accounting
    account_type: AccountType    # Kind payload
    created_at: int              # Seconds since the epoch

    def __post_init__(self):
        _check_str("pubkey", self.pubkey)
        _check_str("owner", self.owner)
        _check_u64("lamports", self.lamports)
        _check_u64("created_at", self.created_at)
        if not isinstance(self.account_type, ACCOUNT_KINDS):
            raise TypeError(f"Unsupported account type: {type(self.account_type).__name__}")
        if self.is_wallet and self.lamports != self.account_type.balance:
            raise ValueError(
                f"Wallet lamports ({self.lamports}) must equal its balance "
                f"({self.account_type.balance})"
            )

    @classmethod
    def create(cls, account_type: AccountType,
               key_generator: KeyGenerator = generate_pubkey,
               clock: Callable[[], float] = time.time) -> 'Account':
        """
        Create a fresh account for the given kind.

        Args:
            account_type: Kind the account wraps
            key_generator: Produces a unique public key for the account
            clock: Returns the current time in seconds since the epoch
        """
        return cls(
            pubkey=key_generator(),
            owner=account_type.owner(),
            lamports=account_type.intrinsic_balance(),
            account_type=account_type,
            created_at=int(clock()),
        )

    @property
    def is_wallet(self) -> bool:
        return isinstance(self.account_type, Wallet)

    @property
    def sol_balance(self) -> float:
        """Convert lamports to SOL for human-readable display."""
        return self.lamports / LAMPORTS_PER_SOL

    def matches_kind_tag(self, other_kind: AccountKind) -> bool:
        """Compare kinds by variant only; used for filtering, not equality."""
        return self.account_type.same_kind(other_kind)

    def to_bytes(self) -> bytes:
        """Encode the whole account deterministically."""
        parts = [
            _string(self.pubkey),
            _string(self.owner),
            _u64(self.lamports),
            self.account_type.encode(),
            _u64(self.created_at),
        ]
        return b''.join(parts)

    @classmethod
    def read_from(cls, reader: ByteReader) -> 'Account':
        """Decode one account from the reader's current position."""
        pubkey = reader.read_string()
        owner = reader.read_string()
        lamports = reader.read_u64()
        account_type = AccountKind.decode(reader)
        created_at = reader.read_u64()
        try:
            return cls(
                pubkey=pubkey,
                owner=owner,
                lamports=lamports,
                account_type=account_type,
                created_at=created_at,
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Invalid account {pubkey}: {e}") from e

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Account':
        """
        Decode an account produced by to_bytes().

        Raises:
            SerializationError: If the data is not exactly one well-formed account
        """
        reader = ByteReader(data)
        account = cls.read_from(reader)
        reader.finish()
        return account

    def short_key(self) -> str:
        """First 8 and last 4 characters of the key; short keys are shown whole."""
        if len(self.pubkey) < 12:
            return self.pubkey
        return f"{self.pubkey[:8]}..{self.pubkey[-4:]}"

    def summary(self) -> str:
        return f"{self.short_key()}|{self.account_type.category_name()}|{format_sol(self.lamports)} SOL"
