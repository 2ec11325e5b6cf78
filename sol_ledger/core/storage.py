"""
Ledger Persistence

The whole account collection is stored as one binary blob: a u32 account
count followed by that many encoded accounts. Loading is all-or-nothing;
a blob that does not decode exactly is rejected with a SerializationError.
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Union

from .accounts import Account, ByteReader
from .errors import SerializationError


def encode_accounts(accounts: Iterable[Account]) -> bytes:
    """Encode accounts, in order, as a single blob."""
    accounts = list(accounts)
    parts = [len(accounts).to_bytes(4, 'little')]
    parts.extend(account.to_bytes() for account in accounts)
    return b''.join(parts)


def decode_accounts(data: bytes) -> List[Account]:
    """
    Decode a blob produced by encode_accounts().

    Raises:
        SerializationError: If the blob is truncated, malformed or has trailing bytes
    """
    reader = ByteReader(data)
    count = reader.read_u32()
    accounts = [Account.read_from(reader) for _ in range(count)]
    reader.finish()
    return accounts


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def save_accounts(path: Union[str, Path], accounts: Iterable[Account]) -> None:
    """
    Write accounts to path, replacing whatever was there.

    Parent directories are created as needed. The blob goes to a temporary
    file next to path first and is then moved over it, so readers never see
    a half-written ledger. The saved file gets the usual permissions for a
    newly created file under the process umask.

    Raises:
        SerializationError: If an account cannot be encoded or the file
            cannot be written
    """
    path = Path(path)
    data = encode_accounts(accounts)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            # mkstemp creates the file owner-only
            os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except OSError as e:
        raise SerializationError(str(e)) from e


def load_accounts(path: Union[str, Path]) -> List[Account]:
    """Read and decode every account stored at path."""
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise SerializationError(str(e)) from e

    return decode_accounts(data)
