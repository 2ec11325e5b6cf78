"""
Account Key Generation

Accounts are identified by a public key string. The ledger only relies on
keys being unique and stable, so key generation is injected wherever an
account is created; this module provides the default generator.

Keys are SECP256k1 keypairs (the same curve the rest of the toolchain signs
with), and the public key is the hex encoding of the verifying key.
"""

from typing import Callable, Tuple

from ecdsa import SigningKey, SECP256k1


# Anything that returns a fresh, unique public key string
KeyGenerator = Callable[[], str]


def generate_keypair() -> Tuple[SigningKey, str]:
    """
    Generate a new SECP256k1 keypair.

    Returns:
        Tuple of (private_key, public_key_hex)
    """
    private_key = SigningKey.generate(curve=SECP256k1)
    public_key_hex = private_key.verifying_key.to_string().hex()
    return private_key, public_key_hex


def generate_pubkey() -> str:
    """Generate a fresh public key, discarding the private half."""
    return generate_keypair()[1]
