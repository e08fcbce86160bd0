"""
Key Derivation Functions
========================

HKDF-SHA256 derivation of per-encryption keys from a master secret.

Each secure data encryption draws a fresh salt, so the same master key
never yields the same data key twice.
"""

from __future__ import annotations

import secrets
from typing import Final

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from appbase.core.exceptions import KeyDerivationError

DERIVED_KEY_SIZE: Final[int] = 32
SALT_SIZE: Final[int] = 32
MASTER_KEY_SIZE: Final[int] = 32


def derive_key(
    master_key: bytes,
    salt: bytes,
    length: int = DERIVED_KEY_SIZE,
) -> bytes:
    """
    Derive a symmetric key using HKDF with SHA-256 and empty info.

    Args:
        master_key: Input key material
        salt: Per-encryption salt (the secure data nonce)
        length: Output key length

    Returns:
        Derived key bytes

    Raises:
        KeyDerivationError: If the primitive fails or returns short output
    """
    try:
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=length,
            salt=salt,
            info=b"",
        )
        key = hkdf.derive(master_key)
    except (TypeError, ValueError) as e:
        raise KeyDerivationError(f"failed to derive encryption key: {e}") from e

    if len(key) != length:
        raise KeyDerivationError(
            f"failed to derive encryption key: got {len(key)} of {length} bytes"
        )
    return key


def generate_salt() -> bytes:
    """Generate a random salt of ``SALT_SIZE`` bytes."""
    return secrets.token_bytes(SALT_SIZE)


def generate_master_key() -> str:
    """
    Generate a random 32-byte master key and return it hex-encoded.

    This is a utility for operators provisioning a new key.
    """
    return secrets.token_hex(MASTER_KEY_SIZE)
