"""
ChaCha20-Poly1305 Authenticated Encryption
==========================================

Key-bound ChaCha20-Poly1305 (RFC 8439) cipher, the alternative suite for
secure data fields on hosts without AES acceleration.
"""

from __future__ import annotations

from typing import Final, Optional

from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

# Constants per RFC 8439
CHACHA_KEY_SIZE: Final[int] = 32  # 256 bits
CHACHA_NONCE_SIZE: Final[int] = 12  # 96 bits (IETF variant)
CHACHA_TAG_SIZE: Final[int] = 16  # 128 bits Poly1305


class ChaCha20Cipher:
    """ChaCha20-Poly1305 AEAD bound to a single derived key."""

    __slots__ = ("_aead",)

    def __init__(self, key: bytes) -> None:
        if len(key) != CHACHA_KEY_SIZE:
            raise ValueError(f"Key must be exactly {CHACHA_KEY_SIZE} bytes")
        self._aead = ChaCha20Poly1305(key)

    def encrypt(self, nonce: bytes, plaintext: bytes, aad: Optional[bytes] = None) -> bytes:
        if len(nonce) != CHACHA_NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {CHACHA_NONCE_SIZE} bytes")
        return self._aead.encrypt(nonce, plaintext, aad)

    def decrypt(self, nonce: bytes, ciphertext: bytes, aad: Optional[bytes] = None) -> bytes:
        """
        Verify and decrypt ciphertext.

        Raises:
            ValueError: If parameters are invalid
            cryptography.exceptions.InvalidTag: If authentication fails
        """
        if len(nonce) != CHACHA_NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {CHACHA_NONCE_SIZE} bytes")
        if len(ciphertext) < CHACHA_TAG_SIZE:
            raise ValueError("Ciphertext too short (missing authentication tag)")
        return self._aead.decrypt(nonce, ciphertext, aad)

    def __repr__(self) -> str:
        return "ChaCha20Cipher(key=<hidden>)"
