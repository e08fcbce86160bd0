"""
AES-256-GCM Authenticated Encryption
====================================

Key-bound AES-256-GCM cipher used for one secure data stream.

Security Properties:
    - 256-bit key (derived per encryption via HKDF)
    - 96-bit nonce supplied by the stream framing
    - 128-bit authentication tag appended to every package

WARNING:
    - Never reuse (key, nonce) pairs
    - Always verify tag before using plaintext
"""

from __future__ import annotations

from typing import Final, Optional

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

AES_KEY_SIZE: Final[int] = 32  # 256 bits
AES_NONCE_SIZE: Final[int] = 12  # 96 bits (NIST recommended for GCM)
AES_TAG_SIZE: Final[int] = 16  # 128 bits


class AesGcmCipher:
    """
    AES-256-GCM AEAD bound to a single derived key.

    Usage:
        cipher = AesGcmCipher(key)
        sealed = cipher.encrypt(nonce, plaintext, aad=header)
        plaintext = cipher.decrypt(nonce, sealed, aad=header)

    ``decrypt`` raises ``cryptography.exceptions.InvalidTag`` when the
    integrity check fails; the stream layer turns that into an
    authentication error.
    """

    __slots__ = ("_aead",)

    def __init__(self, key: bytes) -> None:
        if len(key) != AES_KEY_SIZE:
            raise ValueError(f"Key must be exactly {AES_KEY_SIZE} bytes")
        self._aead = AESGCM(key)

    def encrypt(self, nonce: bytes, plaintext: bytes, aad: Optional[bytes] = None) -> bytes:
        """
        Encrypt plaintext, returning ciphertext with the tag appended.

        Raises:
            ValueError: If the nonce is the wrong size
        """
        if len(nonce) != AES_NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {AES_NONCE_SIZE} bytes")
        return self._aead.encrypt(nonce, plaintext, aad)

    def decrypt(self, nonce: bytes, ciphertext: bytes, aad: Optional[bytes] = None) -> bytes:
        """
        Verify and decrypt ciphertext produced by :meth:`encrypt`.

        Raises:
            ValueError: If the nonce is the wrong size or the tag is missing
            cryptography.exceptions.InvalidTag: If authentication fails
        """
        if len(nonce) != AES_NONCE_SIZE:
            raise ValueError(f"Nonce must be exactly {AES_NONCE_SIZE} bytes")
        if len(ciphertext) < AES_TAG_SIZE:
            raise ValueError("Ciphertext too short (missing authentication tag)")
        return self._aead.decrypt(nonce, ciphertext, aad)

    def __repr__(self) -> str:
        """Safe representation without exposing key material."""
        return "AesGcmCipher(key=<hidden>)"
