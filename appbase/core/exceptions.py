"""
Secure Data Errors
==================

Typed failures raised by the secure data core.

Every operation that raises one of these leaves the field it was called
on exactly as it was before the call.
"""

from __future__ import annotations


class SecureDataError(Exception):
    """Base class for all secure data failures."""
    pass


class DecodeError(SecureDataError):
    """Raised when a nonce, payload or master key is not valid hex."""
    pass


class InvalidCipherSuiteError(SecureDataError):
    """Raised when the cipher suite identifier is not recognized."""

    def __init__(self, cipher_suite: str) -> None:
        super().__init__(f"invalid cipher suite {cipher_suite!r}")
        self.cipher_suite = cipher_suite


class KeyDerivationError(SecureDataError):
    """Raised when key derivation cannot produce full key material."""
    pass


class EncryptionError(SecureDataError):
    """Raised when encryption fails."""
    pass


class AuthenticationError(SecureDataError):
    """Raised when ciphertext fails its integrity check on decrypt."""
    pass


class AlreadyEncryptedError(SecureDataError):
    """Raised when plaintext would overwrite encrypted data."""
    pass


class MissingNonceError(SecureDataError):
    """Raised when decrypting a field that has no nonce."""
    pass
