"""
Secure Data Field
=================

A self-describing, at-rest encrypted value that can be embedded in a
configuration document or any other persisted record.

Persisted Form:
    A mapping with exactly three string fields:
        - nonce: hex encoded 32-byte salt, empty while plaintext
        - ciphersuite: one of the CipherSuite identifiers
        - hexdata: hex encoded plaintext or ciphertext

State Machine:
    EMPTY -> PLAINTEXT (set_plaintext) -> ENCRYPTED (encrypt)
    ENCRYPTED -> PLAINTEXT (decrypt)

The nonce doubles as the HKDF salt for the data key. It is drawn once per
encrypt cycle and cleared on decrypt, so every encryption uses a fresh
salt. Changing this pairing changes the persisted format.

Every operation is atomic: on failure the field is left exactly as it was.
Fields are not synchronized; callers sharing a record between threads must
serialize access to it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Mapping, Optional, Union

from appbase.core.crypto import kdf, stream
from appbase.core.crypto.suites import CipherSuite
from appbase.core.exceptions import (
    AlreadyEncryptedError,
    DecodeError,
    EncryptionError,
    MissingNonceError,
)
from appbase.utils.validators import decode_hex, encode_hex

logger = logging.getLogger(__name__)

FIELD_NONCE = "nonce"
FIELD_CIPHER_SUITE = "ciphersuite"
FIELD_HEX_DATA = "hexdata"


class SecureDataState(Enum):
    """Observable state of a secure data field."""

    EMPTY = auto()
    PLAINTEXT = auto()
    ENCRYPTED = auto()


@dataclass
class SecureData:
    """
    Encrypted-at-rest data field.

    Usage:
        field = SecureData.from_plaintext(b"s3cret", CipherSuite.AES_256_GCM)
        field.encrypt(master_key)      # hex master key
        record["password"] = field.to_dict()

        field = SecureData.from_dict(record["password"])
        field.decrypt(master_key)
        secret = field.to_bytes()

    The cipher suite is stored as given and only validated when a
    cryptographic operation needs it.
    """

    nonce: str = ""
    cipher_suite: str = ""
    hex_data: str = ""

    def __post_init__(self) -> None:
        # CipherSuite members are str subclasses; persist the plain value
        self.cipher_suite = str(self.cipher_suite)

    @classmethod
    def from_plaintext(
        cls,
        data: bytes,
        cipher_suite: Union[str, CipherSuite] = CipherSuite.AES_256_GCM,
    ) -> "SecureData":
        """Create a plaintext field holding ``data``."""
        field = cls(cipher_suite=str(cipher_suite))
        field.set_plaintext(data)
        return field

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SecureData":
        """
        Load a field from its persisted mapping.

        Missing keys are treated as empty strings.

        Raises:
            DecodeError: If a present value is not a string
        """
        values = {}
        for key in (FIELD_NONCE, FIELD_CIPHER_SUITE, FIELD_HEX_DATA):
            value = data.get(key, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise DecodeError(f"{key} must be a string, got {type(value).__name__}")
            values[key] = value
        return cls(
            nonce=values[FIELD_NONCE],
            cipher_suite=values[FIELD_CIPHER_SUITE],
            hex_data=values[FIELD_HEX_DATA],
        )

    def to_dict(self) -> dict[str, str]:
        """Return the persisted mapping."""
        return {
            FIELD_NONCE: self.nonce,
            FIELD_CIPHER_SUITE: str(self.cipher_suite),
            FIELD_HEX_DATA: self.hex_data,
        }

    @property
    def state(self) -> SecureDataState:
        if self.nonce:
            return SecureDataState.ENCRYPTED
        if self.hex_data:
            return SecureDataState.PLAINTEXT
        return SecureDataState.EMPTY

    @property
    def is_encrypted(self) -> bool:
        return self.state is SecureDataState.ENCRYPTED

    def suite(self) -> CipherSuite:
        """
        Resolve the configured cipher suite.

        Raises:
            InvalidCipherSuiteError: If the identifier is not recognized
        """
        return CipherSuite.parse(self.cipher_suite)

    def set_plaintext(self, data: bytes) -> None:
        """
        Replace the payload with new plaintext.

        Raises:
            AlreadyEncryptedError: If the field currently holds ciphertext;
                it must be decrypted first
        """
        if self.nonce:
            raise AlreadyEncryptedError("cannot update encrypted data")
        self.hex_data = encode_hex(bytes(data))

    def to_bytes(self) -> bytes:
        """
        Decode the payload, plaintext or ciphertext depending on state.

        Raises:
            DecodeError: If the payload is not valid hex
        """
        return decode_hex(self.hex_data, "hexdata")

    def encrypt(self, master_key: str) -> None:
        """
        Encrypt the plaintext payload in place.

        A fresh random nonce is drawn and used as the HKDF salt for the
        data key; it is stored alongside the ciphertext.

        Args:
            master_key: Hex encoded master secret

        Raises:
            AlreadyEncryptedError: If the field is already encrypted
            InvalidCipherSuiteError: If the cipher suite is not recognized
            DecodeError: If the master key or payload is not valid hex
            KeyDerivationError: If the data key cannot be derived
            EncryptionError: If the random source or the AEAD fails
        """
        if self.nonce:
            raise AlreadyEncryptedError("data is already encrypted")

        suite = self.suite()
        secret = decode_hex(master_key, "master key")
        plaintext = self.to_bytes()

        try:
            salt = kdf.generate_salt()
        except (OSError, NotImplementedError) as e:
            raise EncryptionError(f"failed to read random data for nonce: {e}") from e

        key = kdf.derive_key(secret, salt)
        ciphertext = stream.seal(suite, key, plaintext)

        self.nonce = encode_hex(salt)
        self.hex_data = encode_hex(ciphertext)
        logger.debug("Encrypted secure data (suite=%s, size=%d)", suite, len(plaintext))

    def decrypt(self, master_key: str) -> None:
        """
        Decrypt the payload in place and clear the nonce.

        Clearing the nonce forces a new salt on the next encryption.

        Args:
            master_key: Hex encoded master secret used to encrypt

        Raises:
            MissingNonceError: If the field has no nonce
            InvalidCipherSuiteError: If the cipher suite is not recognized
            DecodeError: If the master key, nonce or payload is not valid hex
            KeyDerivationError: If the data key cannot be derived
            AuthenticationError: If the ciphertext fails its integrity check
        """
        if not self.nonce:
            raise MissingNonceError("nonce is not set, cannot decrypt")

        suite = self.suite()
        secret = decode_hex(master_key, "master key")
        salt = decode_hex(self.nonce, "nonce")
        ciphertext = self.to_bytes()

        key = kdf.derive_key(secret, salt)
        plaintext = stream.open_stream(suite, key, ciphertext)

        self.nonce = ""
        self.hex_data = encode_hex(plaintext)
        logger.debug("Decrypted secure data (suite=%s, size=%d)", suite, len(plaintext))

    def __repr__(self) -> str:
        """Safe representation without exposing payload or nonce."""
        return (
            f"SecureData(state={self.state.name}, "
            f"ciphersuite={self.cipher_suite!r}, size={len(self.hex_data) // 2})"
        )


def load_secure_data(value: Optional[Mapping[str, Any]]) -> SecureData:
    """Load a field from an optional persisted mapping, empty if missing."""
    if value is None:
        return SecureData()
    if not isinstance(value, Mapping):
        raise DecodeError(f"secure data must be a mapping, got {type(value).__name__}")
    return SecureData.from_dict(value)
