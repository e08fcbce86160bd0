"""
Cipher Suites
=============

Closed table of the AEAD algorithms a secure data field may name.

New algorithms are added as table entries; free-form identifiers are
never dispatched on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Type, Union

from appbase.core.crypto.aes_gcm import AesGcmCipher
from appbase.core.crypto.chacha20 import ChaCha20Cipher
from appbase.core.exceptions import InvalidCipherSuiteError


@dataclass(frozen=True, slots=True)
class SuiteSpec:
    """Stream identifier and cipher implementation for one suite."""

    stream_id: int
    cipher_cls: Type[Union[AesGcmCipher, ChaCha20Cipher]]


class CipherSuite(str, Enum):
    """Recognized cipher suite identifiers."""

    AES_256_GCM = "AES-256-GCM"
    CHACHA20_POLY1305 = "CHACHA20-POLY1305"

    @classmethod
    def parse(cls, value: Union[str, "CipherSuite"]) -> "CipherSuite":
        """
        Resolve an identifier to a suite.

        Raises:
            InvalidCipherSuiteError: If the identifier is not in the table
        """
        if isinstance(value, CipherSuite):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidCipherSuiteError(str(value)) from None

    @classmethod
    def from_stream_id(cls, stream_id: int) -> "CipherSuite":
        for suite, spec in _SUITE_TABLE.items():
            if spec.stream_id == stream_id:
                return suite
        raise InvalidCipherSuiteError(f"0x{stream_id:02x}")

    @property
    def stream_id(self) -> int:
        return _SUITE_TABLE[self].stream_id

    def new_cipher(self, key: bytes) -> Union[AesGcmCipher, ChaCha20Cipher]:
        """Create the AEAD cipher for this suite, bound to ``key``."""
        return _SUITE_TABLE[self].cipher_cls(key)

    def __str__(self) -> str:
        return self.value


_SUITE_TABLE: Final[dict[CipherSuite, SuiteSpec]] = {
    CipherSuite.AES_256_GCM: SuiteSpec(stream_id=0x00, cipher_cls=AesGcmCipher),
    CipherSuite.CHACHA20_POLY1305: SuiteSpec(stream_id=0x01, cipher_cls=ChaCha20Cipher),
}
