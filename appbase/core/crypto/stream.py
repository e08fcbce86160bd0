"""
Chunked AEAD Stream
===================

Whole-buffer authenticated encryption built from fixed-size packages.

The secure data layer treats the output as opaque: every package carries
its own header, nonce and tag.

Package Format:
    HEADER (16 bytes):
        - VERSION: 1 byte (0x10)
        - SUITE: 1 byte (cipher suite stream id)
        - LENGTH: 2 bytes (payload length, little-endian)
        - NONCE: 12 bytes (stream nonce, top bit set on the final package)
    CIPHERTEXT: LENGTH bytes
    TAG: 16 bytes

The AEAD nonce of package ``n`` is the header nonce with ``n`` XOR-ed
into its last four bytes (little-endian). The first four header bytes are
authenticated as associated data. Every package except the last carries
exactly ``MAX_PAYLOAD_SIZE`` bytes, so truncation, reordering and
appended data are all detected.
"""

from __future__ import annotations

import secrets
import struct
from typing import Final, Optional

from cryptography.exceptions import InvalidTag

from appbase.core.crypto.suites import CipherSuite
from appbase.core.exceptions import AuthenticationError, EncryptionError

STREAM_VERSION: Final[int] = 0x10
HEADER_SIZE: Final[int] = 16
NONCE_SIZE: Final[int] = 12
TAG_SIZE: Final[int] = 16
MAX_PAYLOAD_SIZE: Final[int] = 16 * 1024
MAX_PACKAGES: Final[int] = 2**32

_FINAL_FLAG: Final[int] = 0x80
_PREFIX: Final[struct.Struct] = struct.Struct("<BBH")


def _package_nonce(header_nonce: bytes, sequence: int) -> bytes:
    nonce = bytearray(header_nonce)
    for i, b in enumerate(struct.pack("<I", sequence)):
        nonce[NONCE_SIZE - 4 + i] ^= b
    return bytes(nonce)


def _strip_final(header_nonce: bytes) -> bytes:
    return bytes([header_nonce[0] & 0x7F]) + header_nonce[1:]


def seal(
    suite: CipherSuite,
    key: bytes,
    plaintext: bytes,
    stream_nonce: Optional[bytes] = None,
) -> bytes:
    """
    Encrypt a whole buffer into a package stream.

    Args:
        suite: Cipher suite selecting the AEAD algorithm
        key: 32-byte data key
        plaintext: Data to encrypt (may be empty)
        stream_nonce: Optional 12-byte stream nonce, random if omitted

    Returns:
        Concatenated packages

    Raises:
        EncryptionError: If the AEAD primitive rejects its inputs
    """
    if stream_nonce is None:
        stream_nonce = secrets.token_bytes(NONCE_SIZE)
    if len(stream_nonce) != NONCE_SIZE:
        raise EncryptionError(f"stream nonce must be exactly {NONCE_SIZE} bytes")
    base_nonce = _strip_final(stream_nonce)

    view = memoryview(plaintext)
    chunks = [view[i:i + MAX_PAYLOAD_SIZE] for i in range(0, len(view), MAX_PAYLOAD_SIZE)]
    if not chunks:
        chunks = [view[0:0]]
    if len(chunks) > MAX_PACKAGES:
        raise EncryptionError("plaintext too large for a single stream")

    try:
        cipher = suite.new_cipher(key)
        out = bytearray()
        last = len(chunks) - 1
        for sequence, chunk in enumerate(chunks):
            header_nonce = bytearray(base_nonce)
            if sequence == last:
                header_nonce[0] |= _FINAL_FLAG
            prefix = _PREFIX.pack(STREAM_VERSION, suite.stream_id, len(chunk))
            out += prefix
            out += header_nonce
            out += cipher.encrypt(
                _package_nonce(bytes(header_nonce), sequence),
                bytes(chunk),
                prefix,
            )
    except ValueError as e:
        raise EncryptionError(f"failed to encrypt data: {e}") from e

    return bytes(out)


def open_stream(suite: CipherSuite, key: bytes, data: bytes) -> bytes:
    """
    Verify and decrypt a package stream produced by :func:`seal`.

    No plaintext is returned unless every package authenticates.

    Raises:
        AuthenticationError: If any package is forged, tampered, truncated,
            reordered or encrypted under a different key or suite
    """
    try:
        cipher = suite.new_cipher(key)
    except ValueError as e:
        raise AuthenticationError(f"failed to decrypt data: {e}") from e

    parts: list[bytes] = []
    offset = 0
    sequence = 0
    base_nonce: Optional[bytes] = None

    while True:
        if len(data) - offset < HEADER_SIZE + TAG_SIZE:
            raise AuthenticationError("failed to decrypt data: truncated package")

        version, stream_id, length = _PREFIX.unpack_from(data, offset)
        prefix = bytes(data[offset:offset + _PREFIX.size])
        header_nonce = bytes(data[offset + _PREFIX.size:offset + HEADER_SIZE])

        if version != STREAM_VERSION:
            raise AuthenticationError(f"failed to decrypt data: unsupported version 0x{version:02x}")
        if stream_id != suite.stream_id:
            raise AuthenticationError("failed to decrypt data: cipher suite mismatch")
        if length > MAX_PAYLOAD_SIZE:
            raise AuthenticationError("failed to decrypt data: package too large")

        final = bool(header_nonce[0] & _FINAL_FLAG)
        if not final and length != MAX_PAYLOAD_SIZE:
            raise AuthenticationError("failed to decrypt data: short intermediate package")

        stripped = _strip_final(header_nonce)
        if base_nonce is None:
            base_nonce = stripped
        elif stripped != base_nonce:
            raise AuthenticationError("failed to decrypt data: package from another stream")

        end = offset + HEADER_SIZE + length + TAG_SIZE
        if end > len(data):
            raise AuthenticationError("failed to decrypt data: truncated package")

        try:
            parts.append(cipher.decrypt(
                _package_nonce(header_nonce, sequence),
                bytes(data[offset + HEADER_SIZE:end]),
                prefix,
            ))
        except InvalidTag as e:
            raise AuthenticationError("failed to decrypt data: authentication failed") from e

        offset = end
        sequence += 1
        if final:
            break

    if offset != len(data):
        raise AuthenticationError("failed to decrypt data: unexpected data after final package")

    return b"".join(parts)
