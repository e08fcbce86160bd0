"""
appbase Cryptographic Core
==========================

Primitives behind secure data fields.

Architecture:
    1. HKDF-SHA256: per-encryption data key from master key and salt
    2. AES-256-GCM / ChaCha20-Poly1305: selected by cipher suite
    3. Chunked package stream: whole-buffer AEAD with per-package tags

WARNING: This module handles sensitive cryptographic material.
         Never log keys, nonces or payloads.
"""

from appbase.core.crypto.aes_gcm import AesGcmCipher
from appbase.core.crypto.chacha20 import ChaCha20Cipher
from appbase.core.crypto.kdf import derive_key, generate_master_key, generate_salt
from appbase.core.crypto.suites import CipherSuite
from appbase.core.crypto.stream import open_stream, seal

__all__ = [
    "AesGcmCipher",
    "ChaCha20Cipher",
    "CipherSuite",
    "derive_key",
    "generate_master_key",
    "generate_salt",
    "open_stream",
    "seal",
]
