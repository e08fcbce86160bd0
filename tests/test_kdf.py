"""
Tests for key derivation and key generation.
"""

import pytest

from appbase.core.crypto.kdf import (
    DERIVED_KEY_SIZE,
    SALT_SIZE,
    derive_key,
    generate_master_key,
    generate_salt,
)
from appbase.core.exceptions import KeyDerivationError


class TestDeriveKey:
    """Tests for HKDF-SHA256 derivation."""

    def test_rfc5869_vector_without_salt_or_info(self):
        # RFC 5869 appendix A.3
        okm = derive_key(b"\x0b" * 22, b"", length=42)
        assert okm.hex() == (
            "8da4e775a563c18f715f802a063c5a31b8a11f5c5ee1879ec3454e5f3c738d2d"
            "9d201395faa4b61a96c8"
        )

    def test_default_length(self):
        assert len(derive_key(b"master", b"salt")) == DERIVED_KEY_SIZE

    def test_deterministic(self):
        assert derive_key(b"master", b"salt") == derive_key(b"master", b"salt")

    def test_salt_changes_key(self):
        assert derive_key(b"master", b"salt-1") != derive_key(b"master", b"salt-2")

    def test_master_key_changes_key(self):
        assert derive_key(b"master-1", b"salt") != derive_key(b"master-2", b"salt")

    def test_excessive_length(self):
        with pytest.raises(KeyDerivationError):
            derive_key(b"master", b"salt", length=255 * 32 + 1)


class TestGeneration:
    """Tests for random salts and master keys."""

    def test_salt_size(self):
        assert len(generate_salt()) == SALT_SIZE

    def test_salts_are_unique(self):
        assert generate_salt() != generate_salt()

    def test_master_key_is_hex(self):
        key = generate_master_key()
        assert len(key) == 64
        assert bytes.fromhex(key)

    def test_master_keys_are_unique(self):
        assert generate_master_key() != generate_master_key()
