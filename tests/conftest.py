"""
Pytest configuration and shared fixtures for appbase tests.
"""

from typing import Generator

import pytest

from appbase.core.config import LoggingConfig
from appbase.core.crypto.kdf import generate_master_key
from appbase.core.crypto.suites import CipherSuite
from appbase.core.logging import configure_logging
from appbase.core.secure_data import SecureData


# ===========================================================================
# Key Fixtures
# ===========================================================================

@pytest.fixture
def master_key() -> str:
    """A fresh hex encoded 32-byte master key."""
    return generate_master_key()


@pytest.fixture
def other_master_key(master_key: str) -> str:
    """A second master key, guaranteed different from ``master_key``."""
    key = generate_master_key()
    while key == master_key:
        key = generate_master_key()
    return key


# ===========================================================================
# Secure Data Fixtures
# ===========================================================================

@pytest.fixture(params=list(CipherSuite), ids=lambda s: s.value)
def suite(request) -> CipherSuite:
    """Every recognized cipher suite."""
    return request.param


@pytest.fixture
def plaintext_field(suite: CipherSuite) -> SecureData:
    """A plaintext field holding a short secret."""
    return SecureData.from_plaintext(b"correct horse battery staple", suite)


@pytest.fixture
def encrypted_field(plaintext_field: SecureData, master_key: str) -> SecureData:
    """A field encrypted under ``master_key``."""
    plaintext_field.encrypt(master_key)
    return plaintext_field


# ===========================================================================
# Logging
# ===========================================================================

@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Leave the application logger disabled, and its files closed, after each test."""
    yield
    configure_logging(LoggingConfig())
