"""
appbase - Application Base with Secure Data Fields
==================================================

Command-line application scaffold around an at-rest encrypted data field
that can be embedded in configuration documents.

Security Notice:
- Master keys, nonces and payloads are never logged
- Every secure data operation is atomic and fails with a typed error
"""

from appbase.core.crypto.suites import CipherSuite
from appbase.core.exceptions import SecureDataError
from appbase.core.secure_data import SecureData, SecureDataState

__version__ = "0.1.0"

__all__ = [
    "CipherSuite",
    "SecureData",
    "SecureDataError",
    "SecureDataState",
    "__version__",
]
