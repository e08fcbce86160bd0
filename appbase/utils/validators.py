"""
Validation Utilities
====================

Strict decoding and input validation helpers.
"""

from __future__ import annotations

import binascii

from appbase.core.exceptions import DecodeError


class ValidationError(ValueError):
    """Raised when validation fails."""
    pass


def decode_hex(value: str, field_name: str = "value") -> bytes:
    """
    Decode a hex string strictly.

    Unlike ``bytes.fromhex`` this rejects embedded whitespace, so a value
    that decodes here is exactly what was written.

    Args:
        value: Hex encoded text (either case)
        field_name: Name of the field for error messages

    Returns:
        Decoded bytes

    Raises:
        DecodeError: If the value is not a string or not valid hex
    """
    if not isinstance(value, str):
        raise DecodeError(f"{field_name} must be a hex string")
    try:
        return binascii.unhexlify(value)
    except ValueError as e:
        raise DecodeError(f"could not decode {field_name}: {e}") from e


def encode_hex(data: bytes) -> str:
    """Hex-encode bytes as lowercase text."""
    return binascii.hexlify(data).decode("ascii")


def validate_string_safe(
    value: str,
    min_length: int = 0,
    max_length: int = 1000,
    allow_empty: bool = False,
    field_name: str = "value",
) -> str:
    """
    Validate a string value for safety.

    Args:
        value: The string to validate
        min_length: Minimum allowed length
        max_length: Maximum allowed length
        allow_empty: If False, empty strings are rejected
        field_name: Name of the field for error messages

    Returns:
        Validated string

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    if not allow_empty and not value:
        raise ValidationError(f"{field_name} cannot be empty")

    if len(value) < min_length:
        raise ValidationError(
            f"{field_name} must be at least {min_length} characters"
        )

    if len(value) > max_length:
        raise ValidationError(
            f"{field_name} must be at most {max_length} characters"
        )

    if "\x00" in value:
        raise ValidationError(f"{field_name} contains invalid characters")

    return value
