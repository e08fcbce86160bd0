"""
Utils module - Path and validation helpers used throughout appbase.
"""

from appbase.utils.paths import clean_path, clean_search_paths, expand_path
from appbase.utils.validators import ValidationError, decode_hex, encode_hex

__all__ = [
    "clean_path",
    "clean_search_paths",
    "expand_path",
    "ValidationError",
    "decode_hex",
    "encode_hex",
]
