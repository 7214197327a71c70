"""b58codec - Base58 (Bitcoin alphabet) encoding and decoding.

Provides an importable codec for arbitrary bytes and text, plus a small
CLI for encoding and decoding from arguments, files or stdin.
"""

__version__ = "0.1.0"

from b58codec.base58 import (  # noqa: F401
    BITCOIN_ALPHABET,
    b58encode,
    b58decode,
    b58encode_str,
    b58decode_str,
    estimate_encoded_length,
    Base58Error,
    InvalidCharacterError,
)
from b58codec.cli import main  # noqa: F401
