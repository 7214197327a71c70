"""Base58 codec (Bitcoin alphabet).

Encodes arbitrary bytes to text over a 58-character alphabet that leaves out
``0``, ``O``, ``I`` and ``l``. Each leading zero byte maps to one leading
``1`` so that byte counts survive the round trip.
"""

from typing import Union

from b58codec.scratch import default_pool

BITCOIN_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE = len(BITCOIN_ALPHABET)
ZERO_SYMBOL = BITCOIN_ALPHABET[0]

_ALPHABET_BYTES = BITCOIN_ALPHABET.encode("ascii")
_B58_MAP = {char: idx for idx, char in enumerate(BITCOIN_ALPHABET)}

# log(256) / log(58) ~= 1.36566, scaled to integers
_SIZE_MULTIPLIER = 1366
_SIZE_DIVISOR = 1000
_SIZE_EXTRA = 2


class Base58Error(ValueError):
    """Base exception for base58 codec errors."""


class InvalidCharacterError(Base58Error):
    """Raised when a string to decode holds a character outside the alphabet."""

    def __init__(self, character: str, position: int):
        self.character = character
        self.position = position
        super().__init__(
            f"Invalid base58 character {character!r} at position {position}"
        )


def estimate_encoded_length(size: int) -> int:
    """Return an upper bound on the base58 digits needed for ``size`` bytes.

    ``size`` counts bytes after the leading zeros have been stripped. The
    bound never falls below ``ceil(size * log(256) / log(58))``.
    """
    if size < 0:
        raise ValueError("size must be non-negative")
    if size == 0:
        return 0
    return size * _SIZE_MULTIPLIER // _SIZE_DIVISOR + _SIZE_EXTRA


def _count_leading(seq, zero) -> int:
    leading = 0
    for item in seq:
        if item != zero:
            break
        leading += 1
    return leading


def b58encode(data: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes to a base58 string using the Bitcoin alphabet."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("Input must be bytes")
    data = bytes(data)
    if not data:
        return ""

    leading = _count_leading(data, 0)
    if leading == len(data):
        return ZERO_SYMBOL * leading

    num = int.from_bytes(data[leading:], byteorder="big")
    size = estimate_encoded_length(len(data) - leading)

    with default_pool.buffer(size) as buf:
        pos = size - 1
        while num > 0:
            num, rem = divmod(num, BASE)
            buf[pos] = _ALPHABET_BYTES[rem]
            pos -= 1
        digits = buf[pos + 1 : size].decode("ascii")

    return ZERO_SYMBOL * leading + digits


def b58decode(encoded: str) -> bytes:
    """Decode a base58 string to bytes using the Bitcoin alphabet.

    Raises:
        TypeError: If ``encoded`` is not a string.
        InvalidCharacterError: At the first character outside the alphabet.
    """
    if not isinstance(encoded, str):
        raise TypeError("Input must be a string")
    if not encoded:
        return b""

    leading = _count_leading(encoded, ZERO_SYMBOL)

    num = 0
    for position in range(leading, len(encoded)):
        char = encoded[position]
        digit = _B58_MAP.get(char)
        if digit is None:
            raise InvalidCharacterError(char, position)
        num = num * BASE + digit

    byte_len = (num.bit_length() + 7) // 8
    return b"\x00" * leading + num.to_bytes(byte_len, byteorder="big")


def b58encode_str(text: str, encoding: str = "utf-8") -> str:
    """Encode a text string to base58."""
    return b58encode(text.encode(encoding))


def b58decode_str(encoded: str, encoding: str = "utf-8") -> str:
    """Decode a base58 string to text."""
    return b58decode(encoded).decode(encoding)
