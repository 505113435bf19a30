"""
Byte/text conversions: hex, base58 (Bitcoin alphabet), base64 (RFC 4648, padded)
"""

import base64
import binascii
import re
from typing import Union

import base58

from ..errors import FormatError

BytesLike = Union[bytes, bytearray, memoryview]

_HEX_RE = re.compile(r"[0-9a-fA-F]*")

# b58decode strips trailing whitespace, so the alphabet is checked up front
_BASE58_CHARS = frozenset(base58.BITCOIN_ALPHABET.decode("ascii"))


def hex_to_bytes(text: str) -> bytes:
    """
    Convert a hex string to bytes

    Raises:
        FormatError: On odd length or non-hex characters
    """
    if not isinstance(text, str):
        raise FormatError.invalid_hex(f"expected str, got {type(text).__name__}")
    if len(text) % 2:
        raise FormatError.invalid_hex(f"odd length {len(text)}")
    if not _HEX_RE.fullmatch(text):
        raise FormatError.invalid_hex("non-hex character")
    return bytes.fromhex(text)


def bytes_to_hex(data: BytesLike) -> str:
    """Convert bytes to a lowercase hex string"""
    return bytes(data).hex()


def encode_base58(data: BytesLike) -> str:
    """Encode bytes in base58"""
    return base58.b58encode(bytes(data)).decode("ascii")


def decode_base58(text: str) -> bytes:
    """
    Decode a base58 string

    Raises:
        FormatError: On characters outside the base58 alphabet
    """
    if isinstance(text, str):
        invalid = sorted(set(text) - _BASE58_CHARS)
        if invalid:
            raise FormatError.invalid_base58(ValueError(f"invalid characters {''.join(invalid)!r}"))
    try:
        return base58.b58decode(text)
    except ValueError as e:
        raise FormatError.invalid_base58(e) from e


def encode_base64(data: BytesLike) -> str:
    """Encode bytes in base64"""
    return base64.b64encode(bytes(data)).decode("ascii")


def decode_base64(text: str) -> bytes:
    """
    Decode a base64 string

    Raises:
        FormatError: On characters outside the base64 alphabet or bad padding
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError.invalid_base64(e) from e
