"""
Codec layer for Koinos Adapter

Provides:
- hex / base58 / base64 conversions
- SHA256 / RIPEMD160 hash helpers
- Base58Check encoding of addresses and private keys (WIF)
"""

from .encoding import (
    hex_to_bytes,
    bytes_to_hex,
    encode_base58,
    decode_base58,
    encode_base64,
    decode_base64,
)
from .hashing import sha256, double_sha256, ripemd160, hash160
from .checksum import (
    KeyKind,
    DecodedKey,
    checksum,
    encode_checksummed,
    decode_checksummed,
    decode_checksummed_key,
    derive_address,
    is_valid_address,
)

__all__ = [
    "hex_to_bytes",
    "bytes_to_hex",
    "encode_base58",
    "decode_base58",
    "encode_base64",
    "decode_base64",
    "sha256",
    "double_sha256",
    "ripemd160",
    "hash160",
    "KeyKind",
    "DecodedKey",
    "checksum",
    "encode_checksummed",
    "decode_checksummed",
    "decode_checksummed_key",
    "derive_address",
    "is_valid_address",
]
