"""
Hash primitives used by key and address encoding
"""

import hashlib

from Crypto.Hash import RIPEMD160


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def double_sha256(data: bytes) -> bytes:
    return sha256(sha256(data))


def ripemd160(data: bytes) -> bytes:
    # hashlib only exposes ripemd160 when OpenSSL ships the legacy provider
    return RIPEMD160.new(data).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data)), the 20-byte public key hash"""
    return ripemd160(sha256(data))
