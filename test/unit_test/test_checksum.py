"""
Test Checksum Codec

Tests for Base58Check encoding of addresses and private keys
(koinos_adapter.codec.checksum).
"""

import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from koinos_adapter.codec import (
    KeyKind,
    checksum,
    decode_base58,
    decode_checksummed,
    decode_checksummed_key,
    derive_address,
    encode_base58,
    encode_checksummed,
    hex_to_bytes,
    is_valid_address,
)
from koinos_adapter.errors import ChecksumError, ErrorCode, FormatError, VersionError

# Bitcoin wiki: technical background of version 1 addresses
PUBLIC_KEY_HEX = (
    "0450863AD64A87AE8A2FE83C1AF1A8403CB53F53E486D8511DAD8A04887E5B235"
    "22CD470243453A299FA9E77237716103ABC11A1DF38855ED6F2EE187E9C582BA6"
)
PUBLIC_KEY_HASH_HEX = "010966776006953d5567439e5e39f86a0d273bee"
ADDRESS = "16UwLL9Risc3QfPqBUvKofHmBQ7wMtjvM"

# Bitcoin wiki: wallet import format
PRIVATE_KEY_HEX = "0c28fca386c7a227600b2fe50b7cae11ec86d3bf1fbe471be89827e19d72aa1d"
WIF = "5HueCGU8rMjxEXxiPuD5BDku4MkFqeZyd4dZ1jvhTVqvbTLvyTJ"
WIF_COMPRESSED = "KwdMAjGmerYanjeui5SHS7JkmpZvVipYvB2LJGU1ZxJwYvP98617"


def _encode_raw(body: bytes) -> str:
    """Base58Check-encode an arbitrary body with a valid checksum"""
    return encode_base58(body + checksum(body))


def test_derive_address_vector():
    """Known public key gives the known address, every time"""
    print("Testing derive_address...")

    public_key = hex_to_bytes(PUBLIC_KEY_HEX)
    assert derive_address(public_key) == ADDRESS
    assert derive_address(public_key) == derive_address(bytearray(public_key))

    print("  derive_address: PASSED")


def test_public_encoding_vector():
    """Public kind encodes a 20-byte hash to a 25-byte buffer"""
    payload = hex_to_bytes(PUBLIC_KEY_HASH_HEX)

    assert encode_checksummed(payload, KeyKind.PUBLIC) == ADDRESS
    assert encode_checksummed(payload, "public") == ADDRESS
    assert len(decode_base58(ADDRESS)) == 25
    assert decode_checksummed(ADDRESS) == payload


def test_private_encoding_vectors():
    """WIF vectors, uncompressed and compressed"""
    print("Testing WIF vectors...")

    key = hex_to_bytes(PRIVATE_KEY_HEX)

    assert encode_checksummed(key, "private") == WIF
    assert encode_checksummed(key, KeyKind.PRIVATE, compressed=True) == WIF_COMPRESSED
    assert len(decode_base58(WIF)) == 37
    assert len(decode_base58(WIF_COMPRESSED)) == 38

    decoded = decode_checksummed_key(WIF)
    assert decoded.payload == key
    assert decoded.kind is KeyKind.PRIVATE
    assert decoded.compressed is False
    assert decoded.version == 0x80

    decoded = decode_checksummed_key(WIF_COMPRESSED)
    assert decoded.payload == key
    assert decoded.kind is KeyKind.PRIVATE
    assert decoded.compressed is True

    print("  WIF vectors: PASSED")


@pytest.mark.parametrize("kind,size,compressed", [
    (KeyKind.PUBLIC, 20, False),
    (KeyKind.PRIVATE, 32, False),
    (KeyKind.PRIVATE, 32, True),
])
def test_round_trip_recovers_kind(kind, size, compressed):
    """Decode recovers payload, kind and compression"""
    payload = bytes((7 * i + 3) % 256 for i in range(size))

    decoded = decode_checksummed_key(encode_checksummed(payload, kind, compressed))

    assert decoded.payload == payload
    assert decoded.kind is kind
    assert decoded.compressed is compressed


def test_corrupted_byte_fails_checksum():
    """A single corrupted payload byte is detected"""
    buffer = bytearray(decode_base58(ADDRESS))
    buffer[5] ^= 0x01

    with pytest.raises(ChecksumError) as exc_info:
        decode_checksummed(encode_base58(buffer))
    assert exc_info.value.code == ErrorCode.CHECKSUM_MISMATCH


def test_corrupted_checksum_fails():
    """A corrupted checksum byte is detected on private keys too"""
    buffer = bytearray(decode_base58(WIF_COMPRESSED))
    buffer[-1] ^= 0xFF

    with pytest.raises(ChecksumError):
        decode_checksummed(encode_base58(buffer))


def test_wrong_version_byte():
    """Valid checksum but version byte not matching the layout"""
    # 25-byte buffer (public layout) carrying the private version byte
    text = _encode_raw(b"\x80" + bytes(20))
    with pytest.raises(VersionError) as exc_info:
        decode_checksummed(text)
    assert exc_info.value.version == 0x80
    assert exc_info.value.expected_version == 0x00

    # 37-byte buffer (private layout) carrying the public version byte
    with pytest.raises(VersionError):
        decode_checksummed(_encode_raw(b"\x00" + bytes(32)))


def test_expected_kind_mismatch():
    """Requesting a kind that does not match the string fails"""
    with pytest.raises(VersionError):
        decode_checksummed(WIF, KeyKind.PUBLIC)
    with pytest.raises(VersionError):
        decode_checksummed(ADDRESS, "private")

    assert decode_checksummed(ADDRESS, "public") == hex_to_bytes(PUBLIC_KEY_HASH_HEX)


def test_invalid_compression_flag():
    """38-byte buffer must carry the 0x01 flag"""
    text = _encode_raw(b"\x80" + bytes(range(32)) + b"\x02")

    with pytest.raises(FormatError) as exc_info:
        decode_checksummed(text)
    assert exc_info.value.code == ErrorCode.FORMAT_INVALID_FLAG


def test_invalid_length():
    """Buffers of unknown length are rejected before anything else"""
    with pytest.raises(FormatError) as exc_info:
        decode_checksummed(_encode_raw(b"\x00" + bytes(10)))
    assert exc_info.value.code == ErrorCode.FORMAT_INVALID_LENGTH

    with pytest.raises(FormatError):
        decode_checksummed("")


def test_encode_rejects_bad_input():
    """Payload size must match the kind; public keys have no compression flag"""
    with pytest.raises(FormatError):
        encode_checksummed(bytes(32), KeyKind.PUBLIC)
    with pytest.raises(FormatError):
        encode_checksummed(bytes(20), KeyKind.PRIVATE)
    with pytest.raises(FormatError):
        encode_checksummed(bytes(20), KeyKind.PUBLIC, compressed=True)
    with pytest.raises(ValueError):
        encode_checksummed(bytes(20), "secret")


def test_is_valid_address():
    """Non-raising address check"""
    assert is_valid_address(ADDRESS)
    assert not is_valid_address(WIF)
    assert not is_valid_address("not-base58-0OIl")
    assert not is_valid_address(ADDRESS[:-1] + ("2" if ADDRESS[-1] != "2" else "3"))


def test_non_base58_input():
    """Characters outside the alphabet surface as FormatError"""
    with pytest.raises(FormatError) as exc_info:
        decode_checksummed("0" * 34)
    assert exc_info.value.code == ErrorCode.FORMAT_INVALID_BASE58


@pytest.mark.parametrize("suffix", [" ", "\n", " \n", "\t"])
def test_trailing_whitespace_rejected(suffix):
    """Padded addresses and keys are not silently accepted"""
    with pytest.raises(FormatError) as exc_info:
        decode_checksummed(ADDRESS + suffix)
    assert exc_info.value.code == ErrorCode.FORMAT_INVALID_BASE58

    with pytest.raises(FormatError):
        decode_checksummed_key(WIF + suffix)

    assert not is_valid_address(ADDRESS + suffix)
