"""
Test Encoding Module

Tests for koinos_adapter.codec.encoding and hashing helpers.
"""

import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

SAMPLES = [
    b"",
    b"\x00",
    b"\x00\x00\x01",
    b"hello world",
    bytes(range(256)),
]


def test_hex_round_trip():
    """Test hex conversion both ways"""
    from koinos_adapter.codec import hex_to_bytes, bytes_to_hex

    print("Testing hex round trip...")

    assert bytes_to_hex(b"\x00\x0f\xff") == "000fff"
    assert hex_to_bytes("000FfF") == b"\x00\x0f\xff"
    assert hex_to_bytes("") == b""
    for sample in SAMPLES:
        assert hex_to_bytes(bytes_to_hex(sample)) == sample
    assert bytes_to_hex(bytearray(b"\xab")) == "ab"

    print("  hex round trip: PASSED")


@pytest.mark.parametrize("bad", ["abc", "zz", "0x00", "ab cd", "12\n", "012\n", "abcd\n"])
def test_hex_invalid(bad):
    """Odd length, non-hex characters and trailing newlines are rejected"""
    from koinos_adapter.codec import hex_to_bytes
    from koinos_adapter.errors import FormatError, ErrorCode

    with pytest.raises(FormatError) as exc_info:
        hex_to_bytes(bad)
    assert exc_info.value.code == ErrorCode.FORMAT_INVALID_HEX
    assert not exc_info.value.recoverable


def test_base58_known_values():
    """Test base58 against known encodings"""
    from koinos_adapter.codec import encode_base58, decode_base58

    print("Testing base58 known values...")

    assert encode_base58(b"hello world") == "StV1DL6CwTryKyV"
    # Leading zero bytes map to leading '1's
    assert encode_base58(b"\x00\x00\x01") == "112"
    assert encode_base58(b"") == ""
    assert decode_base58("StV1DL6CwTryKyV") == b"hello world"
    assert decode_base58("") == b""

    print("  base58 known values: PASSED")


def test_base58_round_trip():
    """Test base58 round trip"""
    from koinos_adapter.codec import encode_base58, decode_base58

    for sample in SAMPLES:
        assert decode_base58(encode_base58(sample)) == sample


@pytest.mark.parametrize("bad", ["0OIl", "abc0", "hello!", "ñ", "StV1DL6CwTryKyV ", "StV1DL6CwTryKyV\n", " StV1DL6CwTryKyV", "StV1 DL6C"])
def test_base58_invalid(bad):
    """Characters outside the bitcoin alphabet, whitespace included, are rejected"""
    from koinos_adapter.codec import decode_base58
    from koinos_adapter.errors import FormatError, ErrorCode

    with pytest.raises(FormatError) as exc_info:
        decode_base58(bad)
    assert exc_info.value.code == ErrorCode.FORMAT_INVALID_BASE58


def test_base64():
    """Test base64 encoding, decoding and invalid input"""
    from koinos_adapter.codec import encode_base64, decode_base64
    from koinos_adapter.errors import FormatError, ErrorCode

    print("Testing base64...")

    assert encode_base64(b"hello") == "aGVsbG8="
    assert decode_base64("aGVsbG8=") == b"hello"
    assert encode_base64(b"") == ""
    assert decode_base64("") == b""
    for sample in SAMPLES:
        assert decode_base64(encode_base64(sample)) == sample

    for bad in ["aGVs*G8=", "aGVsbG8", "a"]:
        try:
            decode_base64(bad)
            assert False, f"Should reject {bad!r}"
        except FormatError as e:
            assert e.code == ErrorCode.FORMAT_INVALID_BASE64

    print("  base64: PASSED")


def test_hash160():
    """Test sha256 + ripemd160 against the bitcoin wiki vector"""
    from koinos_adapter.codec import hex_to_bytes, sha256, hash160

    print("Testing hash160...")

    public_key = hex_to_bytes(
        "0450863AD64A87AE8A2FE83C1AF1A8403CB53F53E486D8511DAD8A04887E5B235"
        "22CD470243453A299FA9E77237716103ABC11A1DF38855ED6F2EE187E9C582BA6"
    )
    assert sha256(public_key).hex() == "600ffe422b4e00731a59557a5cca46cc183944191006324a447bdb2d98d4b408"
    assert hash160(public_key).hex() == "010966776006953d5567439e5e39f86a0d273bee"

    print("  hash160: PASSED")


def main():
    """Run encoding tests"""
    print("=" * 60)
    print("Encoding Tests")
    print("=" * 60)

    tests = [
        test_hex_round_trip,
        test_base58_known_values,
        test_base58_round_trip,
        test_base64,
        test_hash160,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"  FAILED: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print("=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
