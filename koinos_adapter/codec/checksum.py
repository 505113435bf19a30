"""
Base58Check encoding for public key hashes, addresses and private keys

Buffer layouts (see https://en.bitcoin.it/wiki/Base58Check_encoding and
https://en.bitcoin.it/wiki/Wallet_import_format):

    public              [0x00][20-byte hash][4-byte checksum]           25 bytes
    private             [0x80][32-byte key][4-byte checksum]            37 bytes
    private compressed  [0x80][32-byte key][0x01][4-byte checksum]      38 bytes

checksum = first 4 bytes of SHA256(SHA256(version + payload + flag)).
For private keys this encoding is also known as wallet import format (WIF).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from .encoding import BytesLike, decode_base58, encode_base58
from .hashing import double_sha256, hash160
from ..errors import ChecksumError, FormatError, KoinosAdapterError, VersionError

logger = logging.getLogger(__name__)


class KeyKind(Enum):
    """Kind of payload carried by a Base58Check string"""
    PUBLIC = "public"
    PRIVATE = "private"


VERSION_BYTES: Dict[KeyKind, int] = {
    KeyKind.PUBLIC: 0x00,
    KeyKind.PRIVATE: 0x80,
}

PAYLOAD_SIZES: Dict[KeyKind, int] = {
    KeyKind.PUBLIC: 20,
    KeyKind.PRIVATE: 32,
}

COMPRESSED_FLAG = 0x01
CHECKSUM_SIZE = 4

# Buffer length -> (kind, compressed)
_LAYOUTS: Dict[int, Tuple[KeyKind, bool]] = {
    1 + 20 + CHECKSUM_SIZE: (KeyKind.PUBLIC, False),
    1 + 32 + CHECKSUM_SIZE: (KeyKind.PRIVATE, False),
    1 + 32 + 1 + CHECKSUM_SIZE: (KeyKind.PRIVATE, True),
}


@dataclass(frozen=True)
class DecodedKey:
    """
    Result of decoding a Base58Check string

    Attributes:
        payload: 20-byte hash (public) or 32-byte key (private)
        kind: Payload kind recovered from the buffer layout
        compressed: Whether a private key carries the compression flag
    """
    payload: bytes
    kind: KeyKind
    compressed: bool = False

    @property
    def version(self) -> int:
        return VERSION_BYTES[self.kind]


def _coerce_kind(kind: Union[KeyKind, str]) -> KeyKind:
    try:
        return KeyKind(kind)
    except ValueError:
        raise ValueError(f"Unknown key kind: {kind!r}, expected 'public' or 'private'") from None


def checksum(data: bytes) -> bytes:
    """First 4 bytes of the double SHA256 of data"""
    return double_sha256(data)[:CHECKSUM_SIZE]


def encode_checksummed(
    payload: BytesLike,
    kind: Union[KeyKind, str] = KeyKind.PUBLIC,
    compressed: bool = False,
) -> str:
    """
    Encode a public key hash or private key in Base58Check

    Args:
        payload: 20-byte hash (public) or 32-byte key (private)
        kind: KeyKind or "public" / "private"
        compressed: Append the compression flag (private keys only)

    Returns:
        Base58 string

    Raises:
        FormatError: If the payload size does not match the kind, or
            compression is requested for a public payload
    """
    kind = _coerce_kind(kind)
    payload = bytes(payload)

    expected_size = PAYLOAD_SIZES[kind]
    if len(payload) != expected_size:
        raise FormatError.invalid_length(f"{kind.value} payload", len(payload), str(expected_size))
    if compressed and kind is KeyKind.PUBLIC:
        raise FormatError.invalid_flag(COMPRESSED_FLAG)

    body = bytes([VERSION_BYTES[kind]]) + payload
    if compressed:
        body += bytes([COMPRESSED_FLAG])
    return encode_base58(body + checksum(body))


def decode_checksummed_key(
    text: str,
    expected_kind: Optional[Union[KeyKind, str]] = None,
) -> DecodedKey:
    """
    Decode a Base58Check string, verifying layout, checksum and version

    Args:
        text: Base58Check string
        expected_kind: If given, the decoded kind must match it

    Returns:
        DecodedKey with payload, kind and compression flag

    Raises:
        FormatError: Not base58, unknown buffer length or bad compression flag
        ChecksumError: Checksum does not match
        VersionError: Version byte does not match the kind
    """
    buffer = decode_base58(text)

    layout = _LAYOUTS.get(len(buffer))
    if layout is None:
        raise FormatError.invalid_length(
            "checksummed buffer", len(buffer), " or ".join(str(n) for n in sorted(_LAYOUTS))
        )
    kind, compressed = layout

    body, found = buffer[:-CHECKSUM_SIZE], buffer[-CHECKSUM_SIZE:]
    computed = checksum(body)
    if computed != found:
        raise ChecksumError(computed, found)

    version = body[0]
    if version != VERSION_BYTES[kind]:
        raise VersionError(version, VERSION_BYTES[kind], kind.value)

    if expected_kind is not None:
        expected_kind = _coerce_kind(expected_kind)
        if expected_kind is not kind:
            raise VersionError(version, VERSION_BYTES[expected_kind], expected_kind.value)

    if compressed and body[-1] != COMPRESSED_FLAG:
        raise FormatError.invalid_flag(body[-1])

    payload = body[1:1 + PAYLOAD_SIZES[kind]]
    return DecodedKey(payload=payload, kind=kind, compressed=compressed)


def decode_checksummed(text: str, kind: Optional[Union[KeyKind, str]] = None) -> bytes:
    """Decode a Base58Check string and return only its payload"""
    return decode_checksummed_key(text, kind).payload


def derive_address(public_key: BytesLike) -> str:
    """
    Compute the address of a public key

    address = encode_checksummed(ripemd160(sha256(public_key)), public)
    """
    return encode_checksummed(hash160(bytes(public_key)), KeyKind.PUBLIC)


def is_valid_address(text: str) -> bool:
    """Check that text decodes as a public Base58Check string"""
    try:
        decode_checksummed_key(text, KeyKind.PUBLIC)
    except KoinosAdapterError as e:
        logger.debug(f"Address {text!r} rejected: {e}")
        return False
    return True
