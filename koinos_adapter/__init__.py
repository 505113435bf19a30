"""
Koinos Adapter - client library for Koinos RPC nodes

Provides:
- Provider: JSON-RPC calls over a pool of nodes with automatic failover
- TransactionHandle: wait for submitted transactions to be mined
- Base58Check encoding of addresses and private keys (WIF)
"""

from .infra import (
    Provider,
    ProviderConfig,
    TransactionHandle,
    JsonRpcTransport,
)
from .codec import (
    KeyKind,
    DecodedKey,
    hex_to_bytes,
    bytes_to_hex,
    encode_base58,
    decode_base58,
    encode_base64,
    decode_base64,
    encode_checksummed,
    decode_checksummed,
    decode_checksummed_key,
    derive_address,
    is_valid_address,
)
from .errors import (
    ErrorCode,
    KoinosAdapterError,
    TransportError,
    RemoteError,
    TransactionError,
    TransactionTimeoutError,
    TransactionCancelled,
    FormatError,
    ChecksumError,
    VersionError,
    ConfigurationError,
)

__all__ = [
    # Provider
    "Provider",
    "ProviderConfig",
    "TransactionHandle",
    "JsonRpcTransport",
    # Codec
    "KeyKind",
    "DecodedKey",
    "hex_to_bytes",
    "bytes_to_hex",
    "encode_base58",
    "decode_base58",
    "encode_base64",
    "decode_base64",
    "encode_checksummed",
    "decode_checksummed",
    "decode_checksummed_key",
    "derive_address",
    "is_valid_address",
    # Errors
    "ErrorCode",
    "KoinosAdapterError",
    "TransportError",
    "RemoteError",
    "TransactionError",
    "TransactionTimeoutError",
    "TransactionCancelled",
    "FormatError",
    "ChecksumError",
    "VersionError",
    "ConfigurationError",
]

__version__ = "1.0.0"
