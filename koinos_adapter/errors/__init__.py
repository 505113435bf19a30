"""
Error definitions for Koinos Adapter
"""

from .exceptions import (
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
