"""
Exception definitions for Koinos Adapter
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """
    Unified error codes for adapter operations

    1xxx - RPC errors
    2xxx - Transaction errors
    3xxx - Encoding/decoding errors
    9xxx - Configuration errors
    """
    # RPC errors (recoverable by switching node)
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_INVALID_RESPONSE = "1004"
    # Well-formed error response from a node (not recoverable)
    RPC_REMOTE_ERROR = "1005"

    # Transaction errors
    TX_CONFIRMATION_TIMEOUT = "2001"
    TX_WAIT_CANCELLED = "2002"
    TX_INVALID = "2003"

    # Encoding errors
    FORMAT_INVALID_HEX = "3001"
    FORMAT_INVALID_BASE58 = "3002"
    FORMAT_INVALID_BASE64 = "3003"
    FORMAT_INVALID_LENGTH = "3004"
    CHECKSUM_MISMATCH = "3005"
    VERSION_MISMATCH = "3006"
    FORMAT_INVALID_FLAG = "3007"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class KoinosAdapterError(Exception):
    """
    Base exception for all adapter errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class TransportError(KoinosAdapterError):
    """
    Failure reaching a node - recoverable by rotating to another node

    Raised when:
    - Connection to the node fails
    - Request times out
    - Rate limit is hit
    - Response body is not a well-formed JSON-RPC response
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "TransportError":
        return cls(
            f"Failed to connect to RPC node: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: str, timeout_seconds: float, error: Exception = None) -> "TransportError":
        return cls(
            f"RPC request timed out after {timeout_seconds}s",
            ErrorCode.RPC_TIMEOUT,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(cls, endpoint: str) -> "TransportError":
        return cls(
            "RPC rate limit exceeded",
            ErrorCode.RPC_RATE_LIMITED,
            endpoint=endpoint,
        )

    @classmethod
    def invalid_response(cls, endpoint: str, reason: str, error: Exception = None) -> "TransportError":
        return cls(
            f"Invalid RPC response: {reason}",
            ErrorCode.RPC_INVALID_RESPONSE,
            original_error=error,
            endpoint=endpoint,
        )


class RemoteError(KoinosAdapterError):
    """
    Error response returned by a node - not recoverable

    The node was reached and rejected the request (invalid transaction,
    unknown method, bad parameters). Switching node will not help.
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        rpc_code: Optional[int] = None,
        rpc_data: Any = None,
    ):
        super().__init__(
            message,
            ErrorCode.RPC_REMOTE_ERROR,
            recoverable=False,
            details={
                "endpoint": endpoint,
                "rpc_error_code": rpc_code,
                "rpc_error_data": rpc_data,
            },
        )
        self.endpoint = endpoint
        self.rpc_code = rpc_code
        self.rpc_data = rpc_data

    @classmethod
    def from_response(cls, error: Any, endpoint: Optional[str] = None) -> "RemoteError":
        """Build from the ``error`` member of a JSON-RPC response"""
        if isinstance(error, dict):
            return cls(
                error.get("message") or str(error),
                endpoint=endpoint,
                rpc_code=error.get("code"),
                rpc_data=error.get("data"),
            )
        return cls(str(error), endpoint=endpoint)


class TransactionError(KoinosAdapterError):
    """
    Transaction submission and confirmation errors

    Raised when:
    - Transaction cannot be submitted (missing id)
    - Transaction is not observed in a block in time
    - Waiting for confirmation is cancelled
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_INVALID,
        transaction_id: Optional[str] = None,
        recoverable: bool = False,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            details={"transaction_id": transaction_id},
        )
        self.transaction_id = transaction_id

    @classmethod
    def missing_id(cls) -> "TransactionError":
        return cls("Transaction has no id", ErrorCode.TX_INVALID)


class TransactionTimeoutError(TransactionError):
    """
    Submitted transaction was not found in any block within the poll window

    Recoverable: the caller may re-poll or resubmit.
    """

    def __init__(self, transaction_id: str, elapsed_seconds: float, attempts: int):
        super().__init__(
            f"Transaction {transaction_id} not mined after {elapsed_seconds:.0f} seconds ({attempts} polls)",
            ErrorCode.TX_CONFIRMATION_TIMEOUT,
            transaction_id=transaction_id,
            recoverable=True,
        )
        self.elapsed_seconds = elapsed_seconds
        self.attempts = attempts


class TransactionCancelled(TransactionError):
    """Waiting for a transaction was cancelled by the caller"""

    def __init__(self, transaction_id: str):
        super().__init__(
            f"Wait for transaction {transaction_id} cancelled",
            ErrorCode.TX_WAIT_CANCELLED,
            transaction_id=transaction_id,
        )


class FormatError(KoinosAdapterError):
    """
    Malformed hex/Base58/Base64 input or buffer layout - not recoverable
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, code, recoverable=False, original_error=original_error)

    @classmethod
    def invalid_hex(cls, reason: str) -> "FormatError":
        return cls(f"Invalid hex: {reason}", ErrorCode.FORMAT_INVALID_HEX)

    @classmethod
    def invalid_base58(cls, error: Exception = None) -> "FormatError":
        return cls(
            f"Invalid base58 string: {error}" if error else "Invalid base58 string",
            ErrorCode.FORMAT_INVALID_BASE58,
            original_error=error,
        )

    @classmethod
    def invalid_base64(cls, error: Exception = None) -> "FormatError":
        return cls(
            f"Invalid base64 string: {error}" if error else "Invalid base64 string",
            ErrorCode.FORMAT_INVALID_BASE64,
            original_error=error,
        )

    @classmethod
    def invalid_length(cls, what: str, length: int, expected: str) -> "FormatError":
        return cls(
            f"Invalid {what} length {length}, expected {expected}",
            ErrorCode.FORMAT_INVALID_LENGTH,
        )

    @classmethod
    def invalid_flag(cls, flag: int) -> "FormatError":
        return cls(
            f"Invalid compression flag 0x{flag:02x}, expected 0x01",
            ErrorCode.FORMAT_INVALID_FLAG,
        )


class ChecksumError(KoinosAdapterError):
    """Checksum of a Base58Check string does not match its content"""

    def __init__(self, expected: bytes, actual: bytes):
        super().__init__(
            f"Checksum mismatch: computed {expected.hex()}, found {actual.hex()}",
            ErrorCode.CHECKSUM_MISMATCH,
            recoverable=False,
            details={"expected": expected.hex(), "actual": actual.hex()},
        )
        self.expected = expected
        self.actual = actual


class VersionError(KoinosAdapterError):
    """Version byte of a Base58Check string does not match the expected kind"""

    def __init__(self, version: int, expected_version: int, kind: Optional[str] = None):
        message = f"Unexpected version byte 0x{version:02x}, expected 0x{expected_version:02x}"
        if kind:
            message += f" for {kind} key"
        super().__init__(
            message,
            ErrorCode.VERSION_MISMATCH,
            recoverable=False,
            details={"version": version, "expected_version": expected_version, "kind": kind},
        )
        self.version = version
        self.expected_version = expected_version
        self.kind = kind


class ConfigurationError(KoinosAdapterError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
