"""
Infrastructure layer for Koinos Adapter

Provides:
- JsonRpcTransport: single JSON-RPC call over HTTP (httpx)
- Provider: node pool failover and chain queries
- TransactionHandle: wait for a submitted transaction to be mined
- CorrelationContext: correlation IDs for log tracing
"""

from .transport import JsonRpcTransport, build_request, parse_response
from .provider import (
    Provider,
    ProviderConfig,
    TransactionHandle,
    Transport,
    OnErrorHook,
    never_abort,
)
from .correlation import (
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

__all__ = [
    "JsonRpcTransport",
    "build_request",
    "parse_response",
    "Provider",
    "ProviderConfig",
    "TransactionHandle",
    "Transport",
    "OnErrorHook",
    "never_abort",
    "CorrelationContext",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]
