"""
JSON-RPC 2.0 transport over HTTP POST

Performs one request against one node. No retry and no node switching:
that belongs to the Provider, which only needs to tell TransportError
(node unreachable, malformed body) from RemoteError (node said no).
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Any, Dict, Optional

import httpx

from ..errors import RemoteError, TransportError
from ..config import config as global_config

logger = logging.getLogger(__name__)


def build_request(method: str, params: Any) -> Dict[str, Any]:
    """Build a JSON-RPC 2.0 request body"""
    return {
        "id": random.randint(0, 1000),
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
    }


def parse_response(body: Any, endpoint: Optional[str] = None) -> Any:
    """
    Extract the result of a parsed JSON-RPC response body

    Args:
        body: Parsed JSON body
        endpoint: Node URL, for error context

    Returns:
        The ``result`` member (may be None)

    Raises:
        RemoteError: Body carries a non-null ``error``
        TransportError: Body is not an object, or has neither result nor error
    """
    if not isinstance(body, dict):
        raise TransportError.invalid_response(endpoint, f"expected JSON object, got {type(body).__name__}")

    error = body.get("error")
    if error is not None:
        raise RemoteError.from_response(error, endpoint)

    if "result" not in body:
        raise TransportError.invalid_response(endpoint, "response has neither result nor error")

    return body["result"]


class JsonRpcTransport:
    """
    HTTP JSON-RPC transport

    Usage:
        transport = JsonRpcTransport(timeout_seconds=10)
        head = transport.call("http://localhost:8080", "chain.get_head_info", {})
    """

    def __init__(self, timeout_seconds: Optional[float] = None):
        """
        Args:
            timeout_seconds: Per-request timeout (defaults to config.rpc.timeout_seconds)
        """
        self._timeout = timeout_seconds if timeout_seconds is not None else global_config.rpc.timeout_seconds
        self._client: Optional[httpx.Client] = None
        self._client_lock = threading.Lock()

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client (thread-safe)"""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = httpx.Client(
                        timeout=self._timeout,
                        headers={"Content-Type": "application/json"},
                    )
        return self._client

    def call(self, endpoint: str, method: str, params: Any) -> Any:
        """
        Make one JSON-RPC call

        Args:
            endpoint: Node URL
            method: RPC method name
            params: RPC parameters

        Returns:
            RPC result

        Raises:
            TransportError: Node unreachable, timeout, rate limit or malformed body
            RemoteError: Node returned an error response
        """
        client = self._get_client()
        body = build_request(method, params)
        logger.debug(f"RPC {method} -> {endpoint} (id={body['id']})")

        try:
            response = client.post(endpoint, json=body, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise TransportError.timeout(endpoint, self._timeout, e) from e
        except httpx.RequestError as e:
            raise TransportError.connection_failed(endpoint, e) from e

        if response.status_code == 429:
            raise TransportError.rate_limited(endpoint)

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportError.invalid_response(
                endpoint, f"HTTP {response.status_code} body is not valid JSON", e
            ) from e

        return parse_response(payload, endpoint)

    def close(self):
        """Close HTTP client"""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
