"""
Provider for Koinos RPC nodes

Provides:
- Node pool failover: a failing node is replaced by the next one in the
  pool, indefinitely unless the on_error hook aborts
- Chain queries (nonce, resource credits, head info, blocks, transactions)
- Transaction submission with a handle to wait for block inclusion
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Union, runtime_checkable

from .correlation import CorrelationContext, log_with_correlation
from .transport import JsonRpcTransport
from ..errors import ConfigurationError, TransactionCancelled, TransactionError, TransactionTimeoutError, TransportError
from ..config import config as global_config

logger = logging.getLogger(__name__)

# (error, node that failed, node used for the next attempt) -> abort
OnErrorHook = Callable[[Exception, str, str], bool]


def never_abort(error: Exception, current_node: str, new_node: str) -> bool:
    """Default failure hook: keep rotating"""
    return False


@runtime_checkable
class Transport(Protocol):
    """Anything able to perform a single JSON-RPC call against one node"""

    def call(self, endpoint: str, method: str, params: Any) -> Any:
        ...


@dataclass
class ProviderConfig:
    """
    Provider runtime configuration

    Unset values are taken from the global config (koinos_adapter.config).

    Usage:
        # Give up after the whole pool failed once
        config = ProviderConfig(max_rotations=2)
        provider = Provider(["http://a:8080", "http://b:8080"], config=config)
    """
    timeout_seconds: float = None
    max_rotations: Optional[int] = None
    rotation_delay_seconds: float = None
    confirmation_window_seconds: float = None
    poll_interval_seconds: float = None
    poll_attempts: int = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        if self.timeout_seconds is None:
            self.timeout_seconds = global_config.rpc.timeout_seconds
        if self.max_rotations is None:
            self.max_rotations = global_config.rpc.max_rotations
        if self.rotation_delay_seconds is None:
            self.rotation_delay_seconds = global_config.rpc.rotation_delay_seconds
        if self.confirmation_window_seconds is None:
            self.confirmation_window_seconds = global_config.tx.confirmation_window_seconds
        if self.poll_interval_seconds is None:
            self.poll_interval_seconds = global_config.tx.poll_interval_seconds
        if self.poll_attempts is None:
            self.poll_attempts = global_config.tx.poll_attempts


class TransactionHandle:
    """
    Handle returned by Provider.send_transaction

    Tracks one submitted transaction until it is found in a block.

    Usage:
        handle = provider.send_transaction(signed_tx)
        block_id = handle.wait()
    """

    PENDING = "pending"
    MINED = "mined"
    TIMEOUT = "timeout"

    def __init__(
        self,
        provider: "Provider",
        transaction_id: str,
        deadline: float,
        poll_interval_seconds: float,
        poll_attempts: int,
    ):
        self._provider = provider
        self._transaction_id = transaction_id
        self._deadline = deadline
        self._poll_interval = poll_interval_seconds
        self._poll_attempts = poll_attempts
        self._block_id: Optional[str] = None
        self._status = self.PENDING

    @property
    def id(self) -> str:
        """Transaction ID"""
        return self._transaction_id

    @property
    def block_id(self) -> Optional[str]:
        """Containing block ID once mined"""
        return self._block_id

    @property
    def status(self) -> str:
        return self._status

    def _sleep(self, seconds: float, cancel_event: Optional[threading.Event]):
        if seconds <= 0:
            if cancel_event is not None and cancel_event.is_set():
                raise TransactionCancelled(self._transaction_id)
            return
        if cancel_event is None:
            time.sleep(seconds)
        elif cancel_event.wait(seconds):
            raise TransactionCancelled(self._transaction_id)

    def _containing_block(self) -> Optional[str]:
        result = self._provider.get_transactions_by_id([self._transaction_id])
        transactions = (result or {}).get("transactions")
        if not transactions or not transactions[0]:
            return None
        blocks = transactions[0].get("containing_blocks")
        if not blocks:
            return None
        return blocks[0]

    def wait(self, cancel_event: Optional[threading.Event] = None) -> str:
        """
        Wait until the transaction is included in a block

        Sleeps until one poll interval before the confirmation deadline
        (the node needs time to index the transaction), then polls
        get_transactions_by_id once per interval, up to poll_attempts times.

        Args:
            cancel_event: Optional event; setting it stops the wait

        Returns:
            ID of the first block containing the transaction

        Raises:
            TransactionTimeoutError: Not found after all poll attempts
            TransactionCancelled: cancel_event was set
            TransportError / RemoteError: From the underlying queries
        """
        if self._block_id is not None:
            return self._block_id

        started = time.monotonic()
        with CorrelationContext("wait"):
            log_with_correlation(
                logging.INFO,
                f"Waiting for transaction {self._transaction_id}",
                "wait",
                log=logger,
                transaction_id=self._transaction_id,
            )
            self._sleep(self._deadline - started - self._poll_interval, cancel_event)

            for attempt in range(self._poll_attempts):
                self._sleep(self._poll_interval, cancel_event)
                block_id = self._containing_block()
                if block_id:
                    self._block_id = block_id
                    self._status = self.MINED
                    log_with_correlation(
                        logging.INFO,
                        f"Transaction {self._transaction_id} mined in block {block_id}",
                        "wait",
                        attempt + 1,
                        self._poll_attempts,
                        log=logger,
                        transaction_id=self._transaction_id,
                        block_id=block_id,
                    )
                    return block_id
                log_with_correlation(
                    logging.DEBUG,
                    f"Transaction {self._transaction_id} not in a block yet",
                    "wait",
                    attempt + 1,
                    self._poll_attempts,
                    log=logger,
                    transaction_id=self._transaction_id,
                )

            self._status = self.TIMEOUT
            # Elapsed since submission, not since wait() was called
            elapsed = time.monotonic() - (self._deadline - self._provider.config.confirmation_window_seconds)
            error = TransactionTimeoutError(self._transaction_id, elapsed, self._poll_attempts)
            log_with_correlation(logging.WARNING, error.message, "wait", log=logger)
            raise error

    def __repr__(self) -> str:
        return f"TransactionHandle(id={self._transaction_id!r}, status={self._status})"


class Provider:
    """
    Client for a pool of Koinos RPC nodes

    Calls go to the current node; when it cannot be reached the next node
    in the pool takes over and the call is retried there. Error responses
    from a node are raised immediately.

    Calls on one instance are serialized, so the node cursor moves exactly
    once per failure even when the provider is shared between threads.

    Usage:
        provider = Provider([
            "http://45.56.104.152:8080",
            "http://159.203.119.0:8080",
        ])

        def on_error(error, node, new_node):
            print(f"Error from node {node}: {error}, switching to {new_node}")
            return False  # keep going

        provider.on_error = on_error
        nonce = provider.get_nonce("1Krs7v1rtpgRyfwEZncuKMQQnY5JhqXVSx")
    """

    def __init__(
        self,
        rpc_nodes: Union[str, List[str]],
        on_error: Optional[OnErrorHook] = None,
        config: Optional[ProviderConfig] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Args:
            rpc_nodes: Node URL or list of URLs to switch between
            on_error: Hook called on each node failure, returns True to abort
            config: Provider configuration options
            transport: Transport override (defaults to JsonRpcTransport)
        """
        self._nodes = [rpc_nodes] if isinstance(rpc_nodes, str) else list(rpc_nodes)
        if not self._nodes:
            raise ConfigurationError.missing("RPC node")

        self._config = config or ProviderConfig()
        if self._config.max_rotations is not None and self._config.max_rotations < 0:
            raise ConfigurationError.invalid("max_rotations", "must be >= 0")

        self._transport = transport or JsonRpcTransport(timeout_seconds=self._config.timeout_seconds)
        self._current_node_id = 0
        self._on_error: OnErrorHook = on_error or never_abort
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, **kwargs) -> "Provider":
        """Create a provider for the nodes listed in KOINOS_RPC_URLS"""
        if not global_config.rpc.urls:
            raise ConfigurationError.missing("KOINOS_RPC_URLS")
        return cls(global_config.rpc.urls, **kwargs)

    @property
    def rpc_nodes(self) -> List[str]:
        return list(self._nodes)

    @property
    def current_node_id(self) -> int:
        """Index of the current node in rpc_nodes"""
        return self._current_node_id

    @property
    def current_node(self) -> str:
        return self._nodes[self._current_node_id]

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def on_error(self) -> OnErrorHook:
        return self._on_error

    @on_error.setter
    def on_error(self, hook: Optional[OnErrorHook]):
        self._on_error = hook or never_abort

    def _rotate(self):
        """Advance the cursor, returning (previous node, new node)"""
        current_node = self._nodes[self._current_node_id]
        self._current_node_id = (self._current_node_id + 1) % len(self._nodes)
        return current_node, self._nodes[self._current_node_id]

    def call(self, method: str, params: Any = None) -> Any:
        """
        Make a JSON-RPC call, switching node on transport failures

        Args:
            method: RPC method name
            params: RPC parameters

        Returns:
            RPC result

        Raises:
            TransportError: The on_error hook aborted, or max_rotations was exceeded
            RemoteError: The node returned an error response
        """
        if params is None:
            params = {}
        max_rotations = self._config.max_rotations

        with self._lock, CorrelationContext("call"):
            failures = 0
            while True:
                node = self._nodes[self._current_node_id]
                try:
                    result = self._transport.call(node, method, params)
                except TransportError as error:
                    failures += 1
                    current_node, new_node = self._rotate()
                    log_with_correlation(
                        logging.WARNING,
                        f"Node {current_node} failed: {error.message}. Switching to {new_node}",
                        method,
                        failures,
                        max_rotations + 1 if max_rotations is not None else None,
                        log=logger,
                        endpoint=current_node,
                        new_endpoint=new_node,
                        error_code=error.code.value,
                    )
                    if self._on_error(error, current_node, new_node):
                        logger.info(f"Call {method} aborted by on_error hook")
                        raise
                    if max_rotations is not None and failures > max_rotations:
                        logger.error(f"Call {method} failed on {failures} attempts, giving up")
                        raise
                    if self._config.rotation_delay_seconds > 0:
                        time.sleep(self._config.rotation_delay_seconds)
                    continue

                if failures:
                    logger.info(f"Call {method} succeeded on {node} after {failures} failures")
                return result

    def get_nonce(self, account: str) -> int:
        """
        Number of transactions sent by an account, used when
        creating new transactions

        Args:
            account: Account address

        Returns:
            Nonce (0 for accounts without transactions)
        """
        result = self.call("chain.get_account_nonce", {"account": account}) or {}
        nonce = result.get("nonce")
        if not nonce:
            return 0
        return int(nonce)

    def get_account_rc(self, account: str) -> str:
        """Resource credits of an account (string encoded integer)"""
        result = self.call("chain.get_account_rc", {"account": account}) or {}
        return result.get("rc") or "0"

    def get_transactions_by_id(self, transaction_ids: List[str]) -> Dict[str, Any]:
        """
        Get transactions by ID and the IDs of the blocks containing them

        Returns:
            {"transactions": [{"transaction": ..., "containing_blocks": [...]}]}
        """
        return self.call(
            "transaction_store.get_transactions_by_id",
            {"transaction_ids": list(transaction_ids)},
        )

    def get_blocks_by_id(self, block_ids: List[str]) -> Dict[str, Any]:
        """
        Get blocks by ID

        Returns:
            {"block_items": [{"block_id", "block_height", "block"}]}
        """
        return self.call(
            "block_store.get_blocks_by_id",
            {
                "block_id": list(block_ids),
                "return_block": True,
                "return_receipt": False,
            },
        )

    def get_head_info(self) -> Dict[str, Any]:
        """
        Info about the head block

        Returns:
            {"head_topology": {"id", "height", "previous"}, "last_irreversible_height"}
        """
        return self.call("chain.get_head_info", {})

    def get_blocks(
        self,
        height: int,
        num_blocks: int = 1,
        id_ref: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get consecutive blocks starting at a height

        Args:
            height: Starting block height
            num_blocks: Number of blocks to fetch
            id_ref: ID of a block at a greater height used as search
                reference. Defaults to the head block.

        Returns:
            List of {"block_id", "block_height", "block", "block_receipt"}
        """
        with self._lock, CorrelationContext("call"):
            block_id_ref = id_ref
            if not block_id_ref:
                head = self.get_head_info()
                block_id_ref = head["head_topology"]["id"]

            result = self.call(
                "block_store.get_blocks_by_height",
                {
                    "head_block_id": block_id_ref,
                    "ancestor_start_height": height,
                    "num_blocks": num_blocks,
                    "return_block": True,
                    "return_receipt": False,
                },
            ) or {}
        return result.get("block_items", [])

    def get_block(self, height: int) -> Optional[Dict[str, Any]]:
        """Get a block by its height, None if the node has no such block"""
        blocks = self.get_blocks(height, 1)
        return blocks[0] if blocks else None

    def send_transaction(self, transaction: Dict[str, Any]) -> TransactionHandle:
        """
        Submit a signed transaction

        Args:
            transaction: Signed transaction (JSON form, must carry "id")

        Returns:
            TransactionHandle whose wait() blocks until the transaction
            is included in a block
        """
        transaction_id = transaction.get("id") if isinstance(transaction, dict) else None
        if not transaction_id:
            raise TransactionError.missing_id()

        self.call("chain.submit_transaction", {"transaction": transaction})
        deadline = time.monotonic() + self._config.confirmation_window_seconds
        logger.info(f"Transaction submitted: {transaction_id}")

        return TransactionHandle(
            self,
            transaction_id,
            deadline,
            poll_interval_seconds=self._config.poll_interval_seconds,
            poll_attempts=self._config.poll_attempts,
        )

    def read_contract(self, operation: Dict[str, Any]) -> Dict[str, Any]:
        """
        Read a contract without submitting a transaction

        Args:
            operation: Encoded call contract operation
                ({"contract_id", "entry_point", "args"})

        Returns:
            {"result": <encoded result>, "logs": ...}
        """
        return self.call("chain.read_contract", operation)

    def close(self):
        """Close the underlying transport"""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
