"""JSON-RPC connections to the L1 and L2 networks."""

import itertools
import logging
import os
import time
from typing import Any, Dict, List, Optional

import requests

from .constants import (
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RPC_TIMEOUT,
    SUPPORTED_L1_NETWORKS,
)
from .exceptions import ConfigurationError, RpcError, TransactionTimeoutError

log = logging.getLogger(__name__)


def _to_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    return int(value, 16)


class JsonRpcProvider:
    """A plain Ethereum JSON-RPC endpoint."""

    def __init__(self, rpc_url: str, timeout: int = DEFAULT_RPC_TIMEOUT):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._session = requests.Session()
        self._ids = itertools.count(1)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rpc_url!r})"

    def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name, e.g. "eth_gasPrice"
            params: Positional parameters

        Returns:
            The "result" member of the response

        Raises:
            RpcError: On transport failure, non-200 status or an RPC error object
        """
        log.debug("RPC %s -> %s", method, self.rpc_url)
        try:
            response = self._session.post(
                self.rpc_url,
                json={
                    "jsonrpc": "2.0",
                    "method": method,
                    "params": params or [],
                    "id": next(self._ids),
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RpcError(f"Network error during RPC call {method}: {e}", method=method) from e

        # Check for HTTP errors
        if response.status_code != 200:
            raise RpcError(
                f"RPC request {method} failed with status {response.status_code}",
                method=method,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise RpcError(f"Invalid JSON in response to {method}: {e}", method=method) from e

        # Check for RPC errors
        if "error" in result:
            error = result["error"]
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", error) if isinstance(error, dict) else error
            raise RpcError(f"RPC error in {method}: {message}", method=method, code=code)

        return result.get("result")

    def chain_id(self) -> int:
        return _to_int(self.request("eth_chainId"))

    def block_number(self) -> int:
        return _to_int(self.request("eth_blockNumber"))

    def get_gas_price(self) -> int:
        """Get current gas price in wei."""
        return _to_int(self.request("eth_gasPrice"))

    def get_balance(self, address: str, block: str = "latest") -> int:
        """Get native balance in wei."""
        return _to_int(self.request("eth_getBalance", [address, block]))

    def get_transaction_count(self, address: str, block: str = "pending") -> int:
        return _to_int(self.request("eth_getTransactionCount", [address, block]))

    def estimate_gas(self, transaction: Dict[str, Any]) -> int:
        """
        Estimate gas units for a call object.

        Args:
            transaction: JSON-RPC call object

        Returns:
            Estimated gas units
        """
        return _to_int(self.request("eth_estimateGas", [transaction]))

    def call(self, transaction: Dict[str, Any], block: str = "latest") -> str:
        """Execute a read-only call and return the raw 0x-prefixed result."""
        return self.request("eth_call", [transaction, block])

    def send_raw_transaction(self, raw_transaction: str) -> str:
        """Broadcast a signed transaction and return its hash."""
        return self.request("eth_sendRawTransaction", [raw_transaction])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        return self.request("eth_getTransactionReceipt", [tx_hash])

    def wait_for_transaction_receipt(
        self,
        tx_hash: str,
        timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> Dict[str, Any]:
        """
        Poll until a transaction is included in a block.

        Args:
            tx_hash: Transaction hash
            timeout: Seconds to wait before giving up
            poll_interval: Seconds between receipt queries

        Returns:
            Transaction receipt

        Raises:
            TransactionTimeoutError: If no receipt appears within timeout
        """
        deadline = time.monotonic() + timeout
        while True:
            receipt = self.get_transaction_receipt(tx_hash)
            # Pending transactions may come back with a null blockNumber
            if receipt is not None and receipt.get("blockNumber") is not None:
                return receipt
            if time.monotonic() >= deadline:
                raise TransactionTimeoutError(
                    f"Transaction {tx_hash} not confirmed after {timeout} seconds",
                    method="eth_getTransactionReceipt",
                )
            time.sleep(poll_interval)

    def close(self) -> None:
        """Release the underlying HTTP connections."""
        self._session.close()


class ZkSyncProvider(JsonRpcProvider):
    """A zkSync JSON-RPC endpoint; accepts 0x71 transactions and eip712Meta call objects."""

    pass


def resolve_l1_provider(eth_network: str, timeout: int = DEFAULT_RPC_TIMEOUT) -> JsonRpcProvider:
    """
    Resolve the L1 connection for an Ethereum network identifier.

    Args:
        eth_network: Network name ("mainnet", "goerli", ...) or an RPC URL

    Returns:
        Provider bound to the network's default endpoint (overridable through
        its environment variable) for named networks, otherwise to the URL itself

    Raises:
        ConfigurationError: If the identifier is neither a known network nor a URL
    """
    if eth_network in SUPPORTED_L1_NETWORKS:
        network_config = SUPPORTED_L1_NETWORKS[eth_network]
        rpc_url = os.environ.get(network_config["default_rpc_env"]) or network_config["default_rpc_url"]
        log.debug("Resolved L1 network %s to %s", eth_network, rpc_url)
        return JsonRpcProvider(rpc_url, timeout=timeout)

    _require_url(eth_network, "ethNetwork")
    return JsonRpcProvider(eth_network, timeout=timeout)


def resolve_l2_provider(zksync_network: str, timeout: int = DEFAULT_RPC_TIMEOUT) -> ZkSyncProvider:
    """
    Resolve the L2 connection; zkSync networks are always given as RPC URLs.

    Raises:
        ConfigurationError: If the identifier is not a URL
    """
    _require_url(zksync_network, "zkSyncNetwork")
    return ZkSyncProvider(zksync_network, timeout=timeout)


def _require_url(value: str, setting: str) -> None:
    if not value.startswith(("http://", "https://")):
        supported = ", ".join(SUPPORTED_L1_NETWORKS) if setting == "ethNetwork" else "none"
        raise ConfigurationError(
            f"{setting} '{value}' is not an RPC URL (named networks supported: {supported})"
        )
