"""
RPC Client for Arbitrum (and other EVM JSON-RPC nodes)

Thin adapter over web3.py that:
- Exposes only the calls the client workflows need
- Translates transport and node failures into NetworkError / RequestTimeout
- Returns plain Python values (int, bytes, str, Receipt)

No retries happen here: every method performs exactly one request (or one
bounded receipt wait) and lets the caller decide what to do on failure.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from requests import exceptions as requests_exceptions
from web3 import Web3, HTTPProvider
from web3.exceptions import (
    TimeExhausted,
    TransactionNotFound,
    Web3Exception,
    Web3RPCError,
)

from ..config import config as global_config
from ..errors import (
    ArbClientError,
    ConfigurationError,
    ErrorCode,
    NetworkError,
    RequestTimeout,
    TransactionError,
)
from ..types import Receipt
from .tracing import classify_error

logger = logging.getLogger(__name__)


@dataclass
class RpcClientConfig:
    """
    RPC client runtime configuration

    Allows per-client overrides while pulling defaults from the global
    config (arb_client.config.RpcConfig).

    Usage:
        # Use all defaults from environment
        client = RpcClient()

        # Override specific settings
        config = RpcClientConfig(timeout_seconds=10)
        client = RpcClient("https://...", config=config)
    """
    url: str = None
    timeout_seconds: float = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        if self.url is None:
            self.url = global_config.rpc.url
        if self.timeout_seconds is None:
            self.timeout_seconds = global_config.rpc.timeout_seconds


def create_web3(rpc_url: str, timeout: float = 30) -> Web3:
    """
    Create Web3 instance for an HTTP endpoint

    Args:
        rpc_url: RPC endpoint URL
        timeout: Request timeout in seconds

    Returns:
        Web3 instance with provider-level retries disabled
    """
    provider = HTTPProvider(
        rpc_url,
        request_kwargs={"timeout": timeout},
        exception_retry_configuration=None,
    )
    return Web3(provider)


def _hash_to_hex(tx_hash) -> str:
    if isinstance(tx_hash, (bytes, bytearray)):
        return "0x" + bytes(tx_hash).hex()
    return str(tx_hash)


class RpcClient:
    """
    JSON-RPC adapter

    Usage:
        rpc = RpcClient("https://sepolia-rollup.arbitrum.io/rpc")

        balance = rpc.get_balance("0x...")
        price = rpc.get_gas_price()
        receipt = rpc.wait_for_receipt(tx_hash, timeout=120)
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        config: Optional[RpcClientConfig] = None,
        web3: Optional[Web3] = None,
    ):
        """
        Initialize RPC client

        Args:
            endpoint: RPC endpoint URL (defaults to config.rpc.url)
            config: RPC configuration options
            web3: Pre-built Web3 instance (tests inject a mock here)
        """
        self._config = config or RpcClientConfig()
        self._endpoint = endpoint or self._config.url
        if not self._endpoint:
            raise ConfigurationError.missing("ARB_RPC_URL")

        self._web3 = web3 if web3 is not None else create_web3(
            self._endpoint, timeout=self._config.timeout_seconds
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def timeout_seconds(self) -> float:
        return self._config.timeout_seconds

    @property
    def web3(self) -> Web3:
        return self._web3

    @contextmanager
    def _translate_errors(self, method: str) -> Iterator[None]:
        """Map web3 / requests exceptions onto the client error taxonomy"""
        try:
            yield
        except ArbClientError:
            raise
        except Web3RPCError as e:
            logger.debug(f"{method}: node error: {e}")
            raise NetworkError.node_error(self._endpoint, e) from e
        except requests_exceptions.Timeout as e:
            logger.debug(f"{method}: timed out after {self.timeout_seconds}s")
            raise RequestTimeout.request(self._endpoint, self.timeout_seconds, e) from e
        except requests_exceptions.ConnectionError as e:
            logger.debug(f"{method}: connection failed: {e}")
            raise NetworkError.connection_failed(self._endpoint, e) from e
        except (Web3Exception, requests_exceptions.RequestException, OSError, ValueError) as e:
            # web3 v6 style node errors: ValueError({"code": ..., "message": ...})
            if isinstance(e, ValueError) and e.args and isinstance(e.args[0], dict):
                raise NetworkError.node_error(self._endpoint, e) from e

            _, code = classify_error(e)
            logger.debug(f"{method}: {type(e).__name__}: {e} (classified as {code})")
            if code == ErrorCode.RPC_TIMEOUT:
                raise RequestTimeout.request(self._endpoint, self.timeout_seconds, e) from e
            if code == ErrorCode.RPC_RATE_LIMITED:
                raise NetworkError.rate_limited(self._endpoint, e) from e
            if code == ErrorCode.RPC_CONNECTION_FAILED:
                raise NetworkError.connection_failed(self._endpoint, e) from e
            raise NetworkError.invalid_response(self._endpoint, e) from e

    # =========================================================================
    # Account / chain state
    # =========================================================================

    def get_balance(self, address: str) -> int:
        """Native balance in wei at the latest block"""
        with self._translate_errors("eth_getBalance"):
            return int(self._web3.eth.get_balance(address))

    def get_gas_price(self) -> int:
        """Current gas price in wei (point-in-time snapshot)"""
        with self._translate_errors("eth_gasPrice"):
            return int(self._web3.eth.gas_price)

    def get_chain_id(self) -> int:
        with self._translate_errors("eth_chainId"):
            return int(self._web3.eth.chain_id)

    def get_transaction_count(self, address: str, block_identifier: str = "pending") -> int:
        """Next nonce for an address (counts mempool transactions by default)"""
        with self._translate_errors("eth_getTransactionCount"):
            return int(self._web3.eth.get_transaction_count(address, block_identifier))

    def get_block_number(self) -> int:
        with self._translate_errors("eth_blockNumber"):
            return int(self._web3.eth.block_number)

    # =========================================================================
    # Transactions
    # =========================================================================

    def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """
        Broadcast a signed transaction

        Returns:
            Transaction hash (0x hex)

        Raises:
            TransactionError: Node rejected the transaction
            NetworkError / RequestTimeout: Transport failure
        """
        try:
            with self._translate_errors("eth_sendRawTransaction"):
                tx_hash = self._web3.eth.send_raw_transaction(raw_transaction)
        except NetworkError as e:
            if e.code == ErrorCode.RPC_NODE_ERROR:
                raise TransactionError.send_failed(e.original_error) from e
            raise
        return _hash_to_hex(tx_hash)

    def get_receipt(self, tx_hash: str) -> Optional[Receipt]:
        """
        Single receipt lookup

        Returns:
            Receipt, or None if the transaction is not mined (or unknown)
        """
        with self._translate_errors("eth_getTransactionReceipt"):
            try:
                receipt = self._web3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                return None
        if receipt is None:
            return None
        return Receipt.from_web3(receipt)

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120,
        poll_interval: float = 2.0,
    ) -> Optional[Receipt]:
        """
        Poll for a receipt until it appears or `timeout` elapses

        Returns:
            Receipt, or None if nothing was observed within the wait
        """
        with self._translate_errors("eth_getTransactionReceipt"):
            try:
                receipt = self._web3.eth.wait_for_transaction_receipt(
                    tx_hash, timeout=timeout, poll_latency=poll_interval
                )
            except TimeExhausted:
                logger.info(f"No receipt for {tx_hash} within {timeout}s")
                return None
        return Receipt.from_web3(receipt)

    # =========================================================================
    # Contract calls
    # =========================================================================

    def call(self, address: str, data: bytes, block_identifier: str = "latest") -> bytes:
        """eth_call: execute a read-only call and return the raw result"""
        with self._translate_errors("eth_call"):
            result = self._web3.eth.call({"to": address, "data": data}, block_identifier)
        return bytes(result)

    def __repr__(self) -> str:
        return f"RpcClient(endpoint={self._endpoint})"


def connect(rpc_url: Optional[str] = None, timeout: Optional[float] = None) -> RpcClient:
    """
    Create an RpcClient for an endpoint

    Args:
        rpc_url: Endpoint URL (defaults to config.rpc.url)
        timeout: Request timeout override in seconds
    """
    return RpcClient(rpc_url, config=RpcClientConfig(url=rpc_url, timeout_seconds=timeout))
