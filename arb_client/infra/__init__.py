"""
Infrastructure layer for the Arbitrum client

Provides:
- RpcClient: web3.py JSON-RPC adapter with typed error translation
- EVMSigner: Local private-key signing
- NonceManager: Per-sender nonce assignment
- build_transaction: Unsigned transaction assembly
- CorrelationContext: Correlation IDs for structured logs
"""

from .rpc import RpcClient, RpcClientConfig, create_web3, connect
from .evm_signer import EVMSigner, NonceManager, get_nonce_manager
from .tx_builder import build_transaction
from .tracing import (
    CorrelationContext,
    classify_error,
    get_correlation_id,
    log_with_correlation,
)

__all__ = [
    "RpcClient",
    "RpcClientConfig",
    "create_web3",
    "connect",
    "EVMSigner",
    "NonceManager",
    "get_nonce_manager",
    "build_transaction",
    "CorrelationContext",
    "classify_error",
    "get_correlation_id",
    "log_with_correlation",
]
