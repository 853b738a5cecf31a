"""
Arbitrum client - JSON-RPC workflows for the Arbitrum Sepolia testnet

Provides:
- Native balance queries
- Gas price discovery and fee estimation
- Native ETH transfers (validate, sign, broadcast, await receipt)
- Read-only contract calls (ERC20 name / symbol)
"""

__version__ = "0.1.0"

from .client import ArbClient
from .types import (
    UINT256_MAX,
    OperationClass,
    FeeEstimate,
    UnsignedTransaction,
    SignedTransaction,
    Receipt,
    TransferStage,
    TransferStatus,
    TransferEvent,
    TransferResult,
    parse_address,
    parse_amount,
    format_ether,
    format_gwei,
)
from .errors import (
    ErrorCode,
    ArbClientError,
    NetworkError,
    RequestTimeout,
    InvalidAddressError,
    InsufficientFundsError,
    TransactionError,
    SignerError,
    InvalidAbiError,
    DecodingError,
    ConfigurationError,
)
from .infra import RpcClient, EVMSigner, NonceManager, connect, build_transaction
from .modules import (
    WalletModule,
    FeeEstimator,
    TransferOrchestrator,
    ContractModule,
    TokenInfo,
    ERC20_METADATA_ABI,
    estimate_fee,
    validate_sufficient,
    call_view_method,
)

__all__ = [
    "__version__",
    # Client
    "ArbClient",
    # Types
    "UINT256_MAX",
    "OperationClass",
    "FeeEstimate",
    "UnsignedTransaction",
    "SignedTransaction",
    "Receipt",
    "TransferStage",
    "TransferStatus",
    "TransferEvent",
    "TransferResult",
    "parse_address",
    "parse_amount",
    "format_ether",
    "format_gwei",
    # Errors
    "ErrorCode",
    "ArbClientError",
    "NetworkError",
    "RequestTimeout",
    "InvalidAddressError",
    "InsufficientFundsError",
    "TransactionError",
    "SignerError",
    "InvalidAbiError",
    "DecodingError",
    "ConfigurationError",
    # Infrastructure
    "RpcClient",
    "EVMSigner",
    "NonceManager",
    "connect",
    "build_transaction",
    # Modules
    "WalletModule",
    "FeeEstimator",
    "TransferOrchestrator",
    "ContractModule",
    "TokenInfo",
    "ERC20_METADATA_ABI",
    "estimate_fee",
    "validate_sufficient",
    "call_view_method",
]
