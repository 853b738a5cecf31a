"""
Type definitions for the Arbitrum client
"""

from .common import (
    UINT256_MAX,
    OperationClass,
    parse_address,
    is_valid_address,
    ensure_amount,
    ensure_positive_int,
)
from .units import ETHER_DECIMALS, parse_amount, format_ether, format_gwei
from .transaction import FeeEstimate, UnsignedTransaction, SignedTransaction, Receipt
from .result import TransferStage, TransferStatus, TransferEvent, TransferResult

__all__ = [
    # Common types
    "UINT256_MAX",
    "OperationClass",
    "parse_address",
    "is_valid_address",
    "ensure_amount",
    "ensure_positive_int",
    # Units
    "ETHER_DECIMALS",
    "parse_amount",
    "format_ether",
    "format_gwei",
    # Transactions
    "FeeEstimate",
    "UnsignedTransaction",
    "SignedTransaction",
    "Receipt",
    # Results
    "TransferStage",
    "TransferStatus",
    "TransferEvent",
    "TransferResult",
]
