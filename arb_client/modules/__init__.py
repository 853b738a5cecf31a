"""
Functional modules for ArbClient

Provides high-level operations:
- WalletModule: Native balance queries
- FeeEstimator: Gas price and fee estimation
- TransferOrchestrator: Native-asset transfer workflow
- ContractModule: Read-only contract calls
"""

from .wallet import WalletModule
from .fees import FeeEstimator, compute_fee, estimate_fee
from .validation import validate_sufficient
from .transfer import TransferOrchestrator
from .contract import ContractModule, TokenInfo, ERC20_METADATA_ABI, call_view_method

__all__ = [
    # Core modules
    "WalletModule",
    "FeeEstimator",
    "TransferOrchestrator",
    "ContractModule",
    # Functions
    "compute_fee",
    "estimate_fee",
    "validate_sufficient",
    "call_view_method",
    # Contract helpers
    "TokenInfo",
    "ERC20_METADATA_ABI",
]
