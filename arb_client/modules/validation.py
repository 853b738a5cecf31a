"""
Input and balance validation

Pure checks with no I/O: the caller fetches the values, these functions
decide whether the workflow may continue.
"""

import logging

from ..errors import InsufficientFundsError
from ..types import UINT256_MAX, ensure_amount, parse_address, is_valid_address

logger = logging.getLogger(__name__)

__all__ = [
    "validate_sufficient",
    "parse_address",
    "is_valid_address",
]


def validate_sufficient(balance: int, transfer_amount: int, estimated_fee: int) -> None:
    """
    Check that `balance` covers `transfer_amount + estimated_fee`.

    Args:
        balance: Sender balance in wei
        transfer_amount: Value to send in wei
        estimated_fee: Estimated fee in wei

    Raises:
        InsufficientFundsError: With required total, amount, fee, balance and
            shortfall. A total beyond the 256-bit range is reported the same
            way (flagged as overflow) since no balance can cover it.
        ConfigurationError: If any input is negative or not an int
    """
    ensure_amount(balance, "balance")
    ensure_amount(transfer_amount, "amount")
    ensure_amount(estimated_fee, "fee")

    required = transfer_amount + estimated_fee
    overflow = required > UINT256_MAX

    if overflow or balance < required:
        error = InsufficientFundsError.for_transfer(
            transfer_amount, estimated_fee, balance, overflow=overflow
        )
        logger.debug(f"Balance check failed: shortfall={error.shortfall} overflow={overflow}")
        raise error
