"""
Common type definitions: addresses, amount bounds, operation classes
"""

import string
from enum import Enum
from typing import Any

from eth_typing import ChecksumAddress
from web3 import Web3

from ..errors import ConfigurationError, InvalidAddressError


# Largest value an EVM word can hold; every wei amount must fit in it
UINT256_MAX = 2 ** 256 - 1


class OperationClass(Enum):
    """Operation classes with a fixed gas-limit policy"""
    TRANSFER = "transfer"
    CONTRACT_CALL = "contract_call"

    def gas_limit(self, tx_config=None) -> int:
        """Configured gas limit for this class"""
        if tx_config is None:
            from ..config import config
            tx_config = config.tx
        if self == OperationClass.TRANSFER:
            return tx_config.transfer_gas_limit
        return tx_config.contract_gas_limit


def parse_address(value: Any) -> ChecksumAddress:
    """
    Parse a canonical hex address.

    Accepts "0x" + 40 hex characters. Mixed-case input must carry a valid
    EIP-55 checksum; all-lower or all-upper input is accepted as is.

    Args:
        value: Address string

    Returns:
        Checksummed address

    Raises:
        InvalidAddressError: On wrong type, prefix, length, encoding or checksum
    """
    if not isinstance(value, str):
        raise InvalidAddressError(value, f"expected a string, got {type(value).__name__}")
    if not value.startswith(("0x", "0X")):
        raise InvalidAddressError(value, "missing 0x prefix")

    body = value[2:]
    if len(body) != 40:
        raise InvalidAddressError(value, f"expected 40 hex characters, got {len(body)}")
    if any(c not in string.hexdigits for c in body):
        raise InvalidAddressError(value, "contains non-hex characters")

    # Single-case input carries no checksum
    mixed_case = body != body.lower() and body != body.upper()
    if mixed_case and not Web3.is_checksum_address("0x" + body):
        raise InvalidAddressError(value, "checksum mismatch")

    return Web3.to_checksum_address("0x" + body)


def is_valid_address(value: Any) -> bool:
    """Check address format without raising"""
    try:
        parse_address(value)
    except InvalidAddressError:
        return False
    return True


def ensure_amount(value: Any, name: str = "amount") -> int:
    """
    Check that a wei quantity is a non-negative int that fits in 256 bits.

    Raises:
        ConfigurationError: On wrong type, negative value or overflow
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError.invalid(name, f"expected an integer wei amount, got {type(value).__name__}")
    if value < 0:
        raise ConfigurationError.invalid(name, f"must not be negative (got {value})")
    if value > UINT256_MAX:
        raise ConfigurationError.invalid(name, "exceeds the 256-bit range")
    return value


def ensure_positive_int(value: Any, name: str) -> int:
    """Check for a strictly positive int (gas limits, chain ids)"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError.invalid(name, f"expected an integer, got {type(value).__name__}")
    if value <= 0:
        raise ConfigurationError.invalid(name, f"must be positive (got {value})")
    return value
