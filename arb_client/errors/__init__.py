"""
Error definitions for the Arbitrum client
"""

from .exceptions import (
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

__all__ = [
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
]
