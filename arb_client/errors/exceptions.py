"""
Exception definitions for the Arbitrum client
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    Unified error codes for client operations

    1xxx - RPC errors
    2xxx - Transaction errors
    3xxx - Address errors
    4xxx - Contract call errors
    6xxx - Signer errors
    9xxx - Configuration errors
    """
    # RPC errors
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_INVALID_RESPONSE = "1004"
    RPC_NODE_ERROR = "1005"

    # Transaction errors
    TX_SEND_FAILED = "2002"
    TX_INSUFFICIENT_FUNDS = "2004"

    # Address errors
    ADDRESS_INVALID = "3001"

    # Contract call errors
    ABI_INVALID = "4001"
    DECODING_FAILED = "4002"

    # Signer errors
    SIGNER_FAILED = "6002"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class ArbClientError(Exception):
    """
    Base exception for all client errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on a later attempt
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class NetworkError(ArbClientError):
    """
    Transport or JSON-RPC failure

    Raised when:
    - Connection to the RPC endpoint fails
    - The node answers with an error object
    - The response cannot be interpreted
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "NetworkError":
        return cls(
            f"Failed to connect to RPC endpoint: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(cls, endpoint: str, error: Exception = None) -> "NetworkError":
        return cls(
            "RPC rate limit exceeded",
            ErrorCode.RPC_RATE_LIMITED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def invalid_response(cls, endpoint: str, error: Exception = None) -> "NetworkError":
        return cls(
            f"Malformed response from RPC endpoint: {error}",
            ErrorCode.RPC_INVALID_RESPONSE,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def node_error(cls, endpoint: str, error: Exception) -> "NetworkError":
        return cls(
            f"RPC node returned an error: {error}",
            ErrorCode.RPC_NODE_ERROR,
            original_error=error,
            endpoint=endpoint,
        )


class RequestTimeout(ArbClientError, TimeoutError):
    """
    No response within the allowed time

    Kept apart from NetworkError so callers can tell "too slow" from
    "broken". Also a builtin TimeoutError.
    """

    def __init__(
        self,
        message: str,
        timeout_seconds: Optional[float] = None,
        endpoint: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            ErrorCode.RPC_TIMEOUT,
            recoverable=True,
            original_error=original_error,
            details={"timeout_seconds": timeout_seconds, "endpoint": endpoint},
        )
        self.timeout_seconds = timeout_seconds
        self.endpoint = endpoint

    @classmethod
    def request(cls, endpoint: str, timeout_seconds: Optional[float], error: Exception = None) -> "RequestTimeout":
        if timeout_seconds is None:
            message = "RPC request timed out"
        else:
            message = f"RPC request timed out after {timeout_seconds}s"
        return cls(message, timeout_seconds=timeout_seconds, endpoint=endpoint, original_error=error)


class InvalidAddressError(ArbClientError):
    """
    Malformed account or contract address

    Raised when:
    - Wrong length or missing 0x prefix
    - Non-hex characters
    - Mixed-case address with a bad EIP-55 checksum
    """

    def __init__(self, address: object, reason: str = "not a valid 20-byte hex address"):
        super().__init__(
            f"Invalid address {address!r}: {reason}",
            ErrorCode.ADDRESS_INVALID,
            recoverable=False,
            details={"address": address, "reason": reason},
        )
        self.address = address
        self.reason = reason


class InsufficientFundsError(ArbClientError):
    """
    Balance does not cover amount plus fee

    The transaction is never built or signed when this is raised.
    """

    def __init__(
        self,
        message: str,
        required: int,
        amount: int,
        fee: int,
        balance: int,
        overflow: bool = False,
    ):
        super().__init__(
            message,
            ErrorCode.TX_INSUFFICIENT_FUNDS,
            recoverable=False,
            details={
                "required": required,
                "amount": amount,
                "fee": fee,
                "balance": balance,
                "shortfall": required - balance,
                "overflow": overflow,
            },
        )
        self.required = required
        self.amount = amount
        self.fee = fee
        self.balance = balance
        self.overflow = overflow

    @property
    def shortfall(self) -> int:
        """Missing amount in wei"""
        return self.required - self.balance

    @classmethod
    def for_transfer(cls, amount: int, fee: int, balance: int, overflow: bool = False) -> "InsufficientFundsError":
        required = amount + fee
        return cls(
            f"Insufficient balance: need {required} wei "
            f"(amount {amount} + fee {fee}), have {balance} wei",
            required=required,
            amount=amount,
            fee=fee,
            balance=balance,
            overflow=overflow,
        )


class TransactionError(ArbClientError):
    """
    The node rejected a signed transaction
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        tx_hash: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            original_error=original_error,
            details={"tx_hash": tx_hash},
        )
        self.tx_hash = tx_hash

    @classmethod
    def send_failed(cls, error: Exception, tx_hash: Optional[str] = None) -> "TransactionError":
        return cls(
            f"Failed to broadcast transaction: {error}",
            ErrorCode.TX_SEND_FAILED,
            tx_hash=tx_hash,
            original_error=error,
        )


class SignerError(ArbClientError):
    """
    Signing primitive failed
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(
            message,
            ErrorCode.SIGNER_FAILED,
            recoverable=False,
            original_error=original_error,
        )

    @classmethod
    def failed(cls, reason: str, error: Exception = None) -> "SignerError":
        return cls(f"Signing failed: {reason}", original_error=error)


class InvalidAbiError(ArbClientError):
    """
    ABI fragment is malformed or does not describe the requested call
    """

    def __init__(self, message: str, method_name: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(
            message,
            ErrorCode.ABI_INVALID,
            recoverable=False,
            original_error=original_error,
            details={"method": method_name},
        )
        self.method_name = method_name


class DecodingError(ArbClientError):
    """
    Contract call returned data that does not match the declared outputs
    """

    def __init__(self, message: str, method_name: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(
            message,
            ErrorCode.DECODING_FAILED,
            recoverable=False,
            original_error=original_error,
            details={"method": method_name},
        )
        self.method_name = method_name


class ConfigurationError(ArbClientError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing (e.g. private key)
    - Configuration or input values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str, hint: Optional[str] = None) -> "ConfigurationError":
        message = f"Missing required configuration: {param}"
        if hint:
            message = f"{message}\n{hint}"
        return cls(message, ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
