"""
Result type definitions for transfers
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .transaction import FeeEstimate, Receipt


class TransferStage(Enum):
    """Transfer workflow stages, in execution order"""
    START = "start"
    CREDENTIAL_LOADED = "credential_loaded"
    RECIPIENT_VALIDATED = "recipient_validated"
    BALANCE_FETCHED = "balance_fetched"
    AMOUNT_PARSED = "amount_parsed"
    GAS_PRICE_FETCHED = "gas_price_fetched"
    FEE_COMPUTED = "fee_computed"
    FUNDS_VALIDATED = "funds_validated"
    CHAIN_ID_FETCHED = "chain_id_fetched"
    NONCE_ASSIGNED = "nonce_assigned"
    TRANSACTION_BUILT = "transaction_built"
    SIGNED = "signed"
    BROADCAST = "broadcast"
    AWAITING_RECEIPT = "awaiting_receipt"
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TransferStage.CONFIRMED, TransferStage.UNCONFIRMED, TransferStage.FAILED)


class TransferStatus(Enum):
    """Terminal transfer outcome"""
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class TransferEvent:
    """
    One state transition of a transfer attempt

    Attributes:
        stage: Stage just entered
        details: Values produced by the stage (addresses, amounts, hash...)
    """
    stage: TransferStage
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TransferResult:
    """
    Transfer attempt result

    Attributes:
        status: Terminal outcome
        stage: Last stage reached before the outcome (where a failure happened)
        tx_hash: Transaction hash, set once broadcast succeeded
        receipt: Receipt when confirmed
        error: Typed error for FAILED; the polling error (if any) for UNCONFIRMED
        sender: Sender address
        recipient: Recipient address
        amount: Transfer amount in wei
        fee: Fee estimate used for the balance check
    """
    status: TransferStatus
    stage: TransferStage
    tx_hash: Optional[str] = None
    receipt: Optional[Receipt] = None
    error: Optional[Exception] = None
    sender: Optional[str] = None
    recipient: Optional[str] = None
    amount: Optional[int] = None
    fee: Optional[FeeEstimate] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == TransferStatus.CONFIRMED

    @property
    def is_unconfirmed(self) -> bool:
        return self.status == TransferStatus.UNCONFIRMED

    @property
    def is_failed(self) -> bool:
        return self.status == TransferStatus.FAILED

    @property
    def was_broadcast(self) -> bool:
        return self.tx_hash is not None

    @classmethod
    def confirmed(cls, tx_hash: str, receipt: Receipt, **kwargs) -> "TransferResult":
        """Receipt observed"""
        return cls(
            status=TransferStatus.CONFIRMED,
            stage=TransferStage.AWAITING_RECEIPT,
            tx_hash=tx_hash,
            receipt=receipt,
            **kwargs
        )

    @classmethod
    def unconfirmed(cls, tx_hash: str, error: Optional[Exception] = None, **kwargs) -> "TransferResult":
        """Broadcast succeeded but no receipt was observed (may still be mined)"""
        return cls(
            status=TransferStatus.UNCONFIRMED,
            stage=TransferStage.AWAITING_RECEIPT,
            tx_hash=tx_hash,
            error=error,
            **kwargs
        )

    @classmethod
    def failed(cls, stage: TransferStage, error: Exception, **kwargs) -> "TransferResult":
        """Attempt aborted at `stage`; nothing was broadcast"""
        return cls(
            status=TransferStatus.FAILED,
            stage=stage,
            error=error,
            **kwargs
        )

    def __str__(self) -> str:
        if self.is_failed:
            return f"TransferResult(failed at {self.stage.value}, error={self.error})"
        return f"TransferResult({self.status.value}, {self.tx_hash})"
