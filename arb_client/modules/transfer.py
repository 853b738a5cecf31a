"""
Transfer Module

Runs one native-asset transfer attempt through a fixed sequence of
stages. Any failure before broadcast aborts with nothing sent. Once the
node accepts the transaction, the result is CONFIRMED or UNCONFIRMED,
never FAILED.
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Union, TYPE_CHECKING

from ..config import TxConfig, config as global_config
from ..errors import ArbClientError, RequestTimeout
from ..infra.evm_signer import EVMSigner, NonceManager, get_nonce_manager
from ..infra.tracing import CorrelationContext, log_with_correlation
from ..infra.tx_builder import build_transaction
from ..types import (
    OperationClass,
    TransferEvent,
    TransferResult,
    TransferStage,
    ensure_amount,
    parse_address,
    parse_amount,
)
from .fees import FeeEstimator
from .validation import validate_sufficient

if TYPE_CHECKING:
    from ..infra.rpc import RpcClient

logger = logging.getLogger(__name__)

EventListener = Callable[[TransferEvent], None]
AmountInput = Union[int, str, Decimal]

_AFTER_BROADCAST = frozenset({
    TransferStage.BROADCAST,
    TransferStage.AWAITING_RECEIPT,
    TransferStage.CONFIRMED,
    TransferStage.UNCONFIRMED,
})


class TransferOrchestrator:
    """
    Transfer workflow

    Stages run in this order; a typed error at any stage before BROADCAST
    ends the attempt as FAILED at the last stage reached:

        START -> CREDENTIAL_LOADED -> RECIPIENT_VALIDATED -> BALANCE_FETCHED
        -> AMOUNT_PARSED -> GAS_PRICE_FETCHED -> FEE_COMPUTED
        -> FUNDS_VALIDATED -> CHAIN_ID_FETCHED -> NONCE_ASSIGNED
        -> TRANSACTION_BUILT -> SIGNED -> BROADCAST -> AWAITING_RECEIPT
        -> CONFIRMED | UNCONFIRMED

    Usage:
        orchestrator = TransferOrchestrator(rpc, EVMSigner.from_env(), on_event=print)
        result = orchestrator.transfer("0x741CD80d41eDE318feD4010E296704a061f4115a", "0.001")
        if result.is_confirmed:
            print(result.receipt.block_number)
    """

    def __init__(
        self,
        rpc: "RpcClient",
        signer: EVMSigner,
        tx_config: Optional[TxConfig] = None,
        nonce_manager: Optional[NonceManager] = None,
        on_event: Optional[EventListener] = None,
        fee_estimator: Optional[FeeEstimator] = None,
    ):
        """
        Args:
            rpc: RPC client
            signer: Sender credential (used for exactly one signature per attempt)
            tx_config: Gas limits and receipt wait policy (defaults to config.tx)
            nonce_manager: Nonce source (defaults to the process-wide manager)
            on_event: Called with a TransferEvent on every stage transition
            fee_estimator: Fee source (defaults to a FeeEstimator on `rpc`)
        """
        self._rpc = rpc
        self._signer = signer
        self._tx_config = tx_config or global_config.tx
        self._nonce_manager = nonce_manager or get_nonce_manager()
        self._on_event = on_event
        self._fees = fee_estimator or FeeEstimator(rpc, tx_config=self._tx_config)

    def _emit(self, stage: TransferStage, **details: Any) -> None:
        log_with_correlation(logging.INFO, stage.value, "transfer", log=logger, stage=stage.value)
        if self._on_event is None:
            return

        event = TransferEvent(stage=stage, details=details)
        if stage not in _AFTER_BROADCAST:
            self._on_event(event)
            return

        # The transaction is already on the wire; the hash must reach the caller
        try:
            self._on_event(event)
        except Exception:
            logger.exception(f"Transfer event listener failed on {stage.value}")

    @staticmethod
    def _to_wei(amount: AmountInput) -> int:
        # ints are wei, text and Decimal are ether
        if isinstance(amount, int) and not isinstance(amount, bool):
            return ensure_amount(amount, "amount")
        return parse_amount(amount, "ether")

    def transfer(
        self,
        to_address: str,
        amount: AmountInput,
        gas_limit: Optional[int] = None,
        receipt_timeout: Optional[float] = None,
    ) -> TransferResult:
        """
        Run one transfer attempt

        Args:
            to_address: Recipient (hex string)
            amount: int wei, or a decimal string / Decimal in ether
            gas_limit: Override of the configured transfer gas limit
            receipt_timeout: Override of the configured receipt wait

        Returns:
            TransferResult. Typed errors are reported in the result, not raised.
        """
        with CorrelationContext("transfer"):
            return self._run(to_address, amount, gas_limit, receipt_timeout)

    def _run(
        self,
        to_address: str,
        amount: AmountInput,
        gas_limit: Optional[int],
        receipt_timeout: Optional[float],
    ) -> TransferResult:
        stage = TransferStage.START
        context: Dict[str, Any] = {}
        sender: Optional[str] = None
        nonce: Optional[int] = None
        self._emit(stage)

        try:
            sender = self._signer.address
            context["sender"] = sender
            stage = TransferStage.CREDENTIAL_LOADED
            self._emit(stage, sender=sender)

            recipient = parse_address(to_address)
            context["recipient"] = recipient
            stage = TransferStage.RECIPIENT_VALIDATED
            self._emit(stage, recipient=recipient)

            balance = self._rpc.get_balance(sender)
            stage = TransferStage.BALANCE_FETCHED
            self._emit(stage, balance=balance)

            value = self._to_wei(amount)
            context["amount"] = value
            stage = TransferStage.AMOUNT_PARSED
            self._emit(stage, amount=value)

            gas_price = self._fees.gas_price()
            stage = TransferStage.GAS_PRICE_FETCHED
            self._emit(stage, gas_price=gas_price)

            limit = gas_limit if gas_limit is not None else OperationClass.TRANSFER.gas_limit(self._tx_config)
            estimate = self._fees.fee_for(gas_price, limit)
            context["fee"] = estimate
            stage = TransferStage.FEE_COMPUTED
            self._emit(stage, gas_limit=estimate.gas_limit, fee=estimate.fee, buffered_fee=estimate.buffered_fee)

            validate_sufficient(balance, value, estimate.buffered_fee)
            stage = TransferStage.FUNDS_VALIDATED
            self._emit(stage, required=value + estimate.buffered_fee, balance=balance)

            chain_id = self._rpc.get_chain_id()
            stage = TransferStage.CHAIN_ID_FETCHED
            self._emit(stage, chain_id=chain_id)

            nonce = self._nonce_manager.get_nonce(self._rpc, sender)
            stage = TransferStage.NONCE_ASSIGNED
            self._emit(stage, nonce=nonce)

            tx = build_transaction(
                recipient=recipient,
                value=value,
                gas_limit=estimate.gas_limit,
                gas_price=estimate.gas_price,
                chain_id=chain_id,
                nonce=nonce,
            )
            stage = TransferStage.TRANSACTION_BUILT
            self._emit(stage, transaction=tx)

            signed = self._signer.sign_transaction(tx)
            stage = TransferStage.SIGNED
            self._emit(stage, tx_hash=signed.tx_hash)

            broadcast_error: Optional[RequestTimeout] = None
            try:
                tx_hash = self._rpc.send_raw_transaction(signed.raw_transaction)
            except RequestTimeout as e:
                # The node may have accepted it: keep the nonce and follow the signed hash
                tx_hash = signed.tx_hash
                broadcast_error = e

        except ArbClientError as e:
            if nonce is not None:
                self._nonce_manager.release_nonce(sender, nonce)
            log_with_correlation(
                logging.WARNING,
                f"Transfer failed after {stage.value}: {e}",
                "transfer",
                log=logger,
                stage=stage.value,
                error_code=e.code.value,
            )
            self._emit(TransferStage.FAILED, failed_stage=stage, error=e)
            return TransferResult.failed(stage, e, **context)

        self._nonce_manager.confirm_nonce(sender, nonce)
        if broadcast_error is not None:
            log_with_correlation(
                logging.WARNING,
                f"Broadcast timed out, outcome unknown for {tx_hash}: {broadcast_error}",
                "transfer",
                log=logger,
                tx_hash=tx_hash,
            )
            self._emit(TransferStage.BROADCAST, tx_hash=tx_hash, error=broadcast_error)
        else:
            self._emit(TransferStage.BROADCAST, tx_hash=tx_hash)

        return self._await_receipt(tx_hash, receipt_timeout, context, broadcast_error)

    def _await_receipt(
        self,
        tx_hash: str,
        receipt_timeout: Optional[float],
        context: Dict[str, Any],
        broadcast_error: Optional[ArbClientError] = None,
    ) -> TransferResult:
        timeout = receipt_timeout if receipt_timeout is not None else self._tx_config.receipt_timeout
        self._emit(TransferStage.AWAITING_RECEIPT, tx_hash=tx_hash, timeout=timeout)

        try:
            receipt = self._rpc.wait_for_receipt(
                tx_hash,
                timeout=timeout,
                poll_interval=self._tx_config.receipt_poll_interval,
            )
        except ArbClientError as e:
            log_with_correlation(
                logging.WARNING,
                f"Receipt polling failed for {tx_hash}: {e}",
                "transfer",
                log=logger,
                tx_hash=tx_hash,
            )
            self._emit(TransferStage.UNCONFIRMED, tx_hash=tx_hash, error=e)
            return TransferResult.unconfirmed(tx_hash, error=e, **context)

        if receipt is None:
            if broadcast_error is not None:
                self._emit(TransferStage.UNCONFIRMED, tx_hash=tx_hash, error=broadcast_error)
            else:
                self._emit(TransferStage.UNCONFIRMED, tx_hash=tx_hash)
            return TransferResult.unconfirmed(tx_hash, error=broadcast_error, **context)

        self._emit(TransferStage.CONFIRMED, tx_hash=tx_hash, receipt=receipt)
        return TransferResult.confirmed(tx_hash, receipt, **context)


def transfer(
    rpc: "RpcClient",
    signer: EVMSigner,
    to_address: str,
    amount: AmountInput,
    gas_limit: Optional[int] = None,
    on_event: Optional[EventListener] = None,
) -> TransferResult:
    """One-shot transfer with default policy"""
    return TransferOrchestrator(rpc, signer, on_event=on_event).transfer(to_address, amount, gas_limit)
