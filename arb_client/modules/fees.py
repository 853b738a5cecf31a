"""
Fee Estimator

Estimated fee = current gas price x fixed gas limit for the operation
class. The gas price is read fresh on every estimate and never cached.
"""

import logging
from typing import Optional, TYPE_CHECKING

from ..config import TxConfig, config as global_config
from ..errors import ConfigurationError
from ..types import FeeEstimate, OperationClass, ensure_amount, ensure_positive_int

if TYPE_CHECKING:
    from ..infra.rpc import RpcClient

logger = logging.getLogger(__name__)

BPS_DENOMINATOR = 10_000


def compute_fee(gas_price: int, gas_limit: int, buffer_bps: int = 0) -> FeeEstimate:
    """
    Pure fee computation

    Args:
        gas_price: Wei per gas
        gas_limit: Gas limit
        buffer_bps: Safety margin in basis points, rounded up

    Returns:
        FeeEstimate
    """
    ensure_amount(gas_price, "gas_price")
    ensure_positive_int(gas_limit, "gas_limit")
    if isinstance(buffer_bps, bool) or not isinstance(buffer_bps, int) or buffer_bps < 0:
        raise ConfigurationError.invalid("fee_buffer_bps", f"expected a non-negative integer, got {buffer_bps!r}")

    fee = gas_price * gas_limit
    buffer = -(-fee * buffer_bps // BPS_DENOMINATOR)
    return FeeEstimate(
        gas_price=gas_price,
        gas_limit=gas_limit,
        fee=fee,
        buffered_fee=fee + buffer,
    )


class FeeEstimator:
    """
    Gas price discovery and fee estimation

    Usage:
        fees = FeeEstimator(rpc)

        estimate = fees.estimate_fee(21_000)
        print(estimate.fee)

        estimate = fees.estimate_for(OperationClass.CONTRACT_CALL)
    """

    def __init__(
        self,
        rpc: "RpcClient",
        buffer_bps: Optional[int] = None,
        tx_config: Optional[TxConfig] = None,
    ):
        """
        Args:
            rpc: RPC client
            buffer_bps: Fee safety margin (defaults to config.tx.fee_buffer_bps)
            tx_config: Gas-limit policy (defaults to config.tx)
        """
        self._rpc = rpc
        self._tx_config = tx_config or global_config.tx
        self._buffer_bps = self._tx_config.fee_buffer_bps if buffer_bps is None else buffer_bps

    @property
    def buffer_bps(self) -> int:
        return self._buffer_bps

    def gas_price(self) -> int:
        """Current network gas price in wei (one RPC call)"""
        price = self._rpc.get_gas_price()
        logger.debug(f"Gas price: {price} wei")
        return price

    def fee_for(self, gas_price: int, gas_limit: int) -> FeeEstimate:
        """Fee for an already fetched gas price"""
        return compute_fee(gas_price, gas_limit, self._buffer_bps)

    def estimate_fee(self, gas_limit: int) -> FeeEstimate:
        """
        Estimate the fee for a gas limit at the current gas price

        Raises:
            ConfigurationError: gas_limit is not a positive int
            NetworkError / RequestTimeout: gas price fetch failed
        """
        ensure_positive_int(gas_limit, "gas_limit")
        return self.fee_for(self.gas_price(), gas_limit)

    def estimate_for(self, operation: OperationClass, gas_limit: Optional[int] = None) -> FeeEstimate:
        """Estimate using the configured gas limit of an operation class"""
        limit = gas_limit if gas_limit is not None else operation.gas_limit(self._tx_config)
        return self.estimate_fee(limit)


def estimate_fee(rpc: "RpcClient", gas_limit: int, buffer_bps: int = 0) -> FeeEstimate:
    """Convenience wrapper: one estimate without keeping an estimator around"""
    return FeeEstimator(rpc, buffer_bps=buffer_bps).estimate_fee(gas_limit)
