"""
Wallet Module

Native balance queries.
"""

import logging
from decimal import Decimal
from typing import TYPE_CHECKING

from ..types import format_ether, parse_address

if TYPE_CHECKING:
    from ..infra.rpc import RpcClient

logger = logging.getLogger(__name__)


class WalletModule:
    """
    Balance queries

    Usage:
        wallet = WalletModule(rpc)

        wei = wallet.balance("0x51F14ab69C8f748F72b6DB1Aa66875faf7c24Bd2")
        eth = wallet.balance_ether("0x51F14ab69C8f748F72b6DB1Aa66875faf7c24Bd2")
    """

    def __init__(self, rpc: "RpcClient"):
        self._rpc = rpc

    def balance(self, address: str) -> int:
        """
        Native balance in wei

        Raises:
            InvalidAddressError: Malformed address
            NetworkError / RequestTimeout: RPC failure
        """
        checksum_address = parse_address(address)
        balance = self._rpc.get_balance(checksum_address)
        logger.debug(f"Balance of {checksum_address}: {balance} wei")
        return balance

    def balance_ether(self, address: str) -> Decimal:
        """Native balance in ETH"""
        return format_ether(self.balance(address))
