"""
Transaction builder

Assembles unsigned legacy transactions. Pure and deterministic: no I/O,
identical inputs give equal records.
"""

from __future__ import annotations

from typing import Optional

from ..errors import ConfigurationError
from ..types import (
    UnsignedTransaction,
    ensure_amount,
    ensure_positive_int,
    parse_address,
)


def build_transaction(
    recipient: str,
    value: int,
    gas_limit: int,
    gas_price: int,
    chain_id: int,
    nonce: Optional[int] = None,
) -> UnsignedTransaction:
    """
    Build an unsigned native-asset transfer

    Args:
        recipient: Recipient address (hex string)
        value: Amount in wei
        gas_limit: Gas limit
        gas_price: Gas price in wei
        chain_id: Chain ID (EIP-155 replay protection)
        nonce: Sender nonce; may be left for later assignment

    Returns:
        UnsignedTransaction

    Raises:
        InvalidAddressError: Malformed recipient
        ConfigurationError: Out-of-range numeric field
    """
    to_address = parse_address(recipient)
    ensure_amount(value, "value")
    ensure_positive_int(gas_limit, "gas_limit")
    ensure_amount(gas_price, "gas_price")
    ensure_positive_int(chain_id, "chain_id")
    if nonce is not None:
        if isinstance(nonce, bool) or not isinstance(nonce, int) or nonce < 0:
            raise ConfigurationError.invalid("nonce", f"expected a non-negative integer, got {nonce!r}")

    return UnsignedTransaction(
        recipient=to_address,
        value=value,
        gas_limit=gas_limit,
        gas_price=gas_price,
        chain_id=chain_id,
        nonce=nonce,
    )
