"""
Conversions between wei and display units
"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from web3 import Web3

from ..errors import ConfigurationError
from .common import UINT256_MAX

ETHER_DECIMALS = 18


def parse_amount(value: Union[str, Decimal, int], unit: str = "ether") -> int:
    """
    Convert a display-unit amount (e.g. "0.001" ETH) to wei.

    Args:
        value: Amount in `unit`; strings and Decimals keep full precision
        unit: web3 unit name ("ether", "gwei", ...)

    Returns:
        Amount in wei

    Raises:
        ConfigurationError: If the amount is malformed, negative, finer than
            one wei, or outside the 256-bit range
    """
    if isinstance(value, bool) or not isinstance(value, (str, Decimal, int)):
        raise ConfigurationError.invalid("amount", f"unsupported type {type(value).__name__}")

    try:
        number = Decimal(value.strip()) if isinstance(value, str) else Decimal(value)
    except InvalidOperation:
        raise ConfigurationError.invalid("amount", f"{value!r} is not a number") from None

    if not number.is_finite():
        raise ConfigurationError.invalid("amount", f"{value!r} is not a finite number")
    if number < 0:
        raise ConfigurationError.invalid("amount", f"must not be negative (got {value})")

    unit_wei = Web3.to_wei(1, unit)
    try:
        with localcontext() as ctx:
            ctx.prec = 200
            scaled = number * unit_wei
            whole = scaled.to_integral_value()
    except ArithmeticError:
        raise ConfigurationError.invalid("amount", f"{value!r} is outside the 256-bit range") from None

    if scaled > UINT256_MAX:
        raise ConfigurationError.invalid("amount", f"{value!r} is outside the 256-bit range")
    if scaled != whole:
        raise ConfigurationError.invalid("amount", f"{value!r} is finer than 1 wei")

    try:
        return Web3.to_wei(number, unit)
    except ValueError as e:
        raise ConfigurationError.invalid("amount", str(e)) from e


def format_ether(wei: int) -> Decimal:
    """Wei to ETH"""
    return Decimal(Web3.from_wei(wei, "ether"))


def format_gwei(wei: int) -> Decimal:
    """Wei to gwei"""
    return Decimal(Web3.from_wei(wei, "gwei"))
