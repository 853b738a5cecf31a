"""
Contract Module

Read-only contract calls: a web3 Contract built from the ABI fragment
resolves and encodes the call, eth_call runs through the RPC client, and
the return data is decoded with the same codec. No state changes, no
signing.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING, Union

from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_utils import to_bytes
from eth_utils.abi import get_abi_output_types
from web3 import Web3
from web3.exceptions import Web3Exception
from web3.utils.abi import get_abi_element

from ..errors import DecodingError, InvalidAbiError
from ..types import parse_address

if TYPE_CHECKING:
    from ..infra.rpc import RpcClient

logger = logging.getLogger(__name__)

AbiFragment = Union[str, bytes, Dict[str, Any], List[Dict[str, Any]]]

# Minimal ERC20 metadata ABI
ERC20_METADATA_ABI = [
    {
        "inputs": [],
        "name": "name",
        "outputs": [{"internalType": "string", "name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "symbol",
        "outputs": [{"internalType": "string", "name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
]

# ABI problems surface from web3 and eth_abi as these
_ABI_ERRORS = (Web3Exception, KeyError, TypeError, ValueError)


def load_abi(abi_fragment: AbiFragment) -> List[Dict[str, Any]]:
    """
    Normalize an ABI fragment (JSON text, one entry, or a list of entries)

    Raises:
        InvalidAbiError: Not JSON, or not a list of objects
    """
    abi = abi_fragment
    if isinstance(abi_fragment, (str, bytes)):
        try:
            abi = json.loads(abi_fragment)
        except ValueError as e:
            raise InvalidAbiError(f"ABI is not valid JSON: {e}", original_error=e) from e

    if isinstance(abi, dict):
        abi = [abi]
    if not isinstance(abi, list) or not all(isinstance(entry, dict) for entry in abi):
        raise InvalidAbiError("ABI must be a JSON object or a list of objects")
    return abi


def encode_call(
    abi: List[Dict[str, Any]],
    method_name: str,
    args: Sequence[Any] = (),
    w3: Optional[Web3] = None,
) -> Tuple[Dict[str, Any], bytes]:
    """
    Resolve `method_name` against the ABI and encode the call

    Overloads are resolved by the number and types of `args`.

    Returns:
        (function ABI entry, selector + encoded arguments)

    Raises:
        InvalidAbiError: Malformed ABI, unknown method, or arguments that
            match no overload
    """
    w3 = w3 or Web3()
    args = list(args)
    try:
        contract = w3.eth.contract(abi=abi)
        fn_abi = get_abi_element(abi, method_name, *args, abi_codec=w3.codec)
        data = contract.encode_abi(method_name, args=args)
    except _ABI_ERRORS as e:
        raise InvalidAbiError(f"Cannot encode {method_name}() with {len(args)} argument(s): {e}", method_name, e) from e

    return fn_abi, to_bytes(hexstr=data)


def decode_result(
    fn_abi: Dict[str, Any],
    data: bytes,
    expected_type: Optional[type] = None,
    w3: Optional[Web3] = None,
) -> Any:
    """
    Decode eth_call return data

    A single output is returned unwrapped, several outputs as a tuple,
    none as None.

    Raises:
        DecodingError: Empty or malformed data, or a value that is not
            `expected_type`
    """
    method_name = fn_abi.get("name", "")
    try:
        output_types = get_abi_output_types(fn_abi)
    except _ABI_ERRORS as e:
        raise InvalidAbiError(f"Malformed outputs for {method_name}: {e}", method_name, e) from e
    if not output_types:
        return None

    if not data:
        raise DecodingError(
            f"{method_name}() returned no data (is the target a contract?)",
            method_name,
        )

    codec = (w3 or Web3()).codec
    try:
        decoded = codec.decode(output_types, data)
    except (AbiDecodingError, ValueError, OverflowError) as e:
        raise DecodingError(f"Cannot decode {method_name}() result: {e}", method_name, e) from e

    value = decoded[0] if len(decoded) == 1 else tuple(decoded)

    if expected_type is not None and not isinstance(value, expected_type):
        raise DecodingError(
            f"{method_name}() returned {type(value).__name__}, expected {expected_type.__name__}",
            method_name,
        )
    return value


def call_view_method(
    rpc: "RpcClient",
    contract_address: str,
    abi_fragment: AbiFragment,
    method_name: str,
    args: Sequence[Any] = (),
    expected_type: Optional[type] = None,
) -> Any:
    """
    Call a view/pure method and decode its result

    Args:
        rpc: RPC client
        contract_address: Contract address (hex string)
        abi_fragment: ABI JSON text, entry, or list of entries
        method_name: Function name
        args: Positional call arguments
        expected_type: Python type the decoded value must have

    Raises:
        InvalidAddressError: Malformed contract address
        InvalidAbiError: Bad ABI, unknown method, or mismatched arguments
        NetworkError / RequestTimeout: eth_call failed (reverts included)
        DecodingError: Return data does not match the declared outputs
    """
    address = parse_address(contract_address)
    fn_abi, data = encode_call(load_abi(abi_fragment), method_name, args, w3=rpc.web3)

    logger.debug(f"eth_call {address} {method_name} ({len(data)} bytes)")
    raw = rpc.call(address, data)
    return decode_result(fn_abi, raw, expected_type, w3=rpc.web3)


@dataclass(frozen=True)
class TokenInfo:
    """ERC20 token metadata"""
    address: str
    name: str
    symbol: str


class ContractModule:
    """
    Read-only contract access

    Usage:
        contracts = ContractModule(rpc)

        name = contracts.call(address, ERC20_METADATA_ABI, "name", expected_type=str)
        info = contracts.token_info(address)
    """

    def __init__(self, rpc: "RpcClient"):
        self._rpc = rpc

    def call(
        self,
        contract_address: str,
        abi_fragment: AbiFragment,
        method_name: str,
        args: Sequence[Any] = (),
        expected_type: Optional[type] = None,
    ) -> Any:
        return call_view_method(self._rpc, contract_address, abi_fragment, method_name, args, expected_type)

    def token_info(self, contract_address: str) -> TokenInfo:
        """Query name() and symbol() of an ERC20 token"""
        address = parse_address(contract_address)
        name = self.call(address, ERC20_METADATA_ABI, "name", expected_type=str)
        symbol = self.call(address, ERC20_METADATA_ABI, "symbol", expected_type=str)
        return TokenInfo(address=address, name=name, symbol=symbol)
