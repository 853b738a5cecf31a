"""
Transaction value types
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class FeeEstimate:
    """
    Fee estimate for one operation

    Attributes:
        gas_price: Price snapshot in wei per gas (not guaranteed at broadcast time)
        gas_limit: Gas limit policy used for the estimate
        fee: gas_price * gas_limit, in wei
        buffered_fee: fee plus the configured safety margin, in wei
    """
    gas_price: int
    gas_limit: int
    fee: int
    buffered_fee: int

    @property
    def buffer(self) -> int:
        return self.buffered_fee - self.fee


@dataclass(frozen=True)
class UnsignedTransaction:
    """
    Legacy (type 0) native-asset transaction, ready for signing

    Immutable; build it with infra.tx_builder.build_transaction.
    """
    recipient: str
    value: int
    gas_limit: int
    gas_price: int
    chain_id: int
    nonce: Optional[int] = None
    data: bytes = b""

    def to_dict(self) -> Dict[str, Any]:
        """Transaction dict in the shape eth_account expects"""
        tx: Dict[str, Any] = {
            "to": self.recipient,
            "value": self.value,
            "gas": self.gas_limit,
            "gasPrice": self.gas_price,
            "chainId": self.chain_id,
        }
        if self.nonce is not None:
            tx["nonce"] = self.nonce
        if self.data:
            tx["data"] = self.data
        return tx


@dataclass(frozen=True)
class SignedTransaction:
    """Signed raw transaction and its hash"""
    raw_transaction: bytes
    tx_hash: str

    def __repr__(self) -> str:
        return f"SignedTransaction(tx_hash={self.tx_hash})"


@dataclass(frozen=True)
class Receipt:
    """
    Mined transaction receipt

    Attributes:
        tx_hash: Transaction hash (0x hex)
        block_number: Block that included the transaction
        gas_used: Gas actually consumed
        status: 1 on success, 0 when execution reverted
        effective_gas_price: Price actually paid, when the node reports it
    """
    tx_hash: str
    block_number: int
    gas_used: int
    status: int
    effective_gas_price: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    @property
    def fee_paid(self) -> Optional[int]:
        """Actual fee in wei, if the effective gas price is known"""
        if self.effective_gas_price is None:
            return None
        return self.gas_used * self.effective_gas_price

    @classmethod
    def from_web3(cls, receipt: Mapping[str, Any]) -> "Receipt":
        """Build from a web3 TxReceipt (AttributeDict)"""
        tx_hash = receipt["transactionHash"]
        # HexBytes.hex() drops the 0x prefix on hexbytes>=1.0
        if isinstance(tx_hash, (bytes, bytearray)):
            tx_hash = "0x" + bytes(tx_hash).hex()
        return cls(
            tx_hash=str(tx_hash),
            block_number=int(receipt["blockNumber"]),
            gas_used=int(receipt["gasUsed"]),
            status=int(receipt.get("status", 0)),
            effective_gas_price=(
                int(receipt["effectiveGasPrice"])
                if receipt.get("effectiveGasPrice") is not None
                else None
            ),
        )
