"""
Shared fixtures for unit tests.

Nothing here touches the network: FakeRpc stands in for RpcClient and
records every call, so tests can assert what was (and was not) sent.
"""

import sys
from pathlib import Path

import pytest
from web3 import Web3

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from arb_client.config import TxConfig
from arb_client.infra import EVMSigner, NonceManager
from arb_client.types import Receipt

# Well-known development key (anvil / hardhat account #0) - never fund it on a real network
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

RECIPIENT = "0x741CD80d41eDE318feD4010E296704a061f4115a"
CHAIN_ID = 421614
GAS_PRICE = 100_000_000  # 0.1 gwei
TX_HASH = "0x" + "ab" * 32


class FakeRpc:
    """
    In-memory RpcClient replacement

    Args:
        balance: Balance returned for every address
        gas_price: Gas price in wei
        chain_id: Chain id
        nonce: Pending transaction count
        receipt: What wait_for_receipt returns (None = not observed)
        errors: {method_name: exception} raised instead of answering
    """

    endpoint = "http://fake-rpc"

    def __init__(
        self,
        balance=10 ** 18,
        gas_price=GAS_PRICE,
        chain_id=CHAIN_ID,
        nonce=0,
        receipt="default",
        errors=None,
        call_result=b"",
        block_number=1000,
    ):
        self.balance = balance
        self.gas_price = gas_price
        self.chain_id = chain_id
        self.nonce = nonce
        self.receipt = receipt
        self.errors = errors or {}
        self.call_result = call_result
        self.block_number = block_number
        self.calls = []
        self.broadcasts = []
        self.eth_calls = []
        # Offline instance: supplies the ABI codec and contract factory only
        self.web3 = Web3()

    def _record(self, method):
        self.calls.append(method)
        if method in self.errors:
            raise self.errors[method]

    def get_balance(self, address):
        self._record("get_balance")
        return self.balance

    def get_gas_price(self):
        self._record("get_gas_price")
        return self.gas_price

    def get_chain_id(self):
        self._record("get_chain_id")
        return self.chain_id

    def get_transaction_count(self, address, block_identifier="pending"):
        self._record("get_transaction_count")
        return self.nonce

    def get_block_number(self):
        self._record("get_block_number")
        return self.block_number

    def send_raw_transaction(self, raw_transaction):
        self._record("send_raw_transaction")
        self.broadcasts.append(raw_transaction)
        return TX_HASH

    def wait_for_receipt(self, tx_hash, timeout=120, poll_interval=2.0):
        self._record("wait_for_receipt")
        if self.receipt == "default":
            return Receipt(tx_hash=tx_hash, block_number=12345, gas_used=21_000, status=1)
        return self.receipt

    def call(self, address, data, block_identifier="latest"):
        self._record("call")
        self.eth_calls.append((address, data))
        return self.call_result


@pytest.fixture()
def fake_rpc():
    return FakeRpc()


@pytest.fixture()
def signer():
    return EVMSigner.from_private_key(TEST_PRIVATE_KEY)


@pytest.fixture()
def nonce_manager():
    return NonceManager()


@pytest.fixture()
def tx_config():
    return TxConfig(
        transfer_gas_limit=21_000,
        contract_gas_limit=300_000,
        receipt_timeout=5.0,
        receipt_poll_interval=0.01,
        fee_buffer_bps=0,
    )
