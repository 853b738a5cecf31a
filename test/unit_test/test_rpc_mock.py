"""
Test RPC Client with Mocks

Tests for RpcClient behavior with a mocked Web3 instance.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, PropertyMock

import pytest
import requests
from web3.exceptions import TimeExhausted, TransactionNotFound, Web3RPCError

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from arb_client.errors import (
    ConfigurationError,
    ErrorCode,
    NetworkError,
    RequestTimeout,
    TransactionError,
)
from arb_client.infra.rpc import RpcClient, RpcClientConfig, create_web3

ENDPOINT = "https://rpc.example.com"
ADDRESS = "0x741CD80d41eDE318feD4010E296704a061f4115a"


def _client(web3=None):
    return RpcClient(ENDPOINT, config=RpcClientConfig(url=ENDPOINT, timeout_seconds=10), web3=web3 or MagicMock())


def test_rpc_config_defaults():
    """Test RpcClientConfig default values from global config"""
    print("Testing RpcClientConfig defaults...")

    config = RpcClientConfig()
    assert config.url, "Should have a default endpoint"
    assert config.timeout_seconds > 0, "Should have positive timeout"

    print("  RpcClientConfig defaults: PASSED")


def test_rpc_config_override():
    """Test RpcClientConfig with overrides"""
    config = RpcClientConfig(url="http://localhost:8545", timeout_seconds=5)
    assert config.url == "http://localhost:8545"
    assert config.timeout_seconds == 5


def test_create_web3_sets_timeout():
    """Test create_web3 passes the request timeout to the provider"""
    web3 = create_web3("http://localhost:8545", timeout=7)
    assert web3.provider.endpoint_uri == "http://localhost:8545"
    assert dict(web3.provider.get_request_kwargs())["timeout"] == 7


def test_empty_endpoint_is_configuration_error():
    with pytest.raises(ConfigurationError):
        RpcClient("", config=RpcClientConfig(url="", timeout_seconds=10), web3=MagicMock())


class TestQueries:
    """Successful calls return plain ints / bytes"""

    def test_get_balance(self):
        web3 = MagicMock()
        web3.eth.get_balance.return_value = 10 ** 18
        assert _client(web3).get_balance(ADDRESS) == 10 ** 18
        web3.eth.get_balance.assert_called_once_with(ADDRESS)

    def test_get_gas_price(self):
        web3 = MagicMock()
        web3.eth.gas_price = 100_000_000
        assert _client(web3).get_gas_price() == 100_000_000

    def test_get_chain_id_and_block(self):
        web3 = MagicMock()
        web3.eth.chain_id = 421614
        web3.eth.block_number = 99
        client = _client(web3)
        assert client.get_chain_id() == 421614
        assert client.get_block_number() == 99

    def test_get_transaction_count_uses_pending(self):
        web3 = MagicMock()
        web3.eth.get_transaction_count.return_value = 4
        assert _client(web3).get_transaction_count(ADDRESS) == 4
        web3.eth.get_transaction_count.assert_called_once_with(ADDRESS, "pending")

    def test_call_returns_bytes(self):
        web3 = MagicMock()
        web3.eth.call.return_value = b"\x00" * 32
        assert _client(web3).call(ADDRESS, b"\x06\xfd\xde\x03") == b"\x00" * 32
        web3.eth.call.assert_called_once_with({"to": ADDRESS, "data": b"\x06\xfd\xde\x03"}, "latest")


class TestErrorTranslation:
    """Transport and node failures map onto the error taxonomy"""

    def test_requests_timeout(self):
        web3 = MagicMock()
        web3.eth.get_balance.side_effect = requests.exceptions.ReadTimeout("read timed out")

        with pytest.raises(RequestTimeout) as exc_info:
            _client(web3).get_balance(ADDRESS)
        assert exc_info.value.timeout_seconds == 10
        assert exc_info.value.endpoint == ENDPOINT

    def test_connection_refused(self):
        web3 = MagicMock()
        web3.eth.get_balance.side_effect = requests.exceptions.ConnectionError("Connection refused")

        with pytest.raises(NetworkError) as exc_info:
            _client(web3).get_balance(ADDRESS)
        assert exc_info.value.code == ErrorCode.RPC_CONNECTION_FAILED

    def test_node_error(self):
        web3 = MagicMock()
        type(web3.eth).gas_price = PropertyMock(side_effect=Web3RPCError("internal error"))

        with pytest.raises(NetworkError) as exc_info:
            _client(web3).get_gas_price()
        assert exc_info.value.code == ErrorCode.RPC_NODE_ERROR

    def test_legacy_value_error_payload(self):
        web3 = MagicMock()
        web3.eth.get_balance.side_effect = ValueError({"code": -32000, "message": "header not found"})

        with pytest.raises(NetworkError) as exc_info:
            _client(web3).get_balance(ADDRESS)
        assert exc_info.value.code == ErrorCode.RPC_NODE_ERROR

    def test_rate_limited_http_error(self):
        web3 = MagicMock()
        web3.eth.get_balance.side_effect = requests.exceptions.HTTPError("429 Client Error: Too Many Requests")

        with pytest.raises(NetworkError) as exc_info:
            _client(web3).get_balance(ADDRESS)
        assert exc_info.value.code == ErrorCode.RPC_RATE_LIMITED

    def test_unclassified_error_is_invalid_response(self):
        web3 = MagicMock()
        web3.eth.get_balance.side_effect = ValueError("could not decode result")

        with pytest.raises(NetworkError) as exc_info:
            _client(web3).get_balance(ADDRESS)
        assert exc_info.value.code == ErrorCode.RPC_INVALID_RESPONSE


class TestTransactions:
    """Broadcast and receipt handling"""

    def test_send_raw_transaction_returns_hex_hash(self):
        web3 = MagicMock()
        web3.eth.send_raw_transaction.return_value = bytes.fromhex("ab" * 32)

        assert _client(web3).send_raw_transaction(b"\x01\x02") == "0x" + "ab" * 32

    def test_rejected_broadcast_is_transaction_error(self):
        web3 = MagicMock()
        web3.eth.send_raw_transaction.side_effect = Web3RPCError("nonce too low")

        with pytest.raises(TransactionError) as exc_info:
            _client(web3).send_raw_transaction(b"\x01\x02")
        assert "nonce too low" in str(exc_info.value)

    def test_broadcast_timeout_stays_timeout(self):
        web3 = MagicMock()
        web3.eth.send_raw_transaction.side_effect = requests.exceptions.ReadTimeout()

        with pytest.raises(RequestTimeout):
            _client(web3).send_raw_transaction(b"\x01\x02")

    def test_get_receipt_not_found(self):
        web3 = MagicMock()
        web3.eth.get_transaction_receipt.side_effect = TransactionNotFound("not found")

        assert _client(web3).get_receipt("0x" + "ab" * 32) is None

    def test_wait_for_receipt_found(self):
        web3 = MagicMock()
        web3.eth.wait_for_transaction_receipt.return_value = {
            "transactionHash": bytes.fromhex("ab" * 32),
            "blockNumber": 10,
            "gasUsed": 21_000,
            "status": 1,
        }

        receipt = _client(web3).wait_for_receipt("0x" + "ab" * 32, timeout=3, poll_interval=0.5)

        assert receipt.block_number == 10
        assert receipt.succeeded
        web3.eth.wait_for_transaction_receipt.assert_called_once_with(
            "0x" + "ab" * 32, timeout=3, poll_latency=0.5
        )

    def test_wait_for_receipt_time_exhausted(self):
        web3 = MagicMock()
        web3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("gave up")

        assert _client(web3).wait_for_receipt("0x" + "ab" * 32, timeout=1) is None
