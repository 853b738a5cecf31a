"""
Test Signer Module

Tests for local EVM signing and nonce management.
"""

import sys
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from eth_account import Account

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from arb_client.errors import ConfigurationError, ErrorCode, SignerError
from arb_client.infra.evm_signer import EVMSigner, NonceManager
from arb_client.types import UnsignedTransaction

from conftest import TEST_PRIVATE_KEY, TEST_ADDRESS, RECIPIENT, CHAIN_ID, FakeRpc


def _unsigned(nonce=0):
    return UnsignedTransaction(
        recipient=RECIPIENT,
        value=10 ** 15,
        gas_limit=21_000,
        gas_price=100_000_000,
        chain_id=CHAIN_ID,
        nonce=nonce,
    )


class TestEVMSigner:
    """Tests for EVMSigner"""

    def test_from_private_key(self):
        signer = EVMSigner.from_private_key(TEST_PRIVATE_KEY)
        assert signer.address == TEST_ADDRESS

    def test_from_private_key_without_prefix(self):
        signer = EVMSigner.from_private_key(TEST_PRIVATE_KEY[2:])
        assert signer.address == TEST_ADDRESS

    def test_malformed_key_does_not_leak(self):
        bad_key = "0x1234deadbeef"
        with pytest.raises(ConfigurationError) as exc_info:
            EVMSigner.from_private_key(bad_key)
        assert "1234deadbeef" not in str(exc_info.value)
        assert exc_info.value.__cause__ is None

    def test_from_env(self):
        with patch.dict("os.environ", {"TEST_ARB_KEY": TEST_PRIVATE_KEY}):
            signer = EVMSigner.from_env("TEST_ARB_KEY")
        assert signer.address == TEST_ADDRESS

    def test_from_env_missing(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ConfigurationError) as exc_info:
                EVMSigner.from_env("TEST_ARB_KEY")
        assert exc_info.value.code == ErrorCode.CONFIG_MISSING
        assert "TEST_ARB_KEY" in str(exc_info.value)
        assert ".env" in str(exc_info.value)

    def test_repr_shows_address_only(self):
        signer = EVMSigner.from_private_key(TEST_PRIVATE_KEY)
        assert TEST_ADDRESS in repr(signer)
        assert TEST_PRIVATE_KEY[2:] not in repr(signer)

    def test_sign_transaction_recovers_sender(self):
        signer = EVMSigner.from_private_key(TEST_PRIVATE_KEY)

        signed = signer.sign_transaction(_unsigned(nonce=5))

        assert signed.tx_hash.startswith("0x")
        assert len(signed.tx_hash) == 66
        assert Account.recover_transaction(signed.raw_transaction) == TEST_ADDRESS

    def test_sign_is_deterministic(self):
        signer = EVMSigner.from_private_key(TEST_PRIVATE_KEY)
        assert signer.sign_transaction(_unsigned()) == signer.sign_transaction(_unsigned())

    def test_sign_without_nonce_fails(self):
        signer = EVMSigner.from_private_key(TEST_PRIVATE_KEY)
        with pytest.raises(SignerError):
            signer.sign_transaction(_unsigned(nonce=None))

    def test_sign_failure_is_signer_error(self):
        account = MagicMock()
        account.sign_transaction.side_effect = TypeError("bad field")
        signer = EVMSigner(account)

        with pytest.raises(SignerError) as exc_info:
            signer.sign_transaction(_unsigned())
        assert exc_info.value.code == ErrorCode.SIGNER_FAILED


class TestNonceManager:
    """Tests for NonceManager"""

    def test_first_nonce_comes_from_chain(self):
        manager = NonceManager()
        rpc = FakeRpc(nonce=7)

        assert manager.get_nonce(rpc, TEST_ADDRESS) == 7
        assert manager.in_flight(TEST_ADDRESS) == {7}

    def test_sequential_nonces_do_not_repeat(self):
        manager = NonceManager()
        rpc = FakeRpc(nonce=0)

        first = manager.get_nonce(rpc, TEST_ADDRESS)
        second = manager.get_nonce(rpc, TEST_ADDRESS)

        assert (first, second) == (0, 1)

    def test_chain_ahead_of_tracker_wins(self):
        manager = NonceManager()
        rpc = FakeRpc(nonce=0)
        manager.get_nonce(rpc, TEST_ADDRESS)

        rpc.nonce = 10  # sent from elsewhere
        assert manager.get_nonce(rpc, TEST_ADDRESS) == 10

    def test_release_allows_reuse(self):
        manager = NonceManager()
        rpc = FakeRpc(nonce=3)

        nonce = manager.get_nonce(rpc, TEST_ADDRESS)
        manager.release_nonce(TEST_ADDRESS, nonce)

        assert manager.get_nonce(rpc, TEST_ADDRESS) == 3

    def test_confirm_removes_from_in_flight(self):
        manager = NonceManager()
        nonce = manager.get_nonce(FakeRpc(nonce=2), TEST_ADDRESS)

        manager.confirm_nonce(TEST_ADDRESS, nonce)

        assert manager.in_flight(TEST_ADDRESS) == set()

    def test_addresses_are_case_insensitive(self):
        manager = NonceManager()
        rpc = FakeRpc(nonce=0)

        manager.get_nonce(rpc, TEST_ADDRESS)
        assert manager.get_nonce(rpc, TEST_ADDRESS.lower()) == 1

    def test_reset(self):
        manager = NonceManager()
        rpc = FakeRpc(nonce=0)
        manager.get_nonce(rpc, TEST_ADDRESS)
        manager.get_nonce(rpc, TEST_ADDRESS)

        manager.reset(TEST_ADDRESS)

        assert manager.get_nonce(rpc, TEST_ADDRESS) == 0

    def test_concurrent_assignment_is_unique(self):
        manager = NonceManager()
        rpc = FakeRpc(nonce=0)
        assigned = []
        lock = threading.Lock()

        def worker():
            nonce = manager.get_nonce(rpc, TEST_ADDRESS)
            with lock:
                assigned.append(nonce)

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(assigned) == list(range(20))
