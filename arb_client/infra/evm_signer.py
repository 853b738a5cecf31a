"""
EVM Transaction Signer using eth-account

Provides local signing for Arbitrum (and other EVM) transactions.
Only supports local private key signing (no remote signer).
Includes thread-safe nonce management so repeated transfers from the
same sender in one process never reuse a nonce.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Dict, Optional, TYPE_CHECKING

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys.exceptions import ValidationError as KeyValidationError

from ..errors import ConfigurationError, SignerError
from ..types import SignedTransaction, UnsignedTransaction

if TYPE_CHECKING:
    from .rpc import RpcClient

logger = logging.getLogger(__name__)

PRIVATE_KEY_HINT = (
    "Set the private key in one of these ways:\n"
    "  1. Create a .env file containing: {env_var}=your_private_key_here\n"
    "  2. Windows: set {env_var}=your_private_key_here\n"
    "  3. Unix/Linux/Mac: export {env_var}=your_private_key_here\n"
    "Never hardcode a private key in source code."
)


class NonceManager:
    """
    Thread-safe nonce manager for EVM transactions.

    Prevents nonce collisions when sending several transactions by:
    1. Keeping track of pending nonces locally
    2. Using a lock to prevent race conditions
    3. Syncing with the chain on every assignment

    Usage:
        nonce_mgr = NonceManager()
        nonce = nonce_mgr.get_nonce(rpc, address)  # Thread-safe
        # ... send transaction ...
        nonce_mgr.confirm_nonce(address, nonce)  # On success
        # or
        nonce_mgr.release_nonce(address, nonce)  # On failure before broadcast
    """

    def __init__(self):
        self._lock = threading.Lock()
        # Track pending nonces per address: {address: next_nonce}
        self._pending_nonces: Dict[str, int] = {}
        # Track in-flight nonces: {address: set of pending nonces}
        self._in_flight: Dict[str, set] = {}

    def get_nonce(self, rpc: "RpcClient", address: str) -> int:
        """
        Get the next available nonce for an address (thread-safe).

        Args:
            rpc: RPC client used to read the on-chain pending nonce
            address: Wallet address

        Returns:
            Next nonce to use
        """
        key = address.lower()

        with self._lock:
            # Includes transactions still in the mempool
            chain_nonce = rpc.get_transaction_count(address, "pending")

            tracked_nonce = self._pending_nonces.get(key, chain_nonce)

            # Use the higher of chain nonce or tracked nonce
            # This handles transactions sent outside this manager
            next_nonce = max(chain_nonce, tracked_nonce)

            self._pending_nonces[key] = next_nonce + 1
            self._in_flight.setdefault(key, set()).add(next_nonce)

            logger.debug(
                f"NonceManager: address={address[:10]}... "
                f"chain={chain_nonce} tracked={tracked_nonce} assigned={next_nonce}"
            )

            return next_nonce

    def confirm_nonce(self, address: str, nonce: int) -> None:
        """Mark a nonce as used (transaction accepted by the node)."""
        key = address.lower()

        with self._lock:
            if key in self._in_flight:
                self._in_flight[key].discard(nonce)

    def release_nonce(self, address: str, nonce: int) -> None:
        """
        Release a nonce that was never broadcast.

        This allows the nonce to be reused by a subsequent transaction.
        """
        key = address.lower()

        with self._lock:
            if key in self._in_flight:
                self._in_flight[key].discard(nonce)

            # If this was the highest pending nonce, we can reuse it
            current_pending = self._pending_nonces.get(key, 0)
            if nonce == current_pending - 1:
                self._pending_nonces[key] = nonce
                logger.debug(f"NonceManager: released nonce {nonce} for {address[:10]}...")

    def in_flight(self, address: str) -> set:
        """Nonces assigned but not yet confirmed or released"""
        with self._lock:
            return set(self._in_flight.get(address.lower(), set()))

    def reset(self, address: Optional[str] = None) -> None:
        """
        Reset nonce tracking, forcing re-sync with chain.

        Args:
            address: Address to reset. If None, resets all addresses.
        """
        with self._lock:
            if address:
                key = address.lower()
                self._pending_nonces.pop(key, None)
                self._in_flight.pop(key, None)
            else:
                self._pending_nonces.clear()
                self._in_flight.clear()


# Global nonce manager instance (shared across all orchestrators)
_nonce_manager = NonceManager()


def get_nonce_manager() -> NonceManager:
    """Get the global nonce manager instance."""
    return _nonce_manager


class EVMSigner:
    """
    Local EVM signer

    Holds the only reference to the private key. The key is never logged
    and never shown by repr().

    Usage:
        # From private key
        signer = EVMSigner.from_private_key("0x...")

        # From environment variable
        signer = EVMSigner.from_env()

        signed = signer.sign_transaction(unsigned_tx)
    """

    def __init__(self, account: LocalAccount):
        """
        Initialize with eth_account LocalAccount

        Args:
            account: LocalAccount from eth_account
        """
        self._account = account

    @property
    def address(self) -> str:
        """Get wallet address (checksummed)"""
        return self._account.address

    def sign_transaction(self, tx: UnsignedTransaction) -> SignedTransaction:
        """
        Sign a transaction

        Args:
            tx: Unsigned transaction with its nonce assigned

        Returns:
            SignedTransaction with raw bytes and hash

        Raises:
            SignerError: If the nonce is missing or signing fails
        """
        if tx.nonce is None:
            raise SignerError.failed("transaction has no nonce")

        try:
            signed = self._account.sign_transaction(tx.to_dict())
        except (TypeError, ValueError) as e:
            raise SignerError.failed(f"{type(e).__name__}: {e}", e) from e

        return SignedTransaction(
            raw_transaction=bytes(signed.raw_transaction),
            tx_hash="0x" + bytes(signed.hash).hex(),
        )

    @classmethod
    def from_private_key(cls, private_key: str) -> "EVMSigner":
        """
        Create signer from private key

        Args:
            private_key: Hex-encoded private key (with or without 0x prefix)

        Returns:
            EVMSigner instance

        Raises:
            ConfigurationError: If the key cannot be parsed
        """
        private_key = private_key.strip()
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key

        try:
            account = Account.from_key(private_key)
        except (ValueError, TypeError, KeyValidationError):
            # Never echo the key material back
            raise ConfigurationError.invalid(
                "private key", "expected a 32-byte hex string"
            ) from None
        return cls(account)

    @classmethod
    def from_env(cls, env_var: Optional[str] = None) -> "EVMSigner":
        """
        Create signer from environment variable

        Args:
            env_var: Name of environment variable containing private key
                (defaults to config.signer.private_key_env)

        Returns:
            EVMSigner instance

        Raises:
            ConfigurationError: If the variable is not set or malformed
        """
        if env_var is None:
            from ..config import config
            env_var = config.signer.private_key_env

        private_key = os.getenv(env_var, "")
        if not private_key.strip():
            raise ConfigurationError.missing(env_var, hint=PRIVATE_KEY_HINT.format(env_var=env_var))

        return cls.from_private_key(private_key)

    def __repr__(self) -> str:
        return f"EVMSigner(address={self.address})"
