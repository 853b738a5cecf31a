"""
ArbClient - Unified entry point for Arbitrum testnet operations

Provides a high-level interface to one JSON-RPC endpoint through
functional modules (wallet, fees, contracts) plus the transfer workflow.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union, TYPE_CHECKING

from .config import TxConfig, config as global_config
from .infra import RpcClient, RpcClientConfig, EVMSigner, NonceManager, get_nonce_manager
from .types import TransferResult

if TYPE_CHECKING:
    from .modules.transfer import EventListener


class ArbClient:
    """
    Unified Arbitrum client

    Provides access to operations through functional modules:
    - wallet: Balance queries
    - fees: Gas price and fee estimation
    - contracts: Read-only contract calls

    The private key is only needed for transfer(). Unless a signer is
    injected, it is read from the environment at the start of each
    transfer and dropped when the attempt ends.

    Usage:
        client = ArbClient()  # endpoint from ARB_RPC_URL

        balance = client.wallet.balance("0x...")
        estimate = client.fees.estimate_fee(21_000)
        name = client.contracts.call(token, ERC20_METADATA_ABI, "name", expected_type=str)

        result = client.transfer("0x...", "0.001", on_event=print)
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        signer: Optional[EVMSigner] = None,
        rpc_config: Optional[RpcClientConfig] = None,
        tx_config: Optional[TxConfig] = None,
        nonce_manager: Optional[NonceManager] = None,
        rpc: Optional[RpcClient] = None,
    ):
        """
        Initialize ArbClient

        Args:
            rpc_url: RPC endpoint URL (defaults to config.rpc.url)
            signer: Optional signer; loaded from the environment per transfer otherwise
            rpc_config: Optional RPC configuration
            tx_config: Optional gas and receipt policy
            nonce_manager: Optional nonce manager (defaults to the process-wide one)
            rpc: Pre-built RPC client (overrides rpc_url / rpc_config)
        """
        self._rpc = rpc or RpcClient(rpc_url, config=rpc_config)
        self._signer = signer
        self._tx_config = tx_config or global_config.tx
        self._nonce_manager = nonce_manager or get_nonce_manager()

        # Lazy-loaded modules
        self._wallet: Optional["WalletModule"] = None
        self._fees: Optional["FeeEstimator"] = None
        self._contracts: Optional["ContractModule"] = None

    @property
    def rpc(self) -> RpcClient:
        """Access to RPC client"""
        return self._rpc

    @property
    def tx_config(self) -> TxConfig:
        return self._tx_config

    @property
    def wallet(self) -> "WalletModule":
        """
        Wallet module for balance queries

        Provides:
        - balance(address): Balance in wei
        - balance_ether(address): Balance in ETH
        """
        if self._wallet is None:
            from .modules.wallet import WalletModule
            self._wallet = WalletModule(self._rpc)
        return self._wallet

    @property
    def fees(self) -> "FeeEstimator":
        """
        Fee estimator

        Provides:
        - gas_price(): Current gas price
        - estimate_fee(gas_limit): Fee for a gas limit
        - estimate_for(operation): Fee for an operation class
        """
        if self._fees is None:
            from .modules.fees import FeeEstimator
            self._fees = FeeEstimator(self._rpc, tx_config=self._tx_config)
        return self._fees

    @property
    def contracts(self) -> "ContractModule":
        """
        Contract module for read-only calls

        Provides:
        - call(address, abi, method, args): Call a view method
        - token_info(address): ERC20 name and symbol
        """
        if self._contracts is None:
            from .modules.contract import ContractModule
            self._contracts = ContractModule(self._rpc)
        return self._contracts

    def block_number(self) -> int:
        """Latest block number (connectivity check)"""
        return self._rpc.get_block_number()

    def transfer(
        self,
        to_address: str,
        amount: Union[int, str, Decimal],
        gas_limit: Optional[int] = None,
        on_event: Optional["EventListener"] = None,
        receipt_timeout: Optional[float] = None,
    ) -> TransferResult:
        """
        Send native ETH

        Args:
            to_address: Recipient address
            amount: int wei, or decimal string / Decimal in ETH
            gas_limit: Override of the configured transfer gas limit
            on_event: Stage transition listener
            receipt_timeout: Override of the configured receipt wait

        Returns:
            TransferResult

        Raises:
            ConfigurationError: No signer injected and the private key is
                missing or malformed in the environment
        """
        from .modules.transfer import TransferOrchestrator

        signer = self._signer or EVMSigner.from_env()
        orchestrator = TransferOrchestrator(
            self._rpc,
            signer,
            tx_config=self._tx_config,
            nonce_manager=self._nonce_manager,
            on_event=on_event,
            fee_estimator=self.fees,
        )
        return orchestrator.transfer(to_address, amount, gas_limit=gas_limit, receipt_timeout=receipt_timeout)

    def __repr__(self) -> str:
        return f"ArbClient(endpoint={self._rpc.endpoint})"


# Type hints for modules (resolved at runtime)
if TYPE_CHECKING:
    from .modules.wallet import WalletModule
    from .modules.fees import FeeEstimator
    from .modules.contract import ContractModule
