"""
arb-client CLI

Command-line interface for the Arbitrum testnet client.

Commands:
  balance   - Show the native balance of an address
  gas       - Show the current gas price and estimated fees
  transfer  - Send native ETH and wait for the receipt
  query     - Read ERC20 name() and symbol() from a contract
  block     - Show the latest block number

Exit status: 0 on success (an unconfirmed transfer included), 1 on a
runtime failure, 2 on a configuration error.
"""

from __future__ import annotations

import sys
from typing import Callable, NoReturn, Optional

import click

from . import __version__
from .client import ArbClient
from .config import LoggingConfig, config, setup_logging
from .errors import ArbClientError, ConfigurationError
from .infra import EVMSigner
from .types import (
    OperationClass,
    TransferEvent,
    TransferResult,
    TransferStage,
    format_ether,
    format_gwei,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def _exit_code(error: BaseException) -> int:
    return EXIT_CONFIG if isinstance(error, ConfigurationError) else EXIT_FAILURE


def _fail(error: ArbClientError) -> NoReturn:
    click.secho(f"\nError: {error}", fg="red", err=True)
    sys.exit(_exit_code(error))


class ConsolePresenter:
    """
    Renders transfer events as numbered console steps

    Usage:
        presenter = ConsolePresenter()
        client.transfer(to, amount, on_event=presenter)
    """

    def __init__(self, echo: Callable[..., None] = click.echo):
        self._echo = echo

    def __call__(self, event: TransferEvent) -> None:
        render = getattr(self, f"_on_{event.stage.value}", None)
        if render is not None:
            render(**event.details)

    def _on_start(self) -> None:
        self._echo("\n=== Transfer started ===\n")

    def _on_credential_loaded(self, sender: str) -> None:
        self._echo("1. Wallet loaded")
        self._echo(f"   From: {sender}")

    def _on_recipient_validated(self, recipient: str) -> None:
        self._echo("2. Recipient validated")
        self._echo(f"   To: {recipient}")

    def _on_balance_fetched(self, balance: int) -> None:
        self._echo(f"3. Balance: {format_ether(balance)} ETH")

    def _on_amount_parsed(self, amount: int) -> None:
        self._echo(f"4. Amount: {format_ether(amount)} ETH ({amount} wei)")

    def _on_gas_price_fetched(self, gas_price: int) -> None:
        self._echo(f"5. Gas price: {format_gwei(gas_price)} Gwei")

    def _on_fee_computed(self, gas_limit: int, fee: int, buffered_fee: int) -> None:
        self._echo(f"   Gas limit: {gas_limit}")
        self._echo(f"   Estimated fee: {format_ether(fee)} ETH")
        if buffered_fee != fee:
            self._echo(f"   With buffer: {format_ether(buffered_fee)} ETH")

    def _on_funds_validated(self, required: int, balance: int) -> None:
        self._echo("   Balance is sufficient")

    def _on_chain_id_fetched(self, chain_id: int) -> None:
        self._echo(f"6. Chain ID: {chain_id}")

    def _on_nonce_assigned(self, nonce: int) -> None:
        self._echo(f"   Nonce: {nonce}")

    def _on_transaction_built(self, transaction) -> None:
        self._echo("7. Transaction built")

    def _on_signed(self, tx_hash: str) -> None:
        self._echo("8. Transaction signed")

    def _on_broadcast(self, tx_hash: str, error: Optional[Exception] = None) -> None:
        if error is not None:
            self._echo("   Broadcast timed out; the node may still have accepted it")
        else:
            self._echo("   Transaction sent")
        self._echo(f"   Hash: {tx_hash}")
        self._echo(f"   Explorer: {config.explorer.tx_url(tx_hash)}")

    def _on_awaiting_receipt(self, tx_hash: str, timeout: float) -> None:
        self._echo(f"9. Waiting for confirmation (up to {timeout:g}s)...")

    def _on_confirmed(self, tx_hash: str, receipt) -> None:
        self._echo("   Transaction confirmed")
        self._echo(f"   - Block: {receipt.block_number}")
        self._echo(f"   - Gas used: {receipt.gas_used}")
        self._echo(f"   - Status: {'success' if receipt.succeeded else 'reverted'}")

    def _on_unconfirmed(self, tx_hash: str, error: Optional[Exception] = None) -> None:
        self._echo("   Transaction sent, but no receipt was observed")
        self._echo("   It may still be mined; check the explorer link above")

    def _on_failed(self, failed_stage: TransferStage, error: Exception) -> None:
        click.secho(f"   Aborted after stage '{failed_stage.value}'", fg="yellow", err=True)


def _client(ctx: click.Context) -> ArbClient:
    try:
        return ArbClient(rpc_url=ctx.obj.get("rpc_url"))
    except ConfigurationError as e:
        _fail(e)


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=__version__, prog_name="arb-client")
@click.option("--rpc-url", default=None, help="JSON-RPC endpoint (default: ARB_RPC_URL or Arbitrum Sepolia)")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for diagnostics on stderr",
)
@click.pass_context
def cli(ctx: click.Context, rpc_url: Optional[str], log_level: Optional[str]) -> None:
    """Arbitrum testnet client"""
    log_config = config.logging
    if log_level:
        log_config = LoggingConfig(
            log_file=log_config.log_file,
            log_level=log_level.upper(),
            log_format=log_config.log_format,
            console_output=log_config.console_output,
            max_bytes=log_config.max_bytes,
            backup_count=log_config.backup_count,
        )
    setup_logging(log_config)
    ctx.ensure_object(dict)
    ctx.obj["rpc_url"] = rpc_url


# ============ Queries ============


@cli.command()
@click.argument("address", required=False)
@click.pass_context
def balance(ctx: click.Context, address: Optional[str]) -> None:
    """Show the native balance of ADDRESS (default: the PRIVATE_KEY wallet)."""
    try:
        if address is None:
            address = EVMSigner.from_env().address
        client = _client(ctx)
        wei = client.wallet.balance(address)
    except ArbClientError as e:
        _fail(e)

    click.echo(f"Address: {address}")
    click.echo(f"Balance: {format_ether(wei)} ETH ({wei} wei)")


@cli.command()
@click.option("--gas-limit", type=int, default=None, help="Gas limit to price (default: both operation classes)")
@click.pass_context
def gas(ctx: click.Context, gas_limit: Optional[int]) -> None:
    """Show the current gas price and estimated fees."""
    client = _client(ctx)
    try:
        gas_price = client.fees.gas_price()
        click.echo(f"Gas price: {format_gwei(gas_price)} Gwei ({gas_price} wei)")

        if gas_limit is not None:
            estimates = [("Custom", client.fees.fee_for(gas_price, gas_limit))]
        else:
            estimates = [
                ("ETH transfer", client.fees.fee_for(gas_price, OperationClass.TRANSFER.gas_limit(client.tx_config))),
                ("Contract call", client.fees.fee_for(gas_price, OperationClass.CONTRACT_CALL.gas_limit(client.tx_config))),
            ]
    except ArbClientError as e:
        _fail(e)

    for label, estimate in estimates:
        click.echo(f"\n--- {label} ---")
        click.echo(f"Gas limit: {estimate.gas_limit}")
        click.echo(f"Estimated fee: {format_ether(estimate.fee)} ETH")


@cli.command()
@click.argument("contract", required=False)
@click.pass_context
def query(ctx: click.Context, contract: Optional[str]) -> None:
    """Read name() and symbol() of an ERC20 CONTRACT (default: USDC test token)."""
    contract = contract or config.contract.default_contract
    client = _client(ctx)
    try:
        info = client.contracts.token_info(contract)
    except ArbClientError as e:
        _fail(e)

    click.echo(f"Contract: {info.address}")
    click.echo(f"Name: {info.name}")
    click.echo(f"Symbol: {info.symbol}")


@cli.command()
@click.pass_context
def block(ctx: click.Context) -> None:
    """Show the latest block number."""
    client = _client(ctx)
    try:
        number = client.block_number()
    except ArbClientError as e:
        _fail(e)
    click.echo(f"Latest block number: {number}")


# ============ Transfer ============


@cli.command()
@click.option("--to", "to_address", default=None, help="Recipient (default: TO_ADDRESS)")
@click.option("--amount", default=None, help="Amount in ETH (default: AMOUNT or 0.001)")
@click.option("--gas-limit", type=int, default=None, help="Gas limit override")
@click.option("--timeout", type=float, default=None, help="Seconds to wait for the receipt")
@click.pass_context
def transfer(
    ctx: click.Context,
    to_address: Optional[str],
    amount: Optional[str],
    gas_limit: Optional[int],
    timeout: Optional[float],
) -> None:
    """Send native ETH and wait for the receipt."""
    to_address = to_address or config.transfer.to_address
    amount = amount or config.transfer.amount

    click.echo("=== Arbitrum testnet ETH transfer ===")
    client = _client(ctx)
    try:
        result: TransferResult = client.transfer(
            to_address,
            amount,
            gas_limit=gas_limit,
            on_event=ConsolePresenter(),
            receipt_timeout=timeout,
        )
    except ArbClientError as e:
        _fail(e)

    if result.is_failed:
        _fail(result.error)

    if result.is_confirmed:
        click.secho("\nTransfer succeeded", fg="green")
    else:
        click.secho(f"\nTransfer sent, not yet confirmed: {result.tx_hash}", fg="yellow")


def main() -> None:
    """Entry point for the arb-client CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
