"""
Configuration management for the Arbitrum client

Loads settings from environment variables and .env file.
Includes logging configuration with file output and correlation ID support.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

from dotenv import load_dotenv


def _load_env_file():
    """Load .env from the project root, then from the working directory"""
    current = Path(__file__).parent.parent  # arb_client package parent
    env_file = current / ".env"

    if env_file.exists():
        load_dotenv(env_file)

    cwd_env = Path.cwd() / ".env"
    if cwd_env.exists() and cwd_env != env_file:
        load_dotenv(cwd_env)


# Load .env on module import
_load_env_file()


def _get_env(key: str, default: Optional[str] = "") -> Optional[str]:
    """Get environment variable with default"""
    value = os.getenv(key)
    if value is None:
        return default
    return value


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid float value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as int"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid int value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as bool"""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


# Arbitrum Sepolia public endpoint
DEFAULT_RPC_URL = "https://sepolia-rollup.arbitrum.io/rpc"
DEFAULT_TO_ADDRESS = "0x741CD80d41eDE318feD4010E296704a061f4115a"
DEFAULT_AMOUNT = "0.001"
# USDC test token on Arbitrum Sepolia
DEFAULT_CONTRACT_ADDRESS = "0x75faf114eafb1BDbe2F0316DF893fd58CE46AA4d"
DEFAULT_EXPLORER_URL = "https://sepolia.arbiscan.io"


@dataclass
class RpcConfig:
    """RPC client configuration"""
    url: str = field(default_factory=lambda: _get_env("ARB_RPC_URL", DEFAULT_RPC_URL))
    timeout_seconds: float = field(default_factory=lambda: _get_env_float("RPC_TIMEOUT_SECONDS", 30.0))


@dataclass
class SignerConfig:
    """Signer configuration: name of the environment variable holding the private key"""
    private_key_env: str = field(default_factory=lambda: _get_env("SIGNER_KEY_ENV", "PRIVATE_KEY"))


@dataclass
class TxConfig:
    """Transaction configuration"""
    # Plain native transfer
    transfer_gas_limit: int = field(default_factory=lambda: _get_env_int("TX_TRANSFER_GAS_LIMIT", 21_000))
    # Flows that touch contract code; fixed upper bound, not simulated
    contract_gas_limit: int = field(default_factory=lambda: _get_env_int("TX_CONTRACT_GAS_LIMIT", 300_000))
    receipt_timeout: float = field(default_factory=lambda: _get_env_float("TX_RECEIPT_TIMEOUT", 120.0))
    receipt_poll_interval: float = field(default_factory=lambda: _get_env_float("TX_RECEIPT_POLL_INTERVAL", 2.0))
    # Safety margin added to the estimated fee before the balance check (0 = none)
    fee_buffer_bps: int = field(default_factory=lambda: _get_env_int("TX_FEE_BUFFER_BPS", 0))


@dataclass
class TransferConfig:
    """Defaults for the transfer command"""
    to_address: str = field(default_factory=lambda: _get_env("TO_ADDRESS", DEFAULT_TO_ADDRESS))
    amount: str = field(default_factory=lambda: _get_env("AMOUNT", DEFAULT_AMOUNT))


@dataclass
class ContractConfig:
    """Defaults for read-only contract queries"""
    default_contract: str = field(default_factory=lambda: _get_env("CONTRACT_ADDRESS", DEFAULT_CONTRACT_ADDRESS))


@dataclass
class ExplorerConfig:
    """Block explorer used for transaction links"""
    base_url: str = field(default_factory=lambda: _get_env("EXPLORER_URL", DEFAULT_EXPLORER_URL))

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.base_url.rstrip('/')}/tx/{tx_hash}"


@dataclass
class LoggingConfig:
    """
    Logging configuration with file output and correlation ID support.

    Environment variables:
        LOG_FILE: Path to log file (empty disables file logging)
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: WARNING)
        LOG_FORMAT: Custom log format string
        LOG_CONSOLE: Enable console output (default: true)
        LOG_MAX_BYTES: Max log file size before rotation (default: 10MB)
        LOG_BACKUP_COUNT: Number of backup files to keep (default: 5)

    Example .env:
        LOG_LEVEL=DEBUG
        LOG_FILE=logs/arb_client.log
    """
    log_file: str = field(default_factory=lambda: _get_env("LOG_FILE", ""))

    # The CLI narrates on stdout; logs stay quiet unless asked for
    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "WARNING"))

    log_format: str = field(default_factory=lambda: _get_env(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))

    console_output: bool = field(default_factory=lambda: _get_env_bool("LOG_CONSOLE", True))

    max_bytes: int = field(default_factory=lambda: _get_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB
    backup_count: int = field(default_factory=lambda: _get_env_int("LOG_BACKUP_COUNT", 5))

    @property
    def level(self) -> int:
        """Get numeric log level"""
        return getattr(logging, self.log_level.upper(), logging.WARNING)


@dataclass
class Config:
    """
    Main configuration container

    Loads all settings from environment variables and .env file.

    Usage:
        from arb_client.config import config

        print(config.rpc.url)
        print(config.tx.transfer_gas_limit)
    """
    rpc: RpcConfig = field(default_factory=RpcConfig)
    signer: SignerConfig = field(default_factory=SignerConfig)
    tx: TxConfig = field(default_factory=TxConfig)
    transfer: TransferConfig = field(default_factory=TransferConfig)
    contract: ContractConfig = field(default_factory=ContractConfig)
    explorer: ExplorerConfig = field(default_factory=ExplorerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def reload(cls) -> "Config":
        """Reload configuration from environment"""
        _load_env_file()
        return cls()


# Global config instance
config = Config()


def get_config() -> Config:
    """Get global configuration instance"""
    return config


def reload_config() -> Config:
    """Reload and return new configuration"""
    global config
    config = Config.reload()
    return config


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "arb_client",
) -> logging.Logger:
    """
    Set up logging based on configuration.

    Creates handlers for file and/or console output with optional rotation.
    The log file directory is created automatically if it doesn't exist.

    Args:
        log_config: Logging configuration (uses global config if None)
        logger_name: Name of the logger to configure (default: arb_client)

    Returns:
        Configured logger instance
    """
    if log_config is None:
        log_config = config.logging

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_config.level)

    # Close and remove existing handlers to avoid duplicates on reload
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(log_config.log_format)

    handlers: List[logging.Handler] = []

    if log_config.log_file:
        from logging.handlers import RotatingFileHandler

        log_path = Path(log_config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_config.log_file,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding='utf-8',
        )
        file_handler.setLevel(log_config.level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Console logs go to stderr so they never mix with command output
    if log_config.console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_config.level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    for handler in handlers:
        logger.addHandler(handler)

    if log_config.log_file:
        logger.info(f"Logging initialized: file={log_config.log_file}, level={log_config.log_level}")

    return logger
