"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.

Blockchain settings accept two spellings for each variable (for example
``BLOCKCHAIN_RPC_URL`` or ``RPC_URL``); the first one found wins.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from learninggrowth.chain.errors import ConfigurationError

BUNDLED_ABI_DIR = Path(__file__).resolve().parent.parent / "contracts"

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


@dataclass(frozen=True)
class BlockchainEnvironmentConfig:
    """Connection settings for the JSON-RPC endpoint."""

    rpc_url: str
    private_key: Optional[str] = None
    chain_id: Optional[int] = None


@dataclass(frozen=True)
class ContractAddresses:
    """Deployed contract addresses, when configured."""

    class_scheduler: Optional[str] = None
    learning_points_token: Optional[str] = None


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="Server host address to bind to",
        validation_alias=AliasChoices("LEARNINGGROWTH_SERVER_HOST"),
    )
    server_port: int = Field(
        default=3000,
        description="Server port number",
        validation_alias=AliasChoices("LEARNINGGROWTH_SERVER_PORT", "PORT"),
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        validation_alias=AliasChoices("LEARNINGGROWTH_LOG_LEVEL"),
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        validation_alias=AliasChoices("LEARNINGGROWTH_LOG_FORMAT", "LOG_FORMAT"),
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file when file logging is enabled",
        validation_alias=AliasChoices("LEARNINGGROWTH_LOG_FILE_DIR", "LOG_FILE_DIR"),
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Also write logs to a file",
        validation_alias=AliasChoices("LEARNINGGROWTH_ENABLE_FILE_LOGGING", "ENABLE_FILE_LOGGING"),
    )

    # =====================================================================
    # Blockchain Configuration
    # =====================================================================
    rpc_url: Optional[str] = Field(
        default=None,
        description="JSON-RPC endpoint of the blockchain node",
        validation_alias=AliasChoices("BLOCKCHAIN_RPC_URL", "RPC_URL"),
    )
    private_key: Optional[str] = Field(
        default=None,
        description="Private key used to sign transactions",
        validation_alias=AliasChoices("BLOCKCHAIN_PRIVATE_KEY", "PRIVATE_KEY"),
    )
    chain_id: Optional[int] = Field(
        default=None,
        description="Chain id of the network; queried from the node when unset",
        validation_alias=AliasChoices("BLOCKCHAIN_CHAIN_ID", "CHAIN_ID"),
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for a single JSON-RPC request",
        validation_alias=AliasChoices("BLOCKCHAIN_REQUEST_TIMEOUT"),
    )
    receipt_timeout: float = Field(
        default=120.0,
        description="Seconds to wait for a transaction receipt",
        validation_alias=AliasChoices("BLOCKCHAIN_RECEIPT_TIMEOUT"),
    )

    # =====================================================================
    # Contract Configuration
    # =====================================================================
    class_scheduler_address: Optional[str] = Field(
        default=None,
        description="Address of the deployed ClassScheduler contract",
        validation_alias=AliasChoices("CLASS_SCHEDULER_ADDRESS"),
    )
    learning_points_token_address: Optional[str] = Field(
        default=None,
        description="Address of the deployed LearningPointsToken contract",
        validation_alias=AliasChoices("LEARNING_POINTS_TOKEN_ADDRESS"),
    )
    class_scheduler_abi_path: str = Field(
        default=str(BUNDLED_ABI_DIR / "ClassScheduler.json"),
        description="Path to the ClassScheduler ABI JSON file",
        validation_alias=AliasChoices("CLASS_SCHEDULER_ABI_PATH"),
    )
    learning_points_token_abi_path: str = Field(
        default=str(BUNDLED_ABI_DIR / "LearningPointsToken.json"),
        description="Path to the LearningPointsToken ABI JSON file",
        validation_alias=AliasChoices("LEARNING_POINTS_TOKEN_ABI_PATH"),
    )

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], validation_alias=AliasChoices("CORS_ORIGINS"))
    cors_allow_credentials: bool = Field(default=True, validation_alias=AliasChoices("CORS_ALLOW_CREDENTIALS"))
    cors_allow_methods: list[str] = Field(default=["*"], validation_alias=AliasChoices("CORS_ALLOW_METHODS"))
    cors_allow_headers: list[str] = Field(default=["*"], validation_alias=AliasChoices("CORS_ALLOW_HEADERS"))

    @field_validator("chain_id", mode="before")
    @classmethod
    def _ignore_non_numeric_chain_id(cls, value: Any) -> Optional[int]:
        if value is None or value == "":
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @field_validator("rpc_url", "private_key", "class_scheduler_address", "learning_points_token_address")
    @classmethod
    def _blank_as_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration."""
        return CORSConfig(
            origins=self.cors_origins,
            allow_credentials=self.cors_allow_credentials,
            allow_methods=self.cors_allow_methods,
            allow_headers=self.cors_allow_headers,
        )

    @property
    def contracts(self) -> ContractAddresses:
        """Get the configured contract addresses."""
        return ContractAddresses(
            class_scheduler=self.class_scheduler_address,
            learning_points_token=self.learning_points_token_address,
        )


settings = Settings()


def load_blockchain_environment() -> BlockchainEnvironmentConfig:
    """
    Read the blockchain connection settings from the current environment.

    The environment is re-read on every call so that changes made after import
    (tests, process managers injecting secrets) are honoured.

    Raises:
        ConfigurationError: If no RPC URL is configured.
    """
    current = Settings()
    if not current.rpc_url:
        raise ConfigurationError(
            "The BLOCKCHAIN_RPC_URL environment variable is required to connect to the blockchain."
        )
    return BlockchainEnvironmentConfig(
        rpc_url=current.rpc_url,
        private_key=current.private_key,
        chain_id=current.chain_id,
    )


def load_contract_addresses() -> ContractAddresses:
    """Read the deployed contract addresses from the current environment."""
    return Settings().contracts
