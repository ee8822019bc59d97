"""Configuration management for the DeepBook client."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deepbook_client.core.constants import DEFAULT_RPC_URLS, MAINNET, TESTNET
from deepbook_client.models import BalanceManager
from deepbook_client.utils import normalize_address


class DeepBookSettings(BaseSettings):
    """Network selection, caller identity and RPC endpoint.

    Uses Pydantic v2 settings with environment variable support
    (``DEEPBOOK_`` prefix). Defaults to testnet.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEEPBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    env: str = Field(
        default=TESTNET,
        description="Network name; 'mainnet' or anything else for testnet",
    )
    address: str = Field(
        default="0x0",
        description="Caller address used as sender for dry runs",
    )
    rpc_url: str | None = Field(
        default=None,
        description="Fullnode JSON-RPC URL (derived from env when unset)",
    )
    request_timeout: float = Field(
        default=10.0, gt=0, description="Per-request RPC timeout in seconds"
    )
    admin_cap: str | None = Field(default=None, description="Optional DeepBook admin cap id")
    balance_managers: dict[str, BalanceManager] = Field(
        default_factory=dict,
        description="Balance managers by key, as JSON in DEEPBOOK_BALANCE_MANAGERS",
    )
    log_dir: Path = Field(default=Path("logs"), description="Directory for logs")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Normalize the caller address."""
        return normalize_address(v)

    @property
    def resolved_rpc_url(self) -> str:
        """RPC URL to use, falling back to the public fullnode of the network."""
        if self.rpc_url:
            return self.rpc_url
        return DEFAULT_RPC_URLS[MAINNET if self.env == MAINNET else TESTNET]


def load_settings() -> DeepBookSettings:
    """Load settings from environment and .env file."""
    return DeepBookSettings()
