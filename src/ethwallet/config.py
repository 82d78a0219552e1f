"""Application configuration using pydantic-settings.

RPC endpoints are tried in the order listed; the first one is preferred.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ETH_RPC_URLS = [
    "https://eth.llamarpc.com",
    "https://1rpc.io/eth",
    "https://ethereum-rpc.publicnode.com",
    "https://rpc.ankr.com/eth",
    "https://cloudflare-eth.com",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Chain RPC Endpoints
    # ======================
    eth_rpc_urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ETH_RPC_URLS),
        description="Ethereum JSON-RPC endpoints in priority order",
    )
    rpc_timeout: float = Field(
        default=10.0, description="Per-endpoint request timeout in seconds"
    )
    rpc_backoff: float = Field(
        default=0.5, description="Delay before trying the next endpoint, in seconds"
    )

    # ======================
    # Wallet Storage
    # ======================
    wallet_store_path: str = Field(
        default="./data/wallet.store", description="Encrypted wallet store location"
    )
    master_key: Optional[str] = Field(
        default=None, description="Master encryption key for the wallet store (Fernet key)"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def has_master_key(self) -> bool:
        """Check if the store encryption key is configured."""
        return bool(self.master_key)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "eth_rpc_urls": list(self.eth_rpc_urls),
            "rpc_timeout": self.rpc_timeout,
            "rpc_backoff": self.rpc_backoff,
            "wallet_store_path": self.wallet_store_path,
            "master_key": "***" if self.master_key else "(not set)",
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
