"""Configuration architecture using pydantic-settings for typed environment loading."""

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from ensemble_wallet.wallet.manager import WalletManager


DEFAULT_RPC_URL = "https://sepolia.base.org"


class WalletSettings(BaseSettings):
    """Wallet manager runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ENSEMBLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    home_dir: Path = Field(default_factory=lambda: Path.home() / ".ensemble")
    network: Literal["mainnet", "sepolia", "baseSepolia"] = "baseSepolia"
    rpc_url: str = DEFAULT_RPC_URL
    log_level: str = "INFO"

    @property
    def wallet_dir(self) -> Path:
        """Directory holding one encrypted record file per wallet."""
        return self.home_dir / "wallets"

    @property
    def config_file(self) -> Path:
        """CLI config file that carries the active wallet pointer."""
        return self.home_dir / "config.json"


# Global settings instance - lazily loaded
_settings: WalletSettings | None = None


def get_settings() -> WalletSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = WalletSettings()
    return _settings


def build_wallet_manager(settings: WalletSettings | None = None) -> "WalletManager":
    """Wire a WalletManager with file-backed stores and a web3 chain client."""
    from ensemble_wallet.chain.web3_client import Web3ChainClient
    from ensemble_wallet.persistence.config_store import JsonConfigStore
    from ensemble_wallet.wallet.manager import WalletManager
    from ensemble_wallet.wallet.store import WalletStore

    settings = settings or get_settings()
    return WalletManager(
        store=WalletStore(settings.wallet_dir),
        config_store=JsonConfigStore(settings.config_file),
        chain_client=Web3ChainClient(settings.rpc_url),
    )
