"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Public fullnode REST endpoints per network
NETWORK_NODE_URLS: dict[str, str] = {
    "mainnet": "https://fullnode.mainnet.aptoslabs.com/v1",
    "testnet": "https://fullnode.testnet.aptoslabs.com/v1",
    "devnet": "https://fullnode.devnet.aptoslabs.com/v1",
    "local": "http://127.0.0.1:8080/v1",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Aptos network name (mainnet, testnet, devnet, local)
    aptos_network: str = "devnet"

    # Explicit fullnode REST URL, overrides the network default
    aptos_node_url: str = ""

    # Account address the signal_registry module is published under
    aptos_module_address: str = "0x1"

    # Seconds to wait for a submitted transaction to leave the mempool
    confirm_timeout: float = 20.0

    # Seconds between confirmation polls
    poll_interval: float = 0.5

    # HTTP request timeout seconds
    http_timeout: float = 30.0

    # SQLite database path for locally stored signals
    db_path: Path = Path.home() / ".aptos-signals" / "signals.db"

    # HTTP API bind address
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @field_validator("aptos_network")
    @classmethod
    def _known_network(cls, v: str) -> str:
        v = v.lower()
        if v not in NETWORK_NODE_URLS:
            raise ValueError(
                f"aptos_network must be one of {sorted(NETWORK_NODE_URLS)}, got {v!r}"
            )
        return v

    @field_validator("confirm_timeout", "poll_interval", "http_timeout")
    @classmethod
    def _positive_seconds(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeouts must be > 0, got {v}")
        return v

    @property
    def node_url(self) -> str:
        """Fullnode REST base URL, without a trailing slash."""
        url = self.aptos_node_url or NETWORK_NODE_URLS[self.aptos_network]
        return url.rstrip("/")


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
