"""Application configuration."""

import os
from dataclasses import dataclass
from typing import Optional


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing."""


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # API settings
    host: str = "0.0.0.0"
    port: int = 8000

    # Magic Eden API
    magiceden_api_url: str = "https://api-mainnet.magiceden.dev/v2"

    # The single collection this deployment tracks
    collection_symbol: str = "vibe_knights"

    # Storage. The read URL is used by the leaderboard; the admin URL
    # is only needed by the sync job that writes sales.
    database_url: str = "sqlite+aiosqlite:///./data/ledger.db"
    admin_database_url: Optional[str] = None

    # Shared secret expected in the sync trigger's Authorization header
    sync_secret_key: Optional[str] = None

    # "even_split" or "full_credit"
    leaderboard_credit_policy: str = "even_split"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            magiceden_api_url=os.getenv(
                "MAGICEDEN_API_URL",
                "https://api-mainnet.magiceden.dev/v2"
            ),
            collection_symbol=os.getenv("COLLECTION_SYMBOL", "vibe_knights"),
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./data/ledger.db"
            ),
            admin_database_url=os.getenv("ADMIN_DATABASE_URL") or None,
            sync_secret_key=os.getenv("SYNC_SECRET_KEY") or None,
            leaderboard_credit_policy=os.getenv(
                "LEADERBOARD_CREDIT_POLICY",
                "even_split"
            ),
        )

    def require_admin_database_url(self) -> str:
        """Return the admin store URL or fail fast if it is not set."""
        if not self.admin_database_url:
            raise ConfigurationError("ADMIN_DATABASE_URL is not defined")
        return self.admin_database_url
