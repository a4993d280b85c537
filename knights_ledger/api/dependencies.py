"""FastAPI dependencies for dependency injection."""

import logging
from typing import Optional

from fastapi import Depends, Header

from knights_ledger.config import Config
from knights_ledger.datasources import DataSource
from knights_ledger.services import AuthorizationError, verify_sync_secret
from knights_ledger.store import SalesStore, create_admin_store

logger = logging.getLogger(__name__)

# Global instances - initialized at app startup
_config: Config | None = None
_datasource: DataSource | None = None
_store: SalesStore | None = None
_admin_store: SalesStore | None = None


def set_config(config: Config) -> None:
    """Set the global config instance."""
    global _config
    _config = config


def get_config() -> Config:
    """Get the global config, loading it from the environment on first use."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def set_datasource(datasource: DataSource) -> None:
    """Set the global datasource instance."""
    global _datasource
    _datasource = datasource


def get_datasource() -> DataSource:
    """Get the global datasource instance for dependency injection."""
    if _datasource is None:
        raise RuntimeError("DataSource not initialized. Call set_datasource() first.")
    return _datasource


def set_store(store: SalesStore | None) -> None:
    """Set the global read store."""
    global _store
    _store = store


def get_store() -> SalesStore:
    """Get the read store used by the leaderboard."""
    if _store is None:
        raise RuntimeError("SalesStore not initialized. Call set_store() first.")
    return _store


def set_admin_store(store: SalesStore | None) -> None:
    """Set the global write store."""
    global _admin_store
    _admin_store = store


def get_admin_store() -> SalesStore:
    """
    Get the write store, building it on first use.

    Raises:
        ConfigurationError: If ADMIN_DATABASE_URL is not configured.
    """
    global _admin_store
    if _admin_store is None:
        _admin_store = create_admin_store(get_config())
    return _admin_store


def verify_sync_trigger(
    authorization: Optional[str] = Header(None),
    config: Config = Depends(get_config),
) -> None:
    """Reject sync triggers that do not carry the shared secret."""
    try:
        verify_sync_secret(authorization, config.sync_secret_key)
    except AuthorizationError:
        logger.warning("Unauthorized sync attempt")
        raise
