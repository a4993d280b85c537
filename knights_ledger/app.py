"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from knights_ledger.config import Config, ConfigurationError
from knights_ledger.datasources import MagicEdenDataSource
from knights_ledger.services import AuthorizationError
from knights_ledger.store import SalesStore, create_admin_store
from knights_ledger.api import router
from knights_ledger.api.dependencies import (
    set_admin_store,
    set_config,
    set_datasource,
    set_store,
)

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. If None, loads from environment.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()

    set_config(config)

    # Create datasource
    datasource = MagicEdenDataSource(api_url=config.magiceden_api_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info("Starting collection ledger API")
        logger.info(f"Using Magic Eden API: {config.magiceden_api_url}")
        logger.info(f"Tracking collection: {config.collection_symbol}")

        store = SalesStore(config.database_url)
        admin_store = None
        if config.admin_database_url:
            admin_store = create_admin_store(config)
            await admin_store.init_models()
        else:
            logger.warning("ADMIN_DATABASE_URL is not set; sync endpoint will fail")
            await store.init_models()

        if not config.sync_secret_key:
            logger.warning("SYNC_SECRET_KEY is not set; all sync triggers will be rejected")

        set_datasource(datasource)
        set_store(store)
        set_admin_store(admin_store)

        yield

        # Shutdown
        logger.info("Shutting down...")
        await datasource.close()
        await store.close()
        if admin_store is not None:
            await admin_store.close()

    app = FastAPI(
        title="Collection Ledger API",
        description="Marketplace sales sync and volume leaderboards for an NFT collection",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.error(f"Configuration error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": f"Internal Server Error: {exc}"},
        )

    # Include API routes
    app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
