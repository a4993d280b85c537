"""Application entry point."""

import argparse
import asyncio
import logging
import sys

import uvicorn

from knights_ledger.config import Config
from knights_ledger.app import create_app
from knights_ledger.datasources import MagicEdenDataSource
from knights_ledger.services import SyncService
from knights_ledger.store import create_admin_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


async def run_sync(config: Config) -> bool:
    """Run a single sync pass outside of the HTTP server."""
    store = create_admin_store(config)
    datasource = MagicEdenDataSource(api_url=config.magiceden_api_url)
    try:
        await store.init_models()
        result = await SyncService(datasource, store, config.collection_symbol).run()
    finally:
        await datasource.close()
        await store.close()

    logging.getLogger(__name__).info(result.message)
    return result.success


def main():
    """Run the application."""
    parser = argparse.ArgumentParser(description="Collection ledger service")
    parser.add_argument(
        "command",
        nargs="?",
        choices=["serve", "sync"],
        default="serve",
        help="serve the API (default) or run one sync pass",
    )
    args = parser.parse_args()

    config = Config.from_env()

    if args.command == "sync":
        ok = asyncio.run(run_sync(config))
        sys.exit(0 if ok else 1)

    app = create_app(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
    )


if __name__ == "__main__":
    main()
