"""API routes for the collection ledger service."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from knights_ledger.config import Config
from knights_ledger.datasources import DataSource, UpstreamFetchError
from knights_ledger.models import LeaderboardEntry, WalletVolume
from knights_ledger.services import (
    CreditPolicy,
    LeaderboardService,
    SyncService,
    Timeframe,
    VolumeService,
)
from knights_ledger.store import SalesStore
from .dependencies import (
    get_admin_store,
    get_config,
    get_datasource,
    get_store,
    verify_sync_trigger,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

LEADERBOARD_CACHE_CONTROL = "s-maxage=60, stale-while-revalidate"


@router.post(
    "/sync-leaderboard",
    dependencies=[Depends(verify_sync_trigger)],
)
async def sync_leaderboard(
    config: Config = Depends(get_config),
    datasource: DataSource = Depends(get_datasource),
    store: SalesStore = Depends(get_admin_store),
):
    """
    Pull recent sales for the configured collection into the store.

    Requires 'Authorization: Bearer <SYNC_SECRET_KEY>'.

    Returns: success, message, count
    """
    service = SyncService(datasource, store, config.collection_symbol)
    try:
        result = await service.run()
    except Exception as e:
        logger.error(f"[Sync] Fatal error: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": f"Internal Server Error: {e}"},
        )

    if not result.success:
        return JSONResponse(status_code=500, content={"error": result.message})

    return {
        "success": True,
        "message": result.message,
        "count": result.count,
    }


@router.get(
    "/leaderboard",
    response_model=list[LeaderboardEntry],
    response_model_exclude_none=True,
)
async def get_leaderboard(
    response: Response,
    timeframe: str = Query(
        Timeframe.ALL_TIME.value,
        description="Window: daily, monthly or allTime",
        example="daily"
    ),
    config: Config = Depends(get_config),
    store: SalesStore = Depends(get_store),
):
    """
    Get the top 50 wallets by traded volume.

    Returns ranked list: rank, address, volume, avatar, donated, burned
    """
    # Parse timeframe and policy
    try:
        leaderboard_timeframe = Timeframe(timeframe)
    except ValueError:
        leaderboard_timeframe = Timeframe.ALL_TIME

    try:
        policy = CreditPolicy(config.leaderboard_credit_policy)
    except ValueError:
        policy = CreditPolicy.EVEN_SPLIT

    service = LeaderboardService(store, config.collection_symbol)
    try:
        leaderboard = await service.get_leaderboard(
            timeframe=leaderboard_timeframe,
            policy=policy,
        )
    except Exception as e:
        logger.error(f"Error fetching leaderboard: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch leaderboard data", "details": str(e)},
        )

    response.headers["Cache-Control"] = LEADERBOARD_CACHE_CONTROL
    return leaderboard


@router.get("/volume", response_model=WalletVolume)
async def get_volume(
    address: Optional[str] = Query(
        None,
        description="Wallet address",
    ),
    datasource: DataSource = Depends(get_datasource),
):
    """
    Get realized trade volume for a wallet from its recent marketplace activity.

    Returns: address, volume
    """
    if not address:
        return JSONResponse(status_code=400, content={"error": "Address is required"})

    service = VolumeService(datasource)
    try:
        return await service.get_volume(address)
    except UpstreamFetchError as e:
        logger.error(f"Error fetching volume: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch volume data"})
