# backend/rentdesk/api/v1/dashboard.py
"""
Dashboard API - per-account summary statistics
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.dependencies import AccountContext, get_account_context
from rentdesk.db.database import get_database, get_db
from rentdesk.schemas.dashboard import CachedStats, DashboardStats
from rentdesk.services.aggregator import DashboardAggregator, write_back_in_background

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    request: Request,
    background_tasks: BackgroundTasks,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    """
    Live dashboard figures.

    The account's cached stats are brought up to date after the response
    has been sent.
    """
    stats = await DashboardAggregator(db, request.app.state.settings).compute_stats(ctx.account_id)
    # the write-back runs in its own session; end this read transaction first
    await db.commit()
    if stats.degraded:
        logger.warning("Serving degraded dashboard stats", extra={"account_id": ctx.account_id})
    else:
        background_tasks.add_task(write_back_in_background, get_database(request), ctx.account_id, stats)
    return stats


@router.get("/stats/cached", response_model=CachedStats)
async def get_cached_stats(
    request: Request,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardAggregator(db, request.app.state.settings).read_stats(ctx.account_id)


@router.post("/stats/refresh", response_model=DashboardStats)
async def refresh_dashboard_stats(
    request: Request,
    ctx: AccountContext = Depends(get_account_context),
    db: AsyncSession = Depends(get_db),
):
    """Recompute and store the cached figures now"""
    return await DashboardAggregator(db, request.app.state.settings).refresh_stats(ctx.account_id)
