from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from auth import entry_limit, get_current_session
from constants.station_config import CHART_WINDOW, TABLE_WINDOW
from crud.sales import fetch_entries, orm_to_entry
from database import get_db
from schemas.auth import SessionContext
from schemas.sales import DailyEntry, SeriesPoint, StatReport
from services.report_aggregator import build_category_totals, build_series

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"])


async def _load_entries(db: AsyncSession, ctx: SessionContext) -> List[DailyEntry]:
    # newest first so a role cap keeps the most recent entries
    try:
        rows = await fetch_entries(db, ctx.station_id, descending=True, limit=entry_limit(ctx))
    except SQLAlchemyError:
        logger.exception("Failed to fetch sales data for reports")
        raise HTTPException(status_code=500, detail="Failed to fetch sales data")
    return [orm_to_entry(r) for r in rows]


@router.get("/series", response_model=List[SeriesPoint])
async def revenue_series(
    window: Optional[int] = Query(CHART_WINDOW, ge=1),
    db: AsyncSession = Depends(get_db),
    ctx: SessionContext = Depends(get_current_session),
):
    entries = await _load_entries(db, ctx)
    return build_series(entries, window)


@router.get("/stat", response_model=StatReport)
async def stat_report(
    db: AsyncSession = Depends(get_db),
    ctx: SessionContext = Depends(get_current_session),
):
    """
    Everything the stat page shows in one call:
    chart series (last 30), table rows (last 10) and category totals over all fetched entries.
    """
    entries = await _load_entries(db, ctx)
    return StatReport(
        chart=build_series(entries, CHART_WINDOW),
        table=build_series(entries, TABLE_WINDOW),
        totals=build_category_totals(entries),
        entries_considered=len(entries),
    )
