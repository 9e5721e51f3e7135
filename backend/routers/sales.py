# backend/routers/sales.py
import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth import delete_allowed, entry_limit, get_current_session
from constants.station_config import MAX_COUNT
from crud.sales import delete_entry, fetch_entries, get_entry, orm_to_entry, save_entry
from database import async_session_maker, get_db
from schemas.auth import SessionContext
from schemas.sales import (
    DailyEntry,
    DayState,
    EmptyFieldsOut,
    PendingDeleteOut,
    SalesSummary,
    SaveResult,
)
from services.entry_form import find_empty_fields
from services.pending_delete import PendingDeleteManager
from services.reconciliation import summarize
from services.rollover import load_day

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sales", tags=["Daily Sales"])

pending_deletes = PendingDeleteManager()

# ---------------------------
# Utilities
# ---------------------------
def parse_iso_date(s: str) -> date:
    """Try date.fromisoformat first, fall back to datetime parsing."""
    try:
        return date.fromisoformat(s)
    except (TypeError, ValueError):
        try:
            return datetime.fromisoformat(s).date()
        except (TypeError, ValueError):
            raise HTTPException(status_code=422, detail="Invalid date format. Expect YYYY-MM-DD")


def pending_out(pending) -> PendingDeleteOut:
    station_id, sale_date, entry_number = pending.key
    return PendingDeleteOut(
        sale_date=sale_date,
        entry_number=entry_number,
        execute_at=pending.execute_at,
    )


# ---------------------------------------------------
# LOAD DAY (EXISTING OR FRESH WITH CARRIED-OVER READINGS)
# ---------------------------------------------------
@router.get("/day", response_model=DayState)
async def get_day(
    date_str: str = Query(..., alias="date"),
    entry_number: int = Query(1, ge=1, le=MAX_COUNT),
    db: AsyncSession = Depends(get_db),
    ctx: SessionContext = Depends(get_current_session),
):
    sale_date = parse_iso_date(date_str)
    try:
        return await load_day(db, ctx.station_id, sale_date, entry_number)
    except SQLAlchemyError:
        logger.exception(f"Failed to load sales day {sale_date}")
        raise HTTPException(status_code=500, detail="Failed to load sales data")


# ---------------------------------------------------
# LIVE CALCULATION (NOTHING PERSISTED)
# ---------------------------------------------------
@router.post("/calc", response_model=SalesSummary, dependencies=[Depends(get_current_session)])
async def calc_live(entry: DailyEntry):
    return summarize(entry)


# ---------------------------------------------------
# INCOMPLETE-ENTRY WARNING
# ---------------------------------------------------
@router.post("/check", response_model=EmptyFieldsOut, dependencies=[Depends(get_current_session)])
async def check_empty(entry: DailyEntry):
    empty = find_empty_fields(entry)
    return EmptyFieldsOut(empty_fields=empty, has_empty=bool(empty))


# ---------------------------------------------------
# SAVE (UPSERT BY DATE + ENTRY NUMBER)
# ---------------------------------------------------
@router.post("/save", response_model=SaveResult)
async def save_sales(
    entry: DailyEntry,
    db: AsyncSession = Depends(get_db),
    ctx: SessionContext = Depends(get_current_session),
):
    try:
        row, created = await save_entry(db, ctx.station_id, entry)
    except SQLAlchemyError:
        logger.exception(f"Failed to save sales entry {entry.sale_date} #{entry.entry_number}")
        raise HTTPException(status_code=500, detail="Failed to save sales data")

    return SaveResult(
        message="Daily sales data saved successfully",
        created=created,
        sale_date=row.sale_date,
        entry_number=row.entry_number,
        total_income=row.total_income,
    )


# ---------------------------------------------------
# LIST ENTRIES (WITH CHILD LEDGERS)
# ---------------------------------------------------
@router.get("/entries", response_model=List[DailyEntry])
async def list_entries(
    date_str: Optional[str] = Query(None, alias="date"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    limit: Optional[int] = Query(None, ge=1, le=MAX_COUNT),
    db: AsyncSession = Depends(get_db),
    ctx: SessionContext = Depends(get_current_session),
):
    sale_date = parse_iso_date(date_str) if date_str else None

    cap = entry_limit(ctx)
    if cap is not None:
        limit = min(limit, cap) if limit else cap

    try:
        rows = await fetch_entries(db, ctx.station_id, sale_date, descending=(order == "desc"), limit=limit)
    except SQLAlchemyError:
        logger.exception("Failed to fetch sales entries")
        raise HTTPException(status_code=500, detail="Failed to fetch sales data")

    return [orm_to_entry(r) for r in rows]


# ---------------------------------------------------
# DELETE (UNDOABLE FOR A SHORT WINDOW)
# ---------------------------------------------------
@router.delete("/{sale_date}/{entry_number}", response_model=PendingDeleteOut)
async def delete_sales(
    sale_date: str,
    entry_number: int = Path(..., ge=1, le=MAX_COUNT),
    db: AsyncSession = Depends(get_db),
    ctx: SessionContext = Depends(delete_allowed),
):
    parsed = parse_iso_date(sale_date)

    if await get_entry(db, ctx.station_id, parsed, entry_number) is None:
        raise HTTPException(status_code=404, detail="Sales entry not found")

    station_id = ctx.station_id

    async def _deferred_delete():
        async with async_session_maker() as session:
            await delete_entry(session, station_id, parsed, entry_number)

    pending = pending_deletes.schedule((station_id, parsed, entry_number), _deferred_delete)
    return pending_out(pending)


@router.get("/pending-delete", response_model=Optional[PendingDeleteOut],
            dependencies=[Depends(get_current_session)])
async def get_pending_delete():
    pending = pending_deletes.pending
    return pending_out(pending) if pending else None


@router.post("/pending-delete/cancel", dependencies=[Depends(delete_allowed)])
async def cancel_pending_delete():
    cancelled = pending_deletes.cancel()
    return {"cancelled": cancelled}
