# services/rollover.py
"""
Day rollover - what the entry form shows when a business date is selected.

If an entry is already stored for the date it is loaded for editing.
Otherwise a fresh day is built: every field at its default, except each
pump's opening reading, carried over from the previous day's closing reading.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from crud.sales import get_entry, get_latest_entry_for_date, orm_to_entry
from schemas.sales import DailyEntry, DayState

logger = logging.getLogger(__name__)


def previous_day(d: date) -> date:
    return d - timedelta(days=1)


def fresh_entry(sale_date: date, previous: Optional[DailyEntry] = None, entry_number: int = 1) -> DailyEntry:
    entry = DailyEntry(sale_date=sale_date, entry_number=entry_number)
    if previous is None:
        return entry

    closing = {p.pump_id: p.closing_reading for p in previous.pump_readings}
    entry.pump_readings = [
        p.model_copy(update={"opening_reading": closing.get(p.pump_id, 0.0)})
        for p in entry.pump_readings
    ]
    return entry


async def load_day(
    db: AsyncSession, station_id: str, sale_date: date, entry_number: int = 1
) -> DayState:
    existing = await get_entry(db, station_id, sale_date, entry_number)
    if existing is not None:
        return DayState(mode="existing", entry=orm_to_entry(existing))

    prev_row = await get_latest_entry_for_date(db, station_id, previous_day(sale_date))
    previous = orm_to_entry(prev_row) if prev_row is not None else None

    if previous is None:
        logger.info(f"No entry for {previous_day(sale_date)}; opening readings start at zero")

    return DayState(mode="fresh", entry=fresh_entry(sale_date, previous, entry_number))
