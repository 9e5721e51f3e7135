# backend/crud/sales.py
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from constants.station_config import CASHIER_GROUPS, PAYMENT_FIELDS
from models import (
    CashDenominationDB,
    DailySalesDB,
    LubricantSaleDB,
    PaymentMethodDB,
    PumpReadingDB,
)
from schemas.sales import (
    CashDenominations,
    CashGroup,
    DailyEntry,
    LubricantItem,
    LubricantLedger,
    PaymentGroup,
    PaymentMethods,
    PumpReading,
)
from services.ledgers import cash_group_total, compute_sales
from services.reconciliation import total_income
from utils.parsing import round_currency

logger = logging.getLogger(__name__)


def _entry_query(station_id: str):
    # parent with all four child ledgers
    return (
        select(DailySalesDB)
        .options(
            selectinload(DailySalesDB.pump_readings),
            selectinload(DailySalesDB.lubricant_sales),
            selectinload(DailySalesDB.payment_methods),
            selectinload(DailySalesDB.cash_denominations),
        )
        .where(DailySalesDB.station_id == station_id)
    )


# =======================================================
# ROW -> RECORD
# =======================================================
def orm_to_entry(row: DailySalesDB) -> DailyEntry:
    pumps = [
        PumpReading(
            pump_type=p.pump_type,
            pump_number=p.pump_number,
            opening_reading=p.opening_reading,
            closing_reading=p.closing_reading,
            price_per_litre=p.price_per_litre,
        )
        for p in row.pump_readings
    ]

    oil_rows = list(row.lubricant_sales)
    if oil_rows:
        # aggregates are repeated per row; the first one is authoritative
        first = oil_rows[0]
        lubricant = LubricantLedger(
            items=[
                LubricantItem(name=o.oil_name, count=o.oil_count, unit_price=o.oil_price)
                for o in oil_rows
            ],
            yesterday_reading=first.yesterday_reading,
            today_reading=first.today_reading,
            total_litres=first.total_litres,
            total_amount=first.total_amount,
            distilled_water=first.distilled_water,
            waste=first.waste,
        )
    else:
        lubricant = LubricantLedger()

    payments = PaymentMethods()
    for r in row.payment_methods:
        if r.cashier_group in CASHIER_GROUPS:
            setattr(payments, r.cashier_group, PaymentGroup(
                **{f: getattr(r, f) for f in PAYMENT_FIELDS}
            ))

    cash = CashDenominations()
    for r in row.cash_denominations:
        if r.cashier_group in CASHIER_GROUPS:
            setattr(cash, r.cashier_group, CashGroup(
                rs_500=r.rs_500, rs_200=r.rs_200, rs_100=r.rs_100,
                rs_50=r.rs_50, rs_20=r.rs_20, rs_10=r.rs_10,
                coins=r.coins,
            ))

    return DailyEntry(
        sale_date=row.sale_date,
        entry_number=row.entry_number,
        pump_readings=pumps,
        lubricant=lubricant,
        payments=payments,
        cash=cash,
        total_income=row.total_income or 0.0,
        total_expenses=row.total_expenses or 0.0,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# =======================================================
# READ
# =======================================================
async def get_entry(
    db: AsyncSession, station_id: str, sale_date: date, entry_number: int = 1
) -> Optional[DailySalesDB]:
    stmt = _entry_query(station_id).where(
        DailySalesDB.sale_date == sale_date,
        DailySalesDB.entry_number == entry_number,
    )
    return (await db.execute(stmt)).scalars().first()


async def get_latest_entry_for_date(
    db: AsyncSession, station_id: str, sale_date: date
) -> Optional[DailySalesDB]:
    stmt = (
        _entry_query(station_id)
        .where(DailySalesDB.sale_date == sale_date)
        .order_by(DailySalesDB.entry_number.desc())
        .limit(1)
    )
    return (await db.execute(stmt)).scalars().first()


async def fetch_entries(
    db: AsyncSession,
    station_id: str,
    sale_date: Optional[date] = None,
    descending: bool = True,
    limit: Optional[int] = None,
) -> List[DailySalesDB]:
    stmt = _entry_query(station_id)
    if sale_date is not None:
        stmt = stmt.where(DailySalesDB.sale_date == sale_date)

    if descending:
        stmt = stmt.order_by(DailySalesDB.sale_date.desc(), DailySalesDB.entry_number.desc())
    else:
        stmt = stmt.order_by(DailySalesDB.sale_date.asc(), DailySalesDB.entry_number.asc())

    if limit is not None:
        stmt = stmt.limit(limit)

    return (await db.execute(stmt)).scalars().all()


# =======================================================
# SAVE (LOCATE-OR-CREATE + REPLACE CHILD LEDGERS)
# =======================================================
def _pump_rows(entry: DailyEntry) -> List[PumpReadingDB]:
    rows = []
    for p in entry.pump_readings:
        sales = compute_sales(p)
        rows.append(PumpReadingDB(
            pump_type=p.pump_type,
            pump_number=p.pump_number,
            opening_reading=p.opening_reading,
            closing_reading=p.closing_reading,
            price_per_litre=p.price_per_litre,
            sales_litres=sales["litres"],
            sales_amount=sales["amount"],
        ))
    return rows


def _lubricant_rows(entry: DailyEntry) -> List[LubricantSaleDB]:
    oil = entry.lubricant
    return [
        LubricantSaleDB(
            oil_name=item.name,
            oil_count=item.count,
            oil_price=item.unit_price,
            yesterday_reading=oil.yesterday_reading,
            today_reading=oil.today_reading,
            total_litres=oil.total_litres,
            total_amount=oil.total_amount,
            distilled_water=oil.distilled_water,
            waste=oil.waste,
        )
        for item in oil.items
    ]


def _payment_rows(entry: DailyEntry) -> List[PaymentMethodDB]:
    return [
        PaymentMethodDB(cashier_group=g, **getattr(entry.payments, g).model_dump())
        for g in CASHIER_GROUPS
    ]


def _cash_rows(entry: DailyEntry) -> List[CashDenominationDB]:
    rows = []
    for g in CASHIER_GROUPS:
        group = getattr(entry.cash, g)
        rows.append(CashDenominationDB(
            cashier_group=g,
            total_cash=round_currency(cash_group_total(group)),
            **group.model_dump(),
        ))
    return rows


async def save_entry(
    db: AsyncSession, station_id: str, entry: DailyEntry
) -> Tuple[DailySalesDB, bool]:
    """
    Upsert the entry for (date, entry_number) and replace its four child
    ledgers. Everything is committed in one transaction; on failure the
    session is rolled back and the stored entry is left as it was.

    Returns (row, created).
    """
    try:
        row = await get_entry(db, station_id, entry.sale_date, entry.entry_number)
        created = row is None

        if created:
            row = DailySalesDB(
                station_id=station_id,
                sale_date=entry.sale_date,
                entry_number=entry.entry_number,
                pump_readings=[],
                lubricant_sales=[],
                payment_methods=[],
                cash_denominations=[],
            )
            db.add(row)

        row.total_income = round_currency(total_income(entry))
        row.total_expenses = 0.0
        row.updated_at = datetime.now()

        # orphaned children are deleted by the relationship cascade
        row.pump_readings = _pump_rows(entry)
        row.lubricant_sales = _lubricant_rows(entry)
        row.payment_methods = _payment_rows(entry)
        row.cash_denominations = _cash_rows(entry)

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        f"{'➕ Created' if created else '✏️  Updated'} sales entry "
        f"{entry.sale_date} #{entry.entry_number} (income {row.total_income:.2f})"
    )
    return row, created


# =======================================================
# DELETE (CHILDREN CASCADE)
# =======================================================
async def delete_entry(
    db: AsyncSession, station_id: str, sale_date: date, entry_number: int
) -> bool:
    try:
        row = await get_entry(db, station_id, sale_date, entry_number)
        if row is None:
            return False
        await db.delete(row)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(f"🗑️  Deleted sales entry {sale_date} #{entry_number}")
    return True
