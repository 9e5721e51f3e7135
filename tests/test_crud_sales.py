from datetime import date

import pytest
from sqlalchemy.exc import SQLAlchemyError

import crud.sales
from conftest import make_entry
from database import AsyncSessionLocal
from constants.station_config import STATION_ID
from crud.sales import delete_entry, fetch_entries, get_entry, orm_to_entry, save_entry
from schemas.sales import LubricantItem, LubricantLedger


class TestSaveEntry:

    async def test_first_save_creates(self, db, sample_entry):
        row, created = await save_entry(db, STATION_ID, sample_entry)

        assert created is True
        assert row.total_income == 5794.94
        assert len(row.pump_readings) == 8
        assert len(row.payment_methods) == 2
        assert len(row.cash_denominations) == 2
        assert {c.cashier_group: c.total_cash for c in row.cash_denominations} == {
            "group1": 1345.5,
            "group2": 1000.0,
        }

    async def test_second_save_updates_and_replaces_children(self, db, sample_entry):
        sample_entry.lubricant.items.append(LubricantItem(name="Coolant", count=1, unit_price=90))
        await save_entry(db, STATION_ID, sample_entry)

        sample_entry.lubricant = LubricantLedger(total_litres=2, total_amount=660)
        row, created = await save_entry(db, STATION_ID, sample_entry)

        assert created is False
        assert len(row.lubricant_sales) == 1
        assert len(await fetch_entries(db, STATION_ID)) == 1

        stored = orm_to_entry(await get_entry(db, STATION_ID, sample_entry.sale_date))
        assert stored.lubricant.total_amount == 660.0
        assert stored.lubricant.items == [LubricantItem()]

    async def test_round_trip_keeps_every_ledger(self, db, sample_entry):
        await save_entry(db, STATION_ID, sample_entry)

        stored = orm_to_entry(await get_entry(db, STATION_ID, sample_entry.sale_date))

        assert stored.pump_readings == sample_entry.pump_readings
        assert stored.lubricant == sample_entry.lubricant
        assert stored.payments == sample_entry.payments
        assert stored.cash == sample_entry.cash
        assert stored.created_at is not None

    async def test_entry_numbers_are_separate_rows(self, db):
        await save_entry(db, STATION_ID, make_entry(date(2024, 3, 1), 1))
        await save_entry(db, STATION_ID, make_entry(date(2024, 3, 1), 2))

        assert await get_entry(db, STATION_ID, date(2024, 3, 1), 2) is not None
        assert len(await fetch_entries(db, STATION_ID, date(2024, 3, 1))) == 2

    async def test_other_station_is_invisible(self, db, sample_entry):
        await save_entry(db, "another-station", sample_entry)
        assert await fetch_entries(db, STATION_ID) == []

    async def test_failed_save_rolls_back_every_ledger(self, db, sample_entry, monkeypatch):
        await save_entry(db, STATION_ID, sample_entry)

        def _broken_cash_rows(entry):
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(crud.sales, "_cash_rows", _broken_cash_rows)
        changed = sample_entry.model_copy(deep=True)
        changed.pump("petrol1").closing_reading = 1100.0
        changed.lubricant = LubricantLedger(total_litres=5, total_amount=1650)
        changed.payments.group1.upi = 1.0

        with pytest.raises(SQLAlchemyError):
            await save_entry(db, STATION_ID, changed)

        async with AsyncSessionLocal() as other:
            row = await get_entry(other, STATION_ID, sample_entry.sale_date)
            stored = orm_to_entry(row)

        assert stored.pump_readings == sample_entry.pump_readings
        assert stored.lubricant == sample_entry.lubricant
        assert stored.payments == sample_entry.payments
        assert stored.cash == sample_entry.cash
        assert row.total_income == 5794.94


class TestFetchAndDelete:

    async def test_fetch_order_and_limit(self, db):
        for d, n in [(date(2024, 3, 2), 1), (date(2024, 3, 1), 1), (date(2024, 3, 2), 2)]:
            await save_entry(db, STATION_ID, make_entry(d, n))

        newest = await fetch_entries(db, STATION_ID)
        assert [(r.sale_date.day, r.entry_number) for r in newest] == [(2, 2), (2, 1), (1, 1)]

        oldest = await fetch_entries(db, STATION_ID, descending=False, limit=2)
        assert [(r.sale_date.day, r.entry_number) for r in oldest] == [(1, 1), (2, 1)]

    async def test_delete_removes_entry(self, db, sample_entry):
        await save_entry(db, STATION_ID, sample_entry)

        assert await delete_entry(db, STATION_ID, sample_entry.sale_date, 1) is True
        assert await get_entry(db, STATION_ID, sample_entry.sale_date) is None
        assert await delete_entry(db, STATION_ID, sample_entry.sale_date, 1) is False
