# tests/conftest.py
# ---------------------------------------------------------------------
# - Point the app at a throwaway SQLite file before anything imports it
# - Every test that touches storage starts from an empty schema
# - API tests share one TestClient per test (startup hook creates tables)
# ---------------------------------------------------------------------

import os
import tempfile
from datetime import date
from pathlib import Path

_DB_DIR = Path(tempfile.mkdtemp(prefix="fuel-station-tests-"))
os.environ["FUEL_DB_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}"

import pytest
from fastapi.testclient import TestClient

import models  # noqa: F401  (registers the tables on Base.metadata)
from constants.station_config import ROLE_PASSWORDS
from database import AsyncSessionLocal, Base, engine
from main import app
from schemas.sales import CashGroup, DailyEntry, LubricantItem, LubricantLedger, PaymentGroup


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


# ---------- Storage ----------
@pytest.fixture
async def db():
    await _reset_schema()
    async with AsyncSessionLocal() as session:
        yield session


# ---------- API ----------
@pytest.fixture
def client():
    with TestClient(app) as c:
        c.portal.call(_reset_schema)
        yield c


@pytest.fixture
def login(client):
    """Sign in as a role and return the bearer header for it."""

    def _login(role: str = "Manager") -> dict:
        r = client.post(
            "/api/auth/login",
            json={"role": role, "password": ROLE_PASSWORDS[role]},
        )
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _login


# ---------- Sample data ----------
def make_entry(sale_date: date, entry_number: int = 1, **pump_overrides) -> DailyEntry:
    """
    A balanced day: petrol1 sells 50.5 L, lubricants bring 650,
    digital payments 3449.44 and counted cash 2345.50.
    """
    entry = DailyEntry(sale_date=sale_date, entry_number=entry_number)
    readings = {
        "petrol1": (1000.0, 1050.5),
        **pump_overrides,
    }
    entry.pump_readings = [
        p.model_copy(update={
            "opening_reading": readings[p.pump_id][0],
            "closing_reading": readings[p.pump_id][1],
        }) if p.pump_id in readings else p
        for p in entry.pump_readings
    ]
    entry.lubricant = LubricantLedger(
        items=[LubricantItem(name="2T Oil", count=2, unit_price=150)],
        yesterday_reading=120.0,
        today_reading=119.0,
        total_litres=1.0,
        total_amount=330.0,
        distilled_water=20.0,
        waste=0.0,
    )
    entry.payments.group1 = PaymentGroup(upi=2000)
    entry.payments.group2 = PaymentGroup(debit=1449.44)
    entry.cash.group1 = CashGroup(rs_500=2, rs_100=3, coins=45.50)
    entry.cash.group2 = CashGroup(rs_500=2)
    return entry


@pytest.fixture
def sample_entry():
    return make_entry(date(2024, 3, 1))
