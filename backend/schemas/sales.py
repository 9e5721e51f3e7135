from datetime import date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from constants.station_config import (
    DEFAULT_PUMP_PRICES,
    MAX_COUNT,
    PUMP_NUMBERS,
    PUMP_TYPES,
)
from utils.parsing import parse_count, parse_decimal

PumpType = Literal["petrol", "diesel"]
CashierGroup = Literal["group1", "group2"]


# ==========================================================
#  LEDGER RECORDS
# ==========================================================

class PumpReading(BaseModel):
    pump_type: PumpType
    pump_number: int = Field(ge=1, le=4)
    opening_reading: float = 0.0
    closing_reading: float = 0.0
    price_per_litre: float = 0.0

    @field_validator("opening_reading", "closing_reading", "price_per_litre", mode="before")
    @classmethod
    def _coerce_decimal(cls, v):
        return parse_decimal(v)

    @property
    def pump_id(self) -> str:
        return f"{self.pump_type}{self.pump_number}"


def default_pump_readings() -> List[PumpReading]:
    return [
        PumpReading(
            pump_type=t,
            pump_number=n,
            price_per_litre=DEFAULT_PUMP_PRICES[t],
        )
        for t in PUMP_TYPES
        for n in PUMP_NUMBERS
    ]


class LubricantItem(BaseModel):
    name: str = ""
    count: int = 0
    unit_price: float = 0.0

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v):
        return "" if v is None else str(v)

    @field_validator("count", mode="before")
    @classmethod
    def _coerce_count(cls, v):
        return parse_count(v)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _coerce_price(cls, v):
        return parse_decimal(v)


class LubricantLedger(BaseModel):
    items: List[LubricantItem] = Field(default_factory=lambda: [LubricantItem()])
    yesterday_reading: float = 0.0
    today_reading: float = 0.0
    total_litres: float = 0.0
    total_amount: float = 0.0
    distilled_water: float = 0.0
    waste: float = 0.0

    @field_validator(
        "yesterday_reading", "today_reading", "total_litres",
        "total_amount", "distilled_water", "waste",
        mode="before",
    )
    @classmethod
    def _coerce_decimal(cls, v):
        return parse_decimal(v)

    @field_validator("items", mode="after")
    @classmethod
    def _at_least_one_item(cls, v):
        return v or [LubricantItem()]


class PaymentGroup(BaseModel):
    upi: float = 0.0
    bharat_fleet_card: float = 0.0
    fiserv: float = 0.0
    debit: float = 0.0
    ubi: float = 0.0
    evening_locker: float = 0.0

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_decimal(cls, v):
        return parse_decimal(v)


class CashGroup(BaseModel):
    rs_500: int = 0
    rs_200: int = 0
    rs_100: int = 0
    rs_50: int = 0
    rs_20: int = 0
    rs_10: int = 0
    coins: float = 0.0

    @field_validator("rs_500", "rs_200", "rs_100", "rs_50", "rs_20", "rs_10", mode="before")
    @classmethod
    def _coerce_count(cls, v):
        return parse_count(v)

    @field_validator("coins", mode="before")
    @classmethod
    def _coerce_coins(cls, v):
        return parse_decimal(v)


class PaymentMethods(BaseModel):
    group1: PaymentGroup = Field(default_factory=PaymentGroup)
    group2: PaymentGroup = Field(default_factory=PaymentGroup)


class CashDenominations(BaseModel):
    group1: CashGroup = Field(default_factory=CashGroup)
    group2: CashGroup = Field(default_factory=CashGroup)


# ==========================================================
#  DAILY ENTRY
# ==========================================================

class DailyEntry(BaseModel):
    sale_date: date
    entry_number: int = Field(1, ge=1, le=MAX_COUNT)
    pump_readings: List[PumpReading] = Field(default_factory=default_pump_readings)
    lubricant: LubricantLedger = Field(default_factory=LubricantLedger)
    payments: PaymentMethods = Field(default_factory=PaymentMethods)
    cash: CashDenominations = Field(default_factory=CashDenominations)
    total_income: float = 0.0
    total_expenses: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _all_eight_pumps(self):
        # canonical order, missing pumps seeded with defaults, last duplicate wins
        by_id = {p.pump_id: p for p in self.pump_readings}
        self.pump_readings = [by_id.get(d.pump_id, d) for d in default_pump_readings()]
        return self

    def pump(self, pump_id: str) -> PumpReading:
        for p in self.pump_readings:
            if p.pump_id == pump_id:
                return p
        raise ValueError(f"Unknown pump '{pump_id}'")


# ==========================================================
#  DERIVED / API OUTPUT
# ==========================================================

class PumpSales(BaseModel):
    pump_id: str
    pump_type: PumpType
    pump_number: int
    litres: float
    amount: float


class SalesSummary(BaseModel):
    pumps: List[PumpSales]
    petrol_litres: float
    diesel_litres: float
    petrol_amount: float
    diesel_amount: float
    lubricant_items_amount: float
    lubricant_sales: float
    payment_group_totals: Dict[CashierGroup, float]
    cash_group_totals: Dict[CashierGroup, float]
    total_income: float
    total_digital_payments: float
    total_cash_counted: float
    must_be: float
    shortage: float
    shortage_status: Literal["shortage", "surplus", "balanced"]


class DayState(BaseModel):
    mode: Literal["existing", "fresh"]
    entry: DailyEntry


class EmptyFieldsOut(BaseModel):
    empty_fields: List[str]
    has_empty: bool


class SaveResult(BaseModel):
    message: str
    created: bool
    sale_date: date
    entry_number: int
    total_income: float


class PendingDeleteOut(BaseModel):
    sale_date: date
    entry_number: int
    execute_at: datetime
    message: str = "Deletion scheduled"


class SeriesPoint(BaseModel):
    sale_date: date
    entry_number: int
    petrol_revenue: float
    diesel_revenue: float
    lubricant_revenue: float
    total_revenue: float


class CategoryTotals(BaseModel):
    petrol: float = 0.0
    diesel: float = 0.0
    lubricant: float = 0.0


class StatReport(BaseModel):
    chart: List[SeriesPoint]
    table: List[SeriesPoint]
    totals: CategoryTotals
    entries_considered: int
