# services/reconciliation.py
"""
Daily reconciliation - income, expected cash ("must be") and shortage
All figures are recomputed from the entry on every call; nothing is cached.
"""

from typing import Dict

from constants.station_config import CASHIER_GROUPS
from schemas.sales import DailyEntry, PumpSales, SalesSummary
from services.ledgers import (
    cash_group_total,
    compute_sales,
    items_total,
    litres_sold,
    lubricant_total,
    payment_group_total,
    pump_amount,
)
from utils.parsing import round_currency, round_litres


def fuel_amount(entry: DailyEntry, pump_type: str = None) -> float:
    return sum(
        pump_amount(p) for p in entry.pump_readings
        if pump_type is None or p.pump_type == pump_type
    )


def fuel_litres(entry: DailyEntry, pump_type: str = None) -> float:
    return sum(
        litres_sold(p) for p in entry.pump_readings
        if pump_type is None or p.pump_type == pump_type
    )


def total_income(entry: DailyEntry) -> float:
    return fuel_amount(entry) + lubricant_total(entry.lubricant)


def payment_totals(entry: DailyEntry) -> Dict[str, float]:
    return {g: payment_group_total(getattr(entry.payments, g)) for g in CASHIER_GROUPS}


def cash_totals(entry: DailyEntry) -> Dict[str, float]:
    return {g: cash_group_total(getattr(entry.cash, g)) for g in CASHIER_GROUPS}


def total_digital_payments(entry: DailyEntry) -> float:
    return sum(payment_totals(entry).values())


def total_cash_counted(entry: DailyEntry) -> float:
    return sum(cash_totals(entry).values())


def must_be(entry: DailyEntry) -> float:
    return total_income(entry) - total_digital_payments(entry)


def shortage(entry: DailyEntry) -> float:
    """Positive = cash missing from the drawer, negative = surplus."""
    return must_be(entry) - total_cash_counted(entry)


def shortage_status(value: float) -> str:
    value = round_currency(value)
    if value > 0:
        return "shortage"
    if value < 0:
        return "surplus"
    return "balanced"


def summarize(entry: DailyEntry) -> SalesSummary:
    pumps = []
    for p in entry.pump_readings:
        sales = compute_sales(p)
        pumps.append(PumpSales(
            pump_id=p.pump_id,
            pump_type=p.pump_type,
            pump_number=p.pump_number,
            litres=sales["litres"],
            amount=sales["amount"],
        ))

    short = shortage(entry)

    return SalesSummary(
        pumps=pumps,
        petrol_litres=round_litres(fuel_litres(entry, "petrol")),
        diesel_litres=round_litres(fuel_litres(entry, "diesel")),
        petrol_amount=round_currency(fuel_amount(entry, "petrol")),
        diesel_amount=round_currency(fuel_amount(entry, "diesel")),
        lubricant_items_amount=round_currency(items_total(entry.lubricant)),
        lubricant_sales=round_currency(lubricant_total(entry.lubricant)),
        payment_group_totals={g: round_currency(v) for g, v in payment_totals(entry).items()},
        cash_group_totals={g: round_currency(v) for g, v in cash_totals(entry).items()},
        total_income=round_currency(total_income(entry)),
        total_digital_payments=round_currency(total_digital_payments(entry)),
        total_cash_counted=round_currency(total_cash_counted(entry)),
        must_be=round_currency(must_be(entry)),
        shortage=round_currency(short),
        shortage_status=shortage_status(short),
    )
