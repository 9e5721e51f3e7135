# services/ledgers.py
"""
Ledger operations for the daily entry form.

Every setter takes the raw text typed into a field, coerces it (bad input
becomes 0, never an error) and returns a new record; nothing here touches
the database. Persistence only happens on an explicit save.
"""

from typing import Any, Dict, List

from constants.station_config import (
    CASH_FIELDS,
    DENOMINATIONS,
    LUBRICANT_AGGREGATE_FIELDS,
    LUBRICANT_ITEM_FIELDS,
    LUBRICANT_PRICE_PER_LITRE,
    PAYMENT_FIELDS,
    PUMP_FIELDS,
)
from schemas.sales import (
    CashGroup,
    LubricantItem,
    LubricantLedger,
    PaymentGroup,
    PumpReading,
)
from utils.parsing import parse_count, parse_decimal, round_currency, round_litres


# ---------------------------
# Pump readings
# ---------------------------

def set_pump_field(readings: List[PumpReading], pump_id: str, field: str, raw: Any) -> PumpReading:
    if field not in PUMP_FIELDS:
        raise ValueError(f"Unknown pump field '{field}'")
    for idx, pump in enumerate(readings):
        if pump.pump_id == pump_id:
            updated = pump.model_copy(update={field: parse_decimal(raw)})
            readings[idx] = updated
            return updated
    raise ValueError(f"Unknown pump '{pump_id}'")


def litres_sold(pump: PumpReading) -> float:
    # closing below opening gives a negative figure; it is kept, not clamped
    return pump.closing_reading - pump.opening_reading


def pump_amount(pump: PumpReading) -> float:
    return litres_sold(pump) * pump.price_per_litre


def compute_sales(pump: PumpReading) -> Dict[str, float]:
    return {
        "litres": round_litres(litres_sold(pump)),
        "amount": round_currency(pump_amount(pump)),
    }


# ---------------------------
# Lubricants
# ---------------------------

def lubricant_amount_for_litres(litres: float) -> float:
    """Amount for loose lubricant sold by the litre at the fixed station price."""
    return litres * LUBRICANT_PRICE_PER_LITRE


def add_item(ledger: LubricantLedger) -> LubricantLedger:
    return ledger.model_copy(update={"items": [*ledger.items, LubricantItem()]})


def remove_item(ledger: LubricantLedger, index: int) -> LubricantLedger:
    # the list never drops below one row
    if len(ledger.items) <= 1 or not 0 <= index < len(ledger.items):
        return ledger
    items = [item for i, item in enumerate(ledger.items) if i != index]
    return ledger.model_copy(update={"items": items})


def set_item_field(ledger: LubricantLedger, index: int, field: str, raw: Any) -> LubricantLedger:
    if field not in LUBRICANT_ITEM_FIELDS:
        raise ValueError(f"Unknown lubricant item field '{field}'")
    if not 0 <= index < len(ledger.items):
        raise IndexError(f"No lubricant item at position {index}")

    if field == "name":
        value = "" if raw is None else str(raw)
    elif field == "count":
        value = parse_count(raw)
    else:
        value = parse_decimal(raw)

    items = list(ledger.items)
    items[index] = items[index].model_copy(update={field: value})
    return ledger.model_copy(update={"items": items})


def set_aggregate_field(ledger: LubricantLedger, field: str, raw: Any) -> LubricantLedger:
    if field not in LUBRICANT_AGGREGATE_FIELDS:
        raise ValueError(f"Unknown lubricant field '{field}'")

    value = parse_decimal(raw)
    update = {field: value}
    if field == "total_litres":
        update["total_amount"] = lubricant_amount_for_litres(value)
    return ledger.model_copy(update=update)


def line_amount(item: LubricantItem) -> float:
    return item.count * item.unit_price


def items_total(ledger: LubricantLedger) -> float:
    return sum(line_amount(i) for i in ledger.items)


def lubricant_total(ledger: LubricantLedger) -> float:
    """Everything the lubricant counter brought in for the day."""
    return ledger.total_amount + ledger.distilled_water + ledger.waste + items_total(ledger)


# ---------------------------
# Payments / cash
# ---------------------------

def set_payment_field(group: PaymentGroup, field: str, raw: Any) -> PaymentGroup:
    if field not in PAYMENT_FIELDS:
        raise ValueError(f"Unknown payment field '{field}'")
    return group.model_copy(update={field: parse_decimal(raw)})


def set_cash_field(group: CashGroup, field: str, raw: Any) -> CashGroup:
    if field not in CASH_FIELDS:
        raise ValueError(f"Unknown cash field '{field}'")
    value = parse_decimal(raw) if field == "coins" else parse_count(raw)
    return group.model_copy(update={field: value})


def payment_group_total(group: PaymentGroup) -> float:
    return sum(getattr(group, f) for f in PAYMENT_FIELDS)


def cash_group_total(group: CashGroup) -> float:
    notes = sum(getattr(group, f) * face for f, face in DENOMINATIONS.items())
    return notes + group.coins
