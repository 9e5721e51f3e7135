# services/entry_form.py
"""
Controlled entry form for one business day.

Holds the in-memory DailyEntry being edited, routes each field change through
the ledger setters and recomputes the summary on demand.
"""

from datetime import date
from typing import Any, List

from constants.station_config import (
    CASH_FIELDS,
    CASHIER_GROUPS,
    DENOMINATION_LABELS,
    PAYMENT_FIELDS,
    PAYMENT_LABELS,
)
from schemas.sales import DailyEntry, SalesSummary
from services import ledgers
from services.reconciliation import summarize


def _group_label(group: str) -> str:
    return "Group " + group.replace("group", "")


def _pump_label(pump_type: str, pump_number: int) -> str:
    return f"{pump_type.capitalize()} {pump_number}"


def find_empty_fields(entry: DailyEntry) -> List[str]:
    """
    Significant fields still at zero, worded for the save confirmation.
    This is a soft warning only; saving is never blocked by it.
    """
    empty: List[str] = []

    for p in entry.pump_readings:
        label = _pump_label(p.pump_type, p.pump_number)
        if p.opening_reading == 0:
            empty.append(f"{label} - Opening Reading")
        if p.closing_reading == 0:
            empty.append(f"{label} - Closing Reading")

    if entry.lubricant.yesterday_reading == 0:
        empty.append("Oil Sales - Yesterday Reading")
    if entry.lubricant.today_reading == 0:
        empty.append("Oil Sales - Today Reading")

    for group in CASHIER_GROUPS:
        payments = getattr(entry.payments, group)
        for field in PAYMENT_FIELDS:
            if getattr(payments, field) == 0:
                empty.append(f"Payment {_group_label(group)} - {PAYMENT_LABELS[field]}")

    for group in CASHIER_GROUPS:
        cash = getattr(entry.cash, group)
        for field in CASH_FIELDS:
            if getattr(cash, field) == 0:
                empty.append(f"Cash {_group_label(group)} - {DENOMINATION_LABELS[field]}")

    return empty


class SalesEntryForm:
    """In-memory form state for a single (date, entry number)."""

    def __init__(self, entry: DailyEntry):
        self.entry = entry

    @classmethod
    def blank(cls, sale_date: date, entry_number: int = 1) -> "SalesEntryForm":
        return cls(DailyEntry(sale_date=sale_date, entry_number=entry_number))

    # ---------- pumps ----------
    def set_pump_field(self, pump_id: str, field: str, raw: Any):
        return ledgers.set_pump_field(self.entry.pump_readings, pump_id, field, raw)

    # ---------- lubricants ----------
    def add_lubricant_item(self):
        self.entry.lubricant = ledgers.add_item(self.entry.lubricant)

    def remove_lubricant_item(self, index: int):
        self.entry.lubricant = ledgers.remove_item(self.entry.lubricant, index)

    def set_lubricant_item_field(self, index: int, field: str, raw: Any):
        self.entry.lubricant = ledgers.set_item_field(self.entry.lubricant, index, field, raw)

    def set_lubricant_field(self, field: str, raw: Any):
        self.entry.lubricant = ledgers.set_aggregate_field(self.entry.lubricant, field, raw)

    # ---------- payments / cash ----------
    def set_payment_field(self, group: str, field: str, raw: Any):
        if group not in CASHIER_GROUPS:
            raise ValueError(f"Unknown cashier group '{group}'")
        updated = ledgers.set_payment_field(getattr(self.entry.payments, group), field, raw)
        setattr(self.entry.payments, group, updated)
        return updated

    def set_cash_field(self, group: str, field: str, raw: Any):
        if group not in CASHIER_GROUPS:
            raise ValueError(f"Unknown cashier group '{group}'")
        updated = ledgers.set_cash_field(getattr(self.entry.cash, group), field, raw)
        setattr(self.entry.cash, group, updated)
        return updated

    # ---------- derived ----------
    def summary(self) -> SalesSummary:
        return summarize(self.entry)

    def empty_fields(self) -> List[str]:
        return find_empty_fields(self.entry)

    def clear_all(self):
        """Reset every field to its default, keeping the date and entry number."""
        self.entry = DailyEntry(
            sale_date=self.entry.sale_date,
            entry_number=self.entry.entry_number,
        )
