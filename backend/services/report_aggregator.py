# services/report_aggregator.py
"""
Report aggregation - revenue series and category totals for the stat page.

Works only on entries fetched from storage, never on the entry form's
in-memory state, so the same input always gives the same output.
"""

from typing import Iterable, List, Optional

from schemas.sales import CategoryTotals, DailyEntry, SeriesPoint
from services.ledgers import lubricant_total
from services.reconciliation import fuel_amount
from utils.parsing import round_currency


def entry_point(entry: DailyEntry) -> SeriesPoint:
    petrol = fuel_amount(entry, "petrol")
    diesel = fuel_amount(entry, "diesel")
    lubricant = lubricant_total(entry.lubricant)

    return SeriesPoint(
        sale_date=entry.sale_date,
        entry_number=entry.entry_number,
        petrol_revenue=round_currency(petrol),
        diesel_revenue=round_currency(diesel),
        lubricant_revenue=round_currency(lubricant),
        total_revenue=round_currency(petrol + diesel + lubricant),
    )


def build_series(entries: Iterable[DailyEntry], window: Optional[int] = None) -> List[SeriesPoint]:
    """Points sorted oldest first; with a window, only the most recent `window` points."""
    ordered = sorted(entries, key=lambda e: (e.sale_date, e.entry_number))
    points = [entry_point(e) for e in ordered]
    if window is not None:
        points = points[-window:] if window > 0 else []
    return points


def build_category_totals(entries: Iterable[DailyEntry]) -> CategoryTotals:
    petrol = diesel = lubricant = 0.0
    for e in entries:
        petrol += fuel_amount(e, "petrol")
        diesel += fuel_amount(e, "diesel")
        lubricant += lubricant_total(e.lubricant)

    return CategoryTotals(
        petrol=round_currency(petrol),
        diesel=round_currency(diesel),
        lubricant=round_currency(lubricant),
    )
