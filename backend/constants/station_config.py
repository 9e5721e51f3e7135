# constants/station_config.py
"""
Station configuration - fixed business constants for the daily sales entry
"""

import os
from typing import Dict, List, Tuple

# ============================================================================
#  STATION
# ============================================================================

# Fixed id so every device at the outlet shares the same data
STATION_ID = "00000000-0000-0000-0000-000000000001"

# ============================================================================
#  PUMPS
# ============================================================================

PUMP_TYPES: Tuple[str, ...] = ("petrol", "diesel")
PUMP_NUMBERS: Tuple[int, ...] = (1, 2, 3, 4)

# seed price per litre (not derived from history)
DEFAULT_PUMP_PRICES: Dict[str, float] = {
    "petrol": 101.88,
    "diesel": 93.48,
}

PUMP_IDS: List[str] = [f"{t}{n}" for t in PUMP_TYPES for n in PUMP_NUMBERS]

PUMP_FIELDS: Tuple[str, ...] = ("opening_reading", "closing_reading", "price_per_litre")

# ============================================================================
#  LUBRICANTS
# ============================================================================

# fixed price of the loose lubricant sold by the litre
LUBRICANT_PRICE_PER_LITRE = 330.0

LUBRICANT_ITEM_FIELDS: Tuple[str, ...] = ("name", "count", "unit_price")

LUBRICANT_AGGREGATE_FIELDS: Tuple[str, ...] = (
    "yesterday_reading",
    "today_reading",
    "total_litres",
    "total_amount",
    "distilled_water",
    "waste",
)

# ============================================================================
#  CASHIER GROUPS / PAYMENTS / CASH
# ============================================================================

# group1 -> pumps 1 & 2, group2 -> pumps 3 & 4
CASHIER_GROUPS: Dict[str, Tuple[int, int]] = {
    "group1": (1, 2),
    "group2": (3, 4),
}

PAYMENT_FIELDS: Tuple[str, ...] = (
    "upi",
    "bharat_fleet_card",
    "fiserv",
    "debit",
    "ubi",
    "evening_locker",
)

PAYMENT_LABELS: Dict[str, str] = {
    "upi": "UPI",
    "bharat_fleet_card": "Bharat Fleet Card",
    "fiserv": "Fiserv",
    "debit": "Debit",
    "ubi": "UBI",
    "evening_locker": "Evening Locker",
}

# note field -> face value
DENOMINATIONS: Dict[str, int] = {
    "rs_500": 500,
    "rs_200": 200,
    "rs_100": 100,
    "rs_50": 50,
    "rs_20": 20,
    "rs_10": 10,
}

CASH_FIELDS: Tuple[str, ...] = tuple(DENOMINATIONS) + ("coins",)

DENOMINATION_LABELS: Dict[str, str] = {
    "rs_500": "₹500 Notes",
    "rs_200": "₹200 Notes",
    "rs_100": "₹100 Notes",
    "rs_50": "₹50 Notes",
    "rs_20": "₹20 Notes",
    "rs_10": "₹10 Notes",
    "coins": "Coins",
}

# ============================================================================
#  PRECISION
# ============================================================================

CURRENCY_DECIMALS = 2
LITRE_DECIMALS = 3

# input beyond these magnitudes is treated like unparseable text (0)
# counts: SQLite INTEGER range; decimals: keeps every product finite
MAX_COUNT = 2**63 - 1
MAX_DECIMAL = 1e15

# ============================================================================
#  REPORTS / DELETE
# ============================================================================

CHART_WINDOW = 30
TABLE_WINDOW = 10

# Supervisor only sees the most recent entries
SUPERVISOR_ENTRY_LIMIT = 15

UNDO_DELETE_SECONDS = 10.0

# ============================================================================
#  ROLES
# ============================================================================

ROLE_PROPRIETOR = "Proprietor"
ROLE_MANAGER = "Manager"
ROLE_SUPERVISOR = "Supervisor"

ROLES: Tuple[str, ...] = (ROLE_PROPRIETOR, ROLE_MANAGER, ROLE_SUPERVISOR)

# roles that never see the delete action
NO_DELETE_ROLES = {ROLE_SUPERVISOR}

# one password per role, overridable per deployment
ROLE_PASSWORDS: Dict[str, str] = {
    ROLE_PROPRIETOR: os.getenv("FUEL_PASSWORD_PROPRIETOR", "owner@123"),
    ROLE_MANAGER: os.getenv("FUEL_PASSWORD_MANAGER", "manager@123"),
    ROLE_SUPERVISOR: os.getenv("FUEL_PASSWORD_SUPERVISOR", "super@123"),
}
