from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime,
    UniqueConstraint, ForeignKey,
)
from sqlalchemy.orm import relationship
from database import Base

# ==========================================================
#  SQLALCHEMY MODELS (Database Tables)
# ==========================================================

class DailySalesDB(Base):
    __tablename__ = "daily_sales"

    id = Column(Integer, primary_key=True, index=True)
    station_id = Column(String, nullable=False, index=True)
    sale_date = Column(Date, nullable=False, index=True)
    entry_number = Column(Integer, nullable=False, default=1)

    # snapshot taken at save time
    total_income = Column(Float, default=0)
    total_expenses = Column(Float, default=0)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    pump_readings = relationship(
        "PumpReadingDB", back_populates="daily_sales",
        cascade="all, delete-orphan", order_by="PumpReadingDB.id",
    )
    lubricant_sales = relationship(
        "LubricantSaleDB", back_populates="daily_sales",
        cascade="all, delete-orphan", order_by="LubricantSaleDB.id",
    )
    payment_methods = relationship(
        "PaymentMethodDB", back_populates="daily_sales",
        cascade="all, delete-orphan", order_by="PaymentMethodDB.id",
    )
    cash_denominations = relationship(
        "CashDenominationDB", back_populates="daily_sales",
        cascade="all, delete-orphan", order_by="CashDenominationDB.id",
    )

    __table_args__ = (
        UniqueConstraint(
            "station_id", "sale_date", "entry_number",
            name="uq_daily_sales_entry"
        ),
    )


class PumpReadingDB(Base):
    __tablename__ = "pump_readings"

    id = Column(Integer, primary_key=True, index=True)
    daily_sales_id = Column(Integer, ForeignKey("daily_sales.id", ondelete="CASCADE"), index=True)

    pump_type = Column(String, nullable=False)       # petrol / diesel
    pump_number = Column(Integer, nullable=False)    # 1..4

    opening_reading = Column(Float, nullable=False, default=0)
    closing_reading = Column(Float, nullable=False, default=0)
    price_per_litre = Column(Float, nullable=False, default=0)

    sales_litres = Column(Float, nullable=True)
    sales_amount = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.now)

    daily_sales = relationship("DailySalesDB", back_populates="pump_readings")


class LubricantSaleDB(Base):
    __tablename__ = "lubricant_sales"

    id = Column(Integer, primary_key=True, index=True)
    daily_sales_id = Column(Integer, ForeignKey("daily_sales.id", ondelete="CASCADE"), index=True)

    # one row per item
    oil_name = Column(String, nullable=True)
    oil_count = Column(Integer, default=0)
    oil_price = Column(Float, default=0)

    # ledger-level values, repeated on every item row
    yesterday_reading = Column(Float, default=0)
    today_reading = Column(Float, default=0)
    total_litres = Column(Float, default=0)
    total_amount = Column(Float, default=0)
    distilled_water = Column(Float, default=0)
    waste = Column(Float, default=0)

    created_at = Column(DateTime, default=datetime.now)

    daily_sales = relationship("DailySalesDB", back_populates="lubricant_sales")


class PaymentMethodDB(Base):
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True, index=True)
    daily_sales_id = Column(Integer, ForeignKey("daily_sales.id", ondelete="CASCADE"), index=True)
    cashier_group = Column(String, nullable=False)   # group1 / group2

    upi = Column(Float, default=0)
    bharat_fleet_card = Column(Float, default=0)
    fiserv = Column(Float, default=0)
    debit = Column(Float, default=0)
    ubi = Column(Float, default=0)
    evening_locker = Column(Float, default=0)

    created_at = Column(DateTime, default=datetime.now)

    daily_sales = relationship("DailySalesDB", back_populates="payment_methods")


class CashDenominationDB(Base):
    __tablename__ = "cash_denominations"

    id = Column(Integer, primary_key=True, index=True)
    daily_sales_id = Column(Integer, ForeignKey("daily_sales.id", ondelete="CASCADE"), index=True)
    cashier_group = Column(String, nullable=False)   # group1 / group2

    rs_500 = Column(Integer, default=0)
    rs_200 = Column(Integer, default=0)
    rs_100 = Column(Integer, default=0)
    rs_50 = Column(Integer, default=0)
    rs_20 = Column(Integer, default=0)
    rs_10 = Column(Integer, default=0)
    coins = Column(Float, default=0)

    total_cash = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.now)

    daily_sales = relationship("DailySalesDB", back_populates="cash_denominations")
