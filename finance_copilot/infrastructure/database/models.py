"""SQLAlchemy ORM models for the financial record tables"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Integer, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class IncomeRecord(Base):
    """Income source"""

    __tablename__ = "incomes"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    frequency = Column(Text, nullable=False)
    last_received = Column(DateTime(timezone=True), nullable=True)
    currency = Column(Text, nullable=False, default="USD")
    source = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ExpenseRecord(Base):
    """Recorded expense with its recurrence"""

    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    category = Column(Text, nullable=False)
    recurrence = Column(Text, nullable=False)
    is_fixed = Column(Boolean, nullable=False, default=False)
    currency = Column(Text, nullable=False, default="USD")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class RecurringPaymentRecord(Base):
    """Upcoming bill, debt or subscription"""

    __tablename__ = "recurring_payments"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    due_date = Column(Date, nullable=False)
    recurrence = Column(Text, nullable=False)
    type = Column(Text, nullable=False, default="other")
    priority_hint = Column(Integer, nullable=False, default=0)
    currency = Column(Text, nullable=False, default="USD")
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRecord(Base):
    """Signed cash movement (negative = outflow)"""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    category = Column(Text, nullable=False)
    vendor = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    currency = Column(Text, nullable=False, default="USD")
    account_id = Column(Text, nullable=True)
    is_recurring_flag = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BalanceRecord(Base):
    """Balance time series point"""

    __tablename__ = "balance_timeseries"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(Text, nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    balance = Column(Float, nullable=False)
    currency = Column(Text, nullable=False, default="USD")
    account_id = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
