"""Data access layer: the record store backed by SQLAlchemy"""

from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from finance_copilot.infrastructure.database.models import (
    BalanceRecord,
    ExpenseRecord,
    IncomeRecord,
    RecurringPaymentRecord,
    TransactionRecord,
)
from finance_copilot.infrastructure.store import RecordStore, TransactionQuery
from finance_copilot.domain.models import BalanceSnapshot, Expense, Income, RecurringPayment, Transaction


class SqlRecordStore(RecordStore):
    """
    Record store over a SQLAlchemy session.

    Queries run synchronously on the session; the async signatures let the
    analytics service treat every store the same way.
    """

    def __init__(self, db: Session):
        self.db = db

    async def get_incomes(self, user_id: str) -> List[Income]:
        rows = self.db.query(IncomeRecord).filter(IncomeRecord.user_id == user_id).all()
        return [
            Income(
                id=row.id,
                user_id=row.user_id,
                amount=row.amount,
                frequency=row.frequency,
                last_received=row.last_received,
                currency=row.currency,
                source=row.source,
            )
            for row in rows
        ]

    async def get_expenses(self, user_id: str) -> List[Expense]:
        rows = self.db.query(ExpenseRecord).filter(ExpenseRecord.user_id == user_id).all()
        return [
            Expense(
                id=row.id,
                user_id=row.user_id,
                amount=row.amount,
                category=row.category,
                recurrence=row.recurrence,
                is_fixed=row.is_fixed,
                currency=row.currency,
            )
            for row in rows
        ]

    async def get_recurring_payments(self, user_id: str, due_from: Optional[date] = None) -> List[RecurringPayment]:
        query = self.db.query(RecurringPaymentRecord).filter(RecurringPaymentRecord.user_id == user_id)
        if due_from is not None:
            query = query.filter(RecurringPaymentRecord.due_date >= due_from)
        rows = query.order_by(RecurringPaymentRecord.due_date.asc()).all()
        return [
            RecurringPayment(
                id=row.id,
                user_id=row.user_id,
                amount=row.amount,
                due_date=row.due_date,
                recurrence=row.recurrence,
                type=row.type,
                priority_hint=row.priority_hint,
                currency=row.currency,
                description=row.description,
            )
            for row in rows
        ]

    async def get_transactions(self, user_id: str, query: Optional[TransactionQuery] = None) -> List[Transaction]:
        query = query or TransactionQuery()
        stmt = self.db.query(TransactionRecord).filter(TransactionRecord.user_id == user_id)
        if query.since is not None:
            stmt = stmt.filter(TransactionRecord.timestamp >= query.since)
        if query.until is not None:
            stmt = stmt.filter(TransactionRecord.timestamp < query.until)
        if query.outflows_only:
            stmt = stmt.filter(TransactionRecord.amount < 0)

        order = TransactionRecord.timestamp.asc() if query.ascending else TransactionRecord.timestamp.desc()
        rows = stmt.order_by(order).all()
        return [
            Transaction(
                id=row.id,
                user_id=row.user_id,
                amount=row.amount,
                category=row.category,
                timestamp=row.timestamp,
                vendor=row.vendor,
                currency=row.currency,
                account_id=row.account_id,
                is_recurring_flag=row.is_recurring_flag,
            )
            for row in rows
        ]

    async def get_latest_balance(self, user_id: str) -> Optional[BalanceSnapshot]:
        row = (
            self.db.query(BalanceRecord)
            .filter(BalanceRecord.user_id == user_id)
            .order_by(BalanceRecord.timestamp.desc())
            .first()
        )
        if row is None:
            return None
        return BalanceSnapshot(
            id=row.id,
            user_id=row.user_id,
            timestamp=row.timestamp,
            balance=row.balance,
            currency=row.currency,
            account_id=row.account_id,
        )
