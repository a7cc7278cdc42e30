"""Record store contract and an in-memory implementation"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

from finance_copilot.domain.models import BalanceSnapshot, Expense, Income, RecurringPayment, Transaction


@dataclass(frozen=True)
class TransactionQuery:
    """
    Transaction filter.

    since is inclusive, until is exclusive; either may be omitted.
    outflows_only keeps negative amounts. Results are ordered by timestamp.
    """

    since: Optional[datetime] = None
    until: Optional[datetime] = None
    outflows_only: bool = False
    ascending: bool = True

    def matches(self, txn: Transaction) -> bool:
        if self.since is not None and txn.timestamp < self.since:
            return False
        if self.until is not None and txn.timestamp >= self.until:
            return False
        if self.outflows_only and not txn.amount < 0:
            return False
        return True


class RecordStore(ABC):
    """Read-only access to a user's financial records"""

    @abstractmethod
    async def get_incomes(self, user_id: str) -> List[Income]:
        raise NotImplementedError

    @abstractmethod
    async def get_expenses(self, user_id: str) -> List[Expense]:
        raise NotImplementedError

    @abstractmethod
    async def get_recurring_payments(self, user_id: str, due_from: Optional[date] = None) -> List[RecurringPayment]:
        """Payments due on or after `due_from`, ordered by due date"""
        raise NotImplementedError

    @abstractmethod
    async def get_transactions(self, user_id: str, query: Optional[TransactionQuery] = None) -> List[Transaction]:
        raise NotImplementedError

    @abstractmethod
    async def get_latest_balance(self, user_id: str) -> Optional[BalanceSnapshot]:
        """Most recent snapshot, or None when the user has none"""
        raise NotImplementedError


class InMemoryRecordStore(RecordStore):
    """Record store over plain lists; every record carries its own user_id"""

    def __init__(
        self,
        incomes: Iterable[Income] = (),
        expenses: Iterable[Expense] = (),
        recurring_payments: Iterable[RecurringPayment] = (),
        transactions: Iterable[Transaction] = (),
        balances: Iterable[BalanceSnapshot] = (),
    ):
        self.incomes = list(incomes)
        self.expenses = list(expenses)
        self.recurring_payments = list(recurring_payments)
        self.transactions = list(transactions)
        self.balances = list(balances)

    async def get_incomes(self, user_id: str) -> List[Income]:
        return [i for i in self.incomes if i.user_id == user_id]

    async def get_expenses(self, user_id: str) -> List[Expense]:
        return [e for e in self.expenses if e.user_id == user_id]

    async def get_recurring_payments(self, user_id: str, due_from: Optional[date] = None) -> List[RecurringPayment]:
        payments = [
            p for p in self.recurring_payments
            if p.user_id == user_id and (due_from is None or p.due_date >= due_from)
        ]
        return sorted(payments, key=lambda p: p.due_date)

    async def get_transactions(self, user_id: str, query: Optional[TransactionQuery] = None) -> List[Transaction]:
        query = query or TransactionQuery()
        matched = [t for t in self.transactions if t.user_id == user_id and query.matches(t)]
        return sorted(matched, key=lambda t: t.timestamp, reverse=not query.ascending)

    async def get_latest_balance(self, user_id: str) -> Optional[BalanceSnapshot]:
        snapshots = [b for b in self.balances if b.user_id == user_id]
        if not snapshots:
            return None
        return max(snapshots, key=lambda b: b.timestamp)
