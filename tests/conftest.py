"""Pytest fixtures for testing"""

from datetime import date, datetime
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from finance_copilot.api.dependencies import get_analytics_service
from finance_copilot.api.main import create_app
from finance_copilot.config import Settings
from finance_copilot.domain.models import BalanceSnapshot, Expense, Income, RecurringPayment, Transaction
from finance_copilot.infrastructure.database.models import Base
from finance_copilot.infrastructure.store import InMemoryRecordStore
from finance_copilot.services.analytics import AnalyticsService

# Every time-dependent calculation in the suite runs against this instant
NOW = datetime(2025, 6, 15, 12, 0, 0)
USER_ID = "user_steady"


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: NOW


@pytest.fixture
def steady_records() -> dict:
    """
    One salaried user with modest spending.

    Monthly income 5000, recurring expenses 1550 (rent 1500 fixed, gym 50),
    three grocery outflows of 300 inside the last three months and two older
    grocery outflows of 250 that only the anomaly baseline sees. Latest
    balance is 18500.

    Derived figures: burn rate 1850, runway 300 days, savings rate 63%.
    """
    return {
        "incomes": [
            Income(id="inc_1", user_id=USER_ID, amount=5000, frequency="monthly", source="Employer"),
        ],
        "expenses": [
            Expense(id="exp_rent", user_id=USER_ID, amount=1500, category="rent", recurrence="monthly", is_fixed=True),
            Expense(id="exp_gym", user_id=USER_ID, amount=50, category="fitness", recurrence="monthly"),
        ],
        "recurring_payments": [
            RecurringPayment(
                id="pay_phone", user_id=USER_ID, amount=60, due_date=date(2025, 6, 20),
                recurrence="monthly", type="bill",
            ),
            RecurringPayment(
                id="pay_loan", user_id=USER_ID, amount=400, due_date=date(2025, 6, 20),
                recurrence="monthly", type="debt",
            ),
            RecurringPayment(
                id="pay_stream", user_id=USER_ID, amount=15, due_date=date(2025, 6, 18),
                recurrence="monthly", type="subscription",
            ),
            # Already past; filtered out by the due date
            RecurringPayment(
                id="pay_old", user_id=USER_ID, amount=999, due_date=date(2025, 6, 1),
                recurrence="monthly", type="bill",
            ),
        ],
        "transactions": [
            Transaction(id="txn_g1", user_id=USER_ID, amount=-300, category="groceries", timestamp=datetime(2025, 4, 1)),
            Transaction(id="txn_g2", user_id=USER_ID, amount=-300, category="groceries", timestamp=datetime(2025, 5, 1)),
            Transaction(id="txn_g3", user_id=USER_ID, amount=-300, category="groceries", timestamp=datetime(2025, 6, 1)),
            Transaction(id="txn_pay", user_id=USER_ID, amount=5000, category="salary", timestamp=datetime(2025, 6, 1)),
            Transaction(id="txn_b1", user_id=USER_ID, amount=-250, category="groceries", timestamp=datetime(2024, 9, 10)),
            Transaction(id="txn_b2", user_id=USER_ID, amount=-250, category="groceries", timestamp=datetime(2024, 10, 10)),
        ],
        "balances": [
            BalanceSnapshot(id="bal_old", user_id=USER_ID, timestamp=datetime(2025, 5, 1), balance=12000),
            BalanceSnapshot(id="bal_new", user_id=USER_ID, timestamp=datetime(2025, 6, 14), balance=18500),
        ],
    }


@pytest.fixture
def store(steady_records: dict) -> InMemoryRecordStore:
    return InMemoryRecordStore(**steady_records)


@pytest.fixture
def service(store: InMemoryRecordStore, clock) -> AnalyticsService:
    return AnalyticsService(store, clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite:///:memory:", log_level="WARNING")


@pytest.fixture
def client(settings: Settings, store: InMemoryRecordStore, clock) -> TestClient:
    """FastAPI test client reading from the in-memory store"""
    app = create_app(settings)
    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(store, clock=clock)
    return TestClient(app)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """SQLite session with the record tables created"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
