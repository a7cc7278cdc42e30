"""
E2E tests for user personas through the HTTP surface.

Each persona is an in-memory record set served by the full application
stack (middleware, routers, analytics service, domain calculators).

User personas:
- user_starter: single salary, rent, light spending, no balance snapshot
- user_overspender: spending above income, thin balance
- user_overdrawn: negative balance, forced to maximum risk
- user_dual_income: two incomes and no expenses, unlimited runway
- user_ghost: no records at all
"""

from datetime import date, datetime
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from finance_copilot.api.dependencies import get_analytics_service
from finance_copilot.api.main import create_app
from finance_copilot.domain.models import BalanceSnapshot, Expense, Income, RecurringPayment, Transaction
from finance_copilot.infrastructure.store import InMemoryRecordStore
from finance_copilot.services.analytics import AnalyticsService

pytestmark = pytest.mark.integration

STORE = InMemoryRecordStore(
    incomes=[
        Income(id="s_inc", user_id="user_starter", amount=3000, frequency="monthly"),
        Income(id="o_inc", user_id="user_overspender", amount=2000, frequency="monthly"),
        Income(id="d_inc1", user_id="user_dual_income", amount=4000, frequency="monthly"),
        Income(id="d_inc2", user_id="user_dual_income", amount=12000, frequency="yearly"),
    ],
    expenses=[
        Expense(id="s_rent", user_id="user_starter", amount=1000, category="rent", recurrence="monthly", is_fixed=True),
        Expense(id="o_rent", user_id="user_overspender", amount=2500, category="rent", recurrence="monthly", is_fixed=True),
        Expense(id="x_rent", user_id="user_overdrawn", amount=1200, category="rent", recurrence="monthly", is_fixed=True),
    ],
    recurring_payments=[
        RecurringPayment(
            id="o_card", user_id="user_overspender", amount=4500, due_date=date(2025, 6, 25),
            recurrence="monthly", type="debt",
        ),
    ],
    transactions=[
        Transaction(id="s_t1", user_id="user_starter", amount=-120, category="groceries", timestamp=datetime(2025, 4, 2)),
        Transaction(id="s_t2", user_id="user_starter", amount=-100, category="groceries", timestamp=datetime(2025, 5, 2)),
        Transaction(id="s_t3", user_id="user_starter", amount=-80, category="dining", timestamp=datetime(2025, 6, 2)),
    ],
    balances=[
        BalanceSnapshot(id="o_bal", user_id="user_overspender", timestamp=datetime(2025, 6, 14), balance=900),
        BalanceSnapshot(id="x_bal", user_id="user_overdrawn", timestamp=datetime(2025, 6, 14), balance=-50),
        BalanceSnapshot(id="d_bal", user_id="user_dual_income", timestamp=datetime(2025, 6, 14), balance=20000),
    ],
)


@pytest.fixture
def persona_client(settings, clock) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(STORE, clock=clock)
    return TestClient(app)


@pytest.fixture
def get_metric(persona_client: TestClient) -> Callable[[str, str], dict]:
    def _get(user_id: str, path: str) -> dict:
        response = persona_client.get(f"/v1/finance/{path}", headers={"X-User-Id": user_id})
        assert response.status_code == 200
        return response.json()

    return _get


def test_user_starter_healthy_savings(get_metric):
    """
    user_starter: 3000 income, 1000 rent, 300 spent over three months
    Expected: burn 1100, savings 63.33%, balance rebuilt from transactions
    """
    burn_rate = get_metric("user_starter", "burn-rate")
    savings_rate = get_metric("user_starter", "savings-rate")
    runway = get_metric("user_starter", "runway")

    assert burn_rate["value"] == 1100
    assert burn_rate["risk"] == "low"
    assert savings_rate["value"] == 63.33
    assert savings_rate["risk"] == "low"
    assert runway["inputs"]["balance"] == -300
    assert runway["risk"] == "critical"


def test_user_overspender_critical_runway(get_metric, persona_client: TestClient):
    """
    user_overspender: 2500 rent against 2000 income, 900 in the bank
    Expected: negative savings, runway under a fortnight, high composite risk
    """
    savings_rate = get_metric("user_overspender", "savings-rate")
    runway = get_metric("user_overspender", "runway")
    risk_score = get_metric("user_overspender", "risk-score")

    assert savings_rate["value"] == -25
    assert savings_rate["risk"] == "critical"
    assert runway["value"] == "11 days"
    assert runway["risk"] == "critical"
    # 0.4 runway + 0.2 obligations + 0.1 burn + 0.1 single income
    assert risk_score["value"] == 80
    assert risk_score["risk"] == "critical"

    advisory = persona_client.get("/v1/advisory", headers={"X-User-Id": "user_overspender"}).json()
    assert advisory["recommendations"][0].startswith("CRITICAL")
    assert any("High financial risk" in r for r in advisory["recommendations"])


def test_user_overdrawn_maximum_risk(get_metric):
    """
    user_overdrawn: balance below zero
    Expected: risk score pinned at 100 regardless of other factors
    """
    risk_score = get_metric("user_overdrawn", "risk-score")

    assert risk_score["value"] == 100
    assert risk_score["risk"] == "critical"
    assert "negative balance" in risk_score["explanation"]


def test_user_dual_income_unlimited_runway(get_metric, persona_client: TestClient):
    """
    user_dual_income: two income sources, nothing spent
    Expected: infinite runway, zero risk, purchases never shorten runway
    """
    runway = get_metric("user_dual_income", "runway")
    risk_score = get_metric("user_dual_income", "risk-score")

    assert runway["value"] == "Infinite"
    assert risk_score["value"] == 0
    assert risk_score["risk"] == "low"

    response = persona_client.post(
        "/v1/finance/simulate-purchase", json={"amount": 5000}, headers={"X-User-Id": "user_dual_income"}
    )
    purchase = response.json()
    assert purchase["value"]["new_runway_days"] == "Infinite"
    assert purchase["value"]["runway_reduction_days"] == 0
    assert purchase["risk"] == "low"


def test_user_ghost_no_records(get_metric, persona_client: TestClient):
    """
    user_ghost: nothing recorded
    Expected: terminal states rather than errors
    """
    assert get_metric("user_ghost", "burn-rate")["value"] == 0
    assert get_metric("user_ghost", "savings-rate")["risk"] == "critical"
    assert get_metric("user_ghost", "payment-priority")["value"] == 0
    assert get_metric("user_ghost", "anomalies")["value"] == 0

    forecast = get_metric("user_ghost", "cashflow-forecast")
    assert all(point["projected_balance"] == 0 for point in forecast["forecast"])

    intent = persona_client.post("/v1/intent", json={"query": "how am i doing"}, headers={"X-User-Id": "user_ghost"})
    assert intent.status_code == 200
    assert intent.json()["aggregated_results"]["runway"]["value"] == "N/A"
