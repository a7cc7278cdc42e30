"""Integration tests for the analytics service over the in-memory store"""

from datetime import datetime

import pytest
from prometheus_client import REGISTRY

from finance_copilot.domain.exceptions import InvalidParameterError, MetricComputationError
from finance_copilot.domain.models import Transaction
from finance_copilot.infrastructure.store import InMemoryRecordStore
from finance_copilot.services.analytics import AnalyticsService

USER_ID = "user_steady"


class FailingExpenseStore(InMemoryRecordStore):
    """Store whose expense table is unreachable"""

    async def get_expenses(self, user_id):
        raise ConnectionError("database unavailable")


class ExplodingStore(InMemoryRecordStore):
    """Fails every read; used to prove validation happens first"""

    async def get_incomes(self, user_id):
        raise AssertionError("store should not be read")

    get_expenses = get_incomes

    async def get_transactions(self, user_id, query=None):
        raise AssertionError("store should not be read")

    async def get_latest_balance(self, user_id):
        raise AssertionError("store should not be read")

    async def get_recurring_payments(self, user_id, due_from=None):
        raise AssertionError("store should not be read")


async def test_burn_rate(service: AnalyticsService):
    result = await service.get_burn_rate(USER_ID)

    assert result.value == 1850
    assert result.risk == "low"
    assert result.inputs["transaction_count"] == 3


async def test_runway_uses_latest_balance_snapshot(service: AnalyticsService):
    result = await service.get_runway(USER_ID)

    assert result.value == "300 days"
    assert result.risk == "low"
    assert result.inputs["balance"] == 18500


async def test_runway_falls_back_to_transaction_sum(steady_records: dict, clock):
    steady_records["balances"] = []
    service = AnalyticsService(InMemoryRecordStore(**steady_records), clock=clock)

    result = await service.get_runway(USER_ID)

    # 5000 salary minus 3 x 300 and 2 x 250 groceries
    assert result.inputs["balance"] == 3600


async def test_savings_rate(service: AnalyticsService):
    result = await service.get_savings_rate(USER_ID)

    assert result.value == 63.0
    assert result.risk == "low"


async def test_classification(service: AnalyticsService):
    result = await service.classify_expenses(USER_ID)

    assert result.classification.fixed.total == 1500
    assert result.classification.discretionary.total == 350
    assert result.classification.fixed.percentage == 81.08
    assert result.risk == "high"


async def test_payment_priority_reads_only_upcoming_payments(service: AnalyticsService):
    result = await service.get_payment_priority(USER_ID)

    assert [p.id for p in result.payments] == ["pay_stream", "pay_loan", "pay_phone"]
    assert result.inputs["total_amount"] == 475
    assert result.inputs["overdue_count"] == 0
    assert result.risk == "low"


async def test_cashflow_forecast(service: AnalyticsService):
    result = await service.get_cashflow_forecast(USER_ID, 6)

    assert len(result.forecast) == 6
    assert result.forecast[0].month == "Jul 2025"
    assert result.forecast[0].projected_balance == 21800
    assert result.forecast[-1].month == "Dec 2025"
    assert result.forecast[-1].projected_balance == 38300
    assert result.risk == "low"


async def test_forecast_months_validated_before_reading(clock):
    service = AnalyticsService(ExplodingStore(), clock=clock)

    with pytest.raises(InvalidParameterError, match="between 1 and 24"):
        await service.get_cashflow_forecast(USER_ID, 25)


async def test_no_anomalies_for_steady_spending(service: AnalyticsService):
    result = await service.detect_spending_anomalies(USER_ID)

    assert result.value == 0
    assert result.inputs["categories_analyzed"] == 1


async def test_spike_against_baseline_is_detected(steady_records: dict, clock):
    steady_records["transactions"].append(
        Transaction(id="txn_spike", user_id=USER_ID, amount=-900, category="groceries", timestamp=datetime(2025, 6, 10))
    )
    service = AnalyticsService(InMemoryRecordStore(**steady_records), clock=clock)

    result = await service.detect_spending_anomalies(USER_ID)

    assert result.value == 1
    assert result.anomalies[0].deviation_percent == 260.0


async def test_risk_score(service: AnalyticsService):
    result = await service.calculate_risk_score(USER_ID)

    assert result.value == 10
    assert result.risk == "low"
    assert result.inputs["income_source_count"] == 1


async def test_purchase_simulation(service: AnalyticsService):
    result = await service.simulate_purchase(USER_ID, 500)

    assert result.value["new_balance"] == 18000
    assert result.inputs["current_runway_days"] == pytest.approx(300)
    assert result.risk == "low"


async def test_purchase_amount_must_be_positive(service: AnalyticsService):
    with pytest.raises(InvalidParameterError, match="Purchase amount must be positive"):
        await service.simulate_purchase(USER_ID, 0)


async def test_losing_all_income(service: AnalyticsService):
    result = await service.simulate_income_change(USER_ID, -100)

    assert result.value["new_monthly_income"] == 0
    assert result.value["new_net_cashflow"] == -1850
    assert result.risk == "medium"


async def test_expense_increase_still_positive(service: AnalyticsService):
    result = await service.simulate_expense_change(USER_ID, 10)

    assert result.value["new_monthly_burn_rate"] == 2035
    assert result.risk == "low"


async def test_percent_below_minus_one_hundred_rejected(service: AnalyticsService):
    with pytest.raises(InvalidParameterError):
        await service.simulate_expense_change(USER_ID, -150)


async def test_financial_summary(service: AnalyticsService):
    summary = await service.get_financial_summary(USER_ID)

    state = summary.financial_state
    assert state.balance == 18500
    assert state.income == 5000
    assert state.burn_rate == 1850
    assert state.runway == "300 days"
    assert state.risk_level == "low"
    assert [i["metric"] for i in summary.insights] == ["burn_rate", "savings_rate", "runway", "payment_priority"]
    assert summary.simulations == []
    assert summary.recommendations == []


async def test_user_without_records_gets_terminal_states(clock):
    service = AnalyticsService(InMemoryRecordStore(), clock=clock)

    runway = await service.get_runway("ghost")
    savings = await service.get_savings_rate("ghost")
    risk = await service.calculate_risk_score("ghost")

    assert runway.value == "N/A"
    assert runway.risk == "critical"
    assert savings.value == 0
    assert savings.risk == "critical"
    assert risk.risk == "low"


async def test_blank_user_id_rejected(service: AnalyticsService):
    with pytest.raises(InvalidParameterError):
        await service.get_burn_rate("  ")


async def test_store_failure_wrapped_at_the_boundary(steady_records: dict, clock):
    service = AnalyticsService(FailingExpenseStore(**steady_records), clock=clock)

    with pytest.raises(MetricComputationError) as exc_info:
        await service.get_burn_rate(USER_ID)

    assert str(exc_info.value) == "Failed to calculate burn rate: Failed to fetch expenses: database unavailable"
    assert exc_info.value.upstream_failure


async def test_nested_failures_keep_the_full_chain(steady_records: dict, clock):
    service = AnalyticsService(FailingExpenseStore(**steady_records), clock=clock)

    with pytest.raises(MetricComputationError) as exc_info:
        await service.get_runway(USER_ID)

    assert str(exc_info.value).startswith("Failed to calculate runway: Failed to calculate burn rate:")
    assert exc_info.value.upstream_failure


async def test_store_failures_counted(steady_records: dict, clock):
    labels = {"entity": "expenses"}
    before = REGISTRY.get_sample_value("finance_store_read_failures_total", labels) or 0.0
    service = AnalyticsService(FailingExpenseStore(**steady_records), clock=clock)

    with pytest.raises(MetricComputationError):
        await service.classify_expenses(USER_ID)

    assert REGISTRY.get_sample_value("finance_store_read_failures_total", labels) == before + 1
