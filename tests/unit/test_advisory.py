"""Unit tests for advisory recommendations"""

from datetime import date

from finance_copilot.domain.advisory import build_recommendations
from finance_copilot.domain.policy import RiskPolicy
from finance_copilot.domain.models import MetricResult, PaymentPriorityResult, RecurringPayment


def _runway(days) -> MetricResult:
    inputs = {"balance": 1000}
    if days is not None:
        inputs["runway_days"] = days
    return MetricResult(metric="runway", value="x", risk="low", explanation="", inputs=inputs)


def _payments(count: int) -> PaymentPriorityResult:
    payments = [
        RecurringPayment(id=f"p{i}", user_id="u1", amount=10, due_date=date(2025, 7, 1), recurrence="monthly", type="bill")
        for i in range(count)
    ]
    return PaymentPriorityResult(
        metric="payment_priority", value=count, risk="low", explanation="", payments=payments
    )


def test_healthy_finances_need_no_recommendations():
    assert build_recommendations(1500, _runway(400), _payments(2), "low") == []


def test_unlimited_runway_needs_no_runway_advice():
    assert build_recommendations(0, _runway(None), _payments(0), "low") == []


def test_critical_runway_advice():
    recommendations = build_recommendations(1500, _runway(12), _payments(0), "low")
    assert recommendations[0].startswith("CRITICAL: Very low runway")


def test_every_heuristic_can_fire_together():
    recommendations = build_recommendations(12000, _runway(60), _payments(6), "critical")

    assert recommendations == [
        "Monitor cashflow closely. Consider building emergency fund.",
        "High financial risk detected. Review spending patterns and consider financial planning.",
        "Multiple upcoming payments. Consider prioritizing high-interest debt and critical bills.",
        "High monthly burn rate. Review recurring expenses and subscriptions.",
    ]


def test_recommendations_follow_the_configured_policy():
    strict = RiskPolicy(very_short_runway_days=500, busy_payment_count=1, high_burn_rate=1000)

    assert build_recommendations(1500, _runway(400), _payments(2), "low") == []
    assert build_recommendations(1500, _runway(400), _payments(2), "low", strict) == [
        "CRITICAL: Very low runway. Consider reducing expenses immediately or increasing income.",
        "Multiple upcoming payments. Consider prioritizing high-interest debt and critical bills.",
        "High monthly burn rate. Review recurring expenses and subscriptions.",
    ]


def test_relaxed_policy_silences_watch_advice():
    relaxed = RiskPolicy(very_short_runway_days=10, short_runway_days=30)
    assert build_recommendations(1500, _runway(60), _payments(0), "low", relaxed) == []
