"""Savings rate - share of monthly income left after the burn rate"""

from typing import Sequence

from finance_copilot.domain.models import Income, MetricResult
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy, first_below
from finance_copilot.domain.recurrence import to_monthly
from finance_copilot.domain.runway import round_cents


def monthly_income(incomes: Sequence[Income]) -> float:
    return sum(to_monthly(i.amount, i.frequency) for i in incomes)


def calculate_savings_rate(
    incomes: Sequence[Income],
    monthly_outcome: float,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> MetricResult:
    """Savings rate (%) = (income - outcome) / income * 100"""
    income = monthly_income(incomes)

    if income == 0:
        return MetricResult(
            metric="savings_rate",
            value=0,
            risk="critical",
            explanation="No income data found. Cannot calculate savings rate.",
            inputs={"monthly_income": 0, "monthly_outcome": monthly_outcome},
        )

    savings = income - monthly_outcome
    savings_rate = savings / income * 100

    return MetricResult(
        metric="savings_rate",
        value=round_cents(savings_rate),
        risk=first_below(savings_rate, policy.savings_rate_levels, "low"),
        explanation=(
            f"Savings rate is {savings_rate:.2f}% (saving ${savings:.2f}/month "
            f"from ${income:.2f}/month income)"
        ),
        inputs={
            "monthly_income": income,
            "monthly_outcome": monthly_outcome,
            "monthly_savings": savings,
        },
    )
