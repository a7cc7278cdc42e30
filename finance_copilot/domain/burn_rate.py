"""Burn rate - monthly cash outflow from recurring expenses plus recent spending"""

from typing import Sequence

from finance_copilot.domain.models import Expense, MetricResult, Transaction
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy, first_above
from finance_copilot.domain.recurrence import to_monthly
from finance_copilot.domain.runway import round_cents

# Outflow transactions are read over this many trailing months and averaged
TRANSACTION_WINDOW_MONTHS = 3


def calculate_burn_rate(
    expenses: Sequence[Expense],
    outflows: Sequence[Transaction],
    policy: RiskPolicy = DEFAULT_POLICY,
) -> MetricResult:
    """
    Combine normalized recurring expenses with the trailing transaction average.

    Args:
        expenses: All recorded expenses, any recurrence
        outflows: Negative-amount transactions from the trailing window
    """
    monthly_expenses = sum(to_monthly(e.amount, e.recurrence) for e in expenses)

    avg_monthly_transactions = 0.0
    if outflows:
        avg_monthly_transactions = sum(abs(t.amount) for t in outflows) / TRANSACTION_WINDOW_MONTHS

    burn_rate = monthly_expenses + avg_monthly_transactions
    risk = first_above(burn_rate, policy.burn_rate_levels, "low")

    return MetricResult(
        metric="burn_rate",
        value=round_cents(burn_rate),
        risk=risk,
        explanation=(
            f"Monthly burn rate is ${burn_rate:.2f}, calculated from recurring expenses "
            f"(${monthly_expenses:.2f}/month) and average transaction spending "
            f"(${avg_monthly_transactions:.2f}/month over the last {TRANSACTION_WINDOW_MONTHS} months)"
        ),
        inputs={
            "expense_count": len(expenses),
            "transaction_count": len(outflows),
            "monthly_expenses": monthly_expenses,
            "avg_monthly_transactions": avg_monthly_transactions,
        },
    )
