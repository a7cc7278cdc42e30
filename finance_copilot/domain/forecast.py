"""Cashflow forecast - linear projection of the balance N months ahead"""

from datetime import date
from typing import Sequence

from finance_copilot.domain.models import Expense, ForecastPoint, ForecastResult, Income, Transaction
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy, first_below
from finance_copilot.domain.recurrence import to_monthly
from finance_copilot.domain.runway import round_cents
from finance_copilot.domain.savings_rate import monthly_income
from finance_copilot.utils.date_utils import add_months, month_label

# Historical spending is averaged over this many trailing months
EXPENSE_LOOKBACK_MONTHS = 6
MIN_FORECAST_MONTHS = 1
MAX_FORECAST_MONTHS = 24


def monthly_expense_estimate(expenses: Sequence[Expense], outflows: Sequence[Transaction]) -> float:
    """Average historical spending plus normalized recurring expenses"""
    avg_spending = sum(abs(t.amount) for t in outflows) / EXPENSE_LOOKBACK_MONTHS if outflows else 0.0
    recurring = sum(to_monthly(e.amount, e.recurrence) for e in expenses)
    return avg_spending + recurring


def project_cashflow(
    current_balance: float,
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    outflows: Sequence[Transaction],
    months: int,
    start: date,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> ForecastResult:
    """
    Project the balance month by month with a constant net cashflow.

    Requirements:
    - One data point per month, labelled with the month it lands in
    - Balance carried forward from the previous month, seeded with today's balance
    - Risk graded on the final month's projected balance

    Args:
        current_balance: Seed balance (0 when the user has no balance data)
        outflows: Negative-amount transactions from the lookback window
        months: Horizon, already validated to 1-24
        start: Date the projection starts from (today)
    """
    income = monthly_income(incomes)
    expense = monthly_expense_estimate(expenses, outflows)
    net_cashflow = income - expense

    forecast = []
    projected_balance = current_balance
    for i in range(1, months + 1):
        projected_balance += net_cashflow
        forecast.append(
            ForecastPoint(
                month=month_label(add_months(start, i)),
                projected_balance=round_cents(projected_balance),
                projected_income=income,
                projected_expenses=expense,
            )
        )

    final_balance = forecast[-1].projected_balance

    return ForecastResult(
        metric="cashflow_forecast",
        value=months,
        risk=first_below(final_balance, policy.forecast_balance_levels, "low"),
        explanation=(
            f"Projected balance after {months} months: ${final_balance:.2f}. Based on monthly income "
            f"of ${income:.2f} and expenses of ${expense:.2f} (net: ${net_cashflow:.2f}/month)"
        ),
        inputs={
            "current_balance": current_balance,
            "monthly_income": income,
            "monthly_expenses": expense,
            "net_cashflow": net_cashflow,
            "forecast_months": months,
        },
        forecast=forecast,
    )
