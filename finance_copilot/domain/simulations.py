"""What-if simulations - recompute runway and cashflow under hypothetical changes"""

import math

from finance_copilot.domain.models import MetricResult
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy, first_above, first_below
from finance_copilot.domain.runway import DAYS_PER_MONTH, round_cents, round_half_up


def _days_or_infinite(days: float):
    return "Infinite" if math.isinf(days) else round_cents(days)


def simulate_purchase(
    amount: float,
    current_balance: float,
    monthly_burn_rate: float,
    current_runway_days: float,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> MetricResult:
    """
    Impact of a one-off purchase on runway.

    Args:
        amount: Purchase amount, already validated as positive
        current_runway_days: Runway before the purchase (math.inf when unlimited)

    With no burn the runway stays unlimited and the reduction is zero.
    """
    daily_burn_rate = monthly_burn_rate / DAYS_PER_MONTH
    new_balance = current_balance - amount

    if daily_burn_rate > 0:
        new_runway_days = new_balance / daily_burn_rate
    else:
        new_runway_days = math.inf

    if math.isinf(current_runway_days) or math.isinf(new_runway_days):
        reduction_days = 0.0
        reduction_percent = 0.0
    else:
        reduction_days = current_runway_days - new_runway_days
        reduction_percent = reduction_days / current_runway_days * 100 if current_runway_days > 0 else 0.0

    if new_balance < 0:
        risk = "critical"
    else:
        risk = first_above(reduction_percent, policy.purchase_reduction_levels, "low")

    remaining = "unlimited" if math.isinf(new_runway_days) else f"{round_half_up(new_runway_days)}"

    return MetricResult(
        metric="purchase_simulation",
        value={
            "purchase_amount": amount,
            "new_balance": round_cents(new_balance),
            "new_runway_days": _days_or_infinite(new_runway_days),
            "runway_reduction_days": round_cents(reduction_days),
            "runway_reduction_percent": round_cents(reduction_percent),
        },
        risk=risk,
        explanation=(
            f"Purchase of ${amount:.2f} would reduce runway by {round_half_up(reduction_days)} days "
            f"({reduction_percent:.1f}%), resulting in {remaining} days remaining"
        ),
        inputs={
            "current_balance": current_balance,
            "current_runway_days": current_runway_days,
            "monthly_burn_rate": monthly_burn_rate,
            "purchase_amount": amount,
        },
    )


def runway_under_cashflow(balance: float, net_monthly_cashflow: float) -> float:
    """Days of runway when the net cashflow is negative, otherwise unlimited"""
    daily_net = net_monthly_cashflow / DAYS_PER_MONTH
    if daily_net < 0:
        return balance / abs(daily_net)
    return math.inf


def cashflow_risk(net_monthly_cashflow: float, runway_days: float, policy: RiskPolicy = DEFAULT_POLICY) -> str:
    if net_monthly_cashflow >= 0:
        return "low"
    return first_below(runway_days, policy.negative_cashflow_runway_levels, "medium")


def _direction(percent: float) -> str:
    return "increase" if percent >= 0 else "decrease"


def _cashflow_sign(net: float) -> str:
    return "positive" if net >= 0 else "negative"


def simulate_income_change(
    percent: float,
    current_monthly_income: float,
    monthly_burn_rate: float,
    current_balance: float,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> MetricResult:
    """Scale monthly income by `percent` and re-derive net cashflow and runway"""
    new_income = current_monthly_income * (1 + percent / 100)
    new_net = new_income - monthly_burn_rate
    new_runway_days = runway_under_cashflow(current_balance, new_net)

    return MetricResult(
        metric="income_change_simulation",
        value={
            "percent_change": percent,
            "new_monthly_income": round_cents(new_income),
            "new_net_cashflow": round_cents(new_net),
            "new_runway_days": _days_or_infinite(new_runway_days),
        },
        risk=cashflow_risk(new_net, new_runway_days, policy),
        explanation=(
            f"Income {_direction(percent)} of {abs(percent):g}% would result in "
            f"{_cashflow_sign(new_net)} cashflow of ${abs(new_net):.2f}/month"
        ),
        inputs={
            "current_monthly_income": current_monthly_income,
            "percent_change": percent,
            "monthly_burn_rate": monthly_burn_rate,
            "current_balance": current_balance,
        },
    )


def simulate_expense_change(
    percent: float,
    monthly_income: float,
    current_monthly_burn_rate: float,
    current_balance: float,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> MetricResult:
    """Scale the burn rate by `percent` and re-derive net cashflow and runway"""
    new_burn = current_monthly_burn_rate * (1 + percent / 100)
    new_net = monthly_income - new_burn
    new_runway_days = runway_under_cashflow(current_balance, new_net)

    return MetricResult(
        metric="expense_change_simulation",
        value={
            "percent_change": percent,
            "new_monthly_burn_rate": round_cents(new_burn),
            "new_net_cashflow": round_cents(new_net),
            "new_runway_days": _days_or_infinite(new_runway_days),
        },
        risk=cashflow_risk(new_net, new_runway_days, policy),
        explanation=(
            f"Expense {_direction(percent)} of {abs(percent):g}% would result in "
            f"{_cashflow_sign(new_net)} cashflow of ${abs(new_net):.2f}/month"
        ),
        inputs={
            "current_monthly_burn_rate": current_monthly_burn_rate,
            "percent_change": percent,
            "monthly_income": monthly_income,
            "current_balance": current_balance,
        },
    )
