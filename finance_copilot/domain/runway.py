"""Runway - days until the balance reaches zero at the current burn rate"""

import math
from typing import Optional, Sequence

from finance_copilot.domain.models import BalanceSnapshot, MetricResult, Transaction
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy, first_below

DAYS_PER_MONTH = 30


def resolve_balance(
    snapshot: Optional[BalanceSnapshot],
    transactions: Sequence[Transaction] = (),
) -> Optional[float]:
    """
    Current balance: latest snapshot wins, otherwise the running sum of all
    transactions (oldest first). None when neither source has data.
    """
    if snapshot is not None:
        return snapshot.balance
    if not transactions:
        return None

    balance = 0.0
    for txn in sorted(transactions, key=lambda t: t.timestamp):
        balance += txn.amount
    return balance


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round_cents(value: float) -> float:
    """Two decimals, ties rounded up (100.125 -> 100.13, -0.005 -> 0.0)"""
    return math.floor(value * 100 + 0.5) / 100


def format_runway(runway_days: float) -> str:
    """Whole months from a year onwards, whole days below that"""
    if runway_days >= 365:
        return f"{round_half_up(runway_days / DAYS_PER_MONTH)} months"
    return f"{round_half_up(runway_days)} days"


def runway_risk(runway_days: float, policy: RiskPolicy = DEFAULT_POLICY) -> str:
    return first_below(runway_days, policy.runway_levels, "low")


def calculate_runway(
    balance: Optional[float],
    monthly_burn_rate: float,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> MetricResult:
    """
    Runway in days = balance / (monthly burn / 30).

    No balance data is a terminal "N/A" state, zero burn is "Infinite". A
    negative balance or negative burn yields a negative runway.
    """
    if balance is None:
        return MetricResult(
            metric="runway",
            value="N/A",
            risk="critical",
            explanation="No balance data found. Cannot calculate runway.",
            inputs={"balance": 0, "burn_rate": 0},
        )

    if monthly_burn_rate == 0:
        return MetricResult(
            metric="runway",
            value="Infinite",
            risk="low",
            explanation="No expenses found. Runway is effectively infinite.",
            inputs={"balance": balance, "monthly_burn_rate": 0},
        )

    daily_burn_rate = monthly_burn_rate / DAYS_PER_MONTH
    runway_days = balance / daily_burn_rate
    formatted = format_runway(runway_days)

    return MetricResult(
        metric="runway",
        value=formatted,
        risk=runway_risk(runway_days, policy),
        explanation=(
            f"Current balance of ${balance:.2f} provides {formatted} of runway at the current "
            f"burn rate of ${monthly_burn_rate:.2f}/month (${daily_burn_rate:.2f}/day)"
        ),
        inputs={
            "balance": balance,
            "monthly_burn_rate": monthly_burn_rate,
            "daily_burn_rate": daily_burn_rate,
            "runway_days": runway_days,
        },
    )
