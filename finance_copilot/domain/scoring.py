"""Composite risk scoring - core business logic for the overall risk level"""

import math
from dataclasses import dataclass
from typing import List

from finance_copilot.domain.models import MetricResult, RiskScoreResult
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy, first_above, first_at_least, first_below
from finance_copilot.domain.runway import round_half_up


@dataclass
class RiskFactors:
    """Inputs gathered from the other metrics"""

    runway_days: float  # math.inf when runway is not computable
    monthly_burn_rate: float
    upcoming_payments_total: float
    income_source_count: int
    current_balance: float


def extract_risk_factors(
    runway: MetricResult,
    burn_rate: MetricResult,
    payment_priority: MetricResult,
    income_source_count: int,
) -> RiskFactors:
    """
    Pull numeric factors out of metric envelopes.

    Runway results without a numeric runway ("Infinite", "N/A") count as an
    unlimited runway.
    """
    runway_days = runway.inputs.get("runway_days")
    balance = runway.inputs.get("balance")
    upcoming = payment_priority.inputs.get("total_amount")

    return RiskFactors(
        runway_days=runway_days if isinstance(runway_days, (int, float)) else math.inf,
        monthly_burn_rate=burn_rate.value if isinstance(burn_rate.value, (int, float)) else 0.0,
        upcoming_payments_total=upcoming if isinstance(upcoming, (int, float)) else 0.0,
        income_source_count=income_source_count,
        current_balance=balance if isinstance(balance, (int, float)) else 0.0,
    )


def income_stability(factors: RiskFactors, policy: RiskPolicy = DEFAULT_POLICY) -> float:
    """Multiple income sources are treated as more stable"""
    if factors.income_source_count > 1:
        return policy.multi_source_stability
    return policy.single_source_stability


def calculate_risk_score(factors: RiskFactors, policy: RiskPolicy = DEFAULT_POLICY) -> float:
    """
    Calculate risk score from 0.0 (lowest risk) to 1.0 (highest risk).

    Scoring weights (one bracket per factor, tightest first):
    - up to 0.4: runway (<30d, <60d, <90d, <180d)
    - up to 0.2: upcoming obligations relative to monthly burn
    - up to 0.2: absolute monthly burn rate
    - up to 0.2: income instability (single source)

    A negative balance overrides everything with 1.0.
    """
    score = 0.0

    score += first_below(factors.runway_days, policy.runway_weights, 0.0)

    burn = factors.monthly_burn_rate
    obligations_ratio = factors.upcoming_payments_total / burn if burn > 0 else 0.0
    score += first_above(obligations_ratio, policy.obligation_ratio_weights, 0.0)

    score += first_above(burn, policy.burn_rate_weights, 0.0)

    score += (1 - income_stability(factors, policy)) * policy.income_instability_weight

    if factors.current_balance < 0:
        score = 1.0

    return min(max(score, 0.0), 1.0)


def determine_risk_level(score: float, policy: RiskPolicy = DEFAULT_POLICY) -> str:
    """
    Map the score to a level:
    - >= 0.75: critical
    - >= 0.5:  high
    - >= 0.25: medium
    - else:    low
    """
    return first_at_least(score, policy.score_levels, "low")


def build_risk_explanation(level: str, factors: RiskFactors, policy: RiskPolicy = DEFAULT_POLICY) -> str:
    """Human-readable summary listing whichever risk factors apply"""
    reasons: List[str] = []

    if factors.current_balance < 0:
        reasons.append("negative balance")

    if factors.runway_days < policy.very_short_runway_days:
        reasons.append(f"very short runway ({round_half_up(factors.runway_days)} days)")
    elif factors.runway_days < policy.short_runway_days:
        reasons.append(f"short runway ({round_half_up(factors.runway_days)} days)")

    if factors.upcoming_payments_total > factors.monthly_burn_rate * policy.heavy_obligation_ratio:
        reasons.append("high upcoming payment obligations")

    if factors.income_source_count <= 1:
        reasons.append("single income source (low stability)")

    if factors.monthly_burn_rate > policy.high_burn_rate:
        reasons.append("high monthly burn rate")

    reasons_text = f" Risk factors: {', '.join(reasons)}." if reasons else ""
    return f"Overall financial risk is {level}.{reasons_text}"


def assess_risk(factors: RiskFactors, policy: RiskPolicy = DEFAULT_POLICY) -> RiskScoreResult:
    """
    Main entry point: score the factors and wrap them in a result.

    Returns RiskScoreResult whose value is the score as a 0-100 integer.
    """
    score = calculate_risk_score(factors, policy)
    level = determine_risk_level(score, policy)

    return RiskScoreResult(
        metric="risk_score",
        value=round_half_up(score * 100),
        risk=level,
        explanation=build_risk_explanation(level, factors, policy),
        inputs={
            "runway_days": factors.runway_days,
            "monthly_burn_rate": factors.monthly_burn_rate,
            "upcoming_payments_total": factors.upcoming_payments_total,
            "income_source_count": factors.income_source_count,
            "income_stability": income_stability(factors, policy),
            "current_balance": factors.current_balance,
            "risk_score": score,
        },
        risk_score=level,
    )
