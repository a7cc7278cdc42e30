"""Advisory summary - one aggregated view of the user's finances with recommendations"""

import math
from typing import List

from finance_copilot.domain.models import (
    AnomalyResult,
    FinancialState,
    FinancialSummary,
    MetricResult,
    PaymentPriorityResult,
    RiskScoreResult,
)
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy


def build_recommendations(
    burn_rate: float,
    runway: MetricResult,
    payment_priority: PaymentPriorityResult,
    risk_level: str,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> List[str]:
    """Heuristic next steps derived from the core metrics"""
    recommendations: List[str] = []

    runway_days = runway.inputs.get("runway_days")
    if not isinstance(runway_days, (int, float)):
        runway_days = math.inf

    if runway_days < policy.very_short_runway_days:
        recommendations.append(
            "CRITICAL: Very low runway. Consider reducing expenses immediately or increasing income."
        )
    elif runway_days < policy.short_runway_days:
        recommendations.append("Monitor cashflow closely. Consider building emergency fund.")

    if risk_level in ("high", "critical"):
        recommendations.append(
            "High financial risk detected. Review spending patterns and consider financial planning."
        )

    if len(payment_priority.payments) > policy.busy_payment_count:
        recommendations.append(
            "Multiple upcoming payments. Consider prioritizing high-interest debt and critical bills."
        )

    if burn_rate > policy.high_burn_rate:
        recommendations.append("High monthly burn rate. Review recurring expenses and subscriptions.")

    return recommendations


def _insight(result: MetricResult) -> dict:
    return {
        "metric": result.metric,
        "value": result.value,
        "risk": result.risk,
        "explanation": result.explanation,
    }


def build_financial_summary(
    monthly_income: float,
    burn_rate: MetricResult,
    savings_rate: MetricResult,
    runway: MetricResult,
    risk_score: RiskScoreResult,
    payment_priority: PaymentPriorityResult,
    anomalies: AnomalyResult,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> FinancialSummary:
    """Assemble the advisory view from already computed metrics"""
    balance = runway.inputs.get("balance")
    monthly_burn = burn_rate.value if isinstance(burn_rate.value, (int, float)) else 0.0
    runway_text = runway.value if isinstance(runway.value, str) else "N/A"
    risk_level = risk_score.risk_score or risk_score.risk

    return FinancialSummary(
        financial_state=FinancialState(
            balance=balance if isinstance(balance, (int, float)) else 0.0,
            income=monthly_income,
            burn_rate=monthly_burn,
            runway=runway_text,
            risk_level=risk_level,
        ),
        insights=[_insight(r) for r in (burn_rate, savings_rate, runway, payment_priority)],
        simulations=[],
        anomalies=list(anomalies.anomalies),
        recommendations=build_recommendations(monthly_burn, runway, payment_priority, risk_level, policy),
    )
