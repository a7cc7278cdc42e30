"""Spending anomaly detection against a per-category historical baseline"""

from collections import defaultdict
from typing import Dict, List, Sequence

from finance_copilot.domain.models import Anomaly, AnomalyResult, Transaction
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy, first_above
from finance_copilot.domain.runway import round_cents

# Window boundaries, in months before now
DETECTION_MONTHS = 3
BASELINE_START_MONTHS = 12
BASELINE_END_MONTHS = 6


def category_baselines(baseline: Sequence[Transaction]) -> Dict[str, float]:
    """Average absolute spend per category"""
    totals: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)
    for txn in baseline:
        totals[txn.category] += abs(txn.amount)
        counts[txn.category] += 1
    return {category: totals[category] / counts[category] for category in totals}


def detect_anomalies(
    recent: Sequence[Transaction],
    baseline: Sequence[Transaction],
    policy: RiskPolicy = DEFAULT_POLICY,
) -> AnomalyResult:
    """
    Flag recent outflows larger than `anomaly_multiplier` x their category baseline.

    Categories without baseline history never produce anomalies. The returned
    list is capped, but value and risk reflect the full count.
    """
    averages = category_baselines(baseline)

    anomalies: List[Anomaly] = []
    for txn in recent:
        average = averages.get(txn.category, 0.0)
        amount = abs(txn.amount)
        if average <= 0 or amount <= average * policy.anomaly_multiplier:
            continue
        anomalies.append(
            Anomaly(
                category=txn.category,
                vendor=txn.vendor,
                amount=amount,
                baseline=average,
                deviation_percent=round_cents((amount - average) / average * 100),
                timestamp=txn.timestamp,
            )
        )

    anomalies.sort(key=lambda a: a.deviation_percent, reverse=True)
    count = len(anomalies)

    return AnomalyResult(
        metric="spending_anomalies",
        value=count,
        risk=first_above(count, policy.anomaly_count_levels, "low"),
        explanation=(
            f"Detected {count} spending anomaly(ies) - transactions that exceed "
            f"{policy.anomaly_multiplier * 100:.0f}% of historical baseline average for their category"
        ),
        inputs={
            "detection_period_months": DETECTION_MONTHS,
            "baseline_period_months": BASELINE_START_MONTHS - BASELINE_END_MONTHS,
            "anomaly_threshold": policy.anomaly_multiplier,
            "categories_analyzed": len(averages),
        },
        anomalies=anomalies[: policy.anomaly_list_limit],
    )
