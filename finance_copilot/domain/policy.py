"""Risk policy tables - every threshold and weight used by the analytics in one place"""

from dataclasses import dataclass
from typing import Sequence, Tuple, TypeVar

T = TypeVar("T")

# A table is an ordered sequence of (bound, outcome) pairs; the first matching row wins.
Table = Sequence[Tuple[float, T]]


def first_above(value: float, table: Table, default: T) -> T:
    """Outcome of the first row whose bound `value` strictly exceeds"""
    for bound, outcome in table:
        if value > bound:
            return outcome
    return default


def first_below(value: float, table: Table, default: T) -> T:
    """Outcome of the first row whose bound `value` is strictly under"""
    for bound, outcome in table:
        if value < bound:
            return outcome
    return default


def first_at_least(value: float, table: Table, default: T) -> T:
    """Outcome of the first row whose bound `value` reaches (>=)"""
    for bound, outcome in table:
        if value >= bound:
            return outcome
    return default


@dataclass(frozen=True)
class RiskPolicy:
    """
    Risk bands per metric.

    Rows are checked top to bottom, so tables must be ordered from the
    tightest bound to the widest.
    """

    # Monthly burn rate ($), checked with ">"
    burn_rate_levels: Table = ((10_000, "high"), (5_000, "medium"))

    # Runway days, checked with "<"
    runway_levels: Table = ((30, "critical"), (60, "high"), (90, "medium"))

    # Savings rate (%), checked with "<"
    savings_rate_levels: Table = ((0, "critical"), (10, "high"), (20, "medium"))

    # Share of fixed spend (%), checked with ">"
    fixed_share_levels: Table = ((80, "high"), (60, "medium"))

    # Total upcoming obligations ($), checked with ">"
    obligation_total_levels: Table = ((5_000, "high"), (2_000, "medium"))

    # Final projected balance ($), checked with "<"
    forecast_balance_levels: Table = ((0, "critical"), (1_000, "high"), (5_000, "medium"))

    # Number of anomalies, checked with ">"
    anomaly_count_levels: Table = ((10, "high"), (5, "medium"))
    anomaly_multiplier: float = 2.0
    anomaly_list_limit: int = 20

    # Runway reduction caused by a purchase (%), checked with ">"
    purchase_reduction_levels: Table = ((20, "high"), (10, "medium"))

    # Runway days when a simulated change leaves cashflow negative, checked with "<"
    negative_cashflow_runway_levels: Table = ((30, "critical"), (60, "high"))

    # Composite score weights
    runway_weights: Table = ((30, 0.4), (60, 0.3), (90, 0.2), (180, 0.1))
    obligation_ratio_weights: Table = ((1.5, 0.2), (1.0, 0.15), (0.5, 0.1))
    burn_rate_weights: Table = ((10_000, 0.2), (5_000, 0.15), (2_000, 0.1))
    income_instability_weight: float = 0.2
    multi_source_stability: float = 1.0
    single_source_stability: float = 0.5

    # Composite score -> level, checked with ">="
    score_levels: Table = ((0.75, "critical"), (0.5, "high"), (0.25, "medium"))

    # Bounds that decide which factors the risk explanation and the advisory recommendations mention
    very_short_runway_days: float = 30
    short_runway_days: float = 90
    heavy_obligation_ratio: float = 1.5
    high_burn_rate: float = 10_000
    busy_payment_count: int = 5


DEFAULT_POLICY = RiskPolicy()
