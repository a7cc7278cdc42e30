"""Recurrence normalization - reduce any payment schedule to a monthly figure"""

from typing import Dict

# Multipliers to a monthly equivalent. Weekly/biweekly use average periods per month.
MONTHLY_MULTIPLIERS: Dict[str, float] = {
    "daily": 30,
    "weekly": 4.33,
    "biweekly": 2.17,
    "monthly": 1,
    "one-time": 0,
}


def to_monthly(amount: float, schedule: str) -> float:
    """
    Convert an amount repeating on `schedule` into its monthly equivalent.

    Unknown labels pass the amount through unchanged rather than failing.

    Example:
        to_monthly(100, "weekly") -> 433.0
        to_monthly(1200, "yearly") -> 100.0
    """
    if schedule == "yearly":
        return amount / 12
    return amount * MONTHLY_MULTIPLIERS.get(schedule, 1)
