"""Parameter validation shared by the analytics service and the API"""

from typing import Optional

from finance_copilot.domain.exceptions import InvalidParameterError
from finance_copilot.domain.forecast import MAX_FORECAST_MONTHS, MIN_FORECAST_MONTHS

MIN_PERCENT_CHANGE = -100


def validate_user_id(user_id: Optional[str]) -> str:
    if not isinstance(user_id, str) or not user_id.strip():
        raise InvalidParameterError("Valid user ID is required")
    return user_id.strip()


def validate_months(months: int) -> int:
    # bool is an int subclass; True would otherwise pass as 1 month
    if isinstance(months, bool) or not isinstance(months, int):
        raise InvalidParameterError("Months must be an integer")
    if months < MIN_FORECAST_MONTHS or months > MAX_FORECAST_MONTHS:
        raise InvalidParameterError(
            f"Months must be between {MIN_FORECAST_MONTHS} and {MAX_FORECAST_MONTHS}"
        )
    return months


def validate_amount(amount: float) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount != amount:
        raise InvalidParameterError("Amount must be a number")
    if amount <= 0:
        raise InvalidParameterError("Purchase amount must be positive")
    return float(amount)


def validate_percent(percent: float, subject: str = "Change") -> float:
    if isinstance(percent, bool) or not isinstance(percent, (int, float)) or percent != percent:
        raise InvalidParameterError("Percent must be a number")
    if percent < MIN_PERCENT_CHANGE:
        raise InvalidParameterError(f"{subject} change cannot be less than {MIN_PERCENT_CHANGE}%")
    return float(percent)
