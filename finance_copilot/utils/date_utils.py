"""Date manipulation utilities"""

from datetime import date, datetime
from typing import TypeVar

from dateutil.relativedelta import relativedelta

D = TypeVar("D", date, datetime)


def add_months(moment: D, months: int) -> D:
    """Calendar month arithmetic; day clamps to the end of shorter months (Jan 31 + 1 -> Feb 28/29)"""
    return moment + relativedelta(months=months)


def months_ago(moment: D, months: int) -> D:
    return moment - relativedelta(months=months)


def month_label(moment: date) -> str:
    """Short month and year, e.g. "Nov 2026" """
    return moment.strftime("%b %Y")
