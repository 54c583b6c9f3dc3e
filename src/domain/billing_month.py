"""Billing Month

Derives invoice dates from a billing month string.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Tuple

from .errors import InvalidMonthFormat

PAYMENT_TERM_DAYS = 7

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})(?:-(\d{1,2}))?$")


@dataclass(frozen=True)
class BillingDates:
    issue_date: date
    due_date: date


def parse_billing_month(month: str) -> Tuple[int, int]:
    """
    Parse a billing month into (year, month)

    Accepts YYYY-MM and full ISO dates (YYYY-MM-DD); only the year and
    month components are used.

    Raises:
        InvalidMonthFormat: value is not a calendar month
    """
    if not isinstance(month, str):
        raise InvalidMonthFormat(str(month))

    match = _MONTH_PATTERN.match(month.strip())
    if not match:
        raise InvalidMonthFormat(month)

    year, month_number = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= month_number <= 12:
        raise InvalidMonthFormat(month)

    if match.group(3) is not None:
        try:
            date(year, month_number, int(match.group(3)))
        except ValueError:
            raise InvalidMonthFormat(month)

    return year, month_number


def derive_billing_dates(month: str) -> BillingDates:
    """
    Compute issue and due dates for a billing month

    issue_date is the last calendar day of the month, due_date follows
    it by PAYMENT_TERM_DAYS.

    Raises:
        InvalidMonthFormat: value is not a calendar month
    """
    year, month_number = parse_billing_month(month)
    last_day = calendar.monthrange(year, month_number)[1]
    issue_date = date(year, month_number, last_day)
    try:
        due_date = issue_date + timedelta(days=PAYMENT_TERM_DAYS)
    except OverflowError:
        # Due date would fall after date.max (9999-12)
        raise InvalidMonthFormat(month)
    return BillingDates(issue_date=issue_date, due_date=due_date)


def month_display_name(month: str, include_year: bool = True) -> str:
    """'2024-03' -> 'March 2024' (or 'March' without the year)"""
    year, month_number = parse_billing_month(month)
    name = calendar.month_name[month_number]
    return f"{name} {year}" if include_year else name
