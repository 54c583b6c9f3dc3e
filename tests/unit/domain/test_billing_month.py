"""Unit tests for billing month date derivation

Tests cover:
- Last-day-of-month issue dates, including leap years
- Due date 7 days after issue date, across month and year boundaries
- Accepted and rejected month formats
- Month display names
"""

import pytest
from datetime import date

from src.domain.billing_month import (
    PAYMENT_TERM_DAYS,
    derive_billing_dates,
    month_display_name,
    parse_billing_month,
)
from src.domain.errors import InvalidMonthFormat


class TestDeriveBillingDates:
    """Test issue and due date derivation"""

    @pytest.mark.parametrize(
        "month, issue_date, due_date",
        [
            ("2024-03", date(2024, 3, 31), date(2024, 4, 7)),
            ("2024-02", date(2024, 2, 29), date(2024, 3, 7)),
            ("2023-02", date(2023, 2, 28), date(2023, 3, 7)),
            ("2024-04", date(2024, 4, 30), date(2024, 5, 7)),
            ("2024-12", date(2024, 12, 31), date(2025, 1, 7)),
        ],
    )
    def test_issue_date_is_last_day_and_due_date_follows(self, month, issue_date, due_date):
        """
        Given: A valid billing month
        When: derive_billing_dates is called
        Then: issue_date is the last day of the month, due_date is 7 days later
        """
        dates = derive_billing_dates(month)

        assert dates.issue_date == issue_date
        assert dates.due_date == due_date
        assert (dates.due_date - dates.issue_date).days == PAYMENT_TERM_DAYS

    def test_full_iso_date_uses_year_and_month_only(self):
        dates = derive_billing_dates("2024-03-15")

        assert dates.issue_date == date(2024, 3, 31)
        assert dates.due_date == date(2024, 4, 7)

    def test_single_digit_month_and_whitespace_accepted(self):
        assert derive_billing_dates(" 2024-3 ").issue_date == date(2024, 3, 31)

    @pytest.mark.parametrize(
        "month",
        ["", "2024", "2024-13", "2024-00", "March 2024", "24-03", "2024/03", "2024-02-30", "abcd-ef"],
    )
    def test_invalid_month_rejected(self, month):
        """
        Given: A value that is not a calendar month
        When: derive_billing_dates is called
        Then: InvalidMonthFormat is raised
        """
        with pytest.raises(InvalidMonthFormat) as exc_info:
            derive_billing_dates(month)

        assert exc_info.value.month == month

    def test_due_date_past_last_representable_date_rejected(self):
        """
        Given: December 9999, whose due date would fall after date.max
        When: derive_billing_dates is called
        Then: InvalidMonthFormat is raised instead of OverflowError
        """
        with pytest.raises(InvalidMonthFormat) as exc_info:
            derive_billing_dates("9999-12")

        assert exc_info.value.month == "9999-12"

    def test_last_supported_month(self):
        assert derive_billing_dates("9999-11").due_date == date(9999, 12, 7)

    def test_non_string_rejected(self):
        with pytest.raises(InvalidMonthFormat):
            parse_billing_month(202403)


class TestMonthDisplayName:
    def test_with_year(self):
        assert month_display_name("2024-03") == "March 2024"

    def test_without_year(self):
        assert month_display_name("2024-11", include_year=False) == "November"
