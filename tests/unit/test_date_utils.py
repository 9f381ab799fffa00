"""
Unit tests for date and formatting utilities.
"""

from datetime import date
from decimal import Decimal

import pytest
from freezegun import freeze_time

from cashflow_mcp.utils.date_utils import (
    current_month_range,
    get_month_range,
    parse_date,
    parse_period,
)
from cashflow_mcp.utils.formatting import format_currency, quantize_cents


@pytest.mark.unit
class TestParsePeriod:
    """Tests for parse_period function."""

    @pytest.mark.parametrize(
        "period, expected",
        [
            ("this_month", ("2026-01-01", "2026-01-31")),
            ("last_month", ("2025-12-01", "2025-12-31")),
            ("this_year", ("2026-01-01", "2026-12-31")),
            ("last_year", ("2025-01-01", "2025-12-31")),
            ("last_7_days", ("2026-01-08", "2026-01-15")),
            ("last_30_days", ("2025-12-16", "2026-01-15")),
            ("last_90_days", ("2025-10-17", "2026-01-15")),
            ("ytd", ("2026-01-01", "2026-01-15")),
        ],
    )
    def test_parse_period(self, period, expected) -> None:
        """Test every supported period shorthand."""
        with freeze_time("2026-01-15"):
            assert parse_period(period) == expected

    @freeze_time("2026-03-15")
    def test_parse_last_month_february(self) -> None:
        """Test last_month when the previous month is February."""
        assert parse_period("last_month") == ("2026-02-01", "2026-02-28")

    def test_parse_invalid_period(self) -> None:
        """Test that invalid period raises ValueError."""
        with pytest.raises(ValueError, match="Unknown period"):
            parse_period("next_decade")


@pytest.mark.unit
class TestGetMonthRange:
    """Tests for get_month_range function."""

    def test_get_month_range_february_leap_year(self) -> None:
        """Test get month range february leap year."""
        assert get_month_range(2024, 2) == ("2024-02-01", "2024-02-29")

    def test_get_month_range_april(self) -> None:
        """Test get month range april."""
        assert get_month_range(2026, 4) == ("2026-04-01", "2026-04-30")

    def test_get_month_range_invalid_month(self) -> None:
        """Test that invalid month raises ValueError."""
        with pytest.raises(ValueError):
            get_month_range(2026, 13)
        with pytest.raises(ValueError):
            get_month_range(2026, 0)

    @freeze_time("2026-02-10")
    def test_current_month_range(self) -> None:
        """Test the default filter range for the current month."""
        assert current_month_range() == ("2026-02-01", "2026-02-28")


@pytest.mark.unit
class TestParseDate:
    """Tests for parse_date function."""

    def test_parse_plain_date(self) -> None:
        """Test parse plain date."""
        assert parse_date("2026-01-15") == date(2026, 1, 15)

    def test_parse_timestamp_keeps_date(self) -> None:
        """Test parse timestamp keeps date."""
        assert parse_date("2026-01-15T23:59:59Z") == date(2026, 1, 15)

    def test_parse_empty(self) -> None:
        """Test parse empty."""
        assert parse_date("") is None
        assert parse_date(None) is None

    def test_parse_malformed(self) -> None:
        """Test parse malformed."""
        assert parse_date("not-a-date") is None
        assert parse_date("2026-13-01") is None
        assert parse_date("2026-01-15garbage") is None
        assert parse_date("2026-01-151") is None
        assert parse_date("2026-01-15 08:00") == date(2026, 1, 15)


@pytest.mark.unit
class TestFormatting:
    """Tests for currency formatting helpers."""

    def test_quantize_cents_rounds_half_up(self) -> None:
        """Test rounding to cents, half away from zero."""
        assert quantize_cents(Decimal("2.345")) == Decimal("2.35")
        assert quantize_cents(Decimal("-2.345")) == Decimal("-2.35")

    def test_format_currency(self) -> None:
        """Test currency formatting with separators and sign."""
        assert format_currency(Decimal("1234.5")) == "$1,235"
        assert format_currency(Decimal("-1234.5")) == "-$1,235"
        assert format_currency(Decimal("0")) == "$0"

    def test_format_currency_symbol(self) -> None:
        """Test format currency symbol."""
        assert format_currency(Decimal("10"), symbol="€") == "€10"
