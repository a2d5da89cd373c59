"""Tests for calendar date helpers."""

from datetime import date, datetime

from linear_dashboard.dates import (
    add_months,
    format_relative_date,
    format_updated_time,
    month_end,
    months_between,
    parse_local_date,
)

TODAY = date(2024, 2, 1)


class TestParseLocalDate:
    """Tests for parse_local_date."""

    def test_parses_iso_date(self):
        assert parse_local_date("2024-03-15") == date(2024, 3, 15)

    def test_parses_datetime_string_as_calendar_date(self):
        assert parse_local_date("2024-03-15T23:30:00.000-0500") == date(2024, 3, 15)

    def test_returns_none_for_missing_value(self):
        assert parse_local_date(None) is None
        assert parse_local_date("") is None

    def test_returns_none_for_invalid_value(self):
        assert parse_local_date("not-a-date") is None

    def test_passes_dates_through(self):
        assert parse_local_date(date(2024, 1, 1)) == date(2024, 1, 1)


class TestMonthHelpers:
    def test_add_months_returns_first_of_month(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 1)
        assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 1)
        assert add_months(date(2024, 11, 5), 14) == date(2026, 1, 1)

    def test_month_end_handles_leap_years(self):
        assert month_end(date(2024, 2, 10)) == date(2024, 2, 29)
        assert month_end(date(2023, 2, 10)) == date(2023, 2, 28)

    def test_months_between(self):
        assert months_between(date(2024, 1, 1), date(2024, 4, 30)) == 4
        assert months_between(date(2023, 12, 1), date(2024, 1, 31)) == 2


class TestFormatRelativeDate:
    """Tests for format_relative_date."""

    def test_today_and_tomorrow(self):
        assert format_relative_date("2024-02-01", TODAY) == "Today"
        assert format_relative_date("2024-02-02", TODAY) == "Tomorrow"

    def test_this_week(self):
        assert format_relative_date("2024-02-04", TODAY) == "in 3 days"
        assert format_relative_date("2024-02-07", TODAY) == "in 6 days"

    def test_overdue(self):
        assert format_relative_date("2024-01-30", TODAY) == "2 days ago (OVERDUE)"

    def test_later_dates(self):
        assert format_relative_date("2024-02-08", TODAY) == "2/8/2024"

    def test_missing(self):
        assert format_relative_date(None, TODAY) == ""


class TestFormatUpdatedTime:
    def test_formats_clock_time(self):
        assert format_updated_time(datetime(2024, 2, 1, 9, 5, 3)) == "Updated: 9:05:03 AM"

    def test_never_updated(self):
        assert format_updated_time(None) == "Not updated yet"
