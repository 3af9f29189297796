"""Tests for calendar helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from platoonplanner.domain.dates import (
    add_hours,
    date_range,
    dates_overlap,
    format_date,
    is_weekend,
    nights_between,
    parse_date,
    parse_instant,
    weekday_name,
)
from platoonplanner.domain.errors import InvalidDateError, PlannerError


class TestParseDate:
    """Tests for parse_date."""

    def test_date_passthrough(self):
        assert parse_date(date(2026, 3, 20)) == date(2026, 3, 20)

    def test_datetime_is_truncated(self):
        assert parse_date(datetime(2026, 3, 20, 23, 59)) == date(2026, 3, 20)

    def test_iso_string(self):
        assert parse_date("2026-03-20") == date(2026, 3, 20)

    def test_iso_datetime_string_uses_date_prefix(self):
        assert parse_date("2026-03-20T22:00:00Z") == date(2026, 3, 20)

    @pytest.mark.parametrize("value", ["", "20/03/2026", "2026-13-01", None, 42])
    def test_malformed_values_raise(self, value):
        """Malformed dates fail fast with a planner error that is also a ValueError."""
        with pytest.raises(InvalidDateError) as excinfo:
            parse_date(value)
        assert isinstance(excinfo.value, PlannerError)
        assert isinstance(excinfo.value, ValueError)


class TestParseInstant:
    """Tests for parse_instant."""

    def test_trailing_z_is_utc(self):
        parsed = parse_instant("2026-03-20T08:00:00Z")
        assert parsed == datetime(2026, 3, 20, 8, tzinfo=timezone.utc)

    def test_naive_value_is_treated_as_utc(self):
        parsed = parse_instant(datetime(2026, 3, 20, 8))
        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timedelta(0)

    def test_offset_is_kept(self):
        parsed = parse_instant("2026-03-20T08:00:00+02:00")
        assert parsed.utcoffset() == timedelta(hours=2)

    def test_malformed_raises(self):
        with pytest.raises(InvalidDateError):
            parse_instant("not a time")


class TestDateArithmetic:
    """Tests for ranges, nights and hour arithmetic."""

    def test_date_range_is_inclusive(self):
        days = date_range("2026-03-20", "2026-03-22")
        assert days == [date(2026, 3, 20), date(2026, 3, 21), date(2026, 3, 22)]

    def test_date_range_single_day(self):
        assert date_range("2026-03-20", "2026-03-20") == [date(2026, 3, 20)]

    def test_date_range_empty_when_reversed(self):
        assert date_range("2026-03-22", "2026-03-20") == []

    def test_nights_between(self):
        assert nights_between("2026-03-20", "2026-03-20") == 0
        assert nights_between("2026-03-20", "2026-03-23") == 3

    def test_add_hours_rolls_over_midnight(self):
        start = datetime(2026, 3, 20, 22, tzinfo=timezone.utc)
        assert add_hours(start, 8) == datetime(2026, 3, 21, 6, tzinfo=timezone.utc)

    def test_add_fractional_hours(self):
        start = datetime(2026, 3, 20, 22, tzinfo=timezone.utc)
        assert add_hours(start, 1.5) == datetime(2026, 3, 20, 23, 30, tzinfo=timezone.utc)

    def test_format_date(self):
        assert format_date(date(2026, 3, 5)) == "2026-03-05"

    def test_dates_overlap_is_inclusive(self):
        d = date
        assert dates_overlap(d(2026, 3, 20), d(2026, 3, 22), d(2026, 3, 22), d(2026, 3, 25))
        assert not dates_overlap(d(2026, 3, 20), d(2026, 3, 21), d(2026, 3, 22), d(2026, 3, 25))


class TestWeekend:
    """Tests for weekday naming and weekend membership."""

    def test_weekday_name(self):
        assert weekday_name(date(2026, 3, 20)) == "Friday"

    def test_default_weekend_days(self):
        weekend = ("Friday", "Saturday")
        assert is_weekend("2026-03-20", weekend) is True
        assert is_weekend("2026-03-21", weekend) is True
        assert is_weekend("2026-03-22", weekend) is False

    def test_custom_weekend_days(self):
        assert is_weekend("2026-03-22", ("Saturday", "Sunday")) is True
        assert is_weekend("2026-03-20", ("Saturday", "Sunday")) is False
