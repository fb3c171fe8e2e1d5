"""Tests for time utilities."""

from datetime import date, datetime

import pytest

from salesdesk.utils.time import format_day, parse_iso_datetime


def test_date_only_is_midnight():
    assert parse_iso_datetime("2023-01-31") == datetime(2023, 1, 31)


def test_z_suffix_and_offsets_normalise_to_naive_utc():
    assert parse_iso_datetime("2023-01-31T10:00:00Z") == datetime(2023, 1, 31, 10, 0)
    assert parse_iso_datetime("2023-01-31T10:00:00+05:30") == datetime(2023, 1, 31, 4, 30)
    assert parse_iso_datetime(" 2023-01-31T10:00:00 ").tzinfo is None


@pytest.mark.parametrize("value", ["", "   ", "yesterday", "2023-13-01", "31-01-2023"])
def test_invalid_values_raise(value):
    with pytest.raises(ValueError):
        parse_iso_datetime(value)


def test_format_day():
    assert format_day(datetime(2023, 5, 6, 23, 59)) == "2023-05-06"
    assert format_day(date(2023, 5, 6)) == "2023-05-06"
    assert format_day(None) == ""
