"""
Tests for the timezone resolver.
"""

from datetime import date, datetime, timezone

import pytest

from todays_horoscope.services.timezone import (
    current_hour_in_timezone,
    is_next_day_from_utc,
    is_valid_timezone,
    local_date,
    safe_timezone,
    utc_today,
)

from conftest import FIXED_NOW


def test_valid_timezones():
    assert is_valid_timezone("UTC")
    assert is_valid_timezone("Asia/Tokyo")
    assert is_valid_timezone("America/Los_Angeles")


def test_invalid_timezones():
    assert not is_valid_timezone("Mars/Olympus_Mons")
    assert not is_valid_timezone("")
    assert not is_valid_timezone(None)


def test_safe_timezone_falls_back_to_utc():
    assert safe_timezone("Europe/London") == "Europe/London"
    assert safe_timezone("not-a-zone") == "UTC"
    assert safe_timezone(None) == "UTC"


def test_local_date_ahead_of_utc():
    assert utc_today(FIXED_NOW) == date(2024, 6, 15)
    assert local_date("Asia/Tokyo", FIXED_NOW) == date(2024, 6, 16)


def test_local_date_behind_utc():
    early = datetime(2024, 6, 15, 3, 0, tzinfo=timezone.utc)
    assert local_date("America/Los_Angeles", early) == date(2024, 6, 14)


def test_local_date_bad_zone_uses_utc_date():
    assert local_date("Nowhere/Special", FIXED_NOW) == date(2024, 6, 15)


def test_naive_now_treated_as_utc():
    naive = datetime(2024, 6, 15, 22, 0)
    assert local_date("Asia/Tokyo", naive) == date(2024, 6, 16)


def test_current_hour_in_timezone():
    assert current_hour_in_timezone("Asia/Tokyo", FIXED_NOW) == 7
    assert current_hour_in_timezone("bogus", FIXED_NOW) == 22


def test_is_next_day_from_utc():
    assert is_next_day_from_utc("Asia/Tokyo", FIXED_NOW) is True
    assert is_next_day_from_utc("America/New_York", FIXED_NOW) is False


@pytest.mark.parametrize(
    "name",
    ["America", "Europe", "x" * 5000, "../etc/passwd"],
    ids=["directory-america", "directory-europe", "overlong", "relative-path"],
)
def test_directory_and_overlong_names_are_invalid(name):
    """Names tzdata cannot open as a zone file never raise."""
    assert is_valid_timezone(name) is False
    assert safe_timezone(name) == "UTC"
    assert local_date(name, FIXED_NOW) == date(2024, 6, 15)
    assert current_hour_in_timezone(name, FIXED_NOW) == 22
    assert is_next_day_from_utc(name, FIXED_NOW) is False
