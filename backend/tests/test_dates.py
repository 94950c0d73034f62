"""
Test date format helpers
"""

import pytest
from datetime import datetime, timezone

from hai.errors import ValidationError
from hai.utils.dates import (
    ddmmyyyy_to_yyyymmdd,
    format_timestamp,
    is_valid_ddmmyyyy,
    is_valid_wire_date,
    is_valid_yyyymmdd,
    shift_sortable_date,
    to_sortable_date,
    utc_now,
    yyyymmdd_to_ddmmyyyy,
)


@pytest.mark.parametrize("value", ["15112025", "01012024", "29022024", "31122099"])
def test_valid_ddmmyyyy(value):
    assert is_valid_ddmmyyyy(value)


@pytest.mark.parametrize("value", [
    "29022025",   # not a leap year
    "31042025",   # April has 30 days
    "00012025",
    "15132025",
    "1511202",
    "151120255",
    "15-11-2025",
    "",
    None,
])
def test_invalid_ddmmyyyy(value):
    assert not is_valid_ddmmyyyy(value)


def test_valid_yyyymmdd():
    assert is_valid_yyyymmdd("20251115")
    assert is_valid_yyyymmdd("20240229")
    assert not is_valid_yyyymmdd("20250229")
    assert not is_valid_yyyymmdd("15112025")


def test_conversions():
    assert ddmmyyyy_to_yyyymmdd("01102025") == "20251001"
    assert yyyymmdd_to_ddmmyyyy("20251001") == "01102025"


@pytest.mark.parametrize("value", ["20251115", "20240229", "19991231", "00010101"])
def test_round_trip(value):
    assert ddmmyyyy_to_yyyymmdd(yyyymmdd_to_ddmmyyyy(value)) == value


@pytest.mark.parametrize("value", ["1511202", "abcdefgh", "15/11/25", ""])
def test_conversion_rejects_malformed_input(value):
    with pytest.raises(ValidationError):
        ddmmyyyy_to_yyyymmdd(value)
    with pytest.raises(ValidationError):
        yyyymmdd_to_ddmmyyyy(value)


def test_to_sortable_date_by_wire_format():
    assert to_sortable_date("15112025", "DDMMYYYY") == "20251115"
    assert to_sortable_date("20251115", "YYYYMMDD") == "20251115"

    with pytest.raises(ValidationError):
        to_sortable_date("2025111", "YYYYMMDD")


def test_is_valid_wire_date():
    assert is_valid_wire_date("15112025", "DDMMYYYY")
    assert not is_valid_wire_date("15112025", "YYYYMMDD")
    assert is_valid_wire_date("20251115", "YYYYMMDD")


def test_timestamps_use_milliseconds_and_z_suffix():
    value = datetime(2025, 11, 15, 9, 30, 0, 123456, tzinfo=timezone.utc)
    assert format_timestamp(value) == "2025-11-15T09:30:00.123Z"

    now = utc_now()
    assert now.microsecond % 1000 == 0
    assert now.tzinfo is not None


def test_shift_sortable_date():
    assert shift_sortable_date("20250301", -1) == "20250228"
    assert shift_sortable_date("20240301", -1) == "20240229"
    assert shift_sortable_date("20260103", -10) == "20251224"
    assert shift_sortable_date("20251115", 0) == "20251115"

    with pytest.raises(ValidationError):
        shift_sortable_date("20251345", -1)
