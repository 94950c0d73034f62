"""
Hai Backend - Date Utilities

Purpose: Wire-format date validation/conversion and timestamp helpers.

Wire dates are 8-digit strings, either DDMMYYYY or YYYYMMDD depending on the
API generation. Anything written to an index sort key uses YYYYMMDD so that
lexicographic order is chronological order.

Testing:
    ddmmyyyy_to_yyyymmdd("15112025")  # "20251115"
    is_valid_ddmmyyyy("31022025")     # False
"""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Literal, Tuple

from hai.errors import ValidationError

DateFormat = Literal["DDMMYYYY", "YYYYMMDD"]

DDMMYYYY: DateFormat = "DDMMYYYY"
YYYYMMDD: DateFormat = "YYYYMMDD"


def _require_eight_digits(value: str, expected: str) -> str:
    if not isinstance(value, str) or len(value) != 8 or not value.isdigit():
        raise ValidationError(f"Invalid date format. Expected {expected}, got: {value}")
    return value


def _is_calendar_date(year: int, month: int, day: int) -> bool:
    if year < 1 or month < 1 or month > 12:
        return False
    return 1 <= day <= calendar.monthrange(year, month)[1]


def _split(value: str, fmt: DateFormat) -> Tuple[int, int, int]:
    """Return (year, month, day)"""
    if fmt == DDMMYYYY:
        return int(value[4:8]), int(value[2:4]), int(value[0:2])
    return int(value[0:4]), int(value[4:6]), int(value[6:8])


def is_valid_ddmmyyyy(value: str) -> bool:
    """Validate DDMMYYYY date format"""
    if not isinstance(value, str) or len(value) != 8 or not value.isdigit():
        return False
    return _is_calendar_date(*_split(value, DDMMYYYY))


def is_valid_yyyymmdd(value: str) -> bool:
    """Validate YYYYMMDD date format"""
    if not isinstance(value, str) or len(value) != 8 or not value.isdigit():
        return False
    return _is_calendar_date(*_split(value, YYYYMMDD))


def ddmmyyyy_to_yyyymmdd(value: str) -> str:
    """Convert DDMMYYYY to YYYYMMDD ("01102025" -> "20251001")"""
    _require_eight_digits(value, DDMMYYYY)
    return f"{value[4:8]}{value[2:4]}{value[0:2]}"


def yyyymmdd_to_ddmmyyyy(value: str) -> str:
    """Convert YYYYMMDD to DDMMYYYY ("20251001" -> "01102025")"""
    _require_eight_digits(value, YYYYMMDD)
    return f"{value[6:8]}{value[4:6]}{value[0:4]}"


def is_valid_wire_date(value: str, fmt: DateFormat) -> bool:
    """Validate a date in the given wire format"""
    if fmt == DDMMYYYY:
        return is_valid_ddmmyyyy(value)
    return is_valid_yyyymmdd(value)


def to_sortable_date(value: str, fmt: DateFormat) -> str:
    """Canonical YYYYMMDD form of a wire date"""
    if fmt == DDMMYYYY:
        return ddmmyyyy_to_yyyymmdd(value)
    return _require_eight_digits(value, YYYYMMDD)


def shift_sortable_date(value: str, days: int) -> str:
    """Move a YYYYMMDD date by a number of days ("20250301", -1 -> "20250228")"""
    try:
        moved = datetime.strptime(value, "%Y%m%d") + timedelta(days=days)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid date: {value}") from e
    return f"{moved.year:04d}{moved.month:02d}{moved.day:02d}"


# =============================================================================
# TIMESTAMPS
# =============================================================================

def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds (the stored precision)"""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with milliseconds and Z suffix, e.g. 2025-11-15T09:30:00.000Z"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
