"""
Date and age helpers.

Every age in the application goes through calculate_age(): whole
calendar years, decremented when this year's birthday has not been
reached yet. Dates of birth are stored as ISO strings ("YYYY-MM-DD");
an empty string means unknown.
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

import pandas as pd

# Days between the Excel serial epoch (1899-12-30, leap-year bug included)
# and the Unix epoch.
EXCEL_EPOCH_OFFSET_DAYS = 25569
UNIX_EPOCH = date(1970, 1, 1)

_FALLBACK_FORMATS = ("%d-%m-%Y", "%d/%m/%Y", "%d.%m.%Y", "%Y/%m/%d")

DateLike = Union[str, date, None]


@dataclass(frozen=True)
class AgeBreakdown:
    """Exact age in years, months and days."""
    years: int
    months: int
    days: int

    def __str__(self) -> str:
        return f"{self.years}y {self.months}m {self.days}d"


def parse_date(value: DateLike) -> Optional[date]:
    """
    Parse a stored date of birth.

    Accepts ISO strings (a time suffix is ignored), a few day-first
    formats, and date/datetime objects. Returns None when unknown or
    unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def calculate_age(dob: DateLike, today: Optional[date] = None) -> Optional[int]:
    """
    Calendar age in whole years.

    Args:
        dob: Date of birth (ISO string or date)
        today: Reference date (default: date.today())

    Returns:
        Age in years, or None if the date of birth is unknown
    """
    birth = parse_date(dob)
    if birth is None:
        return None
    today = today or date.today()
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def precise_age(dob: DateLike, today: Optional[date] = None) -> Optional[AgeBreakdown]:
    """
    Age as years/months/days with month and day borrow.

    A negative day count borrows the length of the month before today's
    month; a negative month count borrows a year.
    """
    birth = parse_date(dob)
    if birth is None:
        return None
    today = today or date.today()

    years = today.year - birth.year
    months = today.month - birth.month
    days = today.day - birth.day

    if days < 0:
        months -= 1
        prev_year, prev_month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
        days += calendar.monthrange(prev_year, prev_month)[1]
    if months < 0:
        years -= 1
        months += 12

    return AgeBreakdown(years=years, months=months, days=days)


def excel_serial_to_iso(serial: float) -> str:
    """
    Convert an Excel serial day number to an ISO date string.

    Raises OverflowError or ValueError when the serial falls outside
    the representable date range.
    """
    utc_days = math.floor(serial - EXCEL_EPOCH_OFFSET_DAYS)
    return (UNIX_EPOCH + timedelta(days=utc_days)).isoformat()


def _as_serial(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None


def normalize_date(value: Any) -> str:
    """
    Normalize a spreadsheet cell into an ISO date string.

    - date/datetime/Timestamp -> ISO date
    - number, or numeric text -> Excel serial conversion
    - other -> calendar date string parse
    - unparseable or out of range -> the raw value as a string
    - empty -> ""
    """
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if value is pd.NaT:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return excel_serial_to_iso(float(value))
        except (OverflowError, ValueError):
            return str(value)

    text = str(value).strip()
    if not text:
        return ""

    parsed = parse_date(text)
    if parsed is not None:
        return parsed.isoformat()

    # CSV sheets carry serials as text
    serial = _as_serial(text)
    if serial is not None:
        try:
            return excel_serial_to_iso(serial)
        except (OverflowError, ValueError):
            return text

    stamp = pd.to_datetime(text, errors="coerce")
    if stamp is not pd.NaT and not pd.isna(stamp):
        return stamp.date().isoformat()

    return text
