"""
import_engine.date_parser - Turn spreadsheet/CSV cell values into datetimes.

Accepted forms, tried in this order:
  • datetime / date objects (openpyxl hands these over for date cells)
  • numbers → spreadsheet serial day count from 1899-12-30
  • "D.M.YYYY" or "D/M/YYYY"
  • "YYYY-M-D"
  • anything datetime.fromisoformat() understands

The serial conversion is plain epoch + days, so it inherits the 1900
leap-year quirk of the spreadsheet date system on purpose.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

SPREADSHEET_EPOCH = datetime(1899, 12, 30)

_DMY = re.compile(r"^(\d{1,2})[./](\d{1,2})[./](\d{4})$")
_YMD = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def parse_date(raw: object) -> Optional[datetime]:
    """
    Return a naive datetime for ``raw`` or None when it is empty or
    unparseable.  Whether None is an error is up to the caller.
    """
    if raw is None:
        return None

    if isinstance(raw, datetime):
        return _naive(raw)
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)

    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return from_serial(raw)

    text = str(raw).strip()
    if not text:
        return None

    m = _DMY.match(text)
    if m:
        return _build(int(m.group(3)), int(m.group(2)), int(m.group(1)))

    m = _YMD.match(text)
    if m:
        return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    try:
        return _naive(datetime.fromisoformat(text))
    except ValueError:
        return None


def from_serial(serial: float) -> Optional[datetime]:
    """Spreadsheet serial (days since 1899-12-30, fractional = time of day)."""
    if not serial or math.isnan(serial) or math.isinf(serial):
        return None
    try:
        return SPREADSHEET_EPOCH + timedelta(milliseconds=round(serial * 86_400_000))
    except OverflowError:
        return None


def _build(year: int, month: int, day: int) -> Optional[datetime]:
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def _naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
