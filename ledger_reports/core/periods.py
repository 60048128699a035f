"""Calendar helpers for month keys ("YYYY-MM") and years.

The engine never reads the clock: anything that needs "this month" takes
an explicit ``reference_date``.
"""

from __future__ import annotations

import calendar
import re
from datetime import date

_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")
_DATE_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})")


def parse_month_key(month: str) -> tuple[int, int]:
    """Split a ``YYYY-MM`` key into ``(year, month)``.

    Raises :class:`ValueError` for anything else, including month numbers
    outside 01..12.
    """
    m = _MONTH_KEY_RE.match(month)
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise ValueError(f"Invalid month '{month}'. Expected YYYY-MM.")
    return int(m.group(1)), int(m.group(2))


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def get_previous_month(month: str) -> str:
    """Return the calendar month before *month*, rolling January back a year."""
    year, mon = parse_month_key(month)
    if mon == 1:
        return month_key(year - 1, 12)
    return month_key(year, mon - 1)


def get_next_month(month: str) -> str:
    """Return the calendar month after *month*, rolling December forward a year."""
    year, mon = parse_month_key(month)
    if mon == 12:
        return month_key(year + 1, 1)
    return month_key(year, mon + 1)


def days_in_month(month: str) -> int:
    year, mon = parse_month_key(month)
    return calendar.monthrange(year, mon)[1]


def current_month(reference_date: date) -> str:
    return reference_date.strftime("%Y-%m")


def current_year(reference_date: date) -> int:
    return reference_date.year


def transaction_period(date_str: str) -> tuple[int, int] | None:
    """Parse the leading ``YYYY-MM`` of an ISO date into ``(year, month)``.

    Returns ``None`` for strings that don't start with a valid year-month,
    so malformed dates fall outside every period instead of raising.
    """
    m = _DATE_PREFIX_RE.match(date_str or "")
    if not m:
        return None
    year, mon = int(m.group(1)), int(m.group(2))
    if not 1 <= mon <= 12:
        return None
    return year, mon


def in_month(date_str: str, month: str) -> bool:
    return transaction_period(date_str) == parse_month_key(month)


def in_year(date_str: str, year: int) -> bool:
    period = transaction_period(date_str)
    return period is not None and period[0] == year


def month_label(month: str) -> str:
    """Human-readable label, e.g. ``"2024-01"`` -> ``"January 2024"``."""
    year, mon = parse_month_key(month)
    return f"{calendar.month_name[mon]} {year}"
