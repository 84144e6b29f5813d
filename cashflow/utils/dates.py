"""
Month-key calendar helpers.

A month key is the canonical "YYYY-MM" string (zero-padded) naming one
calendar month bucket of the ledger. All helpers use the local calendar
and are pure apart from reading today's date when none is given.
"""

import calendar
import re
from datetime import date
from typing import Optional

from cashflow.validation import ValidationError, ValidationIssue


MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def month_key(d: Optional[date] = None) -> str:
    """Month key of a date (today by default)."""
    d = d or date.today()
    return f"{d.year:04d}-{d.month:02d}"


def current_month_key(today: Optional[date] = None) -> str:
    """Month key of the current month."""
    return month_key(today)


def iso_date(d: Optional[date] = None) -> str:
    """YYYY-MM-DD for a date (today by default)."""
    return (d or date.today()).isoformat()


def parse_month_key(key: str) -> tuple[int, int]:
    """
    Split a month key into (year, month).

    Raises:
        ValidationError: If the key is not a canonical "YYYY-MM" string
    """
    match = MONTH_KEY_PATTERN.match(key or "")
    if not match:
        raise ValidationError([
            ValidationIssue(
                field="month_key",
                issue_type="invalid_format",
                message=f"Month key must look like YYYY-MM, got {key!r}",
                severity="error",
            )
        ])
    return int(match.group(1)), int(match.group(2))


def shift_month(key: str, offset: int) -> str:
    """Move a month key forward (or back, for negative offsets) by whole months."""
    year, month = parse_month_key(key)
    index = year * 12 + (month - 1) + offset
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def year_month_keys(year: int) -> list[str]:
    """The 12 canonical month keys of a year, January first."""
    return [f"{year:04d}-{month:02d}" for month in range(1, 13)]


def month_label(key: str) -> str:
    """Human label for a month key, e.g. "March 2024"."""
    year, month = parse_month_key(key)
    return f"{calendar.month_name[month]} {year}"
