"""
app/validators/value_normalizer.py

Pure conversions from raw CSV cells to typed values.

Every function here is total: invalid input yields None (or an error string in
``NumericParse``) so callers can keep scanning the rest of the file.
"""

from __future__ import annotations

import calendar
import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any

# Compared against the stripped cell and its upper-cased form. "â€”" is an
# em-dash decoded as Latin-1 by spreadsheet exports.
NULL_SENTINELS = frozenset({"", "-", "NA", "N/A", "—", "â€”"})

_CURRENCY_CHARS = "$€£¥"
_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_FULL_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
_TICKER_PATTERN = re.compile(r"^[A-Z0-9]{1,20}$")

MAX_TICKER_LENGTH = 20


@dataclass(frozen=True)
class NumericParse:
    value: float | None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


def is_null_sentinel(raw: Any) -> bool:
    if raw is None:
        return True
    text = str(raw).strip()
    return text in NULL_SENTINELS or text.upper() in NULL_SENTINELS


def _to_float(raw: Any) -> float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None

    text = str(raw).strip()
    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1].strip()
        # Accounting negatives carry no sign of their own.
        if text.startswith(("+", "-")):
            return None

    for char in _CURRENCY_CHARS:
        text = text.replace(char, "")
    text = text.replace(",", "").replace("%", "").replace(" ", "")
    if not _NUMBER_PATTERN.match(text):
        return None

    value = float(text)
    if not math.isfinite(value):
        return None
    return -value if negative else value


def validate_numeric_value(raw: Any, column: str) -> NumericParse:
    """
    Parse one metric cell, separating "null" from "present but invalid".
    """

    if is_null_sentinel(raw):
        return NumericParse(value=None)

    value = _to_float(raw)
    if value is None:
        return NumericParse(
            value=None,
            error=f'Invalid numeric value for {column}: "{str(raw).strip()}"',
        )
    return NumericParse(value=value)


def parse_metric_number(raw: Any) -> float | None:
    """
    Parse a metric cell to float; sentinels and unparseable text give None.

    "1,234.56" -> 1234.56, "(1.2)" -> -1.2, "$5" -> 5.0, "3.5%" -> 3.5.
    """

    return validate_numeric_value(raw, "value").value


def is_valid_date_format(raw: Any) -> bool:
    """
    True for a strict YYYY-MM-DD string naming a real calendar day.
    """

    if raw is None:
        return False
    text = str(raw).strip()
    if not _FULL_DATE_PATTERN.match(text):
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


def end_of_month(year: int, month: int) -> str | None:
    """
    Last day of the month as YYYY-MM-DD; None outside the supported calendar.
    """

    if not (date.min.year <= year <= date.max.year and 1 <= month <= 12):
        return None
    return date(year, month, calendar.monthrange(year, month)[1]).isoformat()


def parse_date(raw: Any) -> str | None:
    """
    Parse YYYY-MM-DD as-is and expand YYYY-MM to that month's last day.
    """

    if raw is None:
        return None
    text = str(raw).strip()
    if is_valid_date_format(text):
        return text

    match = _YEAR_MONTH_PATTERN.match(text)
    if match:
        return end_of_month(int(match.group(1)), int(match.group(2)))
    return None


def is_end_of_month(iso_date: str | None) -> bool:
    """
    True when the day equals the last day of its month (Feb 29 in leap years).
    """

    if not is_valid_date_format(iso_date):
        return False
    parsed = date.fromisoformat(str(iso_date).strip())
    return parsed.day == calendar.monthrange(parsed.year, parsed.month)[1]


def convert_to_end_of_month(iso_date: str | None) -> str | None:
    if not is_valid_date_format(iso_date):
        return None
    parsed = date.fromisoformat(str(iso_date).strip())
    return end_of_month(parsed.year, parsed.month)


def normalize_ticker(raw: Any) -> str | None:
    """
    Upper-case and trim a ticker; None when empty, too long or not [A-Z0-9].
    """

    if raw is None:
        return None
    text = str(raw).strip().upper()
    if not _TICKER_PATTERN.match(text):
        return None
    return text
