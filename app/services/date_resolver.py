"""
app/services/date_resolver.py

Chooses the authoritative snapshot date for each row.

Priority:
    1. A valid operator month/year selection overrides every file date.
    2. Otherwise the row's own as-of date, normalized to month end.
    3. Otherwise the row cannot be dated and is excluded from import.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from app.domain.performance import PerformanceRow, PickerDate
from app.validators.value_normalizer import convert_to_end_of_month


class DateMode:
    PICKER = "picker"
    FILE = "file"
    NONE = "none"


def detect_date_mode(picker_date: PickerDate | None, has_as_of_column: bool) -> str:
    if picker_date is not None and picker_date.is_valid:
        return DateMode.PICKER
    if has_as_of_column:
        return DateMode.FILE
    return DateMode.NONE


def resolve_effective_date(
    row: PerformanceRow,
    picker_date: PickerDate | None,
    has_as_of_column: bool,
) -> str | None:
    """
    Return the row's effective month-end date, or None when undateable.

    Pure in its inputs; changing only the picker never needs a re-parse.
    """

    mode = detect_date_mode(picker_date, has_as_of_column)
    if mode == DateMode.PICKER:
        return picker_date.end_of_month()
    if mode == DateMode.FILE:
        return convert_to_end_of_month(row.date)
    return None


def assign_effective_dates(
    rows: Sequence[PerformanceRow],
    picker_date: PickerDate | None,
    has_as_of_column: bool,
) -> tuple[list[PerformanceRow], list[str]]:
    """
    Stamp each valid row with its effective date.

    Returns the re-dated rows plus one error per valid row left undateable;
    those rows are marked invalid so the executor never sees them.
    """

    resolved: list[PerformanceRow] = []
    errors: list[str] = []

    for row in rows:
        if not row.is_valid:
            resolved.append(row)
            continue

        effective = resolve_effective_date(row, picker_date, has_as_of_column)
        if effective is None:
            errors.append(
                f"Row {row.row_index}: No effective date (no month/year selected and no "
                "as-of date in file); row excluded from import"
            )
            resolved.append(replace(row, date=None, is_valid=False))
            continue

        resolved.append(replace(row, date=effective))

    return resolved, errors
