"""
app/validators/snapshot_validator.py

Row-level reference checks, duplicate detection and metric coverage for
monthly performance snapshots.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import AbstractSet, Any, Mapping

from app.domain.performance import PerformanceRow, UploadType, metric_columns_for
from app.domain.snapshot_results import CoverageStat, DuplicateEntry, RowValidation
from app.mappers.header_mapper import DATE_FIELD, TICKER_FIELD
from app.validators.value_normalizer import (
    convert_to_end_of_month,
    is_end_of_month,
    normalize_ticker,
    parse_date,
    validate_numeric_value,
)


class SnapshotRowValidator:
    """
    Validates one canonical-mapped row without ever raising.
    """

    def validate_row(
        self,
        row: Mapping[str, Any],
        row_index: int,
        upload_type: str,
        known_tickers: AbstractSet[str],
        *,
        require_eom: bool = False,
        check_dates: bool = True,
    ) -> RowValidation:
        """
        Check ticker, date and metric cells of one row in that order.

        ``row_index`` is the 1-based data row number used in messages. When
        ``check_dates`` is False the row's own date is ignored entirely (a
        picker date will be applied to the whole batch).
        """

        errors: list[str] = []
        warnings: list[str] = []
        prefix = f"Row {row_index}"

        normalized_ticker = self._check_ticker(
            row.get(TICKER_FIELD), prefix, known_tickers, errors, warnings
        )

        normalized_date: str | None = None
        if check_dates and DATE_FIELD in row:
            normalized_date = self._check_date(
                row.get(DATE_FIELD), prefix, require_eom, errors, warnings
            )

        metrics: dict[str, float | None] = {}
        for column in metric_columns_for(upload_type):
            if column not in row:
                continue
            parsed = validate_numeric_value(row[column], column)
            if not parsed.is_valid:
                errors.append(f"{prefix}: {parsed.error}")
            metrics[column] = parsed.value

        return RowValidation(
            row_index=row_index,
            errors=tuple(errors),
            warnings=tuple(warnings),
            normalized_ticker=normalized_ticker,
            normalized_date=normalized_date,
            metrics=metrics,
        )

    @staticmethod
    def _check_ticker(
        raw: Any,
        prefix: str,
        known_tickers: AbstractSet[str],
        errors: list[str],
        warnings: list[str],
    ) -> str | None:
        if raw is None or not str(raw).strip():
            errors.append(f"{prefix}: Missing ticker")
            return None

        ticker = normalize_ticker(raw)
        if ticker is None:
            errors.append(f'{prefix}: Invalid ticker format: "{str(raw).strip()}"')
            return None

        # An empty catalog means "not loaded", not "nothing is known".
        if known_tickers and ticker not in known_tickers:
            warnings.append(f'{prefix}: Unknown ticker: "{ticker}"')
        return ticker

    @staticmethod
    def _check_date(
        raw: Any,
        prefix: str,
        require_eom: bool,
        errors: list[str],
        warnings: list[str],
    ) -> str | None:
        if raw is None or not str(raw).strip():
            errors.append(f"{prefix}: Missing date")
            return None

        parsed = parse_date(raw)
        if parsed is None:
            errors.append(
                f'{prefix}: Invalid date format: "{str(raw).strip()}" (expected YYYY-MM-DD or YYYY-MM)'
            )
            return None

        if is_end_of_month(parsed):
            return parsed

        corrected = convert_to_end_of_month(parsed)
        if require_eom:
            errors.append(f'{prefix}: Date "{parsed}" is not end-of-month and EOM is required')
            return None
        warnings.append(
            f'{prefix}: Date "{parsed}" is not end-of-month; it will be converted to {corrected}'
        )
        return corrected


def find_duplicates(
    rows: Sequence[PerformanceRow],
    kind: str,
    *,
    date_override: str | None = None,
) -> list[DuplicateEntry]:
    """
    Report second and later occurrences of each (ticker, date) natural key.

    Rows without a normalized ticker are skipped. In a mixed upload fund and
    benchmark tickers live in separate namespaces, so the kind is part of the
    key there.
    """

    seen: dict[tuple[str, str, str | None], int] = {}
    duplicates: list[DuplicateEntry] = []

    for row in rows:
        if kind != UploadType.MIXED and row.kind != kind:
            continue
        if not row.ticker:
            continue

        effective_date = date_override or row.date
        key = (row.kind, row.ticker, effective_date)
        first = seen.get(key)
        if first is None:
            seen[key] = row.row_index
            continue

        duplicates.append(
            DuplicateEntry(
                row_index=row.row_index,
                ticker=row.ticker,
                date=effective_date,
                first_occurrence=first,
            )
        )

    return duplicates


def calculate_coverage(rows: Iterable[PerformanceRow], kind: str) -> dict[str, CoverageStat]:
    """
    Count present and non-null cells for every metric declared for ``kind``.
    """

    columns = metric_columns_for(kind)
    totals = {column: 0 for column in columns}
    non_null = {column: 0 for column in columns}

    for row in rows:
        for column in columns:
            if column not in row.metrics:
                continue
            totals[column] += 1
            if row.metrics[column] is not None:
                non_null[column] += 1

    return {
        column: CoverageStat(total=totals[column], non_null=non_null[column])
        for column in columns
    }
