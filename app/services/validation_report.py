"""
app/services/validation_report.py

Folds per-row diagnostics into a ValidationResult and renders the
downloadable text report.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timezone

from app.domain.performance import PerformanceRow
from app.domain.snapshot_results import CoverageStat, DuplicateEntry, RowValidation, ValidationResult

REPORT_TITLE = "CSV Upload Validation Report"
REPORT_CLOSING_LINE = "Please fix all errors and re-upload the file."


def duplicate_warning(duplicate: DuplicateEntry) -> str:
    return (
        f"Row {duplicate.row_index}: Duplicate entry for {duplicate.ticker} on "
        f"{duplicate.date or 'N/A'} (first seen at row {duplicate.first_occurrence})"
    )


def build_result(
    *,
    upload_type: str | None,
    file_errors: Sequence[str] = (),
    file_warnings: Sequence[str] = (),
    row_validations: Sequence[RowValidation] = (),
    rows: Sequence[PerformanceRow] = (),
    extra_errors: Sequence[str] = (),
    duplicates: Sequence[DuplicateEntry] = (),
    coverage: dict[str, CoverageStat] | None = None,
    total_rows: int = 0,
    has_as_of_column: bool = False,
    unmapped_headers: Sequence[str] = (),
) -> ValidationResult:
    """
    Aggregate diagnostics in a stable order.

    File-level messages come first, then each row's errors in file order,
    then errors raised after row scanning (e.g. undateable rows). Warnings
    follow the same order with duplicate warnings last. Warnings never
    affect validity.
    """

    errors: list[str] = list(file_errors)
    warnings: list[str] = list(file_warnings)

    for validation in row_validations:
        errors.extend(validation.errors)
        warnings.extend(validation.warnings)

    errors.extend(extra_errors)
    warnings.extend(duplicate_warning(duplicate) for duplicate in duplicates)

    return ValidationResult(
        is_valid=not errors,
        upload_type=upload_type,
        data=tuple(rows),
        errors=tuple(errors),
        warnings=tuple(warnings),
        coverage=dict(coverage or {}),
        duplicates=tuple(duplicates),
        total_rows=total_rows,
        has_as_of_column=has_as_of_column,
        unmapped_headers=tuple(unmapped_headers),
    )


def _percentage(stat: CoverageStat) -> int:
    return int(math.floor(stat.coverage * 100 + 0.5))


def generate_error_report(
    result: ValidationResult | None,
    *,
    generated_at: datetime | None = None,
) -> str | None:
    """
    Render the operator-facing report; None when there is nothing to fix.
    """

    if result is None or (not result.errors and not result.warnings):
        return None

    timestamp = (generated_at or datetime.now(tz=timezone.utc)).isoformat()
    lines: list[str] = [REPORT_TITLE, f"Generated: {timestamp}", ""]

    if result.errors:
        lines.append("ERRORS (must be fixed before upload):")
        lines.extend(f"{index}. {error}" for index, error in enumerate(result.errors, start=1))
        lines.append("")

    if result.warnings:
        lines.append("WARNINGS (recommended to review):")
        lines.extend(
            f"{index}. {warning}" for index, warning in enumerate(result.warnings, start=1)
        )
        lines.append("")

    if result.coverage:
        lines.append("DATA COVERAGE SUMMARY:")
        for metric, stat in result.coverage.items():
            lines.append(f"{metric}: {stat.non_null}/{stat.total} rows ({_percentage(stat)}%)")
        lines.append("")

    lines.append(REPORT_CLOSING_LINE)
    return "\n".join(lines)
