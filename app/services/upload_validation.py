"""
app/services/upload_validation.py

Full-file validation of a parsed snapshot CSV.

File-level problems (empty file, unknown or disallowed mixed type, missing
required columns) short-circuit before any row is scanned. Past that point
every row is diagnosed; nothing is raised for expected validation failures.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from typing import IO, AbstractSet, Mapping

from app.domain.performance import ROW_TYPES, PerformanceRow, PickerDate, UploadType
from app.domain.snapshot_results import RowValidation, ValidationResult
from app.mappers.header_mapper import (
    KIND_FIELD,
    HeaderMapper,
    clean_headers,
    determine_upload_type,
)
from app.services.date_resolver import DateMode, detect_date_mode
from app.services.validation_report import build_result
from app.validators.snapshot_validator import (
    SnapshotRowValidator,
    calculate_coverage,
    find_duplicates,
)

logger = logging.getLogger(__name__)

EMPTY_FILE_ERROR = "CSV file is empty or contains no valid data rows"
MISSING_HEADER_ERROR = "CSV header row is missing."


class SnapshotUploadError(ValueError):
    """
    Raised when the upload cannot be read as a UTF-8 CSV at all.
    """


def read_snapshot_csv(stream: IO[bytes] | bytes) -> tuple[list[str], list[dict[str, str | None]]]:
    """
    Decode a (optionally BOM-prefixed) UTF-8 CSV into headers and raw rows.

    Header names are trimmed and completely blank lines are skipped.
    """

    raw_file: IO[bytes] = io.BytesIO(stream) if isinstance(stream, bytes) else stream
    text_stream: io.TextIOWrapper | None = None
    try:
        text_stream = io.TextIOWrapper(raw_file, encoding="utf-8-sig", newline="")
        reader = csv.DictReader(text_stream)
        fieldnames = reader.fieldnames or []
        headers = [name.strip() for name in fieldnames]
        reader.fieldnames = headers

        rows: list[dict[str, str | None]] = []
        for raw_row in reader:
            # DictReader stores overflow cells under the None key.
            row = {key: value for key, value in raw_row.items() if key is not None}
            if all(value is None or not value.strip() for value in row.values()):
                continue
            rows.append(row)
        return headers, rows
    except UnicodeDecodeError as exc:
        raise SnapshotUploadError("CSV must be UTF-8 encoded.") from exc
    except csv.Error as exc:
        raise SnapshotUploadError(f"Invalid CSV format: {exc}") from exc
    finally:
        if text_stream is not None:
            try:
                text_stream.detach()
            except ValueError:
                pass


class SnapshotUploadValidator:
    """
    Runs header mapping, row validation, duplicate and coverage analysis.
    """

    def __init__(
        self,
        *,
        mapper: HeaderMapper | None = None,
        row_validator: SnapshotRowValidator | None = None,
    ) -> None:
        self._mapper = mapper or HeaderMapper()
        self._row_validator = row_validator or SnapshotRowValidator()

    def validate(
        self,
        *,
        headers: Sequence[str | None],
        raw_rows: Sequence[Mapping[str | None, str | None]],
        known_tickers: Mapping[str, AbstractSet[str]] | None = None,
        picker_date: PickerDate | None = None,
        require_eom: bool = False,
        allow_mixed: bool = False,
    ) -> ValidationResult:
        known_tickers = known_tickers or {}

        if not clean_headers(headers):
            return build_result(upload_type=None, file_errors=[MISSING_HEADER_ERROR])

        upload_type = determine_upload_type(headers)
        if upload_type == UploadType.UNKNOWN:
            found = ", ".join(clean_headers(headers))
            return build_result(
                upload_type=UploadType.UNKNOWN,
                file_errors=[
                    "Cannot determine upload type. File must contain a fund_ticker or "
                    f"benchmark_ticker column. Found columns: {found}"
                ],
            )
        if upload_type == UploadType.MIXED and not allow_mixed:
            return build_result(
                upload_type=UploadType.MIXED,
                file_errors=[
                    "Mixed fund and benchmark data in single file is not supported. "
                    "Use separate files."
                ],
            )
        if not raw_rows:
            return build_result(upload_type=upload_type, file_errors=[EMPTY_FILE_ERROR])
        if picker_date is not None and not picker_date.is_valid:
            return build_result(
                upload_type=upload_type,
                file_errors=[
                    f"Invalid month/year selection: {picker_date.month}/{picker_date.year}"
                ],
            )

        mapping = self._mapper.resolve(headers, upload_type)
        date_mode = detect_date_mode(picker_date, mapping.has_as_of_column)
        picker_mode = date_mode == DateMode.PICKER

        column_errors = self._mapper.missing_required_columns(mapping, picker_mode=picker_mode)
        if column_errors:
            return build_result(
                upload_type=upload_type,
                file_errors=column_errors,
                total_rows=len(raw_rows),
                has_as_of_column=mapping.has_as_of_column,
            )

        picker_eom = picker_date.end_of_month() if picker_mode else None
        file_warnings: list[str] = []
        if mapping.unmapped:
            file_warnings.append(f"Unrecognized columns ignored: {', '.join(mapping.unmapped)}")
        if picker_mode and mapping.date_column is not None:
            file_warnings.append(
                f'File date column "{mapping.date_column}" ignored; all rows use '
                f"{picker_eom} from the selected month/year"
            )

        validations: list[RowValidation] = []
        rows: list[PerformanceRow] = []
        for row_index, raw_row in enumerate(raw_rows, start=1):
            mapped = self._mapper.map_row(raw_row=raw_row, mapping=mapping)
            kind = mapped.pop(KIND_FIELD)
            validation = self._row_validator.validate_row(
                mapped,
                row_index,
                kind,
                known_tickers.get(kind, frozenset()),
                require_eom=require_eom,
                check_dates=not picker_mode,
            )
            validations.append(validation)
            rows.append(
                ROW_TYPES[kind](
                    row_index=row_index,
                    ticker=validation.normalized_ticker,
                    date=validation.normalized_date,
                    metrics=validation.metrics,
                    is_valid=validation.is_valid,
                )
            )

        duplicates = find_duplicates(rows, upload_type, date_override=picker_eom)
        coverage = calculate_coverage(rows, upload_type)

        result = build_result(
            upload_type=upload_type,
            file_warnings=file_warnings,
            row_validations=validations,
            rows=rows,
            duplicates=duplicates,
            coverage=coverage,
            total_rows=len(raw_rows),
            has_as_of_column=mapping.has_as_of_column,
            unmapped_headers=mapping.unmapped,
        )
        logger.info(
            "Snapshot validated upload_type=%s rows=%s errors=%s warnings=%s duplicates=%s date_mode=%s",
            upload_type,
            result.total_rows,
            len(result.errors),
            len(result.warnings),
            len(result.duplicates),
            date_mode,
        )
        return result
