"""
app/mappers/header_mapper.py

Resolves snapshot CSV headers against the fixed column vocabulary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from app.domain.performance import (
    BENCHMARK_TICKER_COLUMN,
    DATE_COLUMN_ALIASES,
    FUND_METRIC_COLUMNS,
    FUND_TICKER_COLUMN,
    UploadType,
    metric_columns_for,
)

TICKER_FIELD = "ticker"
DATE_FIELD = "date"
KIND_FIELD = "kind"


def clean_headers(headers: Sequence[str | None]) -> tuple[str, ...]:
    """
    Trim header names and drop blanks; matching stays case-sensitive.
    """

    return tuple(header.strip() for header in headers if header and header.strip())


def determine_upload_type(headers: Sequence[str | None]) -> str:
    """
    Classify a file as fund, benchmark, mixed or unknown from its header set.
    """

    header_set = set(clean_headers(headers))
    has_fund = FUND_TICKER_COLUMN in header_set
    has_benchmark = BENCHMARK_TICKER_COLUMN in header_set

    if has_fund and has_benchmark:
        return UploadType.MIXED
    if has_fund:
        return UploadType.FUND
    if has_benchmark:
        return UploadType.BENCHMARK
    return UploadType.UNKNOWN


@dataclass(frozen=True)
class HeaderMapping:
    """
    Resolved source columns for one upload.
    """

    upload_type: str
    source_headers: tuple[str, ...]
    date_column: str | None
    metric_columns: dict[str, str]
    unmapped: tuple[str, ...]

    @property
    def has_as_of_column(self) -> bool:
        return self.date_column is not None

    @property
    def ticker_columns(self) -> tuple[str, ...]:
        if self.upload_type == UploadType.MIXED:
            return (FUND_TICKER_COLUMN, BENCHMARK_TICKER_COLUMN)
        if self.upload_type == UploadType.BENCHMARK:
            return (BENCHMARK_TICKER_COLUMN,)
        return (FUND_TICKER_COLUMN,)


class HeaderMapper:
    """
    Maps raw CSV rows onto canonical ``ticker``/``date``/metric keys.
    """

    def resolve(self, headers: Sequence[str | None], upload_type: str) -> HeaderMapping:
        source_headers = clean_headers(headers)
        header_set = set(source_headers)

        date_column = next(
            (alias for alias in DATE_COLUMN_ALIASES if alias in header_set),
            None,
        )

        # Mixed files may carry fund-only metrics, so use the superset.
        vocabulary = (
            FUND_METRIC_COLUMNS
            if upload_type == UploadType.MIXED
            else metric_columns_for(upload_type)
        )
        metric_columns = {column: column for column in vocabulary if column in header_set}

        known = {FUND_TICKER_COLUMN, BENCHMARK_TICKER_COLUMN, *DATE_COLUMN_ALIASES, *metric_columns}
        unmapped = tuple(header for header in source_headers if header not in known)

        return HeaderMapping(
            upload_type=upload_type,
            source_headers=source_headers,
            date_column=date_column,
            metric_columns=metric_columns,
            unmapped=unmapped,
        )

    def missing_required_columns(
        self,
        mapping: HeaderMapping,
        *,
        picker_mode: bool,
    ) -> list[str]:
        """
        Return file-level errors for required columns absent from the header.

        The as-of column is only required when no picker date pins the batch.
        """

        errors: list[str] = []
        header_set = set(mapping.source_headers)
        for column in mapping.ticker_columns:
            if column not in header_set:
                errors.append(f"Missing required column: {column}")

        if not picker_mode and mapping.date_column is None:
            expected = ", ".join(DATE_COLUMN_ALIASES)
            errors.append(
                "Missing required date column and no month/year selected. "
                f"Expected one of: {expected}"
            )
        return errors

    def map_row(
        self,
        *,
        raw_row: Mapping[str | None, str | None],
        mapping: HeaderMapping,
    ) -> dict[str, str | None]:
        """
        Project one raw row onto canonical keys.

        Absent columns produce absent keys, so later stages can tell "column
        missing" from "cell empty".
        """

        row = {
            key.strip(): value
            for key, value in raw_row.items()
            if key is not None and key.strip()
        }
        mapped: dict[str, str | None] = {}

        kind, ticker = self._pick_ticker(row, mapping)
        mapped[KIND_FIELD] = kind
        mapped[TICKER_FIELD] = ticker

        if mapping.date_column is not None:
            mapped[DATE_FIELD] = row.get(mapping.date_column)

        for canonical, source in mapping.metric_columns.items():
            if kind == UploadType.BENCHMARK and canonical not in metric_columns_for(kind):
                continue
            mapped[canonical] = row.get(source)

        return mapped

    @staticmethod
    def _pick_ticker(
        row: Mapping[str, str | None],
        mapping: HeaderMapping,
    ) -> tuple[str, str | None]:
        if mapping.upload_type != UploadType.MIXED:
            kind = UploadType.BENCHMARK if mapping.upload_type == UploadType.BENCHMARK else UploadType.FUND
            return kind, row.get(mapping.ticker_columns[0])

        fund_value = row.get(FUND_TICKER_COLUMN)
        if fund_value is not None and fund_value.strip():
            return UploadType.FUND, fund_value
        return UploadType.BENCHMARK, row.get(BENCHMARK_TICKER_COLUMN)
