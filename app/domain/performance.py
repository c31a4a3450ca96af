"""
app/domain/performance.py

Typed performance rows and the fixed column vocabulary for monthly snapshots.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Any, ClassVar


class UploadType:
    FUND = "fund"
    BENCHMARK = "benchmark"
    MIXED = "mixed"
    UNKNOWN = "unknown"


FUND_TICKER_COLUMN = "fund_ticker"
BENCHMARK_TICKER_COLUMN = "benchmark_ticker"

# Closed set of header names accepted as the per-row as-of column.
DATE_COLUMN_ALIASES: tuple[str, ...] = ("date", "AsOfMonth", "as_of_month")

FUND_METRIC_COLUMNS: tuple[str, ...] = (
    "ytd_return",
    "one_year_return",
    "three_year_return",
    "five_year_return",
    "ten_year_return",
    "sharpe_ratio",
    "standard_deviation_3y",
    "standard_deviation_5y",
    "expense_ratio",
    "alpha",
    "beta",
    "manager_tenure",
    "up_capture_ratio",
    "down_capture_ratio",
)

# Benchmarks have no managers, so no tenure.
BENCHMARK_METRIC_COLUMNS: tuple[str, ...] = tuple(
    column for column in FUND_METRIC_COLUMNS if column != "manager_tenure"
)

FUND_PERFORMANCE_TABLE = "fund_performance"
BENCHMARK_PERFORMANCE_TABLE = "benchmark_performance"


def metric_columns_for(kind: str) -> tuple[str, ...]:
    """
    Return the closed metric column set declared for an upload kind.
    """

    if kind == UploadType.BENCHMARK:
        return BENCHMARK_METRIC_COLUMNS
    return FUND_METRIC_COLUMNS


@dataclass(frozen=True)
class PickerDate:
    """
    Operator-selected month/year that pins a whole batch to one month end.
    """

    month: int
    year: int

    @property
    def is_valid(self) -> bool:
        return 1 <= self.month <= 12 and 1900 <= self.year <= 2200

    def end_of_month(self) -> str | None:
        if not self.is_valid:
            return None
        last_day = calendar.monthrange(self.year, self.month)[1]
        return date(self.year, self.month, last_day).isoformat()

    @classmethod
    def from_parts(cls, month: int | None, year: int | None) -> PickerDate | None:
        if month is None or year is None:
            return None
        return cls(month=month, year=year)


@dataclass(frozen=True)
class PerformanceRow:
    """
    One normalized performance row, tagged with its 1-based file row index.

    ``metrics`` only carries the metric columns present in the file; a value of
    None means the cell was present but empty (or a null sentinel).
    """

    kind: ClassVar[str] = UploadType.UNKNOWN
    ticker_column: ClassVar[str] = ""
    table: ClassVar[str] = ""

    row_index: int
    ticker: str | None
    date: str | None
    metrics: dict[str, float | None] = field(default_factory=dict)
    is_valid: bool = True

    @property
    def natural_key(self) -> tuple[str | None, str | None]:
        return (self.ticker, self.date)

    @property
    def is_importable(self) -> bool:
        return self.is_valid and bool(self.ticker) and bool(self.date)

    def to_record(self) -> dict[str, Any]:
        """
        Build the store payload keyed by the table's natural key columns.
        """

        record: dict[str, Any] = {self.ticker_column: self.ticker, "date": self.date}
        for column in metric_columns_for(self.kind):
            if column in self.metrics:
                record[column] = self.metrics[column]
        return record

    def to_dict(self) -> dict[str, Any]:
        return {
            "rowIndex": self.row_index,
            "kind": self.kind,
            "ticker": self.ticker,
            "date": self.date,
            "metrics": dict(self.metrics),
            "isValid": self.is_valid,
        }


@dataclass(frozen=True)
class FundRow(PerformanceRow):
    kind: ClassVar[str] = UploadType.FUND
    ticker_column: ClassVar[str] = FUND_TICKER_COLUMN
    table: ClassVar[str] = FUND_PERFORMANCE_TABLE


@dataclass(frozen=True)
class BenchmarkRow(PerformanceRow):
    kind: ClassVar[str] = UploadType.BENCHMARK
    ticker_column: ClassVar[str] = BENCHMARK_TICKER_COLUMN
    table: ClassVar[str] = BENCHMARK_PERFORMANCE_TABLE


ROW_TYPES: dict[str, type[PerformanceRow]] = {
    UploadType.FUND: FundRow,
    UploadType.BENCHMARK: BenchmarkRow,
}


def natural_key_columns(kind: str) -> tuple[str, str]:
    return (ROW_TYPES[kind].ticker_column, "date")
