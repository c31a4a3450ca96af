"""
app/domain/snapshot_results.py

Result objects emitted by snapshot validation and import.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.domain.performance import PerformanceRow


@dataclass(frozen=True)
class RowValidation:
    """
    Diagnostics and normalized values for one data row.
    """

    row_index: int
    errors: tuple[str, ...]
    warnings: tuple[str, ...]
    normalized_ticker: str | None
    normalized_date: str | None
    metrics: dict[str, float | None] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class CoverageStat:
    total: int
    non_null: int

    @property
    def coverage(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.non_null / self.total

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "nonNull": self.non_null, "coverage": self.coverage}


@dataclass(frozen=True)
class DuplicateEntry:
    row_index: int
    ticker: str
    date: str | None
    first_occurrence: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "rowIndex": self.row_index,
            "ticker": self.ticker,
            "date": self.date,
            "firstOccurrence": self.first_occurrence,
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    Complete, immutable diagnosis of one uploaded file.
    """

    is_valid: bool
    upload_type: str | None
    data: tuple[PerformanceRow, ...] = ()
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    coverage: dict[str, CoverageStat] = field(default_factory=dict)
    duplicates: tuple[DuplicateEntry, ...] = ()
    total_rows: int = 0
    has_as_of_column: bool = False
    unmapped_headers: tuple[str, ...] = ()

    @property
    def valid_rows(self) -> int:
        return sum(1 for row in self.data if row.is_valid)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "uploadType": self.upload_type,
            "data": [row.to_dict() for row in self.data],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "coverage": {metric: stat.to_dict() for metric, stat in self.coverage.items()},
            "duplicates": [duplicate.to_dict() for duplicate in self.duplicates],
            "totalRows": self.total_rows,
            "validRows": self.valid_rows,
            "hasAsOfColumn": self.has_as_of_column,
            "unmappedHeaders": list(self.unmapped_headers),
        }


@dataclass(frozen=True)
class ChunkResult:
    chunk_index: int
    rows_attempted: int
    rows_succeeded: int
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "chunkIndex": self.chunk_index,
            "rowsAttempted": self.rows_attempted,
            "rowsSucceeded": self.rows_succeeded,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass
class ImportOutcome:
    """
    Cumulative import accounting, updated after every chunk.

    Callers may pass their own instance to the executor so the counts committed
    so far stay readable if the import task is cancelled.
    """

    success_count: int = 0
    failed_count: int = 0
    partial: bool = False
    cancelled: bool = False
    chunk_results: list[ChunkResult] = field(default_factory=list)

    def record_chunk(self, result: ChunkResult) -> None:
        self.chunk_results.append(result)
        self.success_count += result.rows_succeeded
        self.failed_count += result.rows_attempted - result.rows_succeeded
        if result.failed:
            self.partial = True

    def mark_cancelled(self) -> None:
        self.cancelled = True
        self.partial = True

    @property
    def failed_chunks(self) -> list[ChunkResult]:
        return [result for result in self.chunk_results if result.failed]

    def to_dict(self) -> dict[str, Any]:
        return {
            "successCount": self.success_count,
            "failedCount": self.failed_count,
            "partial": self.partial,
            "cancelled": self.cancelled,
            "chunkResults": [result.to_dict() for result in self.chunk_results],
        }


@dataclass(frozen=True)
class DryRunSummary:
    """
    Would-be effects of importing a sample, computed without writes.
    """

    sampled: int
    would_insert: int
    would_update: int
    would_skip: int
    chunks: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "sampled": self.sampled,
            "wouldInsert": self.would_insert,
            "wouldUpdate": self.would_update,
            "wouldSkip": self.would_skip,
            "chunks": self.chunks,
        }
