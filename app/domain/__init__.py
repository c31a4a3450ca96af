"""
app/domain package marker.
"""

from app.domain.performance import BenchmarkRow, FundRow, PerformanceRow, PickerDate, UploadType
from app.domain.snapshot_results import (
    ChunkResult,
    CoverageStat,
    DryRunSummary,
    DuplicateEntry,
    ImportOutcome,
    RowValidation,
    ValidationResult,
)

__all__ = [
    "BenchmarkRow",
    "ChunkResult",
    "CoverageStat",
    "DryRunSummary",
    "DuplicateEntry",
    "FundRow",
    "ImportOutcome",
    "PerformanceRow",
    "PickerDate",
    "RowValidation",
    "UploadType",
    "ValidationResult",
]
