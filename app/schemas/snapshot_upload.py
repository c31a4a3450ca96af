"""
app/schemas/snapshot_upload.py

Response schemas for the snapshot upload endpoints.

Payloads are serialized with camelCase keys to match the domain objects'
``to_dict`` output.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PerformanceRowResponse(_CamelModel):
    row_index: int = Field(..., ge=1)
    kind: str
    ticker: str | None = None
    date: str | None = None
    metrics: dict[str, float | None] = Field(default_factory=dict)
    is_valid: bool


class CoverageStatResponse(_CamelModel):
    total: int = Field(..., ge=0)
    non_null: int = Field(..., ge=0)
    coverage: float = Field(..., ge=0.0, le=1.0)


class DuplicateEntryResponse(_CamelModel):
    row_index: int = Field(..., ge=1)
    ticker: str
    date: str | None = None
    first_occurrence: int = Field(..., ge=1)


class ValidationResultResponse(_CamelModel):
    """
    API response model for one validated file.
    """

    is_valid: bool
    upload_type: str | None = None
    data: list[PerformanceRowResponse] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    coverage: dict[str, CoverageStatResponse] = Field(default_factory=dict)
    duplicates: list[DuplicateEntryResponse] = Field(default_factory=list)
    total_rows: int = Field(..., ge=0)
    valid_rows: int = Field(..., ge=0)
    has_as_of_column: bool
    unmapped_headers: list[str] = Field(default_factory=list)


class ChunkResultResponse(_CamelModel):
    chunk_index: int = Field(..., ge=1)
    rows_attempted: int = Field(..., ge=0)
    rows_succeeded: int = Field(..., ge=0)
    error: str | None = None


class ImportOutcomeResponse(_CamelModel):
    success_count: int = Field(..., ge=0)
    failed_count: int = Field(..., ge=0)
    partial: bool
    cancelled: bool = False
    chunk_results: list[ChunkResultResponse] = Field(default_factory=list)


class DryRunSummaryResponse(_CamelModel):
    sampled: int = Field(..., ge=0)
    would_insert: int = Field(..., ge=0)
    would_update: int = Field(..., ge=0)
    would_skip: int = Field(..., ge=0)
    chunks: int = Field(..., ge=0)


class SnapshotValidationResponse(_CamelModel):
    """
    API response model for ``POST /snapshots/validate``.
    """

    validation: ValidationResultResponse
    report: str | None = None


class SnapshotImportResponse(_CamelModel):
    """
    API response model for ``POST /snapshots/import``.

    Exactly one of ``outcome`` and ``dry_run`` is set when the file was
    processed; both are null when the import was skipped.
    """

    validation: ValidationResultResponse
    report: str | None = None
    outcome: ImportOutcomeResponse | None = None
    dry_run: DryRunSummaryResponse | None = None


class HealthResponse(BaseModel):
    status: str
