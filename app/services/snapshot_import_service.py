"""
app/services/snapshot_import_service.py

Service layer for the monthly snapshot upload workflow.

Flow per upload:

    1. Decode the CSV and classify it as a fund or benchmark file.
    2. Load a session snapshot of known tickers for the needed kinds.
    3. Validate every row and build the ValidationResult (preview ends here).
    4. Stamp each row with its effective month-end date.
    5. Either probe a sample (dry run) or upsert valid rows in ordered chunks.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import IO, AbstractSet, Any, Mapping

from app.config import clamp_chunk_size, get_snapshot_import_settings
from app.domain.performance import PerformanceRow, PickerDate, UploadType
from app.domain.snapshot_results import DryRunSummary, ImportOutcome, ValidationResult
from app.mappers.header_mapper import determine_upload_type
from app.repositories.performance_store import PerformanceStore
from app.services.date_resolver import assign_effective_dates
from app.services.import_executor import ChunkedImportExecutor
from app.services.ticker_catalog import TickerCatalogCache
from app.services.upload_validation import SnapshotUploadValidator, read_snapshot_csv
from app.services.validation_report import generate_error_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotUploadOptions:
    """
    Operator controls for one upload. None falls back to service defaults.
    """

    picker_date: PickerDate | None = None
    require_eom: bool | None = None
    allow_mixed: bool | None = None
    dry_run: bool = False
    chunk_size: int | None = None
    skip_invalid_rows: bool = False


@dataclass(frozen=True)
class SnapshotProcessResult:
    validation: ValidationResult
    report: str | None = None
    outcome: ImportOutcome | None = None
    dry_run: DryRunSummary | None = None

    @property
    def imported(self) -> bool:
        return self.outcome is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "validation": self.validation.to_dict(),
            "report": self.report,
            "outcome": self.outcome.to_dict() if self.outcome is not None else None,
            "dryRun": self.dry_run.to_dict() if self.dry_run is not None else None,
        }


def kinds_for(upload_type: str) -> tuple[str, ...]:
    if upload_type == UploadType.MIXED:
        return (UploadType.FUND, UploadType.BENCHMARK)
    if upload_type in (UploadType.FUND, UploadType.BENCHMARK):
        return (upload_type,)
    return ()


def _group_by_kind(rows: Sequence[PerformanceRow]) -> dict[str, list[PerformanceRow]]:
    grouped: dict[str, list[PerformanceRow]] = {}
    for row in rows:
        grouped.setdefault(row.kind, []).append(row)
    return grouped


class SnapshotImportService:
    """
    Coordinates CSV decoding, validation, date resolution and chunked import.
    """

    def __init__(
        self,
        *,
        chunk_size: int,
        dry_run_sample_size: int,
        require_eom: bool = False,
        allow_mixed: bool = False,
        max_report_rows: int = 500,
        log_validation_errors: bool = True,
        validator: SnapshotUploadValidator | None = None,
    ) -> None:
        self._chunk_size = clamp_chunk_size(chunk_size)
        self._dry_run_sample_size = max(1, dry_run_sample_size)
        self._require_eom = require_eom
        self._allow_mixed = allow_mixed
        self._max_report_rows = max(1, max_report_rows)
        self._log_validation_errors = log_validation_errors
        self._validator = validator or SnapshotUploadValidator()

    def validate_content(
        self,
        content: IO[bytes] | bytes,
        *,
        known_tickers: Mapping[str, AbstractSet[str]] | None = None,
        options: SnapshotUploadOptions | None = None,
    ) -> ValidationResult:
        """
        Validate an upload against an already-loaded ticker catalog.

        Raises:
            SnapshotUploadError: the content is not a readable UTF-8 CSV.
        """

        headers, raw_rows = read_snapshot_csv(content)
        return self._validate(headers, raw_rows, known_tickers or {}, options or SnapshotUploadOptions())

    async def validate_upload(
        self,
        content: IO[bytes] | bytes,
        *,
        catalog: TickerCatalogCache,
        options: SnapshotUploadOptions | None = None,
    ) -> ValidationResult:
        headers, raw_rows = read_snapshot_csv(content)
        upload_type = determine_upload_type(headers)
        known_tickers = {
            kind: await catalog.known_tickers(kind) for kind in kinds_for(upload_type)
        }
        return self._validate(headers, raw_rows, known_tickers, options or SnapshotUploadOptions())

    async def process_upload(
        self,
        content: IO[bytes] | bytes,
        *,
        store: PerformanceStore,
        options: SnapshotUploadOptions | None = None,
        catalog: TickerCatalogCache | None = None,
        outcome: ImportOutcome | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> SnapshotProcessResult:
        """
        Validate an upload and, unless blocked, preview or import it.

        Files with errors are not imported unless ``skip_invalid_rows`` is set,
        in which case only rows without errors are written. File-level errors
        always block. Chunk write failures never raise; they are reported in
        the returned outcome.
        """

        options = options or SnapshotUploadOptions()
        catalog = catalog or TickerCatalogCache(store)

        validation = await self.validate_upload(content, catalog=catalog, options=options)
        report = generate_error_report(validation)

        rows, date_errors = assign_effective_dates(
            validation.data,
            options.picker_date,
            validation.has_as_of_column,
        )
        for error in date_errors:
            logger.warning("Snapshot row excluded: %s", error)

        chunk_size = clamp_chunk_size(options.chunk_size or self._chunk_size)
        executor = ChunkedImportExecutor(store, chunk_size=chunk_size)

        if options.dry_run:
            if not rows:
                return SnapshotProcessResult(validation=validation, report=report)
            summary = await executor.dry_run(rows, sample_size=self._dry_run_sample_size)
            return SnapshotProcessResult(validation=validation, report=report, dry_run=summary)

        blocked = not validation.is_valid and not (options.skip_invalid_rows and validation.data)
        importable = [row for row in rows if row.is_importable]
        if blocked or not importable:
            logger.info(
                "Snapshot import skipped is_valid=%s importable_rows=%s",
                validation.is_valid,
                len(importable),
            )
            return SnapshotProcessResult(validation=validation, report=report)

        outcome = outcome if outcome is not None else ImportOutcome()
        for kind_rows in _group_by_kind(importable).values():
            await executor.import_rows(kind_rows, outcome=outcome, cancel_event=cancel_event)
            if outcome.cancelled:
                break

        return SnapshotProcessResult(validation=validation, report=report, outcome=outcome)

    def _validate(
        self,
        headers: Sequence[str],
        raw_rows: Sequence[Mapping[str | None, str | None]],
        known_tickers: Mapping[str, AbstractSet[str]],
        options: SnapshotUploadOptions,
    ) -> ValidationResult:
        result = self._validator.validate(
            headers=headers,
            raw_rows=raw_rows,
            known_tickers=known_tickers,
            picker_date=options.picker_date,
            require_eom=self._require_eom if options.require_eom is None else options.require_eom,
            allow_mixed=self._allow_mixed if options.allow_mixed is None else options.allow_mixed,
        )
        self._log_diagnostics(result)
        return result

    def _log_diagnostics(self, result: ValidationResult) -> None:
        if not self._log_validation_errors:
            return

        logged = 0
        for error in result.errors:
            if logged >= self._max_report_rows:
                break
            logger.warning("Snapshot validation error: %s", error)
            logged += 1
        for warning in result.warnings:
            if logged >= self._max_report_rows:
                break
            logger.info("Snapshot validation warning: %s", warning)
            logged += 1

        suppressed = len(result.errors) + len(result.warnings) - logged
        if suppressed > 0:
            logger.info("Snapshot validation diagnostics suppressed count=%s", suppressed)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_snapshot_import_service() -> SnapshotImportService:
    """
    Build and cache the snapshot service with env-driven settings.
    """

    settings = get_snapshot_import_settings()
    return SnapshotImportService(
        chunk_size=settings.chunk_size,
        dry_run_sample_size=settings.dry_run_sample_size,
        require_eom=settings.require_eom,
        allow_mixed=settings.allow_mixed,
        max_report_rows=settings.max_report_rows,
        log_validation_errors=settings.log_validation_errors,
    )
