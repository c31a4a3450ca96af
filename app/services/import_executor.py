"""
app/services/import_executor.py

Sequential, chunked, idempotent writes of validated performance rows.

Chunks are not a transaction: each chunk is one natural-key upsert, committed
on its own. A failing chunk is recorded and the remaining chunks still run;
replaying any chunk is safe because the write is an upsert.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable, Sequence
from typing import Any

from app.domain.performance import PerformanceRow, natural_key_columns
from app.domain.snapshot_results import ChunkResult, DryRunSummary, ImportOutcome
from app.repositories.performance_store import PerformanceStore

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_DRY_RUN_SAMPLE_SIZE = 200


class ImportInputError(ValueError):
    """
    Raised for malformed import input, never for a chunk's write failure.
    """


def _chunk_payloads(chunk: Sequence[PerformanceRow]) -> list[dict[str, Any]]:
    # One upsert statement may not touch the same key twice; last row wins.
    by_key: dict[tuple[str | None, str | None], dict[str, Any]] = {}
    for row in chunk:
        by_key[row.natural_key] = row.to_record()
    return list(by_key.values())


class ChunkedImportExecutor:
    """
    Writes rows of a single kind to the store in ordered chunks.
    """

    def __init__(
        self,
        store: PerformanceStore,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._store = store
        self._chunk_size = chunk_size

    async def import_rows(
        self,
        rows: Sequence[PerformanceRow],
        chunk_size: int | None = None,
        *,
        outcome: ImportOutcome | None = None,
        cancel_event: asyncio.Event | None = None,
        progress_callback: Callable[[ImportOutcome], None] | None = None,
    ) -> ImportOutcome:
        """
        Upsert ``rows`` chunk by chunk and return cumulative accounting.

        Args:
            rows:              Importable rows (valid, dated) of one kind.
            chunk_size:        Rows per upsert; defaults to the executor's size.
            outcome:           Optional caller-owned accumulator. It is updated
                               after every chunk, so it stays accurate if the
                               awaiting task is cancelled mid-import.
            cancel_event:      When set, no further chunks are started.
            progress_callback: Called with the outcome after every chunk.

        Raises:
            ImportInputError: no rows, bad chunk size, mixed kinds or a row
                              that is invalid or has no effective date.
        """

        size = self._chunk_size if chunk_size is None else chunk_size
        table, natural_key = self._check_input(rows, size)
        outcome = outcome if outcome is not None else ImportOutcome()
        total_chunks = math.ceil(len(rows) / size)

        logger.info(
            "Snapshot import started table=%s rows=%s chunk_size=%s chunks=%s",
            table,
            len(rows),
            size,
            total_chunks,
        )

        # Chunk numbering continues across calls that share one outcome.
        first_index = len(outcome.chunk_results) + 1
        for chunk_index, start in enumerate(range(0, len(rows), size), start=first_index):
            if cancel_event is not None and cancel_event.is_set():
                outcome.mark_cancelled()
                logger.info(
                    "Snapshot import cancelled table=%s before_chunk=%s committed_rows=%s",
                    table,
                    chunk_index,
                    outcome.success_count,
                )
                break

            chunk = rows[start : start + size]
            try:
                await self._store.upsert_rows(table, _chunk_payloads(chunk), natural_key)
            except Exception as exc:  # noqa: BLE001
                outcome.record_chunk(
                    ChunkResult(
                        chunk_index=chunk_index,
                        rows_attempted=len(chunk),
                        rows_succeeded=0,
                        error=str(exc) or exc.__class__.__name__,
                    )
                )
                logger.warning(
                    "Snapshot chunk failed table=%s chunk=%s/%s rows=%s: %s",
                    table,
                    chunk_index,
                    total_chunks,
                    len(chunk),
                    exc,
                )
            else:
                outcome.record_chunk(
                    ChunkResult(
                        chunk_index=chunk_index,
                        rows_attempted=len(chunk),
                        rows_succeeded=len(chunk),
                    )
                )
                logger.debug(
                    "Snapshot chunk committed table=%s chunk=%s/%s rows=%s",
                    table,
                    chunk_index,
                    total_chunks,
                    len(chunk),
                )

            if progress_callback is not None:
                progress_callback(outcome)

        logger.info(
            "Snapshot import finished table=%s succeeded=%s failed=%s partial=%s",
            table,
            outcome.success_count,
            outcome.failed_count,
            outcome.partial,
        )
        return outcome

    async def dry_run(
        self,
        rows: Sequence[PerformanceRow],
        *,
        sample_size: int = DEFAULT_DRY_RUN_SAMPLE_SIZE,
        chunk_size: int | None = None,
    ) -> DryRunSummary:
        """
        Preview a sample: probe each importable row, never write.

        Rows that failed validation or have no effective date count as skips.
        """

        size = self._chunk_size if chunk_size is None else chunk_size
        if size < 1:
            raise ImportInputError("chunk_size must be at least 1.")

        sample = list(rows[: max(0, sample_size)])
        would_insert = would_update = would_skip = 0
        importable = 0

        for row in sample:
            if not row.is_importable:
                would_skip += 1
                continue
            importable += 1
            ticker_column, date_column = natural_key_columns(row.kind)
            exists = await self._store.probe_existing(
                row.table,
                {ticker_column: row.ticker, date_column: row.date},
            )
            if exists:
                would_update += 1
            else:
                would_insert += 1

        summary = DryRunSummary(
            sampled=len(sample),
            would_insert=would_insert,
            would_update=would_update,
            would_skip=would_skip,
            chunks=math.ceil(importable / size),
        )
        logger.info(
            "Snapshot dry run sampled=%s insert=%s update=%s skip=%s",
            summary.sampled,
            summary.would_insert,
            summary.would_update,
            summary.would_skip,
        )
        return summary

    @staticmethod
    def _check_input(
        rows: Sequence[PerformanceRow],
        size: int,
    ) -> tuple[str, tuple[str, str]]:
        if not rows:
            raise ImportInputError("No rows to import.")
        if size < 1:
            raise ImportInputError("chunk_size must be at least 1.")

        kinds = {row.kind for row in rows}
        if len(kinds) != 1:
            raise ImportInputError(f"Rows of one kind expected, got: {', '.join(sorted(kinds))}.")

        for row in rows:
            if not row.is_importable:
                raise ImportInputError(
                    f"Row {row.row_index} is not importable (invalid or missing effective date)."
                )

        kind = kinds.pop()
        return rows[0].table, natural_key_columns(kind)
