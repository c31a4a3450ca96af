"""
app/repositories/performance_store.py

Catalog/store collaborator used by snapshot import.

The engine only depends on three capabilities: known-ticker lookup,
natural-key upsert and existence probe. ``SQLAlchemyPerformanceStore`` is the
PostgreSQL implementation; tests use an in-memory double.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import Any, Mapping, Protocol

from sqlalchemy import and_, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.performance import (
    BENCHMARK_PERFORMANCE_TABLE,
    FUND_PERFORMANCE_TABLE,
    UploadType,
)
from db.models.catalog import Benchmark, Fund
from db.models.performance import BenchmarkPerformance, FundPerformance

logger = logging.getLogger(__name__)


class PerformanceStoreError(RuntimeError):
    """
    Raised when the store cannot complete a read or write.
    """


class PerformanceStore(Protocol):
    async def lookup_known_tickers(self, kind: str) -> set[str]: ...

    async def upsert_rows(
        self,
        table: str,
        rows: Sequence[Mapping[str, Any]],
        natural_key: Sequence[str],
    ) -> None: ...

    async def probe_existing(self, table: str, natural_key: Mapping[str, Any]) -> bool: ...


_PERFORMANCE_MODELS: dict[str, Any] = {
    FUND_PERFORMANCE_TABLE: FundPerformance,
    BENCHMARK_PERFORMANCE_TABLE: BenchmarkPerformance,
}

_CATALOG_MODELS: dict[str, Any] = {
    UploadType.FUND: Fund,
    UploadType.BENCHMARK: Benchmark,
}


def _coerce_date(value: Any) -> Any:
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


class SQLAlchemyPerformanceStore:
    """
    PostgreSQL-backed store. Each upsert commits on its own, so a file's
    chunks are committed independently.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def lookup_known_tickers(self, kind: str) -> set[str]:
        model = _CATALOG_MODELS.get(kind)
        if model is None:
            raise PerformanceStoreError(f"No ticker catalog for kind '{kind}'.")
        try:
            result = await self._session.scalars(select(model.ticker))
        except SQLAlchemyError as exc:
            raise PerformanceStoreError(f"Failed to load {kind} tickers.") from exc
        return {ticker.strip().upper() for ticker in result.all() if ticker}

    async def upsert_rows(
        self,
        table: str,
        rows: Sequence[Mapping[str, Any]],
        natural_key: Sequence[str],
    ) -> None:
        if not rows:
            return
        model = self._model_for(table)

        payloads: list[dict[str, Any]] = [
            {key: _coerce_date(value) if key == "date" else value for key, value in row.items()}
            for row in rows
        ]
        stmt = insert(model).values(payloads)
        update_columns = {
            column: stmt.excluded[column]
            for column in payloads[0]
            if column not in natural_key
        }
        if update_columns:
            update_columns["updated_at"] = func.now()
            stmt = stmt.on_conflict_do_update(index_elements=list(natural_key), set_=update_columns)
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=list(natural_key))

        try:
            await self._session.execute(stmt)
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise PerformanceStoreError(f"Upsert into {table} failed: {exc}") from exc
        logger.debug("Upserted performance rows table=%s count=%s", table, len(payloads))

    async def probe_existing(self, table: str, natural_key: Mapping[str, Any]) -> bool:
        model = self._model_for(table)
        conditions = [
            getattr(model, column) == (_coerce_date(value) if column == "date" else value)
            for column, value in natural_key.items()
        ]
        stmt = select(model.id).where(and_(*conditions)).limit(1)
        try:
            found = await self._session.scalar(stmt)
        except SQLAlchemyError as exc:
            raise PerformanceStoreError(f"Existence probe on {table} failed.") from exc
        return found is not None

    @staticmethod
    def _model_for(table: str) -> Any:
        model = _PERFORMANCE_MODELS.get(table)
        if model is None:
            raise PerformanceStoreError(f"Unknown performance table '{table}'.")
        return model
