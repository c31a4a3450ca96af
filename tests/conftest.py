"""
tests/conftest.py

Shared fixtures: an in-memory stand-in for the performance store.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Mapping, Sequence

import pytest

from app.repositories.performance_store import PerformanceStoreError


class FakePerformanceStore:
    """
    Keeps upserted rows in dicts keyed by natural key.

    ``fail_on_calls`` holds 1-based upsert call numbers that raise
    ``PerformanceStoreError`` instead of writing.
    """

    def __init__(
        self,
        known_tickers: Mapping[str, Sequence[str]] | None = None,
        *,
        fail_on_calls: Sequence[int] = (),
    ) -> None:
        self.known_tickers = {kind: set(tickers) for kind, tickers in (known_tickers or {}).items()}
        self.fail_on_calls = set(fail_on_calls)
        self.tables: dict[str, dict[tuple[Any, ...], dict[str, Any]]] = defaultdict(dict)
        self.upsert_calls: list[tuple[str, int]] = []
        self.lookup_calls: list[str] = []
        self.probe_calls: list[tuple[str, dict[str, Any]]] = []

    async def lookup_known_tickers(self, kind: str) -> set[str]:
        self.lookup_calls.append(kind)
        return set(self.known_tickers.get(kind, set()))

    async def upsert_rows(
        self,
        table: str,
        rows: Sequence[Mapping[str, Any]],
        natural_key: Sequence[str],
    ) -> None:
        self.upsert_calls.append((table, len(rows)))
        if len(self.upsert_calls) in self.fail_on_calls:
            raise PerformanceStoreError("simulated connection reset")
        for row in rows:
            key = tuple(row[column] for column in natural_key)
            self.tables[table][key] = dict(row)

    async def probe_existing(self, table: str, natural_key: Mapping[str, Any]) -> bool:
        self.probe_calls.append((table, dict(natural_key)))
        return tuple(natural_key.values()) in self.tables[table]


@pytest.fixture()
def make_store() -> Callable[..., FakePerformanceStore]:
    """Factory for fresh in-memory stores."""
    return FakePerformanceStore


@pytest.fixture()
def store() -> FakePerformanceStore:
    return FakePerformanceStore()
