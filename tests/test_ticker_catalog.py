from __future__ import annotations

import asyncio
import unittest

from app.domain.performance import UploadType
from app.services.ticker_catalog import TickerCatalogCache
from tests.conftest import FakePerformanceStore


class TestTickerCatalogCache(unittest.TestCase):
    def setUp(self) -> None:
        self.store = FakePerformanceStore(
            {UploadType.FUND: [" vtsax ", "FXNAX", ""], UploadType.BENCHMARK: ["IWF"]}
        )
        self.invalidated: list[str | None] = []
        self.catalog = TickerCatalogCache(self.store, on_invalidate=self.invalidated.append)

    def test_normalizes_and_caches_per_kind(self) -> None:
        first = asyncio.run(self.catalog.known_tickers(UploadType.FUND))
        second = asyncio.run(self.catalog.known_tickers(UploadType.FUND))

        self.assertEqual(first, frozenset({"VTSAX", "FXNAX"}))
        self.assertIs(first, second)
        self.assertEqual(self.store.lookup_calls, [UploadType.FUND])
        self.assertTrue(self.catalog.is_cached(UploadType.FUND))
        self.assertFalse(self.catalog.is_cached(UploadType.BENCHMARK))

    def test_new_tickers_are_seen_only_after_invalidation(self) -> None:
        asyncio.run(self.catalog.known_tickers(UploadType.BENCHMARK))
        self.store.known_tickers[UploadType.BENCHMARK].add("EFA")

        stale = asyncio.run(self.catalog.known_tickers(UploadType.BENCHMARK))
        self.catalog.invalidate(UploadType.BENCHMARK)
        fresh = asyncio.run(self.catalog.known_tickers(UploadType.BENCHMARK))

        self.assertNotIn("EFA", stale)
        self.assertIn("EFA", fresh)
        self.assertEqual(self.invalidated, [UploadType.BENCHMARK])

    def test_invalidate_all(self) -> None:
        asyncio.run(self.catalog.known_tickers(UploadType.FUND))
        asyncio.run(self.catalog.known_tickers(UploadType.BENCHMARK))

        self.catalog.invalidate()

        self.assertFalse(self.catalog.is_cached(UploadType.FUND))
        self.assertFalse(self.catalog.is_cached(UploadType.BENCHMARK))
        self.assertEqual(self.invalidated, [None])


if __name__ == "__main__":
    unittest.main()
