"""
app/services/ticker_catalog.py

Session-scoped snapshot of the known fund and benchmark tickers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from app.repositories.performance_store import PerformanceStore

logger = logging.getLogger(__name__)


class TickerCatalogCache:
    """
    Caches ``lookup_known_tickers`` per kind for the lifetime of one upload
    session.

    Tickers added to the catalog mid-session are not seen until
    ``invalidate`` is called or a new cache is built. ``on_invalidate`` is
    called with the invalidated kind (None for all kinds).
    """

    def __init__(
        self,
        store: PerformanceStore,
        *,
        on_invalidate: Callable[[str | None], None] | None = None,
    ) -> None:
        self._store = store
        self._on_invalidate = on_invalidate
        self._tickers: dict[str, frozenset[str]] = {}

    async def known_tickers(self, kind: str) -> frozenset[str]:
        cached = self._tickers.get(kind)
        if cached is not None:
            return cached

        tickers = frozenset(
            ticker.strip().upper()
            for ticker in await self._store.lookup_known_tickers(kind)
            if ticker and ticker.strip()
        )
        self._tickers[kind] = tickers
        logger.debug("Ticker catalog loaded kind=%s count=%s", kind, len(tickers))
        return tickers

    def is_cached(self, kind: str) -> bool:
        return kind in self._tickers

    def invalidate(self, kind: str | None = None) -> None:
        if kind is None:
            self._tickers.clear()
        else:
            self._tickers.pop(kind, None)
        if self._on_invalidate is not None:
            self._on_invalidate(kind)
