"""
app/repositories package marker.
"""

from app.repositories.performance_store import (
    PerformanceStore,
    PerformanceStoreError,
    SQLAlchemyPerformanceStore,
)

__all__ = [
    "PerformanceStore",
    "PerformanceStoreError",
    "SQLAlchemyPerformanceStore",
]
