"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.catalog import Benchmark, Fund
from db.models.performance import BenchmarkPerformance, FundPerformance

__all__ = [
    "Benchmark",
    "BenchmarkPerformance",
    "Fund",
    "FundPerformance",
]
