"""
db/models/performance.py

Monthly fund and benchmark performance snapshots.

One row per (ticker, month-end date); the unique constraint is the natural key
used as the upsert conflict target.
"""

from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import Date, DateTime, Float, Index, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class _PerformanceMetricsMixin:
    ytd_return: Mapped[float | None] = mapped_column(Float, nullable=True)
    one_year_return: Mapped[float | None] = mapped_column(Float, nullable=True)
    three_year_return: Mapped[float | None] = mapped_column(Float, nullable=True)
    five_year_return: Mapped[float | None] = mapped_column(Float, nullable=True)
    ten_year_return: Mapped[float | None] = mapped_column(Float, nullable=True)
    sharpe_ratio: Mapped[float | None] = mapped_column(Float, nullable=True)
    standard_deviation_3y: Mapped[float | None] = mapped_column(Float, nullable=True)
    standard_deviation_5y: Mapped[float | None] = mapped_column(Float, nullable=True)
    expense_ratio: Mapped[float | None] = mapped_column(Float, nullable=True)
    alpha: Mapped[float | None] = mapped_column(Float, nullable=True)
    beta: Mapped[float | None] = mapped_column(Float, nullable=True)
    up_capture_ratio: Mapped[float | None] = mapped_column(Float, nullable=True)
    down_capture_ratio: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class FundPerformance(_PerformanceMetricsMixin, Base):
    __tablename__ = "fund_performance"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    fund_ticker: Mapped[str] = mapped_column(String(20), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, comment="Month-end as-of date")
    manager_tenure: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (
        UniqueConstraint("fund_ticker", "date", name="uq_fund_performance_ticker_date"),
        Index("ix_fund_performance_date", "date"),
    )


class BenchmarkPerformance(_PerformanceMetricsMixin, Base):
    __tablename__ = "benchmark_performance"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    benchmark_ticker: Mapped[str] = mapped_column(String(20), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, comment="Month-end as-of date")

    __table_args__ = (
        UniqueConstraint("benchmark_ticker", "date", name="uq_benchmark_performance_ticker_date"),
        Index("ix_benchmark_performance_date", "date"),
    )
