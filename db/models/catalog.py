"""
db/models/catalog.py

Fund and benchmark catalogs; the source of known tickers for validation.
"""

from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Fund(TimestampMixin, Base):
    __tablename__ = "funds"

    ticker: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    asset_class: Mapped[str | None] = mapped_column(String(120), nullable=True)
    is_recommended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Benchmark(TimestampMixin, Base):
    __tablename__ = "benchmarks"

    ticker: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    asset_class: Mapped[str | None] = mapped_column(String(120), nullable=True)
