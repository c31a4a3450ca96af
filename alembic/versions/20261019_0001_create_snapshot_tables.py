"""create performance snapshot and ticker catalog tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

_METRIC_COLUMNS = (
    "ytd_return",
    "one_year_return",
    "three_year_return",
    "five_year_return",
    "ten_year_return",
    "sharpe_ratio",
    "standard_deviation_3y",
    "standard_deviation_5y",
    "expense_ratio",
    "alpha",
    "beta",
    "up_capture_ratio",
    "down_capture_ratio",
)


def _metric_columns() -> list[sa.Column]:
    return [sa.Column(name, sa.Float(), nullable=True) for name in _METRIC_COLUMNS]


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "funds",
        sa.Column("ticker", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("asset_class", sa.String(length=120), nullable=True),
        sa.Column("is_recommended", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("ticker"),
    )
    op.create_table(
        "benchmarks",
        sa.Column("ticker", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("asset_class", sa.String(length=120), nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("ticker"),
    )

    op.create_table(
        "fund_performance",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("fund_ticker", sa.String(length=20), nullable=False),
        sa.Column("date", sa.Date(), nullable=False, comment="Month-end as-of date"),
        *_metric_columns(),
        sa.Column("manager_tenure", sa.Float(), nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("fund_ticker", "date", name="uq_fund_performance_ticker_date"),
    )
    op.create_index("ix_fund_performance_date", "fund_performance", ["date"], unique=False)

    op.create_table(
        "benchmark_performance",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("benchmark_ticker", sa.String(length=20), nullable=False),
        sa.Column("date", sa.Date(), nullable=False, comment="Month-end as-of date"),
        *_metric_columns(),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("benchmark_ticker", "date", name="uq_benchmark_performance_ticker_date"),
    )
    op.create_index("ix_benchmark_performance_date", "benchmark_performance", ["date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_benchmark_performance_date", table_name="benchmark_performance")
    op.drop_table("benchmark_performance")
    op.drop_index("ix_fund_performance_date", table_name="fund_performance")
    op.drop_table("fund_performance")
    op.drop_table("benchmarks")
    op.drop_table("funds")
