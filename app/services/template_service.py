"""
app/services/template_service.py

Downloadable CSV templates for monthly snapshot uploads.

Templates are written for spreadsheet tools: UTF-8 BOM, every field quoted,
CRLF line endings. The date column is left out because the batch month is
normally chosen with the month/year picker.
"""

from __future__ import annotations

import csv
import io

from app.domain.performance import (
    BENCHMARK_METRIC_COLUMNS,
    BENCHMARK_TICKER_COLUMN,
    FUND_METRIC_COLUMNS,
    FUND_TICKER_COLUMN,
    UploadType,
)

UTF8_BOM = "\ufeff"

_FUND_SAMPLE_ROWS: tuple[tuple[str, ...], ...] = (
    ("VTSAX", "8.42", "14.65", "10.88", "11.32", "9.87", "1.24", "15.82", "14.97", "0.03", "0.12", "1.02", "12.50", "102.3", "97.8"),
    ("FXNAX", "6.78", "12.34", "9.45", "10.67", "8.93", "1.18", "14.23", "13.45", "0.025", "-0.08", "0.98", "8.75", "99.7", "101.2"),
    ("SWPPX", "7.89", "13.89", "10.12", "11.08", "9.45", "1.21", "15.34", "14.78", "0.02", "0.23", "1.01", "15.25", "103.1", "96.4"),
)

_BENCHMARK_SAMPLE_ROWS: tuple[tuple[str, ...], ...] = (
    ("IWF", "9.15", "15.23", "11.45", "11.87", "10.23", "1.28", "16.12", "15.34", "0.19", "0.00", "1.00", "100.0", "100.0"),
    ("IWD", "6.87", "11.98", "8.76", "9.45", "8.12", "1.05", "13.45", "12.89", "0.20", "0.00", "1.00", "100.0", "100.0"),
    ("EFA", "4.23", "8.67", "6.34", "7.12", "5.89", "0.78", "18.23", "17.45", "0.32", "0.00", "1.00", "100.0", "100.0"),
    ("AGG", "1.45", "3.12", "2.87", "3.23", "2.98", "0.45", "4.12", "3.89", "0.05", "0.00", "1.00", "100.0", "100.0"),
)

TEMPLATE_FILENAMES: dict[str, str] = {
    UploadType.FUND: "fund-performance-template.csv",
    UploadType.BENCHMARK: "benchmark-performance-template.csv",
}


def template_headers(kind: str) -> tuple[str, ...]:
    if kind == UploadType.FUND:
        return (FUND_TICKER_COLUMN, *FUND_METRIC_COLUMNS)
    if kind == UploadType.BENCHMARK:
        return (BENCHMARK_TICKER_COLUMN, *BENCHMARK_METRIC_COLUMNS)
    raise ValueError(f"No template for upload kind '{kind}'.")


def build_template_csv(kind: str, *, include_samples: bool = True) -> bytes:
    """
    Render the template for ``kind`` as BOM-prefixed UTF-8 bytes.
    """

    headers = template_headers(kind)
    samples = _FUND_SAMPLE_ROWS if kind == UploadType.FUND else _BENCHMARK_SAMPLE_ROWS

    buffer = io.StringIO()
    buffer.write(UTF8_BOM)
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(headers)
    if include_samples:
        writer.writerows(samples)
    return buffer.getvalue().encode("utf-8")
