"""
tests/test_upload_validation.py

Pytest tests for CSV decoding and full-file snapshot validation.
"""

from __future__ import annotations

import pytest

from app.domain.performance import BenchmarkRow, FundRow, PickerDate, UploadType
from app.services.upload_validation import (
    EMPTY_FILE_ERROR,
    MISSING_HEADER_ERROR,
    SnapshotUploadError,
    SnapshotUploadValidator,
    read_snapshot_csv,
)

FUND_CSV = (
    "fund_ticker,date,ytd_return,alpha\n"
    "VTSAX,2024-01-31,8.42,0.12\n"
    "FXNAX,2024-01-31,6.78,-0.08\n"
)


def _validate(content: str | bytes, **kwargs: object):
    raw = content.encode("utf-8") if isinstance(content, str) else content
    headers, rows = read_snapshot_csv(raw)
    return SnapshotUploadValidator().validate(headers=headers, raw_rows=rows, **kwargs)


class TestReadSnapshotCsv:
    def test_strips_bom_and_trims_headers(self) -> None:
        headers, rows = read_snapshot_csv(b"\xef\xbb\xbf fund_ticker ,date\r\nVTSAX,2024-01-31\r\n")

        assert headers == ["fund_ticker", "date"]
        assert rows == [{"fund_ticker": "VTSAX", "date": "2024-01-31"}]

    def test_skips_blank_rows(self) -> None:
        _, rows = read_snapshot_csv(b"fund_ticker,date\nVTSAX,2024-01-31\n,\n\nFXNAX,2024-01-31\n")

        assert [row["fund_ticker"] for row in rows] == ["VTSAX", "FXNAX"]

    def test_drops_overflow_cells(self) -> None:
        _, rows = read_snapshot_csv(b"fund_ticker,date\nVTSAX,2024-01-31,extra\n")

        assert rows == [{"fund_ticker": "VTSAX", "date": "2024-01-31"}]

    def test_rejects_non_utf8(self) -> None:
        with pytest.raises(SnapshotUploadError):
            read_snapshot_csv(b"fund_ticker,date\n\xff\xfe\xfa,2024-01-31\n")


class TestFileLevelErrors:
    def test_missing_header(self) -> None:
        result = _validate(b"")

        assert not result.is_valid
        assert result.errors == (MISSING_HEADER_ERROR,)
        assert result.upload_type is None

    def test_header_only_file_is_empty(self) -> None:
        result = _validate("fund_ticker,date\n")

        assert result.errors == (EMPTY_FILE_ERROR,)
        assert result.upload_type == UploadType.FUND

    def test_unknown_upload_type(self) -> None:
        result = _validate("ticker,date\nVTSAX,2024-01-31\n")

        assert result.upload_type == UploadType.UNKNOWN
        assert result.errors[0].startswith("Cannot determine upload type")
        assert result.data == ()

    def test_mixed_file_rejected_by_default(self) -> None:
        result = _validate("fund_ticker,benchmark_ticker,date\nVTSAX,,2024-01-31\n")

        assert result.upload_type == UploadType.MIXED
        assert result.errors[0].startswith("Mixed fund and benchmark data in single file is not supported")

    def test_missing_date_column_without_picker(self) -> None:
        result = _validate("fund_ticker,ytd_return\nVTSAX,1\n")

        assert not result.is_valid
        assert "Missing required date column" in result.errors[0]

    def test_invalid_picker_selection(self) -> None:
        result = _validate(FUND_CSV, picker_date=PickerDate(month=13, year=2024))

        assert result.errors == ("Invalid month/year selection: 13/2024",)


class TestRowValidation:
    def test_valid_fund_file(self) -> None:
        result = _validate(FUND_CSV, known_tickers={UploadType.FUND: {"VTSAX", "FXNAX"}})

        assert result.is_valid
        assert result.upload_type == UploadType.FUND
        assert result.total_rows == 2
        assert result.valid_rows == 2
        assert result.has_as_of_column
        assert result.warnings == ()
        assert all(isinstance(row, FundRow) for row in result.data)
        assert result.data[1].metrics == {"ytd_return": 6.78, "alpha": -0.08}
        assert (result.coverage["ytd_return"].total, result.coverage["ytd_return"].non_null) == (2, 2)

    def test_row_errors_make_file_invalid_but_keep_rows(self) -> None:
        result = _validate("fund_ticker,date,alpha\nVTSAX,2024-01-31,abc\nFXNAX,2024-01-31,1\n")

        assert not result.is_valid
        assert result.errors == ('Row 1: Invalid numeric value for alpha: "abc"',)
        assert [row.is_valid for row in result.data] == [False, True]
        assert result.valid_rows == 1

    def test_out_of_range_year_is_a_row_error(self) -> None:
        result = _validate("fund_ticker,date\nVTSAX,0000-05\nFXNAX,2024-01-31\n")

        assert not result.is_valid
        assert result.errors == (
            'Row 1: Invalid date format: "0000-05" (expected YYYY-MM-DD or YYYY-MM)',
        )
        assert [row.is_valid for row in result.data] == [False, True]

    def test_duplicates_are_warnings(self) -> None:
        result = _validate("fund_ticker,date\nVTSAX,2024-01-31\nvtsax,2024-01\n")

        assert result.is_valid
        assert len(result.duplicates) == 1
        assert result.warnings[-1] == (
            "Row 2: Duplicate entry for VTSAX on 2024-01-31 (first seen at row 1)"
        )

    def test_unmapped_columns_warning(self) -> None:
        result = _validate("fund_ticker,date,notes\nVTSAX,2024-01-31,hello\n")

        assert result.is_valid
        assert result.unmapped_headers == ("notes",)
        assert result.warnings == ("Unrecognized columns ignored: notes",)

    def test_as_of_month_alias(self) -> None:
        result = _validate("benchmark_ticker,AsOfMonth\nIWF,2024-03\n")

        assert result.is_valid
        assert isinstance(result.data[0], BenchmarkRow)
        assert result.data[0].date == "2024-03-31"

    def test_require_eom(self) -> None:
        result = _validate("fund_ticker,date\nVTSAX,2024-01-15\n", require_eom=True)

        assert result.errors == ('Row 1: Date "2024-01-15" is not end-of-month and EOM is required',)


class TestPickerMode:
    def test_picker_makes_date_column_optional(self) -> None:
        result = _validate(
            "fund_ticker,ytd_return\nVTSAX,1\n",
            picker_date=PickerDate(month=2, year=2024),
        )

        assert result.is_valid
        assert not result.has_as_of_column
        assert result.data[0].date is None

    def test_picker_ignores_file_dates(self) -> None:
        result = _validate(
            "fund_ticker,date\nVTSAX,garbage\nVTSAX,2024-01-31\n",
            picker_date=PickerDate(month=3, year=2024),
        )

        assert result.is_valid
        assert result.warnings[0] == (
            'File date column "date" ignored; all rows use 2024-03-31 from the selected month/year'
        )
        # Both rows land on the picker month, so the second is a duplicate.
        assert [d.row_index for d in result.duplicates] == [2]


class TestMixedFiles:
    def test_mixed_file_when_allowed(self) -> None:
        result = _validate(
            "fund_ticker,benchmark_ticker,date,manager_tenure\n"
            "VTSAX,,2024-01-31,5\n"
            ",IWF,2024-01-31,\n",
            allow_mixed=True,
        )

        assert result.is_valid
        assert result.upload_type == UploadType.MIXED
        assert isinstance(result.data[0], FundRow)
        assert isinstance(result.data[1], BenchmarkRow)
        assert "manager_tenure" not in result.data[1].metrics
        assert (result.coverage["manager_tenure"].total, result.coverage["manager_tenure"].non_null) == (1, 1)
