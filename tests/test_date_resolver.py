from __future__ import annotations

import unittest

from app.domain.performance import FundRow, PickerDate
from app.services.date_resolver import (
    DateMode,
    assign_effective_dates,
    detect_date_mode,
    resolve_effective_date,
)


class TestDetectDateMode(unittest.TestCase):
    def test_valid_picker_wins(self) -> None:
        self.assertEqual(detect_date_mode(PickerDate(month=2, year=2024), True), DateMode.PICKER)

    def test_invalid_picker_falls_back_to_file(self) -> None:
        self.assertEqual(detect_date_mode(PickerDate(month=13, year=2024), True), DateMode.FILE)

    def test_no_source(self) -> None:
        self.assertEqual(detect_date_mode(None, False), DateMode.NONE)


class TestResolveEffectiveDate(unittest.TestCase):
    def test_picker_overrides_row_date(self) -> None:
        row = FundRow(row_index=1, ticker="VTSAX", date="2023-12-31")

        self.assertEqual(
            resolve_effective_date(row, PickerDate(month=2, year=2024), True),
            "2024-02-29",
        )

    def test_file_date_is_moved_to_month_end(self) -> None:
        row = FundRow(row_index=1, ticker="VTSAX", date="2024-01-15")

        self.assertEqual(resolve_effective_date(row, None, True), "2024-01-31")

    def test_undateable_row(self) -> None:
        row = FundRow(row_index=1, ticker="VTSAX", date=None)

        self.assertIsNone(resolve_effective_date(row, None, False))


class TestAssignEffectiveDates(unittest.TestCase):
    def test_stamps_valid_rows_and_leaves_invalid_rows(self) -> None:
        rows = [
            FundRow(row_index=1, ticker="VTSAX", date=None),
            FundRow(row_index=2, ticker=None, date=None, is_valid=False),
        ]

        resolved, errors = assign_effective_dates(rows, PickerDate(month=6, year=2024), False)

        self.assertEqual(errors, [])
        self.assertEqual(resolved[0].date, "2024-06-30")
        self.assertTrue(resolved[0].is_importable)
        self.assertIs(resolved[1], rows[1])

    def test_undateable_valid_rows_are_excluded(self) -> None:
        rows = [FundRow(row_index=4, ticker="VTSAX", date=None)]

        resolved, errors = assign_effective_dates(rows, None, False)

        self.assertEqual(len(errors), 1)
        self.assertTrue(errors[0].startswith("Row 4: No effective date"))
        self.assertFalse(resolved[0].is_valid)
        self.assertFalse(resolved[0].is_importable)
        self.assertIsInstance(resolved[0], FundRow)


if __name__ == "__main__":
    unittest.main()
