from __future__ import annotations

import unittest

from app.domain.performance import UploadType
from app.mappers.header_mapper import DATE_FIELD, KIND_FIELD, TICKER_FIELD, HeaderMapper, determine_upload_type


class TestDetermineUploadType(unittest.TestCase):
    def test_classifies_by_ticker_columns(self) -> None:
        self.assertEqual(determine_upload_type(["fund_ticker", "date"]), UploadType.FUND)
        self.assertEqual(determine_upload_type([" benchmark_ticker "]), UploadType.BENCHMARK)
        self.assertEqual(
            determine_upload_type(["fund_ticker", "benchmark_ticker"]),
            UploadType.MIXED,
        )
        self.assertEqual(determine_upload_type(["ticker", "date"]), UploadType.UNKNOWN)

    def test_header_matching_is_case_sensitive(self) -> None:
        self.assertEqual(determine_upload_type(["Fund_Ticker"]), UploadType.UNKNOWN)


class TestHeaderMapper(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = HeaderMapper()

    def test_resolves_date_alias_metrics_and_unmapped(self) -> None:
        mapping = self.mapper.resolve(
            ["fund_ticker", "AsOfMonth", "ytd_return", "notes"],
            UploadType.FUND,
        )

        self.assertEqual(mapping.date_column, "AsOfMonth")
        self.assertTrue(mapping.has_as_of_column)
        self.assertEqual(mapping.metric_columns, {"ytd_return": "ytd_return"})
        self.assertEqual(mapping.unmapped, ("notes",))

    def test_benchmark_mapping_ignores_manager_tenure(self) -> None:
        mapping = self.mapper.resolve(
            ["benchmark_ticker", "date", "manager_tenure"],
            UploadType.BENCHMARK,
        )

        self.assertNotIn("manager_tenure", mapping.metric_columns)
        self.assertEqual(mapping.unmapped, ("manager_tenure",))

    def test_date_column_required_only_without_picker(self) -> None:
        mapping = self.mapper.resolve(["benchmark_ticker", "alpha"], UploadType.BENCHMARK)

        errors = self.mapper.missing_required_columns(mapping, picker_mode=False)
        self.assertEqual(len(errors), 1)
        self.assertIn("Missing required date column", errors[0])

        self.assertEqual(self.mapper.missing_required_columns(mapping, picker_mode=True), [])

    def test_map_row_keeps_absent_columns_absent(self) -> None:
        mapping = self.mapper.resolve(["fund_ticker", "alpha"], UploadType.FUND)

        mapped = self.mapper.map_row(raw_row={"fund_ticker": "VTSAX", "alpha": ""}, mapping=mapping)

        self.assertEqual(mapped[KIND_FIELD], UploadType.FUND)
        self.assertEqual(mapped[TICKER_FIELD], "VTSAX")
        self.assertEqual(mapped["alpha"], "")
        self.assertNotIn(DATE_FIELD, mapped)
        self.assertNotIn("beta", mapped)

    def test_map_row_picks_kind_per_row_in_mixed_files(self) -> None:
        mapping = self.mapper.resolve(
            ["fund_ticker", "benchmark_ticker", "manager_tenure", "alpha"],
            UploadType.MIXED,
        )

        fund = self.mapper.map_row(
            raw_row={"fund_ticker": "VTSAX", "benchmark_ticker": "", "manager_tenure": "5", "alpha": "1"},
            mapping=mapping,
        )
        benchmark = self.mapper.map_row(
            raw_row={"fund_ticker": " ", "benchmark_ticker": "IWF", "manager_tenure": "5", "alpha": "1"},
            mapping=mapping,
        )

        self.assertEqual((fund[KIND_FIELD], fund[TICKER_FIELD]), (UploadType.FUND, "VTSAX"))
        self.assertEqual(fund["manager_tenure"], "5")
        self.assertEqual((benchmark[KIND_FIELD], benchmark[TICKER_FIELD]), (UploadType.BENCHMARK, "IWF"))
        self.assertNotIn("manager_tenure", benchmark)
        self.assertEqual(benchmark["alpha"], "1")


if __name__ == "__main__":
    unittest.main()
