"""
Validate a monthly snapshot CSV from the CLI without touching the database.

Prints the validation report to stderr and the JSON result to stdout.
Exits with status 1 when the file is not valid.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from app.domain.performance import PickerDate, UploadType
from app.services.snapshot_import_service import SnapshotUploadOptions, get_snapshot_import_service
from app.services.upload_validation import SnapshotUploadError
from app.services.validation_report import generate_error_report


def _read_tickers(path: str | None) -> set[str]:
    if not path:
        return set()
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return {line.strip().upper() for line in lines if line.strip() and not line.startswith("#")}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate a fund or benchmark performance CSV.")
    parser.add_argument("csv_path", help="Path to the CSV file.")
    parser.add_argument("--month", type=int, default=None, help="Picker month (1-12).")
    parser.add_argument("--year", type=int, default=None, help="Picker year.")
    parser.add_argument(
        "--require-eom",
        action="store_true",
        default=None,
        help="Reject dates that are not month-end.",
    )
    parser.add_argument(
        "--allow-mixed",
        action="store_true",
        default=None,
        help="Accept fund and benchmark rows in one file.",
    )
    parser.add_argument(
        "--known-fund-tickers",
        default=None,
        help="Optional file with one known fund ticker per line.",
    )
    parser.add_argument(
        "--known-benchmark-tickers",
        default=None,
        help="Optional file with one known benchmark ticker per line.",
    )
    args = parser.parse_args(argv)

    if (args.month is None) != (args.year is None):
        parser.error("--month and --year must be given together.")

    options = SnapshotUploadOptions(
        picker_date=PickerDate.from_parts(args.month, args.year),
        require_eom=args.require_eom,
        allow_mixed=args.allow_mixed,
    )
    known_tickers = {
        UploadType.FUND: _read_tickers(args.known_fund_tickers),
        UploadType.BENCHMARK: _read_tickers(args.known_benchmark_tickers),
    }

    service = get_snapshot_import_service()
    try:
        with open(args.csv_path, "rb") as handle:
            result = service.validate_content(handle, known_tickers=known_tickers, options=options)
    except (OSError, SnapshotUploadError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    report = generate_error_report(result)
    if report:
        print(report, file=sys.stderr)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.is_valid else 1


if __name__ == "__main__":
    raise SystemExit(main())
