from __future__ import annotations

import pytest

from app.domain.performance import PickerDate, UploadType
from app.services.template_service import UTF8_BOM, build_template_csv, template_headers
from app.services.upload_validation import SnapshotUploadValidator, read_snapshot_csv


class TestBuildTemplateCsv:
    def test_fund_template_layout(self) -> None:
        text = build_template_csv(UploadType.FUND).decode("utf-8")

        assert text.startswith(UTF8_BOM)
        lines = text[len(UTF8_BOM):].split("\r\n")
        assert lines[0].startswith('"fund_ticker","ytd_return",')
        assert lines[0].count(",") == 14
        assert lines[1].startswith('"VTSAX",')
        assert lines[-1] == ""
        assert len(lines) == 5

    def test_header_only_template(self) -> None:
        text = build_template_csv(UploadType.BENCHMARK, include_samples=False).decode("utf-8")

        expected_header = ",".join(f'"{column}"' for column in template_headers(UploadType.BENCHMARK))
        assert text == f"{UTF8_BOM}{expected_header}\r\n"

    def test_no_template_for_other_kinds(self) -> None:
        with pytest.raises(ValueError):
            template_headers(UploadType.MIXED)

    @pytest.mark.parametrize(("kind", "rows"), [(UploadType.FUND, 3), (UploadType.BENCHMARK, 4)])
    def test_templates_validate_with_a_picker_date(self, kind: str, rows: int) -> None:
        headers, raw_rows = read_snapshot_csv(build_template_csv(kind))

        result = SnapshotUploadValidator().validate(
            headers=headers,
            raw_rows=raw_rows,
            picker_date=PickerDate(month=1, year=2024),
        )

        assert headers == list(template_headers(kind))
        assert result.is_valid
        assert result.upload_type == kind
        assert result.total_rows == rows
        assert result.warnings == ()
