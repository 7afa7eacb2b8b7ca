from __future__ import annotations

import io
import warnings
import zipfile
from urllib.parse import unquote

import pytest

from cellswap.core.errors import BundleFailure
from cellswap.services.replacer.bundle import REPORT_ENTRY, build_archive
from cellswap.services.replacer.models import FileResult, SheetResult
from cellswap.services.replacer.report import build_report, encode_report_header, format_report_line


def _results() -> list[FileResult]:
    return [
        FileResult("报表.xlsx", [SheetResult("Sheet1", 2), SheetResult("汇总", 0)], b"first"),
        FileResult("b.xlsx", [SheetResult("Data", 5)], b"second"),
    ]


def test_report_line_format() -> None:
    assert format_report_line("a.xlsx", SheetResult("S", 2)) == "File: a.xlsx | Sheet: S | Replaced: 2"


def test_report_joins_lines_in_file_then_sheet_order() -> None:
    assert build_report(_results()) == (
        "File: 报表.xlsx | Sheet: Sheet1 | Replaced: 2\n"
        "File: 报表.xlsx | Sheet: 汇总 | Replaced: 0\n"
        "File: b.xlsx | Sheet: Data | Replaced: 5"
    )


def test_report_of_nothing_is_empty() -> None:
    assert build_report([]) == ""


def test_header_encoding_matches_uri_component_rules() -> None:
    encoded = encode_report_header("File: a.xlsx | Sheet: S (1) | Replaced: 2\n表")

    assert encoded == "File%3A%20a.xlsx%20%7C%20Sheet%3A%20S%20(1)%20%7C%20Replaced%3A%202%0A%E8%A1%A8"
    assert encoded.isascii()
    assert unquote(encoded) == "File: a.xlsx | Sheet: S (1) | Replaced: 2\n表"


def test_archive_entries_in_submission_order_with_report_last() -> None:
    results = _results()
    report = build_report(results)

    payload = build_archive(results, report)

    with zipfile.ZipFile(io.BytesIO(payload)) as zf:
        assert zf.namelist() == ["replaced_报表.xlsx", "replaced_b.xlsx", REPORT_ENTRY]
        assert zf.read("replaced_b.xlsx") == b"second"
        assert zf.read(REPORT_ENTRY).decode("utf-8") == report


def test_duplicate_archive_names_overwrite_in_place() -> None:
    results = [
        FileResult("a.xlsx", [SheetResult("S", 1)], b"first a"),
        FileResult("b.xlsx", [SheetResult("S", 0)], b"only b"),
        FileResult("a.xlsx", [SheetResult("S", 2)], b"second a"),
    ]

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        payload = build_archive(results, build_report(results))

    with zipfile.ZipFile(io.BytesIO(payload)) as zf:
        assert zf.namelist() == ["replaced_a.xlsx", "replaced_b.xlsx", REPORT_ENTRY]
        assert zf.read("replaced_a.xlsx") == b"second a"
        assert zf.read(REPORT_ENTRY).decode("utf-8").count("File: a.xlsx") == 2


def test_archive_write_error_raises_bundle_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken_writestr(self, *args, **kwargs):
        raise OSError("no space left on device")

    monkeypatch.setattr(zipfile.ZipFile, "writestr", _broken_writestr)

    with pytest.raises(BundleFailure) as excinfo:
        build_archive(_results(), "report")

    assert excinfo.value.kind == "BundleFailure"
    assert excinfo.value.status_code == 500
