from __future__ import annotations

import io
import re
import zipfile

import pytest
from openpyxl import Workbook

from cellswap.core.errors import DecodeFailure
from cellswap.services.replacer.mapping import build_replacement_map, load_replacement_map


def test_header_row_is_skipped_and_order_kept(make_map) -> None:
    data = make_map([("foo", "bar"), ("bar", "baz"), ("foo", "later")])

    rmap = load_replacement_map(data)

    assert [(p.key, p.value) for p in rmap] == [("foo", "bar"), ("bar", "baz"), ("foo", "later")]


def test_rows_missing_key_or_value_are_dropped(make_map) -> None:
    data = make_map([("a", None), (None, "b"), ("c", "d")])

    rmap = load_replacement_map(data)

    assert [(p.key, p.value) for p in rmap] == [("c", "d")]


def test_scalars_are_coerced_to_text(make_map) -> None:
    data = make_map([(42, "forty-two"), (1.5, 3), (True, "yes")])

    rmap = load_replacement_map(data)

    assert [(p.key, p.value) for p in rmap] == [("42", "forty-two"), ("1.5", "3"), ("true", "yes")]


def test_only_first_sheet_is_read(make_workbook) -> None:
    data = make_workbook(
        {
            "First": [["key", "value"], ["x", "y"]],
            "Second": [["key", "value"], ["ignored", "nope"]],
        }
    )

    rmap = load_replacement_map(data)

    assert len(rmap) == 1
    assert rmap.pairs[0].key == "x"


def test_columns_follow_used_range(make_workbook) -> None:
    data = make_workbook({"Map": [[None, "key", "value"], [None, "old", "new"]]})

    rmap = load_replacement_map(data)

    assert [(p.key, p.value) for p in rmap] == [("old", "new")]


def test_empty_first_sheet_gives_empty_map() -> None:
    wb = Workbook()

    assert len(build_replacement_map(wb)) == 0


def test_header_only_sheet_gives_empty_map(make_map) -> None:
    assert len(load_replacement_map(make_map([]))) == 0


def test_undecodable_payload_raises() -> None:
    with pytest.raises(DecodeFailure):
        load_replacement_map(b"definitely not a workbook", "map.xlsx")


def test_empty_payload_raises() -> None:
    with pytest.raises(DecodeFailure):
        load_replacement_map(b"", "map.xlsx")



def _with_cached_results(data: bytes, cached: dict[str, str]) -> bytes:
    """Store a computed result next to each formula, as Excel does on save."""

    out = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(data)) as src, zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as dst:
        for item in src.infolist():
            payload = src.read(item.filename)
            if item.filename == "xl/worksheets/sheet1.xml":
                for formula, value in cached.items():
                    pattern = rb"<f>" + re.escape(formula.encode()) + rb"</f>\s*(?:<v\s*/>|<v>\s*</v>)?"
                    replacement = b"<f>" + formula.encode() + b"</f><v>" + value.encode() + b"</v>"
                    payload, found = re.subn(pattern, lambda _m: replacement, payload)
                    assert found == 1
            dst.writestr(item, payload)
    return out.getvalue()


def test_formula_cells_contribute_cached_results(make_map) -> None:
    data = _with_cached_results(make_map([("=40+2", "=1+1"), ("plain", "text")]), {"40+2": "42", "1+1": "2"})

    rmap = load_replacement_map(data)

    assert [(p.key, p.value) for p in rmap] == [("42", "2"), ("plain", "text")]


def test_formula_without_cached_result_is_dropped(make_map) -> None:
    rmap = load_replacement_map(make_map([("=40+2", "answer"), ("plain", "text")]))

    assert [(p.key, p.value) for p in rmap] == [("plain", "text")]
