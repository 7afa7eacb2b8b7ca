"""Sheet walker applying the cell matcher across a worksheet's used range."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from openpyxl.cell.cell import Cell
from openpyxl.worksheet.worksheet import Worksheet

from .matcher import match_cell, to_text
from .models import CellValue, ReplaceMode, ReplacementMap, SheetResult

logger = logging.getLogger(__name__)

_KIND_BY_TYPE = {"n": "number", "s": "string"}
_DATA_TYPE_BY_KIND = {"number": "n", "string": "s"}
FORMULA_TYPE = "f"


# Both helpers read openpyxl's private cell store (``Worksheet._cells``).
# ``iter_rows`` would materialise every missing cell of the bounding range.


def has_used_range(ws: Worksheet) -> bool:
    """True when the sheet stores at least one cell."""

    return bool(ws._cells)


def iter_used_cells(ws: Worksheet) -> Iterator[Cell]:
    """Yield stored cells in row-major order (rows, then columns, ascending)."""

    for coordinate in sorted(ws._cells):
        yield ws._cells[coordinate]


def _snapshot(cell: Cell) -> CellValue:
    return CellValue(
        address=cell.coordinate,
        raw_value=cell.value,
        kind=_KIND_BY_TYPE.get(cell.data_type, "other"),
    )


def walk_sheet(
    ws: Worksheet,
    mode: ReplaceMode | str,
    replacement_map: ReplacementMap,
) -> Optional[SheetResult]:
    """Rewrite matching cells of ``ws`` in place.

    Returns:
        The sheet's replacement count, or ``None`` when the sheet has no used
        range (no populated cells).
    """

    if not has_used_range(ws):
        logger.debug("Sheet %s has no used range; skipped", ws.title)
        return None

    mode = ReplaceMode.parse(mode)
    replacements = 0
    for cell in iter_used_cells(ws):
        if cell.value is None or cell.data_type == FORMULA_TYPE:
            continue
        snapshot = _snapshot(cell)
        original = to_text(snapshot.raw_value)
        outcome = match_cell(original, mode, replacement_map)
        replacements += outcome.count
        if outcome.new_value == original:
            continue

        snapshot.raw_value = outcome.new_value
        snapshot.kind = "string"
        cell.value = snapshot.raw_value
        # stays text even if the new value looks like a formula or error code
        cell.data_type = _DATA_TYPE_BY_KIND[snapshot.kind]
        logger.debug(
            "%s!%s: %r -> %r", ws.title, snapshot.address, original, snapshot.raw_value
        )

    return SheetResult(sheet_name=ws.title, replacement_count=replacements)


__all__ = ["has_used_range", "iter_used_cells", "walk_sheet"]
