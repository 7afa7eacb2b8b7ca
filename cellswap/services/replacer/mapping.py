"""Replacement map builder.

Reads the first sheet of the replacement workbook: row 1 is a header, and
each following row supplies a ``key`` (first used column) and a
``value`` (the column right after it).
"""

from __future__ import annotations

import logging
from typing import List

from openpyxl import Workbook

from .codec import decode_workbook
from .matcher import to_text
from .models import ReplacementMap, ReplacementPair
from .walker import has_used_range

logger = logging.getLogger(__name__)

# the header is always sheet row 1, wherever the used range starts
FIRST_DATA_ROW = 2


def build_replacement_map(wb: Workbook) -> ReplacementMap:
    """Build the ordered replacement map from a decoded workbook."""

    if not wb.worksheets:
        return ReplacementMap()
    ws = wb.worksheets[0]
    if not has_used_range(ws):
        return ReplacementMap()

    key_col = ws.min_column
    pairs: List[ReplacementPair] = []
    skipped = 0
    for key, value in ws.iter_rows(
        min_row=max(ws.min_row, FIRST_DATA_ROW),
        max_row=ws.max_row,
        min_col=key_col,
        max_col=key_col + 1,
        values_only=True,
    ):
        if key is None or value is None:
            skipped += 1
            continue
        key_text = to_text(key)
        if not key_text:
            skipped += 1
            continue
        pairs.append(ReplacementPair(key=key_text, value=to_text(value)))

    logger.info(
        "Replacement map built from sheet %s: %s pairs (%s rows skipped)",
        ws.title,
        len(pairs),
        skipped,
    )
    return ReplacementMap(tuple(pairs))


def load_replacement_map(data: bytes, name: str = "replacement.xlsx") -> ReplacementMap:
    """Decode a replacement workbook payload and build its map.

    Raises:
        DecodeFailure: When the payload is not a readable workbook.
    """

    # formula cells contribute their cached result, not the formula text
    return build_replacement_map(decode_workbook(data, name, data_only=True))


__all__ = ["build_replacement_map", "load_replacement_map"]
