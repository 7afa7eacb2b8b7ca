"""Per-workbook processing: decode, walk every sheet, encode."""

from __future__ import annotations

import logging

from .codec import decode_workbook, encode_workbook
from .models import FileResult, ReplaceMode, ReplacementMap, TargetFile
from .walker import walk_sheet

logger = logging.getLogger(__name__)


def process_workbook(
    target: TargetFile,
    mode: ReplaceMode | str,
    replacement_map: ReplacementMap,
) -> FileResult:
    """Apply the replacement map to every sheet of one target workbook.

    Sheets are walked in declared order; sheets without a used range do not
    produce a result. Decode and encode errors propagate untouched so the
    caller can abort the whole run.
    """

    wb = decode_workbook(target.data or b"", target.name)
    result = FileResult(file_name=target.name)

    for ws in wb.worksheets:
        sheet_result = walk_sheet(ws, mode, replacement_map)
        if sheet_result is None:
            continue
        result.sheets.append(sheet_result)
        logger.info(
            "File %s sheet %s: %s replacements",
            target.name,
            sheet_result.sheet_name,
            sheet_result.replacement_count,
        )

    result.modified_workbook_bytes = encode_workbook(wb, target.name)
    logger.info("File %s processed: %s replacements in total", target.name, result.total_replacements)
    return result


__all__ = ["process_workbook"]
