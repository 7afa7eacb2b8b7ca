"""Zip bundling of rewritten workbooks and the change report."""

from __future__ import annotations

import io
import logging
import zipfile
from typing import Dict, Sequence

from cellswap.core.errors import BundleFailure

from .models import FileResult

logger = logging.getLogger(__name__)

ARCHIVE_NAME = "processed_files.zip"
REPORT_ENTRY = "report.txt"


def build_archive(results: Sequence[FileResult], report_text: str) -> bytes:
    """Pack every rewritten workbook plus ``report.txt`` into a zip.

    Entries keep submission order; the report is always last. When two
    results share an archive name the later workbook overwrites the earlier
    one in place, so each name appears once.

    Raises:
        BundleFailure: When the archive cannot be written.
    """

    entries: Dict[str, bytes] = {}
    for result in results:
        if result.archive_name in entries:
            logger.warning("Duplicate archive entry %s; keeping the last workbook", result.archive_name)
        entries[result.archive_name] = result.modified_workbook_bytes

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for entry_name, data in entries.items():
                zf.writestr(entry_name, data)
            zf.writestr(REPORT_ENTRY, report_text.encode("utf-8"))
    except (OSError, ValueError, zipfile.LargeZipFile) as exc:
        logger.error("Failed to build archive: %s", exc)
        raise BundleFailure(f"Cannot build archive: {exc}") from exc

    payload = buffer.getvalue()
    logger.info("Archive built: %s workbook(s), %s bytes", len(entries), len(payload))
    return payload


__all__ = ["ARCHIVE_NAME", "REPORT_ENTRY", "build_archive"]
