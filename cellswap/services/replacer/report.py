"""Reporting utilities for the replacer."""

from __future__ import annotations

from typing import Iterable, List
from urllib.parse import quote

from .models import FileResult, SheetResult

# Characters left unescaped by JavaScript's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def format_report_line(file_name: str, sheet: SheetResult) -> str:
    return f"File: {file_name} | Sheet: {sheet.sheet_name} | Replaced: {sheet.replacement_count}"


def report_lines(results: Iterable[FileResult]) -> List[str]:
    """One line per sheet, in file submission order then sheet order."""

    return [format_report_line(result.file_name, sheet) for result in results for sheet in result.sheets]


def build_report(results: Iterable[FileResult]) -> str:
    return "\n".join(report_lines(results))


def encode_report_header(report_text: str) -> str:
    """Percent-encode the report so it fits in a single HTTP header value."""

    return quote(report_text, safe=_URI_COMPONENT_SAFE)


__all__ = ["build_report", "encode_report_header", "format_report_line", "report_lines"]
