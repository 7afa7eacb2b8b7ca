from __future__ import annotations

import io
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep test logs out of the user's home directory.
os.environ.setdefault("CELLSWAP_LOG_DIR", tempfile.mkdtemp(prefix="cellswap-logs-"))

from openpyxl import Workbook

from cellswap.core.settings import reset_settings

SheetRows = Sequence[Sequence[Any]]


def workbook_bytes(sheets: Dict[str, SheetRows]) -> bytes:
    """Serialize ``{sheet_name: rows}`` into xlsx bytes; ``None`` cells stay empty."""

    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets.items():
        ws = wb.create_sheet(title)
        for r_idx, row in enumerate(rows, start=1):
            for c_idx, value in enumerate(row, start=1):
                if value is not None:
                    ws.cell(row=r_idx, column=c_idx, value=value)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def map_bytes(pairs: List[tuple[Any, Any]], header: tuple[str, str] = ("key", "value")) -> bytes:
    return workbook_bytes({"Map": [list(header), *[list(p) for p in pairs]]})


@pytest.fixture()
def make_workbook() -> Callable[[Dict[str, SheetRows]], bytes]:
    return workbook_bytes


@pytest.fixture()
def make_map() -> Callable[..., bytes]:
    return map_bytes


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()
