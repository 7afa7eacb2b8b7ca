"""Workbook decode/encode boundary backed by openpyxl."""

# Module responsibilities:
# - Turn uploaded bytes into an openpyxl Workbook and back without touching disk.
# - Keep macro-enabled containers macro-enabled on the way out.

from __future__ import annotations

import io
import logging
from pathlib import PurePath

from openpyxl import Workbook, load_workbook

from cellswap.core.errors import DecodeFailure, EncodeFailure

logger = logging.getLogger(__name__)

MACRO_SUFFIXES = {".xlsm", ".xltm"}


def _keeps_vba(name: str) -> bool:
    return PurePath(name).suffix.lower() in MACRO_SUFFIXES


def decode_workbook(data: bytes, name: str, data_only: bool = False) -> Workbook:
    """Load a workbook from raw bytes.

    Args:
        data: Workbook payload (OOXML container).
        name: Display name, used for error messages and container detection.
        data_only: Read the cached result of formula cells instead of the
            formula text. Only suitable for read-only inputs; saving such a
            workbook drops its formulas.

    Returns:
        The decoded workbook; formulas kept as formulas unless ``data_only``.

    Raises:
        DecodeFailure: When the payload is empty or cannot be parsed.
    """

    if not data:
        raise DecodeFailure(f"Workbook '{name}' is empty")
    try:
        wb = load_workbook(io.BytesIO(data), keep_vba=_keeps_vba(name), data_only=data_only)
    except Exception as exc:  # noqa: BLE001 - any parser error means the payload is unusable
        logger.error("Failed to decode workbook %s: %s", name, exc)
        raise DecodeFailure(f"Cannot read workbook '{name}': {exc}") from exc
    logger.debug("Decoded workbook %s with sheets %s", name, wb.sheetnames)
    return wb


def encode_workbook(wb: Workbook, name: str) -> bytes:
    """Serialize a workbook back to bytes in its original container format.

    Raises:
        EncodeFailure: When openpyxl cannot write the workbook.
    """

    buffer = io.BytesIO()
    try:
        wb.save(buffer)
    except Exception as exc:  # noqa: BLE001 - surface writer errors as a single kind
        logger.error("Failed to encode workbook %s: %s", name, exc)
        raise EncodeFailure(f"Cannot write workbook '{name}': {exc}") from exc
    return buffer.getvalue()


__all__ = ["decode_workbook", "encode_workbook"]
