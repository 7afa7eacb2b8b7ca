"""Data models used by the replacer service."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Sequence, Tuple


ARCHIVE_PREFIX = "replaced_"


class ReplaceMode(str, Enum):
    """Matching mode applied to every cell."""

    FULL = "full"
    PARTIAL = "partial"

    @classmethod
    def parse(cls, value: object) -> "ReplaceMode":
        """Only the literal ``"full"`` selects exact matching."""

        if isinstance(value, ReplaceMode):
            return value
        if value == cls.FULL.value:
            return cls.FULL
        return cls.PARTIAL


@dataclass(frozen=True, slots=True)
class ReplacementPair:
    """One ``key -> value`` rule read from the replacement workbook."""

    key: str
    value: str

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("replacement key must be non-empty")


@dataclass(frozen=True, slots=True)
class ReplacementMap:
    """Ordered, read-only sequence of replacement pairs.

    Duplicate keys are kept; earlier pairs are tried first.
    """

    pairs: Tuple[ReplacementPair, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Sequence[Tuple[str, str]]) -> "ReplacementMap":
        return cls(tuple(ReplacementPair(str(k), str(v)) for k, v in pairs))

    def __iter__(self) -> Iterator[ReplacementPair]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)


@dataclass(slots=True)
class CellValue:
    """Snapshot of a populated cell as seen by the sheet walker."""

    address: str
    raw_value: object
    kind: str  # "number" | "string" | "other"


@dataclass(frozen=True, slots=True)
class SheetResult:
    """Replacement count for a single sheet."""

    sheet_name: str
    replacement_count: int


@dataclass(slots=True)
class FileResult:
    """Outcome of processing one target workbook."""

    file_name: str
    sheets: list[SheetResult] = field(default_factory=list)
    modified_workbook_bytes: bytes = b""

    @property
    def total_replacements(self) -> int:
        return sum(sheet.replacement_count for sheet in self.sheets)

    @property
    def archive_name(self) -> str:
        return f"{ARCHIVE_PREFIX}{self.file_name}"


@dataclass(frozen=True, slots=True)
class TargetFile:
    """A named workbook payload submitted for processing."""

    name: str
    data: Optional[bytes]


__all__ = [
    "ARCHIVE_PREFIX",
    "CellValue",
    "FileResult",
    "ReplaceMode",
    "ReplacementMap",
    "ReplacementPair",
    "SheetResult",
    "TargetFile",
]
