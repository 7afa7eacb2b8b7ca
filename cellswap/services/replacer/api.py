"""Public API for the replacer service."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from cellswap.core.errors import MissingInput

from .bundle import ARCHIVE_NAME, build_archive
from .mapping import load_replacement_map
from .models import FileResult, ReplaceMode, TargetFile
from .processor import process_workbook
from .report import build_report

LOGGER = logging.getLogger(__name__)

Targets = Union[TargetFile, Iterable[TargetFile], None]


class ReplaceResult(BaseModel):
    """Aggregated outcome returned to callers."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    archive: bytes
    report: str
    files: List[FileResult]
    archive_name: str = ARCHIVE_NAME

    @property
    def total_replacements(self) -> int:
        return sum(f.total_replacements for f in self.files)


def _normalize_targets(targets: Targets) -> List[TargetFile]:
    if targets is None:
        return []
    if isinstance(targets, TargetFile):
        return [targets]
    return [t for t in targets if t is not None]


def run_replacement(
    targets: Targets,
    replacement: Optional[TargetFile],
    mode: ReplaceMode | str | None = None,
) -> ReplaceResult:
    """Rewrite every target workbook with the replacement map and bundle the results.

    Files are processed one at a time in submission order. Any failure aborts
    the run; no partial archive is produced.

    Raises:
        MissingInput: When no target or no replacement payload is given.
        DecodeFailure: When any workbook cannot be read.
        EncodeFailure: When a rewritten workbook cannot be written.
        BundleFailure: When the archive cannot be assembled.
    """

    files = _normalize_targets(targets)
    if not files or replacement is None:
        raise MissingInput("Missing files")

    replace_mode = ReplaceMode.parse(mode)
    LOGGER.info(
        "Starting replacement: %s target(s), map=%s, mode=%s",
        len(files),
        replacement.name,
        replace_mode.value,
    )

    replacement_map = load_replacement_map(replacement.data or b"", replacement.name)
    results = [process_workbook(target, replace_mode, replacement_map) for target in files]

    report = build_report(results)
    archive = build_archive(results, report)
    result = ReplaceResult(archive=archive, report=report, files=results)
    LOGGER.info(
        "Replacement finished: %s file(s), %s replacements",
        len(results),
        result.total_replacements,
    )
    return result


def _read_target(path: Path) -> TargetFile:
    if not path.is_file():
        raise MissingInput(f"File not found: {path}")
    return TargetFile(name=path.name, data=path.read_bytes())


def replace_files(
    target_paths: Iterable[str | Path],
    replacement_path: str | Path,
    mode: ReplaceMode | str | None = None,
    output_path: str | Path | None = None,
) -> tuple[ReplaceResult, Path]:
    """Filesystem wrapper around :func:`run_replacement` that writes the archive."""

    targets = [_read_target(Path(p)) for p in target_paths]
    replacement = _read_target(Path(replacement_path))
    result = run_replacement(targets, replacement, mode)

    out = Path(output_path) if output_path else Path.cwd() / result.archive_name
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(result.archive)
    LOGGER.info("Archive written to %s", out)
    return result, out


__all__ = ["ReplaceResult", "replace_files", "run_replacement"]
