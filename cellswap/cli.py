"""Typer based command line entry points for CellSwap."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from cellswap.core.errors import CellSwapError
from cellswap.core.logger import configure_logging
from cellswap.services.replacer import ReplaceMode, replace_files

ALLOWED_MODES = {"full", "partial"}

logger = logging.getLogger(__name__)

app = typer.Typer(help="Bulk find-and-replace across Excel workbooks.")


def _validate_mode(value: str) -> str:
    value = value.lower()
    if value not in ALLOWED_MODES:
        raise typer.BadParameter("mode must be one of full, partial")
    return value


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING). Defaults to CELLSWAP_LOG_LEVEL or INFO.",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    try:
        configure_logging(level=log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("replace")
def replace(
    targets: List[Path] = typer.Argument(..., help="Workbooks whose cells are rewritten."),
    replacement: Path = typer.Option(
        ..., "--map", "-m", help="Workbook whose first sheet holds key/value pairs (row 1 is a header)."
    ),
    mode: str = typer.Option(
        "partial",
        "--mode",
        callback=_validate_mode,
        help="'full' replaces whole-cell matches only; 'partial' replaces substrings.",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Archive path (default: ./processed_files.zip)."
    ),
) -> None:
    """Rewrite every matching cell and bundle the results with a report."""

    try:
        result, out = replace_files(targets, replacement, ReplaceMode.parse(mode), output)
    except CellSwapError as exc:
        logger.error("replace failed: %s", exc, exc_info=True)
        typer.secho(f"{exc.kind}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(result.report)
    typer.secho(
        f"{result.total_replacements} replacement(s) across {len(result.files)} file(s) -> {out}",
        fg=typer.colors.GREEN,
    )


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address."),
    port: int = typer.Option(8000, "--port", help="Bind port."),
) -> None:
    """Run the HTTP service."""

    import uvicorn

    from cellswap.server.main import create_app

    uvicorn.run(create_app(), host=host, port=port, workers=1)


if __name__ == "__main__":  # pragma: no cover
    app()
