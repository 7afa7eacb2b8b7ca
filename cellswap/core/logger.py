from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from .settings import Settings, get_settings


ROOT_LOGGER_NAME = "cellswap"
_CONFIGURED = False


def configure_logging(
    log_dir: Path | None = None,
    level: str | int | None = None,
    settings: Settings | None = None,
) -> logging.Logger:
    """Configure the ``cellswap`` logger once with rotating file + console handlers.

    Called by entry points (CLI callback, app factory) only; library modules
    just use ``logging.getLogger(__name__)``. Creates the directory if needed.
    Later calls only adjust the level, and only when one is passed.

    Args:
        log_dir: Directory for ``cellswap.log``; defaults to ``settings.log_dir``.
        level: Level name or number; defaults to ``settings.log_level`` on the
            first call.
        settings: Source of the defaults; the process-wide settings when omitted.
    """
    global _CONFIGURED
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    if settings is None and not _CONFIGURED:
        settings = get_settings()

    if level is None and not _CONFIGURED:
        level = settings.log_level
    if isinstance(level, str):
        level_value = getattr(logging, level.upper(), None)
        if not isinstance(level_value, int):
            raise ValueError(f"Unknown log level: {level}")
        level = level_value
    if level is not None:
        logger.setLevel(level)

    if _CONFIGURED:
        return logger

    base = Path(log_dir) if log_dir is not None else settings.log_dir
    base.mkdir(parents=True, exist_ok=True)
    log_path = base / "cellswap.log"

    logger.propagate = False

    fmt = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_path, maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(fmt)
    logger.addHandler(file_handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(fmt)
    logger.addHandler(console)

    _CONFIGURED = True
    return logger


def reset_logging() -> None:
    """Detach handlers so the next call reconfigures (used by tests)."""

    global _CONFIGURED
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _CONFIGURED = False
