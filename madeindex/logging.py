"""Logger hierarchy shared by the CLI, the index server and the HTTP service."""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "madeindex"
CONSOLE_FORMAT = "[madeindex] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_MARKER = "_madeindex_handler"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``madeindex.<name>``, or the package logger when *name* is empty."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def _install(logger: logging.Logger, handler: logging.Handler, fmt: str, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Point the package logger at stderr and, when given, an append-only log file.

    Handlers installed by an earlier call are replaced; handlers attached by an
    embedding application are left alone.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False

    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_MARKER, False)]:
        logger.removeHandler(handler)
        handler.close()

    _install(logger, logging.StreamHandler(), CONSOLE_FORMAT, level)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _install(logger, logging.FileHandler(log_file, encoding="utf-8"), FILE_FORMAT, level)

    logger.debug("Logging configured (verbose=%s, log_file=%s)", verbose, log_file)
    return logger


__all__ = ["CONSOLE_FORMAT", "FILE_FORMAT", "ROOT_LOGGER", "configure_logging", "get_logger"]
