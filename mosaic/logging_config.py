"""
Logging for Mosaic.

Every module logs through a child of the ``mosaic`` logger. After
setup_logging() those records go to a rotating ``<log_dir>/debug.log`` at
DEBUG and to stderr at WARNING (or the level passed in). Tile placement can
log once per collapse, so the one-line helpers at the bottom keep each record
short and greppable:

    ITER 00012 | COLLAPSE | cell=37 | tile=road_corner@90
    CONTRADICTION | cell=38 | from=37 | no tile fits road on its left edge
    RUN | growing | DONE | 4ms | iterations=100 resolved=97/100 ...

Usage:
    from mosaic.logging_config import setup_logging, get_logger
    setup_logging("logs")
    logger = get_logger(__name__)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime


ROOT_LOGGER_NAME = "mosaic"
LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # bytes per file before rotating
BACKUP_COUNT = 5

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-35s | %(funcName)-25s | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

_logging_initialized = False


def _file_handler(log_path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
    return handler


def setup_logging(
    log_dir: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Route the mosaic loggers to a log file and to stderr.

    Safe to call again, e.g. from tests or with a new log_dir: the handlers
    of the previous call are closed and replaced.

    Args:
        log_dir: Directory for debug.log (created if missing)
        log_level: Minimum level written to the file
        console_level: Minimum level written to stderr

    Returns:
        Path to the log file
    """
    global _logging_initialized

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    mosaic_logger = logging.getLogger(ROOT_LOGGER_NAME)
    mosaic_logger.setLevel(logging.DEBUG)
    for handler in mosaic_logger.handlers:
        handler.close()
    mosaic_logger.handlers.clear()

    mosaic_logger.addHandler(_file_handler(log_path, log_level))
    mosaic_logger.addHandler(_console_handler(console_level))

    if not _logging_initialized:
        mosaic_logger.info(f"Logging to {log_path.absolute()} since {datetime.now().isoformat()}")
        _logging_initialized = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, always under the mosaic namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_config(
    logger: logging.Logger,
    operation: str,
    path: Path | str | None = None,
    success: bool = True,
    details: str | None = None,
) -> None:
    """Log config and tileset loading."""
    status = "OK" if success else "FAILED"
    path_str = f" | {path}" if path else ""
    details_str = f" | {details}" if details else ""
    logger.debug(f"CONFIG | {operation}{path_str} | {status}{details_str}")


def log_collapse(
    logger: logging.Logger,
    iteration: int,
    cell_index: int,
    tile: str,
    details: str | None = None,
) -> None:
    """Log a cell collapsing to a tile."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"ITER {iteration:05d} | COLLAPSE | cell={cell_index} | tile={tile}{details_str}")


def log_contradiction(
    logger: logging.Logger,
    cell_index: int,
    source_index: int,
    details: str | None = None,
) -> None:
    """Log a cell losing its last candidate."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"CONTRADICTION | cell={cell_index} | from={source_index}{details_str}")


def log_run(
    logger: logging.Logger,
    strategy: str,
    status: str,
    duration_ms: int | None = None,
    details: str | None = None,
) -> None:
    """Log a placement run starting or finishing."""
    duration_str = f" | {duration_ms}ms" if duration_ms else ""
    details_str = f" | {details}" if details else ""
    logger.info(f"RUN | {strategy} | {status}{duration_str}{details_str}")
