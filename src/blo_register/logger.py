"""
Logging for the BLO Register.

Console records go through Rich at INFO (DEBUG when DEBUG=1). When
LOG_TO_FILE is on, every record is also appended to logs/YYYYMMDD.log.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from .config import get_config

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"

_loggers: dict[str, logging.Logger] = {}


def setup_logger(
    name: str = "blo_register",
    log_dir: Optional[Path] = None,
    debug: Optional[bool] = None,
    log_to_file: Optional[bool] = None,
) -> logging.Logger:
    """
    Attach the console and optional file handlers to a named logger.

    Unset arguments fall back to the loaded Config. A logger that
    already has handlers is returned unchanged.
    """
    config = get_config()
    debug = config.debug if debug is None else debug
    log_dir = log_dir or config.logs_dir
    log_to_file = config.log_to_file if log_to_file is None else log_to_file

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_handler = RichHandler(rich_tracebacks=True, show_path=False)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.addHandler(console_handler)

    if log_to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)
        logger.debug(f"Log file: {log_file}")

    return logger


def get_logger(name: str = "blo_register") -> logging.Logger:
    if name not in _loggers:
        _loggers[name] = setup_logger(name)
    return _loggers[name]


def log_timing(logger: logging.Logger, operation: str, duration_sec: float) -> None:
    """Sub-second timings go to DEBUG, longer ones to INFO."""
    if duration_sec < 1:
        logger.debug(f"{operation}: {duration_sec * 1000:.1f}ms")
    elif duration_sec < 60:
        logger.info(f"{operation}: {duration_sec:.2f}s")
    else:
        minutes, seconds = divmod(duration_sec, 60)
        logger.info(f"{operation}: {int(minutes)}m {seconds:.1f}s")
