from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional
from colorlog import ColoredFormatter

_LEVEL_ENV = "CUTOUT_LOG_LEVEL"
_CONSOLE_FORMAT = "%(log_color)s%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_COLORS = {
    "DEBUG": "cyan",
    "INFO": "white",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _default_level() -> int:
    name = os.environ.get(_LEVEL_ENV, "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S", log_colors=_COLORS))
    return handler


def _file_handler(log_dir: Path, level: int) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / "run.log", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def get_logger(name: str,
               log_dir: Optional[Path] = None,
               level: Optional[int] = None) -> logging.Logger:
    """
    Logger under the `cutout.` namespace with a colored console handler.
    A plain run.log is attached the first time a log_dir is given.
    Level defaults to $CUTOUT_LOG_LEVEL (INFO when unset).
    """
    level = _default_level() if level is None else level
    logger = logging.getLogger(f"cutout.{name}")
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        logger.addHandler(_console_handler(level))
    if log_dir is not None and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        logger.addHandler(_file_handler(log_dir, level))
    return logger
