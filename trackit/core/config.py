"""
Configuration helpers for trackit: directory accessors and logging setup.

User preferences are part of the persisted state (see ``Settings``), not
configuration files.
"""

import logging
from pathlib import Path
from typing import Optional

from .paths import get_path_manager

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = "trackit.log"


def get_data_dir() -> Path:
    """Get the data directory for the key-value store."""
    manager = get_path_manager()
    manager.ensure_directories()
    return manager.data_dir


def get_backup_dir() -> Path:
    """Get the directory exports are written to."""
    manager = get_path_manager()
    manager.ensure_directories()
    return manager.backup_dir


def get_log_dir() -> Path:
    """Get the log directory."""
    manager = get_path_manager()
    manager.ensure_directories()
    return manager.log_dir


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``trackit`` logger.

    Args:
        verbose: Log at DEBUG instead of WARNING
        log_file: Optional file to append to. Pass ``"default"`` to use
            trackit.log in the log directory.

    Returns:
        The package logger
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)

    logger = logging.getLogger("trackit")
    logger.setLevel(level)

    if log_file:
        path = get_log_dir() / LOG_FILE if log_file == "default" else Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        already_attached = any(
            isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == path.resolve()
            for handler in logger.handlers
        )
        if not already_attached:
            handler = logging.FileHandler(path, encoding="utf-8")
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(handler)

    return logger
