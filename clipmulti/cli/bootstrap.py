"""Startup wiring for the clipmulti CLI: logging and the data directory."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from clipmulti.config.schema import Config
from clipmulti.core.constants import LOG_FILE_NAME, get_log_dir
from clipmulti.core.secure_io import secure_mkdir

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: Config, verbose: bool = False) -> Path | None:
    """Configure the clipmulti namespace logger.

    Sets up:
    - a stderr handler at WARNING (DEBUG with ``verbose``)
    - a rotating file handler at ``<data_dir>/logs/clipmulti.log``
      (5MB per file, 3 backups) when ``config.logging.file_logging`` is set

    Calling it again replaces the handlers instead of adding duplicates.

    Returns:
        Path to the log file, or None when file logging is disabled.

    Raises:
        OSError: The data or log directory cannot be created. This is the
            one startup failure the CLI treats as fatal.
    """
    data_dir = config.data_path
    if not data_dir.exists():
        secure_mkdir(data_dir)

    file_level = getattr(logging, config.logging.level)
    console_level = logging.DEBUG if verbose else logging.WARNING

    clip_logger = logging.getLogger("clipmulti")
    for handler in list(clip_logger.handlers):
        clip_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    clip_logger.addHandler(console_handler)

    log_file: Path | None = None
    if config.logging.file_logging:
        log_dir = get_log_dir(data_dir)
        secure_mkdir(log_dir)
        log_file = log_dir / LOG_FILE_NAME
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        clip_logger.addHandler(file_handler)

    clip_logger.setLevel(min(file_level, console_level) if log_file else console_level)
    clip_logger.propagate = False
    return log_file


def reset_logging() -> None:
    """Close and remove clipmulti handlers (releases the log file)."""
    clip_logger = logging.getLogger("clipmulti")
    for handler in list(clip_logger.handlers):
        clip_logger.removeHandler(handler)
        handler.close()
    clip_logger.propagate = True
