"""
Logging Utilities for Permset
==============================
Rich console logging on stderr, plus a rotating log file when enabled in
the settings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


# Default log directory
DEFAULT_LOG_DIR = Path.home() / ".permset" / "logs"

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
VERBOSE_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

# Rotation of the log file
MAX_LOG_BYTES = 1024 * 1024
LOG_BACKUPS = 3


@dataclass
class LogConfig:
    """Logging configuration built from Settings"""
    level: int = logging.WARNING
    log_dir: Path = field(default_factory=lambda: DEFAULT_LOG_DIR)
    enable_file: bool = False
    debug_mode: bool = False


def _file_handler(name: str, config: LogConfig) -> RotatingFileHandler:
    config.log_dir.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        config.log_dir / f"{name}.log",
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding='utf-8'
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(
        VERBOSE_FILE_FORMAT if config.debug_mode else FILE_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    return handler


def setup_logging(
    name: str = "permset",
    config: Optional[LogConfig] = None,
    verbose: bool = False
) -> logging.Logger:
    """
    Configure the permset logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        name: Logger name
        config: Logging configuration
        verbose: Force debug level and show time and source in the console

    Returns:
        Configured logger
    """
    config = config or LogConfig()

    if verbose:
        config.level = logging.DEBUG
        config.debug_mode = True

    logger = logging.getLogger(name)
    logger.setLevel(config.level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=config.debug_mode,
        show_path=config.debug_mode,
        markup=False
    )
    console_handler.setLevel(config.level)
    logger.addHandler(console_handler)

    if config.enable_file:
        try:
            logger.addHandler(_file_handler(name, config))
        except OSError as e:
            logger.warning(f"Logging to console only, cannot write to {config.log_dir}: {e}")

    return logger


__all__ = ['setup_logging', 'LogConfig', 'DEFAULT_LOG_DIR']
