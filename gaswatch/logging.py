"""Logging setup for Gas Watch.

Handlers are attached to the ``gaswatch`` package logger only, so a host
application embedding the tracker keeps control of its own root logger.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, Optional, TextIO
from .config import Config

PACKAGE_LOGGER = "gaswatch"
MAIN_LOG_FILENAME = "gaswatch.log"
ERROR_LOG_FILENAME = "gaswatch-error.log"

FILE_FORMAT = logging.Formatter(
    '%(asctime)s [%(levelname)-8s] [%(name)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
CONSOLE_FORMAT = logging.Formatter('[%(levelname)-8s] [%(name)s] %(message)s')

# Attribute set on every handler installed here, so setup can be re-run
_OWNED = "_gaswatch_owned"


def _level(name: str) -> int:
    return getattr(logging, str(name).upper(), logging.INFO)


def _main_file_handler(path: Path, rotation: Dict[str, Any]) -> logging.Handler:
    """Time-based rotation when ``when`` is set, size-based otherwise."""
    if rotation.get("when"):
        return logging.handlers.TimedRotatingFileHandler(
            path,
            when=rotation["when"],
            backupCount=rotation["backup_count"],
            encoding="utf-8",
        )
    return logging.handlers.RotatingFileHandler(
        path,
        maxBytes=rotation["max_bytes"],
        backupCount=rotation["backup_count"],
        encoding="utf-8",
    )


def _remove_owned_handlers(logger: logging.Logger) -> None:
    for handler in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(handler)
        handler.close()


def setup_logging(config: Config, console_stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the ``gaswatch`` logger from configuration.

    Installs a rotating main log, an error-only log and a console handler.
    Calling it again replaces the handlers from the previous call.

    Args:
        config: Configuration instance with logging settings
        console_stream: Stream for console output (default: stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_owned_handlers(logger)

    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    rotation = config.log_rotation
    file_level = _level(config.log_level)
    console_level = _level(config.console_level)

    error_handler = logging.handlers.RotatingFileHandler(
        log_dir / ERROR_LOG_FILENAME,
        maxBytes=rotation["max_bytes"],
        backupCount=rotation["backup_count"],
        encoding="utf-8",
    )
    handlers = [
        (_main_file_handler(log_dir / MAIN_LOG_FILENAME, rotation), file_level, FILE_FORMAT),
        (error_handler, logging.ERROR, FILE_FORMAT),
        (logging.StreamHandler(console_stream), console_level, CONSOLE_FORMAT),
    ]
    for handler, level, formatter in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _OWNED, True)
        logger.addHandler(handler)

    logger.setLevel(min(file_level, console_level))
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific component.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
