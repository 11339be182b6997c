"""Centralized logging configuration for filepool.

The CLI calls configure_logging(), which reads the ``logging.*`` settings and
hands them to setup_logging(). Diagnostics go to stderr so command output on
stdout stays clean; a log file can be added through ``logging.file``.
"""

import logging
import sys
from typing import List, Optional

from filepool.infrastructure.config.settings import get_config

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None
) -> None:
    """Replaces the root logger's handlers with stderr and optional file output.

    Args:
        log_level: Minimum level for the root logger and every handler.
        log_format: Format string shared by all handlers.
        log_file: Path of a file that receives the same records, if any.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        except OSError as e:
            file_error = e

    root_logger.setLevel(log_level)
    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    if file_error is not None:
        logger.error(f"Failed to set up file logging to {log_file}: {file_error}")

    logger.debug(
        f"Logging configured. Level={logging.getLevelName(log_level)}, file={log_file}"
    )


def level_from_name(name: Optional[str], default: int = DEFAULT_LOG_LEVEL) -> int:
    """Maps a level name such as 'debug' to its logging constant."""
    if not name:
        return default
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


def configure_logging(verbose: bool = False) -> None:
    """Sets up logging from the ``logging.level``, ``logging.format`` and ``logging.file`` settings.

    Args:
        verbose: Forces DEBUG regardless of ``logging.level``.
    """
    level = logging.DEBUG if verbose else level_from_name(get_config("logging.level"))
    setup_logging(
        log_level=level,
        log_format=get_config("logging.format", DEFAULT_LOG_FORMAT),
        log_file=get_config("logging.file"),
    )
