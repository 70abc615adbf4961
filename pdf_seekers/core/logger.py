"""
Centralized logging setup for PDF Seekers.

Provides console (stderr) and rotating file output with configuration from config.json.
One log file is written per day under the logs directory; each file rotates
by size and old segments beyond the configured count are deleted.
Uses a guard to prevent multiple initialization.
"""

import logging
import sys
from datetime import date
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .exceptions import ConfigurationError


TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "off": logging.CRITICAL + 10,
}

_logger_initialized = False


def resolve_level(log_level: str = None) -> int:
    """
    Map a verbosity name to a logging level.

    Args:
        log_level: One of trace, debug, info, warn, error, off
                   (case-insensitive). None means info.

    Returns:
        Numeric logging level.

    Raises:
        ConfigurationError: If the name is not a known verbosity level.
    """
    if log_level is None:
        return logging.INFO

    try:
        return LOG_LEVELS[str(log_level).strip().lower()]
    except KeyError:
        raise ConfigurationError(
            f"Invalid log verbosity level: {log_level}",
            {"allowed": sorted(LOG_LEVELS)}
        )


def log_file_for(logs_directory: Path, day: date = None) -> Path:
    """Return the dated log file path for the given day (default today)."""
    day = day or date.today()
    return Path(logs_directory) / f"pdf_seekers_{day.isoformat()}.log"


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "%(asctime)s | %(levelname)-5.5s | %(name)s - %(message)s",
    logs_directory: Path = None,
    max_file_size_mb: int = 1024,
    backup_count: int = 5
) -> None:
    """
    Initialize the root logger with console and optional file handlers.

    Args:
        log_level: Verbosity name (trace, debug, info, warn, error, off).
        log_format: Format string for log messages.
        logs_directory: Directory for log files. If None, file logging disabled.
        max_file_size_mb: Maximum size of each log file in MB.
        backup_count: Number of rotated segments to keep.
    """
    global _logger_initialized

    root_logger = logging.getLogger()
    formatter = logging.Formatter(log_format)

    if not _logger_initialized:
        root_logger.setLevel(resolve_level(log_level))

        # stdout carries command output such as --json
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        _logger_initialized = True

    if logs_directory:
        logs_directory = Path(logs_directory)
        logs_directory.mkdir(parents=True, exist_ok=True)

        log_file = log_file_for(logs_directory).resolve()

        # one file handler per log file, even across repeated setup calls
        for handler in root_logger.handlers:
            if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == log_file:
                return

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_level(log_level: str) -> None:
    """Change the root verbosity after logging has been initialized."""
    logging.getLogger().setLevel(resolve_level(log_level))


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Automatically initializes console logging from config on first call.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        Configured Logger instance.
    """
    if not _logger_initialized:
        try:
            from .config_loader import get_config
            config = get_config()
            setup_logging(
                log_level=config.logging.level,
                log_format=config.logging.format
            )
        except ConfigurationError:
            setup_logging()

    return logging.getLogger(name)


if __name__ == "__main__":
    setup_logging(log_level="trace")

    logger = get_logger(__name__)
    logger.log(TRACE, "Trace message")
    logger.debug("Debug message")
    logger.info("Info message")
    logger.warning("Warning message")
    logger.error("Error message")
