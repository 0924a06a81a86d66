"""
Logging configuration for spotify-web.

The library itself only ever calls get_logger(__name__) and logs through
the standard logging hierarchy rooted at 'spotify_web'. Applications that
want output call setup_logging() once at startup:

    - Console: colored level names, written through tqdm.write() so
      messages do not break progress bars the application may draw
    - log_full_<timestamp>.log: every record at DEBUG and above
    - log_errors_<timestamp>.log: only ERROR and CRITICAL records

File handlers are only created when a log directory is given.

Usage:
    from spotify_web.core.logger import setup_logging, get_logger

    setup_logging("DEBUG", log_dir=Path("logs"))
    logger = get_logger(__name__)
    logger.debug("GET %s", url)
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


LOGGER_NAMESPACE = "spotify_web"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at DEBUG
NOISY_LOGGERS = ("urllib3", "spotipy.client", "spotipy.oauth2")


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name for console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to the console without breaking tqdm progress bars.

    tqdm progress bars write to stderr and use carriage returns to update
    in-place. This handler uses tqdm.write(), which prints above any active
    bar instead of through it.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Used by the error log file handler to exclude DEBUG, INFO, and WARNING.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(
    level: str | int = "INFO",
    log_dir: Path | None = None,
    stream: TextIO | None = None
) -> logging.Logger:
    """
    Configure the 'spotify_web' logger hierarchy.

    Safe to call more than once: handlers installed by a previous call
    are removed first.

    Args:
        level: Console level, as a name ("DEBUG") or a logging constant.
        log_dir: Directory for the full and error-only log files.
                 Created if missing. None disables file output.
        stream: Console stream, defaults to sys.stderr.

    Returns:
        The configured 'spotify_web' logger.

    Raises:
        ValueError: If level is an unknown level name.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = TqdmLoggingHandler(stream or sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredConsoleFormatter())
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        file_formatter = logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT)

        full_handler = logging.FileHandler(
            log_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8"
        )
        full_handler.setLevel(logging.DEBUG)
        full_handler.setFormatter(file_formatter)
        logger.addHandler(full_handler)

        error_handler = logging.FileHandler(
            log_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8"
        )
        error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
        error_handler.setFormatter(file_formatter)
        error_handler.addFilter(ErrorOnlyFilter())
        logger.addHandler(error_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'spotify_web.spotify.client'.

    Returns:
        logging.Logger: A logger in the 'spotify_web' hierarchy.

    Note:
        Until setup_logging() is called the library's loggers have no
        handlers of their own and records propagate to the root logger.
    """
    return logging.getLogger(name)
