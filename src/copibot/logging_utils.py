"""Custom logging utilities for the CopiBot application."""
# src/copibot/logging_utils.py

import logging
import sys
import time
from logging import FileHandler
from pathlib import Path


class _UtcMicrosecondFormatter(logging.Formatter):
    """Formats timestamps in UTC with 6-digit microseconds and a 'Z' suffix."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the time with 6-digit microseconds and a 'Z' for UTC."""
        ct = self.converter(record.created)
        s = time.strftime(datefmt, ct) if datefmt else time.strftime(self.default_time_format, ct)
        microseconds = int((record.created - int(record.created)) * 1_000_000)
        return f"{s}.{microseconds:06d}Z"


class ConsoleFormatter(_UtcMicrosecondFormatter):
    """A compact formatter for console diagnostics."""

    def __init__(self, version: str) -> None:
        """
        Initialize the formatter with the application version.

        Args:
            version: The CopiBot application version.

        """
        super().__init__(
            fmt=f"%(asctime)s | CopiBot - {version} | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        self.converter = time.gmtime


class FileFormatter(_UtcMicrosecondFormatter):
    """A detailed formatter for log files, aimed at developers."""

    def __init__(self) -> None:
        """Initialize the detailed file formatter."""
        super().__init__(
            fmt="%(asctime)s | %(name)-20s | %(funcName)-20s:%(lineno)-4d | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        self.converter = time.gmtime


def setup_logging(version: str, *, debug: bool = False, log_file: Path | None = None) -> None:
    """
    Configure the root logger for the CopiBot application.

    Stdout is reserved for the check result, so console logs go to stderr:
    1.  Console: WARNING and above by default, DEBUG if debug=True.
    2.  File (DEBUG): Detailed logs written to `log_file` when one is given.

    Args:
        version: The application version, included in console logs.
        debug: If True, sets the console level to DEBUG.
        log_file: Optional path of a detailed log file.

    """
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    console_level = logging.DEBUG if debug else logging.WARNING
    root_logger.setLevel(logging.DEBUG if (debug or log_file) else logging.WARNING)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ConsoleFormatter(version))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = FileHandler(log_file, mode="w", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(FileFormatter())
            root_logger.addHandler(file_handler)
            logging.getLogger(__name__).debug("Detailed logs will be written to %s", log_file)
        except OSError:
            # Console logging still works without the file.
            logging.getLogger(__name__).exception("Failed to create log file. Continuing with console logging only.")
