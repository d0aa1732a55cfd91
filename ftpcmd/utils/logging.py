"""Logging configuration for ftpcmd.

Provides logging setup with secret redaction so that passwords and
credentials embedded in FTP URLs never reach log output. Library modules
only create loggers under the "ftpcmd" hierarchy; handlers are attached
here, by the application.
"""

import logging
import re
import sys
from pathlib import Path
from typing import List, Optional


# Secret patterns to redact from logs
SECRET_PATTERNS = [
    (re.compile(r'(password["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    (re.compile(r'(passwd["\s:=]+)[^\s,}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    (re.compile(r'(PASS\s+)\S+'), r'\1[REDACTED]'),
    # FTP URLs with credentials
    (re.compile(r'(ftps?://)[^:/@\s]+:[^@\s]+@'), r'\1[REDACTED]@'),
]


class SecretRedactingFormatter(logging.Formatter):
    """Formatter that redacts secrets from log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, redacting any secrets."""
        message = super().format(record)
        for pattern, replacement in SECRET_PATTERNS:
            message = pattern.sub(replacement, message)
        return message


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _detach_handlers(logger: logging.Logger) -> None:
    """Remove and close every handler on the logger, releasing open files."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure the "ftpcmd" logger with secret redaction.

    Calling this again replaces the previous configuration; handlers from the
    earlier call are closed.

    Args:
        level: Logging level (default INFO)
        log_file: Optional file path for log output; parent dirs are created
        console: Whether to write to stdout (default True)

    Returns:
        The configured "ftpcmd" logger
    """
    logger = logging.getLogger("ftpcmd")
    logger.setLevel(level)
    _detach_handlers(logger)

    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = SecretRedactingFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
