"""Centralized logging setup for the document scanning pipeline.

Provides a structured logging configuration with consistent formatting
across all modules, plus a filter that redacts identifier-like digit runs
so card and Aadhaar numbers never reach log output in clear text.
"""

import logging
import sys

from docscan.validation.masking import mask_digits


class SensitiveDataFilter(logging.Filter):
    """Redact long digit sequences from log records.

    The record message is rendered once with its arguments and the
    masked result replaces both, so later formatters see only the
    redacted text.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_digits(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(level: str = "INFO", mask_sensitive: bool = True) -> None:
    """Configure the root logger with a standard format.

    Args:
        level: Logging level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        mask_sensitive: Whether to attach the :class:`SensitiveDataFilter`
            to the installed handler.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    if mask_sensitive:
        handler.addFilter(SensitiveDataFilter())
    root.addHandler(handler)
    root.setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)
