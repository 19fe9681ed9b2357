"""Observability module for scenelint.

Provides structured logging for the validation pipeline and CLI.
"""

from scenelint.observability.logging import (
    close_file_logging,
    configure_logging,
    get_logger,
)

__all__ = [
    "close_file_logging",
    "configure_logging",
    "get_logger",
]
