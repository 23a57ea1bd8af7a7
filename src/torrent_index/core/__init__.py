"""
Core primitives for the torrent index: errors, logging and configuration.

Architecture::

    errors.py     TorrentIndexError base, ErrorCategory, ErrorContext
    logging.py    structlog setup, threshold → level mapping
    config/       settings document resolution and the shared handle
"""

from torrent_index.core.errors import (
    ErrorCategory,
    ErrorContext,
    TorrentIndexError,
    categorize_error,
    is_retryable,
)
from torrent_index.core.logging import configure_logging, get_logger

__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TorrentIndexError",
    "categorize_error",
    "configure_logging",
    "get_logger",
    "is_retryable",
]
