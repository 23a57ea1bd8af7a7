"""
Structured error types for the torrent index.

Manifesto:
    A broken configuration is found at startup or during an admin reload,
    and in both cases the operator needs three things from the error: which
    source was being read, which option was involved, and what the
    underlying library complained about.  Every error raised by the index
    therefore carries a category, a retry flag, an :class:`ErrorContext`
    and the original exception (also set as ``__cause__``).

Architecture:
    ::

        TorrentIndexError            category / retryable / context / cause
            └── SettingsError        CONFIG, never retried
                    (torrent_index.core.config.errors)

Examples:
    >>> err = TorrentIndexError("unreadable").with_context(source_name="index.toml")
    >>> err.context.source_name
    'index.toml'
    >>> err.to_dict()["category"]
    'INTERNAL'

Tags:
    error-handling, exception-hierarchy, error-context, torrent-index
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Broad classification used when logging and reporting errors."""

    CONFIG = "CONFIG"           # settings document can't be resolved
    PARSE = "PARSE"             # text isn't valid TOML
    VALIDATION = "VALIDATION"   # value doesn't fit its type
    STORAGE = "STORAGE"         # filesystem
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Where an error happened.

    Attributes:
        source_name: file path or environment variable name
        source_type: ``"file"``, ``"env"``, ``"inline"`` or ``"defaults"``
        option_path: dotted option path, e.g. ``"tracker.token"``
        details: anything else worth logging
    """

    source_name: str | None = None
    source_type: str | None = None
    option_path: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flat mapping of the fields that are set, for structured logs."""
        known = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "details" and getattr(self, f.name) is not None
        }
        return {**known, **self.details}


class TorrentIndexError(Exception):
    """
    Root of the index's exception hierarchy.

    Subclasses pick their classification through the ``category`` and
    ``retryable`` class attributes; both can be overridden per instance.
    """

    category: ErrorCategory = ErrorCategory.INTERNAL
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category
        if retryable is not None:
            self.retryable = retryable
        self.context = context if context is not None else ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **values: Any) -> TorrentIndexError:
        """Fill in context fields; unknown names land in ``context.details``.

        Returns ``self`` so it can be chained onto a ``raise``.
        """
        known = {f.name for f in fields(ErrorContext)} - {"details"}
        for name, value in values.items():
            if name in known:
                setattr(self.context, name, value)
            else:
                self.context.details[name] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serializable summary of the error."""
        record: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if context := self.context.to_dict():
            record["context"] = context
        if self.cause is not None:
            record["cause"] = str(self.cause)
        return record

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


_CATEGORY_BY_TYPE: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (OSError, ErrorCategory.STORAGE),
    (ValueError, ErrorCategory.VALIDATION),
    (TypeError, ErrorCategory.VALIDATION),
)


def is_retryable(error: BaseException) -> bool:
    """Only index errors can be retryable, and only when they say so."""
    return isinstance(error, TorrentIndexError) and error.retryable


def categorize_error(error: BaseException) -> ErrorCategory:
    """Category of any exception, falling back to the builtin type."""
    if isinstance(error, TorrentIndexError):
        return error.category
    for exc_type, category in _CATEGORY_BY_TYPE:
        if isinstance(error, exc_type):
            return category
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TorrentIndexError",
    "categorize_error",
    "is_retryable",
]
