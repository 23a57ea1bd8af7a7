"""
The process-wide configuration service.

:class:`Configuration` holds the single resolved settings document behind a
multiple-reader / single-writer lock.  It is constructed once at startup
and passed explicitly to whatever needs it; there is no module-level
instance.

Lock discipline:
    - Readers share the lock and only ever copy the document out.
    - Writers (admin reload, test harnesses) take it exclusively.
    - A waiting writer blocks new readers, so writers don't starve under
      a read-heavy load.
    - No I/O happens while the lock is held; :meth:`Configuration.reload`
      resolves the new document first and only then swaps it in.
    - Edits through :meth:`Configuration.write` go to a draft that replaces
      the document only if the block completes.
    - The lock blocks OS threads.  Coroutines read through
      ``asyncio.to_thread`` and never await while holding the write lock.

Usage::

    from torrent_index.core.config import Configuration, ResolutionInput

    configuration = Configuration.load(ResolutionInput.from_environment())
    settings = configuration.read_snapshot()   # deep copy
    name = configuration.site_name()

Tags:
    torrent-index, configuration, concurrency, rwlock, settings-handle
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import TypeVar

from torrent_index.core.logging import LogContext, get_logger

from .loader import load_settings
from .settings import Settings
from .sources import ResolutionInput

logger = get_logger(__name__)

T = TypeVar("T")


class ReadWriteLock:
    """Writer-preferring readers/writer lock.

    Not reentrant: a thread holding the write lock must not try to read.
    Blocking: waiting parks the calling thread, so an event loop must not
    wait on it while a coroutine on that same loop holds it.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            acquired = False
            try:
                while self._writer or self._readers:
                    self._cond.wait()
                self._writer = acquired = True
            finally:
                self._writers_waiting -= 1
                if not acquired:
                    # Readers parked behind this writer must re-check.
                    self._cond.notify_all()

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        with self._cond:
            return self._readers


class Configuration:
    """Shared, lock-guarded holder of the resolved settings document.

    ``Configuration()`` holds the built-in defaults without running any
    resolution; :meth:`load` resolves a document first.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings if settings is not None else Settings()
        self._lock = ReadWriteLock()

    @classmethod
    def load(
        cls,
        info: ResolutionInput,
        environ: Mapping[str, str] | None = None,
    ) -> Configuration:
        """Resolve *info* and wrap the result.

        Raises:
            SettingsError: any resolution failure; no handle is created.
        """
        return cls(load_settings(info, environ))

    # ── Reads ────────────────────────────────────────────────────

    def read_snapshot(self) -> Settings:
        """A deep copy of the whole document."""
        with self._lock.read_locked():
            return self._settings.model_copy(deep=True)

    def get_all(self) -> Settings:
        return self.read_snapshot()

    def project(self, fn: Callable[[Settings], T]) -> T:
        """Apply *fn* to the document under the read lock.

        *fn* must not keep references to the document or mutate it.
        """
        with self._lock.read_locked():
            return fn(self._settings)

    def site_name(self) -> str:
        return self.project(lambda s: s.website.name)

    def api_base_url(self) -> str | None:
        return self.project(lambda s: None if s.net.base_url is None else str(s.net.base_url))

    # ── Writes (privileged) ──────────────────────────────────────

    def replace(self, settings: Settings) -> None:
        """Swap in a copy of *settings*; the caller keeps no alias to the live document."""
        new = settings.model_copy(deep=True)
        with self._lock.write_locked():
            self._settings = new
        logger.info("config_replaced", schema_version=settings.metadata.schema_version)

    @contextmanager
    def write(self) -> Iterator[Settings]:
        """Exclusive access to a draft of the document for in-place edits.

        The draft is installed when the block exits normally; if it raises
        (for instance a ``ValidationError`` from an assignment) the draft is
        dropped and readers keep seeing the previous document.

        The write lock is a threading lock and is held for the whole block.
        Do not ``await`` inside it on an event loop: readers on the same loop
        would block that loop's thread and never let the writer finish.
        Async code should read through ``asyncio.to_thread``.
        """
        with self._lock.write_locked():
            draft = self._settings.model_copy(deep=True)
            yield draft
            self._settings = draft

    def reload(
        self,
        info: ResolutionInput,
        environ: Mapping[str, str] | None = None,
    ) -> Settings:
        """Resolve *info* and replace the document with the result.

        The current document is left untouched if resolution fails.
        """
        with LogContext(operation="config_reload"):
            try:
                settings = load_settings(info, environ)
            except Exception:
                logger.warning("config_reload_failed", exc_info=True)
                raise
        self.replace(settings)
        return settings

    def __repr__(self) -> str:
        return f"Configuration(site_name={self.site_name()!r})"


__all__ = ["Configuration", "ReadWriteLock"]
