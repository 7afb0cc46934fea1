"""
Config Cache Store

Keyed table of parsed config files shared by every ``DotEnv`` that points at
the same file.

Structure:
    {
        "/abs/path/.env": {"KEY": "value", "OTHER": 42},
        "/abs/path/prod.env": {...},
    }

Thread safety:
    One reader/writer lock guards the whole table. Lookups of cached entries
    run concurrently; populate-on-miss, set, flush and invalidate are
    exclusive. The lock is global across files, so slow I/O on one file
    blocks access to all of them.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from dotenv_registry.storage.dotenv_file import DEFAULT_SEPARATOR, read_env_file

logger = logging.getLogger(__name__)

PathLike = str | Path


class ReadWriteLock:
    """
    Shared/exclusive lock, writer-preferring.

    Not reentrant: a thread holding either side must not acquire again.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

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


def cache_key(file_path: PathLike) -> str:
    """Normalize a file path so equivalent spellings share one entry."""
    return os.path.abspath(os.fspath(file_path))


class CacheStore:
    """
    File path → parsed key/value mapping, guarded by one ``ReadWriteLock``.

    Keys inside an entry are always uppercase. Values are strings when read
    from disk but may be any object after ``set``.

    Invariant: an entry exists for a path iff that file was loaded, or had a
    value set, since its last invalidation.
    """

    def __init__(self) -> None:
        self._entries: dict[str, dict[str, Any]] = {}
        self._lock = ReadWriteLock()

    def __contains__(self, file_path: object) -> bool:
        if not isinstance(file_path, (str, Path)):
            return False
        with self._lock.read_locked():
            return cache_key(file_path) in self._entries

    # -------------------------------------------------------------------------
    # Internal (caller holds the write lock)
    # -------------------------------------------------------------------------

    def _populate(self, path: str, separator: str, strict: bool) -> dict[str, Any]:
        values = read_env_file(path, separator, strict=strict)
        entry = {key.upper(): value for key, value in values.items()}
        self._entries[path] = entry
        logger.debug(f"Cached {len(entry)} keys from {path}")
        return entry

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def load(
        self,
        file_path: PathLike,
        separator: str = DEFAULT_SEPARATOR,
        *,
        strict: bool = False,
    ) -> None:
        """
        Parse ``file_path`` and replace its entry wholesale.

        Raises:
            FileNotFoundError: If the file is missing or a directory
            EnvFileParseError: If ``strict`` and a line is malformed
            OSError: On read failure
        """
        path = cache_key(file_path)
        with self._lock.write_locked():
            self._populate(path, separator, strict)

    def lookup(
        self,
        file_path: PathLike,
        key: str,
        separator: str = DEFAULT_SEPARATOR,
        *,
        strict: bool = False,
    ) -> tuple[Any, bool]:
        """
        Return ``(value, present)`` for ``key`` in the file's entry.

        The entry is populated from disk on first use. Absent keys give
        ``("", False)``.

        Raises:
            FileNotFoundError: If the entry is missing and so is the file
            EnvFileParseError: If ``strict`` and a line is malformed
            OSError: On read failure
        """
        path = cache_key(file_path)

        with self._lock.read_locked():
            entry = self._entries.get(path)
            if entry is not None:
                if key in entry:
                    return entry[key], True
                return "", False

        with self._lock.write_locked():
            # Another thread may have populated while we waited
            entry = self._entries.get(path)
            if entry is None:
                entry = self._populate(path, separator, strict)
            if key in entry:
                return entry[key], True
            return "", False

    def set(
        self,
        file_path: PathLike,
        key: str,
        value: Any,
        separator: str = DEFAULT_SEPARATOR,
        *,
        strict: bool = False,
    ) -> None:
        """
        Store ``value`` under ``key`` in the file's entry.

        A missing entry is populated from disk first, or started empty if the
        file does not exist yet.
        """
        path = cache_key(file_path)
        with self._lock.write_locked():
            entry = self._entries.get(path)
            if entry is None:
                try:
                    entry = self._populate(path, separator, strict)
                except FileNotFoundError:
                    entry = self._entries[path] = {}
            entry[key] = value

    def snapshot(self, file_path: PathLike) -> dict[str, Any] | None:
        """Return a copy of the file's entry, or None if not cached."""
        with self._lock.read_locked():
            entry = self._entries.get(cache_key(file_path))
            return dict(entry) if entry is not None else None

    def flush(
        self,
        file_path: PathLike,
        writer: Callable[[dict[str, Any]], None],
        separator: str = DEFAULT_SEPARATOR,
        *,
        strict: bool = False,
    ) -> None:
        """
        Hand the file's entry to ``writer`` under the exclusive lock, then
        invalidate the entry whether or not ``writer`` succeeded.

        An uncached file is populated first (or treated as empty when it does
        not exist) so flushing never drops keys that are only on disk.
        """
        path = cache_key(file_path)
        with self._lock.write_locked():
            try:
                entry = self._entries.get(path)
                if entry is None:
                    try:
                        entry = self._populate(path, separator, strict)
                    except FileNotFoundError:
                        entry = {}
                writer(dict(entry))
            finally:
                self._entries.pop(path, None)
                logger.debug(f"Invalidated cache for {path}")

    def invalidate(self, file_path: PathLike) -> None:
        """Drop the file's entry; the next read re-parses from disk."""
        path = cache_key(file_path)
        with self._lock.write_locked():
            if self._entries.pop(path, None) is not None:
                logger.debug(f"Invalidated cache for {path}")

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock.write_locked():
            self._entries.clear()


_DEFAULT_STORE = CacheStore()


def default_store() -> CacheStore:
    """Return the process-wide store shared by registries by default."""
    return _DEFAULT_STORE
