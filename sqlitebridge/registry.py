from __future__ import annotations

import collections
import contextlib
import logging
import sqlite3
import threading
from typing import Iterator, Optional

from .config import BridgeConfig
from .errors import DatabaseNotOpened, EngineError, RegistryUnavailable

logger = logging.getLogger(__name__)


class Session:
    """One open SQLite connection owned by a registry entry."""

    def __init__(self, path: str, connection: sqlite3.Connection, config: BridgeConfig):
        self.path = path
        self.connection = connection
        self.config = config
        self._closed = False
        # Diagnostics: statements, rows_written, rows_read.
        self._stats = collections.Counter()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def stats(self) -> dict:
        return dict(self._stats)

    def close(self) -> None:
        if self._closed:
            return
        self.connection.close()
        self._closed = True


def connect(path: str, config: BridgeConfig) -> Session:
    try:
        # Autocommit: no implicit transaction wraps a batch.
        # check_same_thread is off because the registry lock serializes access.
        conn = sqlite3.connect(
            path,
            timeout=config.busy_timeout,
            isolation_level=None,
            check_same_thread=False,
            cached_statements=config.stmt_cache_size,
        )
    except sqlite3.Error as e:
        raise EngineError.from_sqlite(e) from e
    return Session(path, conn, config)


class SessionRegistry:
    """Path -> Session map shared by every caller.

    A single lock guards the map and every statement run on a session taken
    from it, so at most one statement runs per connection (and, with one lock,
    per registry) at any time.
    """

    def __init__(self, config: Optional[BridgeConfig] = None):
        self.config = config or BridgeConfig.from_env()
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self._closed = False

    def open(self, path: str) -> bool:
        new = connect(path, self.config)
        with self._lock:
            if self._closed:
                new.close()
                raise RegistryUnavailable()
            old = self._sessions.get(path)
            self._sessions[path] = new
            if old is not None:
                old.close()
                logger.info("reopened database %s, previous connection closed", path)
            else:
                logger.info("opened database %s", path)
        return True

    def get(self, path: str) -> Session:
        """Look up ``path`` without taking the lock; callers running statements use ``session``."""
        if self._closed:
            raise RegistryUnavailable()
        try:
            return self._sessions[path]
        except KeyError:
            raise DatabaseNotOpened(path) from None

    @contextlib.contextmanager
    def session(self, path: str) -> Iterator[Session]:
        with self._lock:
            yield self.get(path)

    def paths(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def __contains__(self, path) -> bool:
        return path in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close every connection; later calls raise ``RegistryUnavailable``."""
        with self._lock:
            if self._closed:
                return
            for session in self._sessions.values():
                session.close()
            count = len(self._sessions)
            self._sessions.clear()
            self._closed = True
        logger.info("session registry closed (%d connections)", count)
