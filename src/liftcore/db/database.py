"""SQLite connection pool and schema management.

Provides a bounded, thread-safe pool of SQLite connections over one
database file (or one private in-memory database) and the schema for the
exercises table.
"""

from __future__ import annotations

import queue
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

from liftcore.errors import DatabaseError, PoolError, PoolTimeoutError

logger = structlog.get_logger(__name__)

# Sentinel location for an ephemeral database private to one repository
IN_MEMORY = ":memory:"

DEFAULT_POOL_SIZE = 8
DEFAULT_ACQUIRE_TIMEOUT = 30.0
DEFAULT_BUSY_TIMEOUT = 5.0

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS exercises (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    muscle_groups TEXT NOT NULL,
    equipment_needed TEXT,
    difficulty_level INTEGER NOT NULL
)
"""


class ConnectionPool:
    """Bounded pool of SQLite connections shared between threads.

    Connections are opened lazily up to ``max_size``. A caller that finds
    every connection busy waits up to ``acquire_timeout`` seconds and then
    gets a PoolTimeoutError. Idle connections are reused most recently
    released first.

    The pool also counts the repository handles sharing it: retain() adds
    one, release() drops one and closes the pool with the last handle.

    An in-memory database exists per connection, so an in-memory pool is
    always capped at a single connection.
    """

    def __init__(
        self,
        location: str | Path,
        max_size: int = DEFAULT_POOL_SIZE,
        acquire_timeout: float = DEFAULT_ACQUIRE_TIMEOUT,
        busy_timeout: float = DEFAULT_BUSY_TIMEOUT,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")

        self.location = str(location)
        self.in_memory = self.location == IN_MEMORY
        self.max_size = 1 if self.in_memory else max_size
        self.acquire_timeout = acquire_timeout
        self.busy_timeout = busy_timeout

        # None entries wake waiters when the pool closes
        self._idle: queue.LifoQueue[sqlite3.Connection | None] = queue.LifoQueue()
        self._lock = threading.Lock()
        self._all: list[sqlite3.Connection] = []
        self._handles = 1
        self._waiters = 0
        self._closed = False

        if not self.in_memory:
            Path(self.location).parent.mkdir(parents=True, exist_ok=True)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def size(self) -> int:
        """Number of connections opened so far."""
        return len(self._all)

    @property
    def handles(self) -> int:
        """Number of live handles sharing this pool."""
        return self._handles

    def _open_connection(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(
                self.location,
                timeout=self.busy_timeout,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            raise PoolError(f"failed to open '{self.location}': {e}") from e

        conn.row_factory = sqlite3.Row
        logger.debug("pool.connection_opened", location=self.location, size=len(self._all) + 1)
        return conn

    def acquire(self) -> sqlite3.Connection:
        """Take a connection out of the pool.

        Raises:
            PoolError: If the pool is closed or a connection can't be opened
            PoolTimeoutError: If no connection frees up within the timeout
        """
        with self._lock:
            if self._closed:
                raise PoolError("pool is closed")
            try:
                return self._idle.get_nowait()
            except queue.Empty:
                pass
            if len(self._all) < self.max_size:
                conn = self._open_connection()
                self._all.append(conn)
                return conn
            self._waiters += 1

        logger.debug("pool.waiting", location=self.location, max_size=self.max_size)
        try:
            conn = self._idle.get(timeout=self.acquire_timeout)
        except queue.Empty as e:
            logger.error(
                "pool.exhausted",
                location=self.location,
                max_size=self.max_size,
                timeout=self.acquire_timeout,
            )
            raise PoolTimeoutError(self.acquire_timeout) from e
        finally:
            with self._lock:
                self._waiters -= 1

        with self._lock:
            closed = self._closed
        if closed or conn is None:
            if conn is not None:
                conn.close()
            raise PoolError("pool is closed")
        return conn

    def put(self, conn: sqlite3.Connection) -> None:
        """Return a connection to the pool."""
        with self._lock:
            if self._closed:
                conn.close()
                return
            self._idle.put(conn)

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Borrow a connection for a single transaction.

        Commits on success, rolls back on error and always hands the
        connection back to the pool.

        Example:
            with pool.connection() as conn:
                conn.execute("DELETE FROM exercises WHERE id = ?", (id,))
        """
        conn = self.acquire()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self.put(conn)

    def retain(self) -> None:
        """Register one more handle sharing this pool."""
        with self._lock:
            if self._closed:
                raise PoolError("pool is closed")
            self._handles += 1

    def release(self) -> None:
        """Drop one handle; the last one closes the pool."""
        with self._lock:
            if self._closed:
                return
            self._handles -= 1
            if self._handles > 0:
                return
        self.close()

    def close(self) -> None:
        """Close every connection regardless of outstanding handles."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._all = []
            waiters = self._waiters

        # Borrowed connections are closed by put() when they come back
        closed = 0
        while True:
            try:
                conn = self._idle.get_nowait()
            except queue.Empty:
                break
            if conn is not None:
                conn.close()
                closed += 1

        for _ in range(waiters):
            self._idle.put(None)
        logger.debug("pool.closed", location=self.location, connections=closed, waiters=waiters)


def init_schema(pool: ConnectionPool) -> None:
    """Create the exercises table if it doesn't exist.

    Uses IF NOT EXISTS, so reopening a populated store leaves rows intact.

    Raises:
        DatabaseError: If the schema statement fails
        PoolError: If no connection can be acquired
    """
    try:
        with pool.connection() as conn:
            conn.execute(SCHEMA_SQL)
    except sqlite3.Error as e:
        logger.error("database.schema_failed", location=pool.location, error=str(e))
        raise DatabaseError(f"failed to create table: {e}") from e

    logger.debug("database.schema_ready", location=pool.location)
