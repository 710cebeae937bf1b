"""SQLite sink adapter for metric records."""

import json
import sqlite3
import threading
from collections.abc import Iterator, Mapping
from contextlib import closing, contextmanager
from typing import Any

from fluency_reporter.core.errors import SinkError
from fluency_reporter.core.models import Record

_RECORDS_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tag TEXT NOT NULL,
    timestamp INTEGER NOT NULL,
    fields TEXT NOT NULL DEFAULT '{}'
);
CREATE INDEX IF NOT EXISTS idx_records_timestamp ON records(timestamp);
"""

_INSERT_RECORD = """
INSERT INTO records (tag, timestamp, fields) VALUES (?, ?, ?)
"""

_SELECT_RECORDS_SINCE = """
SELECT tag, timestamp, fields FROM records
WHERE timestamp > ?
ORDER BY timestamp ASC, id ASC
"""

_COUNT_RECORDS = """
SELECT COUNT(*) FROM records
"""


# @tra: Adapter.SQLiteSink.ImplementsSinkPort
class SQLiteSink:
    """SQLite implementation of SinkPort.

    Stores each record as a row with its fields encoded as JSON. Uses the
    standard sqlite3 module since emit() is a blocking call. File databases
    use WAL mode and a short-lived connection per operation; :memory:
    databases keep one persistent connection, since they are
    connection-scoped in SQLite.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._initialized = False
        self._lock = threading.Lock()
        self._persistent_conn: sqlite3.Connection | None = None
        self._closed = False

    def _ensure_initialized(self) -> None:
        """Initialize database schema once."""
        if self._initialized:
            return
        with self._lock:
            if self._initialized:
                return
            if self._db_path == ":memory:":
                self._persistent_conn = sqlite3.connect(":memory:")
                self._persistent_conn.executescript(_RECORDS_SCHEMA)
            else:
                with closing(sqlite3.connect(self._db_path)) as db:
                    db.execute("PRAGMA journal_mode=WAL")
                    db.executescript(_RECORDS_SCHEMA)
            self._initialized = True

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection, translating sqlite3 errors into SinkError."""
        if self._closed:
            raise SinkError("sink is closed")
        try:
            self._ensure_initialized()
            if self._persistent_conn is not None:
                yield self._persistent_conn
                return
            conn = sqlite3.connect(self._db_path)
            try:
                yield conn
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise SinkError(f"sqlite error on {self._db_path}: {e}") from e

    def emit(self, tag: str, timestamp: int, fields: Mapping[str, Any]) -> None:
        """Insert one record.

        Raises:
            SinkError: If fields are not JSON serializable or the write fails.
        """
        try:
            encoded = json.dumps(dict(fields), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SinkError(f"cannot serialize record {tag!r}: {e}") from e
        with self._connection() as conn:
            conn.execute(_INSERT_RECORD, (tag, timestamp, encoded))
            conn.commit()

    def read(self, since: int = 0) -> list[Record]:
        """Read records with timestamp > since, ordered by timestamp ascending."""
        with self._connection() as conn:
            cursor = conn.execute(_SELECT_RECORDS_SINCE, (since,))
            return [
                Record(tag=row[0], timestamp=row[1], fields=json.loads(row[2]))
                for row in cursor
            ]

    def count(self) -> int:
        """Return total number of stored records."""
        with self._connection() as conn:
            row = conn.execute(_COUNT_RECORDS).fetchone()
            return row[0] if row else 0

    def close(self) -> None:
        """Close the persistent connection; later emits raise SinkError."""
        self._closed = True
        if self._persistent_conn is not None:
            try:
                self._persistent_conn.close()
            except sqlite3.Error as e:
                raise SinkError(f"cannot close {self._db_path}: {e}") from e
            finally:
                self._persistent_conn = None
