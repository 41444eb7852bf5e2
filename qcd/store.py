"""
Directory store - SQLite file mapping directory paths to visit counts.

One table, created on first open::

    dirs(dir VARCHAR NOT NULL PRIMARY KEY, count INTEGER)

The table and index names match older ``qcd`` releases so an existing
``~/.qcd.db`` keeps working. Every statement is parameterized; caller-supplied
paths and search terms are never spliced into SQL text.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .errors import QueryError, StoreError, StoreOpenError
from .models import DirectoryRecord

logger = logging.getLogger(__name__)

#: Search term that matches every stored directory ("list everything" mode).
WILDCARD = "%"

_SCHEMA_SQL = (
    "CREATE TABLE IF NOT EXISTS dirs (dir VARCHAR NOT NULL PRIMARY KEY, count INTEGER)",
    "CREATE INDEX IF NOT EXISTS dirindex ON dirs(dir)",
)

_UPSERT_SQL = (
    "INSERT INTO dirs (dir, count) VALUES (?, 1) "
    "ON CONFLICT(dir) DO UPDATE SET count = count + 1"
)

# instr() is a case-sensitive literal substring test; LIKE would fold ASCII case
# and treat '_' and '%' inside the term as wildcards.
_MATCH_SQL = "SELECT dir, count FROM dirs WHERE instr(dir, ?) > 0 ORDER BY count DESC, dir ASC"
_ALL_SQL = "SELECT dir, count FROM dirs ORDER BY count DESC, dir ASC"


class DirectoryStore:
    """Visit-count store backed by a single SQLite file.

    Usable as a context manager::

        with DirectoryStore(Path.home() / ".qcd.db") as store:
            store.add_visit("/home/alice/proj")
            store.match_directories("proj")   # ["/home/alice/proj"]
    """

    def __init__(self, db_path: Union[str, Path]):
        """Initialize store; the file is not touched until open().

        Args:
            db_path: Location of the SQLite file. Created (with its schema) by
                     open() when it does not exist yet.
        """
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def open(self) -> "DirectoryStore":
        """Open the backing file, creating file and schema when needed.

        Re-opening an existing file never drops or rebuilds the table.

        Raises:
            StoreOpenError: the engine cannot open or create the file.
        """
        if self._conn is not None:
            return self
        logger.debug("Opening database file %s", self.db_path)
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise StoreOpenError(f"Can't open database {self.db_path}: {exc}") from exc
        try:
            with conn:
                for statement in _SCHEMA_SQL:
                    conn.execute(statement)
        except sqlite3.Error as exc:
            conn.close()
            raise StoreOpenError(f"Can't open database {self.db_path}: {exc}") from exc
        self._conn = conn
        return self

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def __enter__(self) -> "DirectoryStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ── Statement helpers ────────────────────────────────────────────────────

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError(f"Database {self.db_path} is not open")
        return self._conn

    def _execute(self, sql: str, params: Sequence = ()) -> None:
        """Run one write statement in its own transaction."""
        conn = self._connection()
        logger.debug("executing SQL %s %r", sql, tuple(params))
        try:
            with conn:
                conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise QueryError(str(exc)) from exc

    def _query(self, sql: str, params: Sequence = ()) -> List[tuple]:
        conn = self._connection()
        logger.debug("executing SQL %s %r", sql, tuple(params))
        try:
            return conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise QueryError(str(exc)) from exc

    # ── Operations ───────────────────────────────────────────────────────────

    def get_count(self, path: str) -> int:
        """Return the visit count of path, or 0 when it is not stored."""
        rows = self._query("SELECT count FROM dirs WHERE dir = ?", (path,))
        if not rows or rows[0][0] is None:
            return 0
        return int(rows[0][0])

    def add_visit(self, path: str) -> None:
        """Insert path with count 1, or increment its count by one.

        A single upsert statement, so concurrent visits cannot lose an increment.
        """
        self._execute(_UPSERT_SQL, (path,))

    def remove_directory(self, path: str) -> None:
        """Delete path. Deleting a path that is not stored is a no-op."""
        self._execute("DELETE FROM dirs WHERE dir = ?", (path,))

    def list_records(self, term: str = "") -> List[DirectoryRecord]:
        """Return the records whose path contains term, most visited first.

        Equal counts are ordered lexically by path. An empty term or the
        WILDCARD sentinel returns every record.
        """
        if term in ("", WILDCARD):
            rows = self._query(_ALL_SQL)
        else:
            rows = self._query(_MATCH_SQL, (term,))
        return [DirectoryRecord(path=row[0], visit_count=int(row[1] or 0)) for row in rows]

    def match_directories(self, term: str) -> List[str]:
        """Return the stored paths containing term, most visited first.

        Matching is a case-sensitive, unanchored literal substring test. No
        match gives an empty list, not an error.
        """
        return [record.path for record in self.list_records(term)]


def purge_store(db_path: Union[str, Path]) -> bool:
    """Delete the backing file; it is recreated on the next open().

    Returns:
        True if a file was removed, False if there was none.
    """
    path = Path(db_path)
    if not path.exists():
        return False
    path.unlink()
    logger.debug("Removed database file %s", path)
    return True
