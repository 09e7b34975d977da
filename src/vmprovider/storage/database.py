# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""
Database handle provider for the voicemail status store.

``DatabaseHelper`` opens the SQLite file lazily, applies pragmas, creates the
schema and hands out a long-lived :class:`SQLiteDatabase`. All writes go
through a single writer so that at most one write statement runs at a time.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, TypeVar

from vmprovider.core.config import ProviderSettings
from vmprovider.core.values import ContentValues
from vmprovider.storage.cursor import Cursor
from vmprovider.storage.sqlite import schema as _schema
from vmprovider.storage.sqlite.db_writer import DbWriter
from vmprovider.storage.sqlite.utils import db_cursor, open_db, quote_identifier

__all__ = ["DatabaseHelper", "SQLiteDatabase"]

log = logging.getLogger(__name__)

T = TypeVar("T")


class SQLiteDatabase:
    """Statement-level access to an open provider database.

    Every method issues exactly one SQL statement; there is no multi-statement
    transaction support.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        *,
        writer: DbWriter | None = None,
        lock: threading.RLock | None = None,
    ) -> None:
        self.conn = conn
        self._writer = writer
        self._lock = writer.read_lock() if writer is not None else (lock or threading.RLock())

    def _write(self, func: Callable[[sqlite3.Connection], T]) -> T:
        if self._writer is not None:
            return self._writer.run(func)
        with self._lock:
            return func(self.conn)

    # ---- writes ------------------------------------------------------------

    def insert(self, table: str, values: ContentValues | dict[str, Any]) -> int:
        """Insert one row and return its row id, or ``-1`` if the database refused it."""

        values = values if isinstance(values, ContentValues) else ContentValues(values)
        if values:
            cols = ", ".join(quote_identifier(col) for col in values.columns())
            marks = ", ".join("?" for _ in values)
            sql = f"INSERT INTO {quote_identifier(table)} ({cols}) VALUES ({marks})"
        else:
            sql = f"INSERT INTO {quote_identifier(table)} DEFAULT VALUES"
        params = values.params()

        def _insert(conn: sqlite3.Connection) -> int:
            with db_cursor(conn) as cur:
                cur.execute(sql, params)
                return int(cur.lastrowid or -1)

        try:
            return self._write(_insert)
        except sqlite3.Error as exc:
            log.error("Error inserting %s into %s: %s", dict(values), table, exc)
            return -1

    def delete(
        self,
        table: str,
        where_clause: str | None = None,
        where_args: Sequence[object] | None = None,
    ) -> int:
        """Delete matching rows (all rows when ``where_clause`` is empty)."""

        sql = f"DELETE FROM {quote_identifier(table)}"
        if where_clause:
            sql += f" WHERE {where_clause}"
        params = list(where_args or ())

        def _delete(conn: sqlite3.Connection) -> int:
            with db_cursor(conn) as cur:
                cur.execute(sql, params)
                return max(cur.rowcount, 0)

        return self._write(_delete)

    def update(
        self,
        table: str,
        values: ContentValues | dict[str, Any],
        where_clause: str | None = None,
        where_args: Sequence[object] | None = None,
    ) -> int:
        values = values if isinstance(values, ContentValues) else ContentValues(values)
        if not values:
            raise ValueError("Empty values")
        assignments = ", ".join(f"{quote_identifier(col)}=?" for col in values.columns())
        sql = f"UPDATE {quote_identifier(table)} SET {assignments}"
        if where_clause:
            sql += f" WHERE {where_clause}"
        params = values.params() + list(where_args or ())

        def _update(conn: sqlite3.Connection) -> int:
            with db_cursor(conn) as cur:
                cur.execute(sql, params)
                return max(cur.rowcount, 0)

        return self._write(_update)

    # ---- reads -------------------------------------------------------------

    def raw_query(self, sql: str, args: Sequence[object] | None = None) -> Cursor:
        with self._lock, db_cursor(self.conn) as cur:
            cur.execute(sql, list(args or ()))
            rows = cur.fetchall()
            columns = [desc[0] for desc in cur.description or ()]
        return Cursor(columns, rows)


class DatabaseHelper:
    """Opens and owns the provider database.

    ``get_writable_database`` and ``get_readable_database`` return the same
    handle; it stays open until :meth:`close`.
    """

    def __init__(
        self,
        path: str | os.PathLike[str] | None = None,
        *,
        settings: ProviderSettings | None = None,
    ) -> None:
        self.settings = settings or ProviderSettings()
        raw_path = path if path is not None else self.settings.database_path
        self.path = raw_path if raw_path == ":memory:" else Path(raw_path).as_posix()
        self._db: SQLiteDatabase | None = None
        self._writer: DbWriter | None = None
        self._open_lock = threading.Lock()

    def _open(self) -> SQLiteDatabase:
        with self._open_lock:
            if self._db is not None:
                return self._db
            if self.path != ":memory:":
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            conn = open_db(self.path)
            _schema.apply_default_pragmas(
                conn,
                journal_mode=self.settings.journal_mode,
                busy_timeout_ms=self.settings.busy_timeout_ms,
            )
            _schema.ensure_schema(conn)
            if self.settings.serialized_writes:
                self._writer = DbWriter(conn, name=f"DbWriter[{Path(self.path).name}]")
            self._db = SQLiteDatabase(conn, writer=self._writer)
            log.debug(
                "Opened %s (serialized_writes=%s)", self.path, self.settings.serialized_writes
            )
            return self._db

    def get_writable_database(self) -> SQLiteDatabase:
        return self._open()

    def get_readable_database(self) -> SQLiteDatabase:
        return self._open()

    def close(self) -> None:
        with self._open_lock:
            if self._writer is not None:
                self._writer.close()
                self._writer = None
            if self._db is not None:
                self._db.conn.close()
                self._db = None

    def __enter__(self) -> DatabaseHelper:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
