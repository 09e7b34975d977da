# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""
Connection helpers for the provider database.

Connections run in autocommit mode: every statement the provider issues is
its own transaction.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

__all__ = ["open_db", "set_pragmas", "db_cursor", "quote_identifier"]

_JOURNAL_MODES = {"WAL", "DELETE", "TRUNCATE", "PERSIST", "MEMORY", "OFF"}


# ---- Connections ------------------------------------------------------------


def open_db(
    path: str,
    *,
    mode: str = "rwc",
    pragmas: Mapping[str, object] | None = None,
) -> sqlite3.Connection:
    """
    Open the database at ``path`` (``":memory:"`` for a private in-memory db).

    mode: "ro" (read-only), "rw", "rwc" (create if needed). Default: "rwc".
    """
    if path == ":memory:":
        conn = sqlite3.connect(":memory:", check_same_thread=False, isolation_level=None)
    else:
        uri = f"file:{path}?mode={mode}"
        conn = sqlite3.connect(uri, uri=True, check_same_thread=False, isolation_level=None)
    conn.row_factory = sqlite3.Row
    if pragmas:
        set_pragmas(conn, pragmas)
    return conn


def set_pragmas(conn: sqlite3.Connection, opts: Mapping[str, object]) -> None:
    """Apply the supported pragmas present in ``opts``.

    Supported keys: ``foreign_keys``, ``journal_mode``, ``synchronous`` and
    ``busy_timeout_ms``. Unknown keys are ignored.
    """

    norm = {str(key).lower(): value for key, value in opts.items()}
    for key, value in norm.items():
        if key == "foreign_keys":
            conn.execute(f"PRAGMA foreign_keys={'ON' if value else 'OFF'}")
        elif key == "journal_mode":
            mode = str(value).upper()
            if mode not in _JOURNAL_MODES:
                raise ValueError(f"Unsupported journal mode {value!r}")
            conn.execute(f"PRAGMA journal_mode={mode}")
        elif key == "synchronous":
            conn.execute(f"PRAGMA synchronous={str(value).upper()}")
        elif key == "busy_timeout_ms":
            conn.execute(f"PRAGMA busy_timeout={int(value)}")  # type: ignore[call-overload]


def quote_identifier(name: str) -> str:
    """Double-quote a table or column name for interpolation into SQL."""

    return '"' + str(name).replace('"', '""') + '"'


# ---- Cursors ----------------------------------------------------------------


@contextmanager
def db_cursor(conn: sqlite3.Connection) -> Iterator[sqlite3.Cursor]:
    """Context manager that closes the cursor after use."""

    cur = conn.cursor()
    try:
        yield cur
    finally:
        cur.close()
