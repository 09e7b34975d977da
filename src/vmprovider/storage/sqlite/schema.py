# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""
Schema and pragma setup for the voicemail status database.
"""

from __future__ import annotations

import logging
import sqlite3

from vmprovider.contract import STATUS_TABLE, Status

__all__ = [
    "SCHEMA_VERSION",
    "apply_default_pragmas",
    "ensure_schema",
    "get_user_version",
    "set_user_version",
]

log = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def apply_default_pragmas(
    conn: sqlite3.Connection, *, journal_mode: str = "WAL", busy_timeout_ms: int = 10000
) -> None:
    """
    Apply the pragmas every provider connection runs with.

    In-memory databases ignore WAL and silently stay in MEMORY mode.
    """
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute(f"PRAGMA journal_mode = {journal_mode};")
    conn.execute("PRAGMA synchronous = NORMAL;")
    conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)};")


def ensure_schema(conn: sqlite3.Connection) -> bool:
    """
    Create the status table when missing. Returns True if it was created.

    Databases written by a newer schema version are refused rather than
    modified.
    """

    version = get_user_version(conn)
    if version > SCHEMA_VERSION:
        raise RuntimeError(
            f"Database schema version {version} is newer than supported version {SCHEMA_VERSION}"
        )
    if version == SCHEMA_VERSION:
        return False

    conn.executescript(
        f"""
        CREATE TABLE IF NOT EXISTS {STATUS_TABLE} (
            {Status.ID} INTEGER PRIMARY KEY AUTOINCREMENT,
            {Status.SOURCE_PACKAGE} TEXT UNIQUE NOT NULL,
            {Status.SETTINGS_URI} TEXT,
            {Status.VOICEMAIL_ACCESS_URI} TEXT,
            {Status.CONFIGURATION_STATE} INTEGER,
            {Status.DATA_CHANNEL_STATE} INTEGER,
            {Status.NOTIFICATION_CHANNEL_STATE} INTEGER
        );
        """
    )
    set_user_version(conn, SCHEMA_VERSION)
    log.info("Created %s schema (version %d)", STATUS_TABLE, SCHEMA_VERSION)
    return True


def get_user_version(conn: sqlite3.Connection) -> int:
    """Return the PRAGMA user_version value."""

    cur = conn.execute("PRAGMA user_version")
    row = cur.fetchone()
    return int(row[0]) if row and row[0] is not None else 0


def set_user_version(conn: sqlite3.Connection, version: int) -> None:
    """Update the PRAGMA user_version value."""

    conn.execute(f"PRAGMA user_version = {int(version)}")
