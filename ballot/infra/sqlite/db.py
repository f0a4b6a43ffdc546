"""SQLite connection helpers for the ballot journal."""

from __future__ import annotations

import sqlite3


def get_connection(db_path: str) -> sqlite3.Connection:
    # Autocommit mode; the facade issues BEGIN/COMMIT explicitly per command.
    conn = sqlite3.connect(db_path, isolation_level=None)
    conn.row_factory = sqlite3.Row
    return conn
