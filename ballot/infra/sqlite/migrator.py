"""SQLite schema migration helpers for the ballot journal tables.

Responsibilities:
  - Create/upgrade the ballot, ballot_voter, ballot_proposal and ballot_event schema.
Must not:
  - Embed workflow logic; migrations only.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path


def migrations_dir() -> Path:
    return Path(__file__).resolve().parent / "migrations"


def apply_migrations(conn: sqlite3.Connection) -> list[str]:
    applied: list[str] = []
    for migration in sorted(migrations_dir().glob("*.sql")):
        conn.executescript(migration.read_text(encoding="utf-8"))
        applied.append(migration.name)
    return applied
