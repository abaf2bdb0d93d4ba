"""
Local SQLite Schema.

House records live in Supabase; the local database only holds
installation state:

    - ``app_settings``: key-value preferences (e.g. the
      delete-confirmation suppression flag).
    - ``audit_log``: structured audit events written by the record
      editors and by account deletion.

``schema_version`` records which layout a database file was created
with, so a later layout change can detect older files.
"""

from __future__ import annotations

import sqlite3

from house_notes.logger import StructuredLogger

CURRENT_SCHEMA_VERSION: int = 1

_TABLE_DEFINITIONS: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS app_settings (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS audit_log (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        timestamp TEXT NOT NULL,
        action TEXT NOT NULL,
        entity_type TEXT NOT NULL,
        entity_id TEXT NOT NULL,
        user_id TEXT NOT NULL,
        details TEXT DEFAULT '{}',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_audit_log_entity ON audit_log(entity_type, entity_id)",
    """
    CREATE TABLE IF NOT EXISTS schema_version (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        version INTEGER NOT NULL,
        applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
]


def _stored_version(conn: sqlite3.Connection) -> int:
    """Version recorded in the file, ``0`` for a fresh database."""
    exists = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_version'"
    ).fetchone()
    if exists is None:
        return 0
    row = conn.execute("SELECT version FROM schema_version WHERE id = 1").fetchone()
    return row[0] if row is not None else 0


def initialize_schema(conn: sqlite3.Connection, logger: StructuredLogger) -> None:
    """Create the local tables if the database is new.

    Idempotent; called on every startup.  Every statement is
    ``IF NOT EXISTS`` and the version row is written last, so a failed
    run is simply repeated on the next startup.

    Raises:
        RuntimeError: The file was written by a newer release.
        sqlite3.Error: The tables could not be created.
    """
    current = _stored_version(conn)
    if current == CURRENT_SCHEMA_VERSION:
        logger.info("Local schema is up to date (version %s).", current)
        return
    if current > CURRENT_SCHEMA_VERSION:
        raise RuntimeError(
            f"Local database is at schema version {current}; "
            f"this release supports version {CURRENT_SCHEMA_VERSION}."
        )

    try:
        for ddl in _TABLE_DEFINITIONS:
            conn.execute(ddl)
        conn.execute(
            "INSERT INTO schema_version (id, version) VALUES (1, ?)",
            (CURRENT_SCHEMA_VERSION,),
        )
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        logger.error("Local schema creation failed; rolled back.")
        raise

    logger.info("Local schema created at version %s.", CURRENT_SCHEMA_VERSION)
