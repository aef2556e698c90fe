"""Database migrations with schema_version tracking."""

from __future__ import annotations

import sqlite3

MIGRATIONS: list[str] = [
    # Version 1: Initial schema
    """
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER NOT NULL,
        applied_at TEXT DEFAULT (datetime('now'))
    );

    CREATE TABLE IF NOT EXISTS recordings (
        id TEXT PRIMARY KEY,
        file_path TEXT NOT NULL,
        file_name TEXT NOT NULL,
        library_uri TEXT,
        thumbnail_path TEXT,
        created_at TEXT NOT NULL,
        recorded_date TEXT NOT NULL,
        prompt_text TEXT NOT NULL DEFAULT '',
        facing TEXT NOT NULL DEFAULT 'front',
        duration_sec REAL,
        file_size_bytes INTEGER,
        observations TEXT,
        analysis_status TEXT NOT NULL DEFAULT 'not_requested'
            CHECK (analysis_status IN ('not_requested', 'pending', 'completed', 'failed')),
        analysis_mode TEXT,
        analysis_json TEXT,
        analysis_error TEXT,
        updated_at TEXT,
        -- a completed recording always carries its analysis, and only then
        CHECK ((analysis_status = 'completed') = (analysis_json IS NOT NULL))
    );
    CREATE INDEX IF NOT EXISTS idx_recordings_created ON recordings(created_at);
    CREATE INDEX IF NOT EXISTS idx_recordings_status ON recordings(analysis_status);
    """,
]


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Get the current schema version, or 0 if no schema exists."""
    try:
        row = conn.execute(
            "SELECT MAX(version) FROM schema_version"
        ).fetchone()
        return row[0] or 0 if row else 0
    except sqlite3.OperationalError:
        return 0


def migrate(conn: sqlite3.Connection) -> int:
    """Run pending migrations. Returns the final schema version."""
    current = get_schema_version(conn)

    for i, sql in enumerate(MIGRATIONS, start=1):
        if i <= current:
            continue
        conn.executescript(sql)
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (i,))

    return len(MIGRATIONS)
