"""
Database schema definitions.
"""
import sqlite3
import logging
from typing import List

THUMBS_ALIAS = "thumbs"

# One statement per entry so they can run inside a single transaction
FILES_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS files (
        id              INTEGER PRIMARY KEY,
        tag             TEXT NOT NULL,    -- usually an identifier for the disk or archive
        path            TEXT NOT NULL,    -- forward-slash path, relative to the volume if one was given
        content_hash    TEXT,             -- hex digest of the full content
        size            INTEGER,
        mod_time        TEXT,             -- ISO-8601, UTC
        media_type      TEXT,             -- sniffed from the leading bytes
        capture_time    TEXT,             -- EXIF capture time for images
        error           TEXT              -- failure classification if the file could not be fully read
    );
    """,
    # Missing hashes map to an empty blob, which equals no text value,
    # so unreadable files dedupe on re-runs and '' stays distinct from NULL
    """
    CREATE UNIQUE INDEX IF NOT EXISTS files_identity
        ON files(tag, path, COALESCE(content_hash, X''));
    """,
    "CREATE INDEX IF NOT EXISTS files_media_type ON files(media_type);",
    "CREATE INDEX IF NOT EXISTS files_tag ON files(tag);",
]

# Created in the second database file, attached as 'thumbs'
THUMBS_SCHEMA = [
    f"""
    CREATE TABLE IF NOT EXISTS {THUMBS_ALIAS}.thumbnails (
        id              INTEGER PRIMARY KEY,
        file_id         INTEGER NOT NULL,  -- files.id in the primary db
        thumbnail       BLOB
    );
    """,
    f"CREATE INDEX IF NOT EXISTS {THUMBS_ALIAS}.thumbnails_file_id ON thumbnails(file_id);",
]


def schema_sql(with_thumbnails: bool = True) -> str:
    """Returns the schema as a printable SQL script."""
    statements: List[str] = list(FILES_SCHEMA)
    if with_thumbnails:
        statements.append(f"-- expected in a second db attached as {THUMBS_ALIAS}")
        statements.extend(THUMBS_SCHEMA)
    return "\n".join(s.strip() for s in statements) + "\n"


def init_schema(conn: sqlite3.Connection, with_thumbnails: bool = False):
    """
    Applies the core schema to the database.
    Idempotent: safe to run on every startup.
    """
    with conn:
        for stmt in FILES_SCHEMA:
            conn.execute(stmt)

        if with_thumbnails:
            for stmt in THUMBS_SCHEMA:
                conn.execute(stmt)

    logging.debug("Database schema initialized.")
