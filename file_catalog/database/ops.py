import sqlite3
import logging
from datetime import datetime
from typing import Iterator, Optional

from ..exceptions import DatabaseError, DuplicateError
from ..models import FileSummary, TaggedPath
from .schema import THUMBS_ALIAS

INSERT_FILE_SQL = """
    INSERT INTO files (tag, path, content_hash, size, mod_time, media_type, capture_time, error)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""

INSERT_THUMB_SQL = f"INSERT INTO {THUMBS_ALIAS}.thumbnails (file_id, thumbnail) VALUES (?, ?)"

# Projection only; blob and hash columns stay on disk
RETRIEVE_PATHS_SQL = "SELECT tag, path FROM files"


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


class SummaryStore:
    """
    Persists FileSummaries into the 'files' table.
    Each save is its own transaction: the row (and its thumbnail) is either
    fully committed or not present at all.
    """

    def __init__(self, conn: sqlite3.Connection, store_thumbnails: bool = False):
        self.conn = conn
        self.store_thumbnails = store_thumbnails

    def save(self, summary: FileSummary) -> int:
        """
        Inserts one summary and returns its row id.

        Raises:
            DuplicateError: (tag, path, content_hash) is already cataloged.
            DatabaseError: any other store failure.
        """
        params = (
            summary.tag,
            summary.path,
            summary.content_hash,
            summary.size,
            _iso(summary.mod_time),
            summary.media_type,
            _iso(summary.capture_time),
            summary.failure.value if summary.failure else None,
        )
        try:
            with self.conn:
                cur = self.conn.execute(INSERT_FILE_SQL, params)
                file_id = cur.lastrowid
                if file_id is None:
                    raise DatabaseError("Database INSERT failed to return a row ID.")

                if self.store_thumbnails and summary.thumbnail is not None:
                    self.conn.execute(INSERT_THUMB_SQL, (file_id, summary.thumbnail))
        except sqlite3.IntegrityError as e:
            if "UNIQUE constraint failed" in str(e):
                raise DuplicateError(f"Already cataloged: {summary.tag} {summary.path}") from e
            raise DatabaseError(f"Cannot insert file {summary.path}: {e}") from e
        except sqlite3.Error as e:
            raise DatabaseError(f"Cannot insert file {summary.path}: {e}") from e

        logging.debug(f"Saved {summary.tag} {summary.path} as id {file_id}")
        return file_id

    def scan_all(self) -> Iterator[TaggedPath]:
        """Streams the (tag, path) projection of every cataloged file."""
        cur = self.conn.execute(RETRIEVE_PATHS_SQL)
        try:
            for tag, path in cur:
                yield TaggedPath(tag, path)
        finally:
            cur.close()

    def count(self) -> int:
        cur = self.conn.execute("SELECT COUNT(*) FROM files")
        return cur.fetchone()[0]

    def fetch_thumbnail(self, file_id: int) -> Optional[bytes]:
        """Returns the stored thumbnail for a files.id, if the thumbnails db is attached."""
        if not self.store_thumbnails:
            return None
        cur = self.conn.execute(
            f"SELECT thumbnail FROM {THUMBS_ALIAS}.thumbnails WHERE file_id = ?", (file_id,)
        )
        row = cur.fetchone()
        return row[0] if row else None
