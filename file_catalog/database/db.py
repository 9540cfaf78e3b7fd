"""
Database connection management.
"""
import sqlite3
import logging
from pathlib import Path
from typing import Optional

from ..exceptions import StoreInitError
from .schema import THUMBS_ALIAS, init_schema

MEMORY_DB = ":memory:"


def thumbnails_path(db_path: Path) -> Path:
    """catalog.db -> catalog_thumbnails.db, next to the primary database."""
    if str(db_path) == MEMORY_DB:
        return db_path
    return db_path.with_name(f"{db_path.stem}_thumbnails{db_path.suffix}")


class DBManager:
    def __init__(self, db_path: Path, with_thumbnails: bool = False):
        self.db_path = db_path
        self.with_thumbnails = with_thumbnails
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        """
        Connects to the SQLite database and configures performance pragmas.
        Raises StoreInitError if the store cannot be opened or initialized.
        """
        if self._conn:
            return self._conn

        logging.info(f"Connecting to database: {self.db_path}")
        try:
            self._conn = sqlite3.connect(self.db_path)

            # Performance Tuning (Safe for single-writer, multi-reader)
            self._conn.execute("PRAGMA journal_mode=WAL;")
            self._conn.execute("PRAGMA synchronous=NORMAL;")
            self._conn.execute("PRAGMA temp_store=MEMORY;")

            if self.with_thumbnails:
                thumbs = thumbnails_path(Path(self.db_path))
                logging.info(f"Attaching thumbnails database: {thumbs}")
                self._conn.execute(f"ATTACH DATABASE ? AS {THUMBS_ALIAS}", (str(thumbs),))

            # Ensure schema exists
            init_schema(self._conn, with_thumbnails=self.with_thumbnails)
        except sqlite3.Error as e:
            self.close()
            raise StoreInitError(f"Cannot open database {self.db_path}: {e}") from e

        return self._conn

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
