import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from tqdm import tqdm

from .config import CatalogConfig
from .database.db import DBManager
from .database.ops import SummaryStore
from .exceptions import DatabaseError, DuplicateError
from .models import Match
from .scanning.filesystem import DiskScanner
from .scanning.inspector import ContentInspector
from .search.matcher import PathMatcher


@dataclass
class CatalogStats:
    saved: int = 0
    duplicates: int = 0
    failed: int = 0
    skipped_roots: int = 0

    @property
    def processed(self) -> int:
        return self.saved + self.duplicates + self.failed


class FileCatalogApp:
    def __init__(self, db_path: Path, cfg: Optional[CatalogConfig] = None):
        self.cfg = cfg or CatalogConfig()
        self.db_manager = DBManager(db_path, with_thumbnails=self.cfg.store_thumbnails)

    def catalog(self, tag: str, roots: Iterable[Path], progress: bool = True) -> CatalogStats:
        """
        Summarizes every regular, non-hidden file under each root and saves it.
        Per-file problems are logged and the walk continues.
        """
        stats = CatalogStats()
        with self.db_manager as conn:
            store = SummaryStore(conn, store_thumbnails=self.cfg.store_thumbnails)
            scanner = DiskScanner()
            inspector = ContentInspector(self.cfg)

            for root in roots:
                try:
                    abs_root = Path(root).resolve()
                except (OSError, RuntimeError) as e:
                    logging.error(f"Failed to make absolute path for {root}: {e}")
                    stats.skipped_roots += 1
                    continue

                logging.info(f"Scanning {abs_root} (Tag={tag})...")
                files = scanner.iter_files(abs_root)
                for path, stat_info in tqdm(files, desc=f"Cataloging {abs_root.name or abs_root}",
                                            unit="file", disable=not progress):
                    self._catalog_file(store, inspector, tag, path, stat_info, stats)

        logging.info(
            f"Catalog complete. Processed {stats.processed} files: saved {stats.saved}, "
            f"duplicates {stats.duplicates}, failed {stats.failed}."
        )
        return stats

    def _catalog_file(self, store, inspector, tag, path, stat_info, stats: CatalogStats):
        try:
            summary = inspector.inspect(tag, path, stat_info)
        except Exception as e:
            logging.error(f"Failed to summarize {path}: {e}")
            stats.failed += 1
            return

        if summary.failure:
            logging.debug(f"{path}: {summary.failure.value}")

        try:
            store.save(summary)
            stats.saved += 1
        except DuplicateError:
            logging.debug(f"Already cataloged: {tag} {summary.path}")
            stats.duplicates += 1
        except DatabaseError as e:
            logging.error(f"Failed to save summary for {path}: {e}")
            stats.failed += 1

    def search(self, query: str) -> List[Match]:
        """Fuzzy-matches query against every cataloged path, best first."""
        if not query:
            return []
        with self.db_manager as conn:
            store = SummaryStore(conn)
            candidates = list(store.scan_all())
        logging.debug(f"Searching {len(candidates)} paths for {query!r}")
        return PathMatcher().find(query, candidates)
