import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import config
from .config import CatalogConfig
from .core import FileCatalogApp
from .database.schema import schema_sql
from .exceptions import DatabaseError
from .models import Capability

USAGE_EPILOG = """\
examples:
  file-catalog --db summaries.db --tag backup /mnt/c/snapshot
      add the files rooted at /mnt/c/snapshot, tagged with backup

  file-catalog --db summaries.db --tag backup --volume /mnt/c /mnt/c/snapshot
      same as above but paths are saved as snapshot/... (prefix /mnt/c stripped)

  file-catalog --db summaries.db --search main
      fuzzy search the cataloged paths matching main

  file-catalog --schema
      display the sql for the tables of the database
"""


def setup_logging(log_file: Optional[Path], verbose: bool):
    """Sets up logging to stderr and, when given, a log file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Walk directories and catalog a summary of every regular file into an SQLite database.",
        epilog=USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    p.add_argument("roots", type=Path, nargs="*", help="Directories to catalog")

    p.add_argument("-d", "--db", type=Path, default=None,
                   help="SQLite database file. Created and initialized with the schema if needed")
    p.add_argument("-t", "--tag", default=None,
                   help="Tag for the cataloged paths, e.g. an identifier for the disk they came from")
    p.add_argument("--volume", type=Path, default=None,
                   help="Prefix to strip from paths before saving. Usually the mount point of a disk")
    p.add_argument("-w", "--width", type=int, default=config.DEFAULT_THUMBNAIL_WIDTH,
                   help="Width of image thumbnails. Aspect ratio is preserved")
    p.add_argument("--thumbnails", action="store_true",
                   help="Store thumbnails in a second database next to --db (<name>_thumbnails.db)")
    p.add_argument("--no-documents", action="store_true", help="Do not produce PDF thumbnails")
    p.add_argument("-s", "--search", default=None, help="Fuzzy search the database for paths matching the argument")
    p.add_argument("--schema", action="store_true", help="Print the SQLite schema and exit")
    p.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p, p.parse_args(argv)


def build_config(args) -> CatalogConfig:
    capabilities = set(config.ALL_CAPABILITIES)
    if args.no_documents:
        capabilities.discard(Capability.DOCUMENT)
    return CatalogConfig(
        volume=args.volume.resolve() if args.volume else None,
        thumbnail_width=args.width,
        capabilities=frozenset(capabilities),
        store_thumbnails=args.thumbnails,
    )


def main(argv=None):
    parser, args = parse_args(argv)

    if args.schema:
        print(schema_sql())
        return 0

    if args.db is None:
        parser.error("--db is required")
    if args.width <= 0:
        parser.error("--width must be positive")

    db_path = args.db.resolve()
    setup_logging(db_path.parent / config.LOG_FILE_NAME, args.verbose)

    app = FileCatalogApp(db_path, build_config(args))

    if args.search is not None:
        if not args.search:
            parser.error("--search needs a non-empty query")
        try:
            matches = app.search(args.search)
        except DatabaseError:
            logging.exception("Cannot search the catalog.")
            return 1
        for match in matches:
            print(match.candidate.tag, match.candidate.path)
        return 0

    if not args.tag:
        parser.error("--tag is required to catalog")
    if not args.roots:
        parser.error("at least one directory is required to catalog")

    logging.info("=== File Catalog Started ===")
    logging.info(f"Database: {db_path}")

    try:
        app.catalog(args.tag, args.roots, progress=not args.no_progress)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1
    except DatabaseError:
        logging.exception("Fatal error opening the catalog.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
