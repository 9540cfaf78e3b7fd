#!/usr/bin/env python

import argparse
import sqlite3
from pathlib import Path
from typing import Optional


def connect_db(db_path: Path) -> sqlite3.Connection:
    if not db_path.exists():
        raise SystemExit(f"DB not found: {db_path}")
    return sqlite3.connect(db_path)


def _tag_filter(tag: Optional[str]):
    if tag is None:
        return "", ()
    return "WHERE tag = ?", (tag,)


def list_tags(conn: sqlite3.Connection):
    cur = conn.cursor()
    cur.execute("""
        SELECT tag, COUNT(*), SUM(size), SUM(error IS NOT NULL)
        FROM files
        GROUP BY tag
        ORDER BY tag
    """)
    rows = cur.fetchall()
    if not rows:
        print("Catalog is empty.")
        return

    print("tag                  |   files |       bytes | errors")
    print("---------------------+---------+-------------+-------")
    for tag, count, total, errors in rows:
        print(f"{tag.ljust(20)} | {count:7d} | {str(total or 0).rjust(11)} | {errors:6d}")


def list_media_types(conn: sqlite3.Connection, tag: Optional[str] = None):
    where, params = _tag_filter(tag)
    cur = conn.cursor()
    cur.execute(f"""
        SELECT media_type, COUNT(*)
        FROM files
        {where}
        GROUP BY media_type
        ORDER BY COUNT(*) DESC, media_type
    """, params)
    print("  count | media_type")
    print("--------+-----------")
    for media_type, count in cur.fetchall():
        print(f"{count:7d} | {media_type or '(unknown)'}")


def list_errors(conn: sqlite3.Connection, tag: Optional[str] = None):
    where, params = _tag_filter(tag)
    clause = f"{where} AND error IS NOT NULL" if where else "WHERE error IS NOT NULL"
    cur = conn.cursor()
    cur.execute(f"""
        SELECT tag, error, media_type, path
        FROM files
        {clause}
        ORDER BY error, tag, path
    """, params)
    rows = cur.fetchall()
    if not rows:
        print("No files with errors found.")
        return

    print("Files that could not be fully summarized:")
    print("error        | media_type           | tag        | path")
    print("-------------+----------------------+------------+-----")
    for tag_, error, media_type, path in rows:
        print(f"{error.ljust(12)} | {(media_type or '').ljust(20)} | {tag_.ljust(10)} | {path}")


def find_by_hash(conn: sqlite3.Connection, content_hash: str):
    cur = conn.cursor()
    cur.execute("""
        SELECT tag, path, size, mod_time
        FROM files
        WHERE content_hash = ?
        ORDER BY tag, path
    """, (content_hash,))
    rows = cur.fetchall()
    if not rows:
        print(f"No files with hash {content_hash}")
        return

    print(f"Files with hash {content_hash}:")
    for tag, path, size, mod_time in rows:
        print(f"  {tag} {path} ({size or 0} bytes, modified {mod_time or '?'})")


def parse_args():
    p = argparse.ArgumentParser(description="Query helper for a file catalog SQLite DB.")
    p.add_argument("--db", required=True, help="Path to the catalog database")
    p.add_argument("--tag", default=None, help="Restrict --errors / --media-types to one tag")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--tags", action="store_true", help="List tags with file counts")
    group.add_argument("--media-types", action="store_true", help="Count files by media type")
    group.add_argument("--errors", action="store_true", help="List files that have a failure recorded")
    group.add_argument("--hash", help="List every file with the given content hash")
    return p.parse_args()


def main():
    args = parse_args()
    db_path = Path(args.db).resolve()
    conn = connect_db(db_path)

    try:
        if args.tags:
            list_tags(conn)
        elif args.media_types:
            list_media_types(conn, args.tag)
        elif args.errors:
            list_errors(conn, args.tag)
        elif args.hash:
            find_by_hash(conn, args.hash)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
