import os
import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple


class DiskScanner:
    """
    Enumerates the regular, non-hidden files under a root.

    Hidden entries (names starting with '.') are skipped and hidden
    directories are never descended into. Symlinks are not followed.
    """

    def iter_files(self, root: Path) -> Iterator[Tuple[Path, Optional[os.stat_result]]]:
        """
        Depth-first walker using os.scandir for speed.
        Yields (path, stat_result); stat_result is None when stat failed.
        A hidden root yields nothing.
        """
        if self.is_hidden(root.name):
            logging.info(f"Skipping hidden root {root}")
            return

        if root.is_file() and not root.is_symlink():
            yield root, self._stat_path(root)
            return

        stack = [root]
        while stack:
            current = stack.pop()

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                logging.warning(f"Cannot list {current}: {e}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            files = []
            for e in entries:
                if self.is_hidden(e.name):
                    continue
                try:
                    if e.is_dir(follow_symlinks=False):
                        dirs.append(Path(e.path))
                    elif e.is_file(follow_symlinks=False):
                        files.append(e)
                except OSError as err:
                    logging.warning(f"Failed to stat {e.path}: {err}")

            # Push dirs to stack (reversed so we process A before Z)
            for d in reversed(dirs):
                stack.append(d)

            for f in files:
                yield Path(f.path), self._stat(f)

    def is_hidden(self, name: str) -> bool:
        # '.' and '..' are relative roots, not hidden names
        return name.startswith('.') and name not in ('.', '..')

    def _stat_path(self, path: Path) -> Optional[os.stat_result]:
        try:
            return path.lstat()
        except OSError as e:
            logging.warning(f"Failed to stat {path}: {e}")
            return None

    def _stat(self, entry: os.DirEntry) -> Optional[os.stat_result]:
        try:
            return entry.stat(follow_symlinks=False)
        except OSError as e:
            logging.warning(f"Failed to stat {entry.path}: {e}")
            return None
