"""
Custom exception hierarchy for the file catalog.

Per-file problems found while summarizing are not exceptions: they are
recorded on the summary as a Failure. These types cover the store and the
run itself.
"""


class CatalogError(Exception):
    """Base exception for all file catalog errors."""
    pass


class DatabaseError(CatalogError):
    """Raised when database operations fail."""
    pass


class DuplicateError(DatabaseError):
    """Raised when a (tag, path, content hash) combination is already cataloged."""
    pass


class StoreInitError(DatabaseError):
    """Raised when the backing store cannot be opened or initialized."""
    pass
