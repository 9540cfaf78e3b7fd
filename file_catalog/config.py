"""
Configuration constants for the file catalog.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

from .models import Capability

# --- Content Sniffing ---
# Only the leading bytes are inspected to determine the media type
HEADER_SIZE = 4096

# Media type prefixes mapped to extractor capabilities
IMAGE_PREFIX = "image"
DOCUMENT_PREFIX = "application/pdf"

# --- Hashing & Performance ---
HASH_ALGORITHM = "sha256"
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Metadata Parsing ---
DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'EXIF DateTimeDigitized',
    'Image DateTime',
]

# --- Thumbnails ---
DEFAULT_THUMBNAIL_WIDTH = 640
# Modes Pillow can write to PNG without conversion
PNG_MODES = {'1', 'L', 'LA', 'I', 'P', 'RGB', 'RGBA'}

# Provenance annotation placed on document thumbnails
ANNOTATION_POINT = (20, 100)

# --- Search ---
PATH_SEPARATORS = set('/\\_-. ')

# --- Capabilities ---
ALL_CAPABILITIES = frozenset({Capability.IMAGE, Capability.DOCUMENT})

LOG_FILE_NAME = "catalog.log"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Per-run settings threaded explicitly into the pipeline components.

    volume: prefix stripped from cataloged paths (usually a mount point).
    thumbnail_width: target width of image thumbnails; aspect ratio is kept.
    capabilities: extractor capabilities that are enabled for this run.
    store_thumbnails: persist thumbnails into the attached thumbnails db.
    """
    volume: Optional[Path] = None
    thumbnail_width: int = DEFAULT_THUMBNAIL_WIDTH
    capabilities: FrozenSet[Capability] = field(default_factory=lambda: ALL_CAPABILITIES)
    store_thumbnails: bool = False
