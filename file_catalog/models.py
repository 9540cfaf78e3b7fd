from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional, Tuple


class Failure(Enum):
    """
    Closed set of per-file failure classifications.
    The value is the human-readable string persisted in the error column.
    """
    STAT = "Stat"
    OPEN = "Open"
    READ = "Read"
    SEEK = "Seek"
    METADATA = "Exif"
    TIMESTAMP = "ExifTime"
    DECODE = "ImageDecode"
    ENCODE = "ImageEncode"
    DOCUMENT = "PDF"


class Capability(Enum):
    NONE = "none"
    IMAGE = "image"
    DOCUMENT = "document"


@dataclass(frozen=True)
class FileSummary:
    """
    Everything the pipeline could determine about one cataloged file.
    None means the field was not determined.
    """
    tag: str
    path: str
    content_hash: Optional[str] = None
    size: Optional[int] = None
    mod_time: Optional[datetime] = None
    media_type: Optional[str] = None
    capture_time: Optional[datetime] = None
    thumbnail: Optional[bytes] = None
    failure: Optional[Failure] = None


@dataclass(frozen=True)
class ExtractionResult:
    """Output shared by all extractor capabilities."""
    capture_time: Optional[datetime] = None
    thumbnail: Optional[bytes] = None
    failure: Optional[Failure] = None


class TaggedPath(NamedTuple):
    tag: str
    path: str


@dataclass(frozen=True)
class Match:
    candidate: TaggedPath
    score: int
    matched_indexes: Tuple[int, ...] = ()
