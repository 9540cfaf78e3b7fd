import os
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Optional

from .. import config
from ..config import CatalogConfig
from ..metadata.document import DocumentExtractor
from ..metadata.extract import ImageExtractor
from ..models import Capability, ExtractionResult, Failure, FileSummary
from .hasher import FileHasher
from .sniffer import sniff_media_type

Extractor = Callable[[BinaryIO, str, str], ExtractionResult]


def classify(media_type: Optional[str]) -> Capability:
    """Maps a sniffed media type to the extractor capability that handles it."""
    if not media_type:
        return Capability.NONE
    if media_type.startswith(config.IMAGE_PREFIX):
        return Capability.IMAGE
    if media_type.startswith(config.DOCUMENT_PREFIX):
        return Capability.DOCUMENT
    return Capability.NONE


class ContentInspector:
    """
    Builds a FileSummary for one file: sniff, hash, then type-specific extraction.

    Failures never abort summarization. Each stage that cannot complete records
    its Failure and the summary keeps everything determined up to that point.
    """

    def __init__(self, cfg: Optional[CatalogConfig] = None):
        self.cfg = cfg or CatalogConfig()
        self.hasher = FileHasher()
        self.extractors = self._build_dispatch()

    def _build_dispatch(self) -> Dict[Capability, Extractor]:
        table: Dict[Capability, Extractor] = {}
        if Capability.IMAGE in self.cfg.capabilities:
            images = ImageExtractor(self.cfg.thumbnail_width)
            table[Capability.IMAGE] = lambda stream, tag, path: images.extract(stream)
        if Capability.DOCUMENT in self.cfg.capabilities:
            table[Capability.DOCUMENT] = DocumentExtractor().extract
        return table

    def inspect(self, tag: str, path: Path, stat_info: Optional[os.stat_result]) -> FileSummary:
        norm_path = self.normalize_path(path)
        if stat_info is None:
            return FileSummary(tag=tag, path=norm_path, failure=Failure.STAT)

        try:
            stream = open(path, 'rb')
        except OSError as e:
            logging.debug(f"Cannot open {path}: {e}")
            return FileSummary(
                tag=tag,
                path=norm_path,
                size=stat_info.st_size,
                mod_time=_mod_time(stat_info),
                failure=Failure.OPEN,
            )

        with stream:
            return self.inspect_stream(tag, norm_path, stat_info, stream)

    def inspect_stream(self, tag: str, path: str, stat_info: os.stat_result, stream: BinaryIO) -> FileSummary:
        """Summarizes an already opened, seekable stream. `path` is stored as given."""
        size = stat_info.st_size
        mod_time = _mod_time(stat_info)

        try:
            header = stream.read(config.HEADER_SIZE)
        except OSError:
            return FileSummary(tag=tag, path=path, size=size, mod_time=mod_time, failure=Failure.READ)
        media_type = sniff_media_type(header)

        try:
            stream.seek(0)
        except OSError:
            return FileSummary(tag=tag, path=path, size=size, mod_time=mod_time,
                               media_type=media_type, failure=Failure.SEEK)
        try:
            content_hash = self.hasher.hash_stream(stream)
        except OSError:
            return FileSummary(tag=tag, path=path, size=size, mod_time=mod_time,
                               media_type=media_type, failure=Failure.READ)

        result = ExtractionResult()
        extractor = self.extractors.get(classify(media_type))
        if extractor is not None:
            result = extractor(stream, tag, path)

        return FileSummary(
            tag=tag,
            path=path,
            content_hash=content_hash,
            size=size,
            mod_time=mod_time,
            media_type=media_type,
            capture_time=result.capture_time,
            thumbnail=result.thumbnail,
            failure=result.failure,
        )

    def normalize_path(self, path: Path) -> str:
        """Strips the configured volume prefix and returns a forward-slash path."""
        if self.cfg.volume is None:
            return Path(path).as_posix()
        try:
            rel = os.path.relpath(path, self.cfg.volume)
        except ValueError as e:
            # e.g. path and volume on different drives
            logging.warning(f"path {path}: failed to normalize: {e}")
            return Path(path).as_posix()
        return Path(rel).as_posix()


def _mod_time(stat_info: os.stat_result) -> datetime:
    return datetime.fromtimestamp(stat_info.st_mtime, tz=timezone.utc)
