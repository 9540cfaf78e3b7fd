import io
import logging
from datetime import datetime
from typing import Optional, Tuple, BinaryIO

import exifread
from PIL import Image, ImageOps

from .. import config
from ..models import ExtractionResult, Failure


class ImageExtractor:
    """
    Extracts capture time and a PNG thumbnail from an image stream.

    Strategies:
      - Capture time: 'exifread' (fast, Python-native).
      - Thumbnail: Pillow, honoring the EXIF orientation.

    Both halves run independently; the result carries whatever succeeded.
    When both fail, the thumbnail failure is the one reported.
    """

    def __init__(self, width: int = config.DEFAULT_THUMBNAIL_WIDTH):
        self.width = width

    def extract(self, stream: BinaryIO) -> ExtractionResult:
        try:
            stream.seek(0)
        except OSError:
            return ExtractionResult(failure=Failure.SEEK)
        capture_time, failure = self._read_capture_time(stream)

        try:
            stream.seek(0)
        except OSError:
            return ExtractionResult(capture_time=capture_time, failure=Failure.SEEK)
        thumbnail, thumb_failure = self._make_thumbnail(stream)

        return ExtractionResult(
            capture_time=capture_time,
            thumbnail=thumbnail,
            failure=thumb_failure or failure,
        )

    def _read_capture_time(self, stream: BinaryIO) -> Tuple[Optional[datetime], Optional[Failure]]:
        try:
            # details=False speeds up processing significantly
            tags = exifread.process_file(stream, details=False)
        except Exception as e:
            logging.debug(f"ExifRead failed: {e}")
            return None, Failure.METADATA

        if not tags:
            return None, Failure.METADATA

        dt = self._parse_exif_date(tags)
        if dt is None:
            return None, Failure.TIMESTAMP
        return dt, None

    def _make_thumbnail(self, stream: BinaryIO) -> Tuple[Optional[bytes], Optional[Failure]]:
        try:
            img = Image.open(stream)
            # open() is lazy; load() is what surfaces truncated bodies
            img.load()
            img = ImageOps.exif_transpose(img)
        except Exception as e:
            logging.debug(f"Image decode failed: {e}")
            return None, Failure.DECODE

        try:
            if img.mode not in config.PNG_MODES:
                img = img.convert('RGBA')
            height = max(1, round(img.height * self.width / img.width))
            thumb = img.resize((self.width, height), Image.Resampling.BICUBIC)
            buf = io.BytesIO()
            thumb.save(buf, format='PNG')
        except Exception as e:
            logging.debug(f"Thumbnail encode failed: {e}")
            return None, Failure.ENCODE

        return buf.getvalue(), None

    def _parse_exif_date(self, tags) -> Optional[datetime]:
        """Helper to parse standard EXIF date strings from exifread."""
        for tag in config.DATE_TAGS:
            if tag in tags:
                try:
                    # EXIF format is usually "YYYY:MM:DD HH:MM:SS"
                    dt_str = str(tags[tag]).strip().replace(':', '-', 2)
                    return datetime.strptime(dt_str, "%Y-%m-%d %H:%M:%S")
                except ValueError:
                    continue
        return None
