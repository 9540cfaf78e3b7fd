"""
Content-based media type detection.
"""
import magic


def sniff_media_type(header: bytes) -> str:
    """
    Returns the MIME type libmagic reports for the leading bytes of a file.
    The file name plays no part: a PNG saved as notes.txt is still image/png.
    """
    return magic.from_buffer(header, mime=True)
