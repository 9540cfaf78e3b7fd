import io
import pytest
import sqlite3
import fitz
from PIL import Image
from file_catalog.database.schema import init_schema
from file_catalog.database.ops import SummaryStore

@pytest.fixture
def conn():
    """Returns an in-memory SQLite connection with the schema initialized."""
    c = sqlite3.connect(":memory:")
    init_schema(c)
    try:
        yield c
    finally:
        c.close()

@pytest.fixture
def store(conn):
    """Returns a SummaryStore attached to the in-memory DB."""
    return SummaryStore(conn)

@pytest.fixture
def make_jpeg():
    """Factory for JPEG bytes, optionally carrying EXIF tags {tag_id: value}."""
    def _make(size=(80, 60), exif_tags=None):
        img = Image.effect_noise(size, 64).convert("RGB")
        kwargs = {}
        if exif_tags:
            exif = Image.Exif()
            for tag_id, value in exif_tags.items():
                exif[tag_id] = value
            kwargs["exif"] = exif.tobytes()
        buf = io.BytesIO()
        img.save(buf, format="JPEG", **kwargs)
        return buf.getvalue()
    return _make

@pytest.fixture
def make_png():
    def _make(size=(40, 20)):
        buf = io.BytesIO()
        Image.new("RGB", size, (10, 120, 200)).save(buf, format="PNG")
        return buf.getvalue()
    return _make

@pytest.fixture
def make_pdf():
    """Factory for PDF bytes with one line of text per page."""
    def _make(pages=1):
        with fitz.open() as doc:
            for i in range(pages):
                page = doc.new_page()
                page.insert_text((72, 72), f"page {i + 1}")
            return doc.tobytes()
    return _make
