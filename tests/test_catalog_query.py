import sqlite3
import pytest
from datetime import datetime, timezone

import catalog_query as cq

from file_catalog.database.schema import init_schema
from file_catalog.database.ops import SummaryStore
from file_catalog.models import Failure, FileSummary


@pytest.fixture
def conn(tmp_path):
    db_path = tmp_path / "db.sqlite"
    c = sqlite3.connect(db_path)
    init_schema(c)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def populated(conn):
    store = SummaryStore(conn)
    mod = datetime(2024, 3, 1, tzinfo=timezone.utc)
    store.save(FileSummary(tag="disk1", path="a/photo.jpg", content_hash="h1", size=10,
                           mod_time=mod, media_type="image/jpeg"))
    store.save(FileSummary(tag="disk1", path="a/broken.jpg", content_hash="h2", size=5,
                           media_type="image/jpeg", failure=Failure.DECODE))
    store.save(FileSummary(tag="disk2", path="copy/photo.jpg", content_hash="h1", size=10,
                           media_type="image/jpeg"))
    store.save(FileSummary(tag="disk2", path="notes.txt", content_hash="h3", size=3,
                           media_type="text/plain"))
    return conn


def test_connect_db_missing(tmp_path):
    with pytest.raises(SystemExit):
        cq.connect_db(tmp_path / "none.db")


def test_list_tags(populated, capsys):
    cq.list_tags(populated)
    out = capsys.readouterr().out
    assert "disk1" in out
    assert "disk2" in out


def test_list_tags_empty(conn, capsys):
    cq.list_tags(conn)
    assert "Catalog is empty." in capsys.readouterr().out


def test_list_errors_filters_by_tag(populated, capsys):
    cq.list_errors(populated, "disk1")
    out = capsys.readouterr().out
    assert "ImageDecode" in out
    assert "a/broken.jpg" in out

    cq.list_errors(populated, "disk2")
    assert "No files with errors found." in capsys.readouterr().out


def test_list_media_types(populated, capsys):
    cq.list_media_types(populated)
    lines = capsys.readouterr().out.splitlines()
    assert lines[2].split("|")[1].strip() == "image/jpeg"
    assert lines[2].split("|")[0].strip() == "3"


def test_find_by_hash_lists_every_copy(populated, capsys):
    cq.find_by_hash(populated, "h1")
    out = capsys.readouterr().out
    assert "disk1 a/photo.jpg" in out
    assert "disk2 copy/photo.jpg" in out
    assert "2024-03-01T00:00:00+00:00" in out

    cq.find_by_hash(populated, "nope")
    assert "No files with hash nope" in capsys.readouterr().out
