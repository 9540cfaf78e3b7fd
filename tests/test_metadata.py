import io
import pytest
import fitz
from datetime import datetime
from PIL import Image
from file_catalog.metadata.document import DocumentExtractor
from file_catalog.metadata.extract import ImageExtractor
from file_catalog.models import Failure


def test_capture_time_and_thumbnail(make_jpeg):
    data = make_jpeg(size=(80, 60), exif_tags={306: "2020:01:01 10:00:00"})

    res = ImageExtractor(width=40).extract(io.BytesIO(data))

    assert res.capture_time == datetime(2020, 1, 1, 10, 0, 0)
    assert res.failure is None
    thumb = Image.open(io.BytesIO(res.thumbnail))
    assert thumb.format == "PNG"
    assert thumb.size == (40, 30)


def test_missing_exif_is_metadata_failure_but_thumbnail_survives(make_png):
    res = ImageExtractor(width=20).extract(io.BytesIO(make_png(size=(40, 20))))

    assert res.failure == Failure.METADATA
    assert res.capture_time is None
    assert Image.open(io.BytesIO(res.thumbnail)).size == (20, 10)


def test_exif_without_date_is_timestamp_failure(make_jpeg):
    # 271 = Make
    data = make_jpeg(exif_tags={271: "TestCam"})

    res = ImageExtractor(width=16).extract(io.BytesIO(data))

    assert res.failure == Failure.TIMESTAMP
    assert res.capture_time is None
    assert res.thumbnail is not None


def test_unparseable_date_is_timestamp_failure(make_jpeg):
    data = make_jpeg(exif_tags={306: "not a date"})

    res = ImageExtractor().extract(io.BytesIO(data))

    assert res.failure == Failure.TIMESTAMP


def test_truncated_image_is_decode_failure(make_jpeg):
    data = make_jpeg(size=(200, 200), exif_tags={306: "2020:01:01 10:00:00"})
    truncated = data[: len(data) * 2 // 3]

    res = ImageExtractor().extract(io.BytesIO(truncated))

    assert res.failure == Failure.DECODE
    assert res.thumbnail is None


def test_encode_failure_keeps_capture_time(make_jpeg, monkeypatch):
    data = make_jpeg(exif_tags={306: "2020:01:01 10:00:00"})

    def broken_save(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(Image.Image, "save", broken_save)

    res = ImageExtractor(width=16).extract(io.BytesIO(data))

    assert res.failure == Failure.ENCODE
    assert res.thumbnail is None
    assert res.capture_time == datetime(2020, 1, 1, 10, 0, 0)


def test_thumbnail_honors_exif_orientation(make_jpeg):
    # 274 = Orientation; 6 means rotate 90 degrees clockwise
    data = make_jpeg(size=(80, 40), exif_tags={274: 6, 306: "2021:05:06 07:08:09"})

    res = ImageExtractor(width=20).extract(io.BytesIO(data))

    # 80x40 rotated is 40x80, scaled to width 20
    assert Image.open(io.BytesIO(res.thumbnail)).size == (20, 40)
    assert res.capture_time == datetime(2021, 5, 6, 7, 8, 9)


def test_document_thumbnail_is_annotated_first_page(make_pdf):
    res = DocumentExtractor().extract(io.BytesIO(make_pdf(pages=3)), "t1", "docs/report.pdf")

    assert res.failure is None
    assert res.thumbnail.startswith(b"%PDF")
    with fitz.open(stream=res.thumbnail, filetype="pdf") as out:
        assert out.page_count == 1
        annot = out[0].first_annot
        assert annot is not None
        assert annot.info["content"] == "t1@docs/report.pdf"


@pytest.mark.parametrize("data", [b"%PDF-1.4\nthis is not a pdf body", b""])
def test_broken_document_is_document_failure(data):
    res = DocumentExtractor().extract(io.BytesIO(data), "t1", "bad.pdf")

    assert res.failure == Failure.DOCUMENT
    assert res.thumbnail is None
