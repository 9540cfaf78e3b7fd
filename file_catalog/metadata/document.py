import logging
from typing import BinaryIO

import fitz  # PyMuPDF

from .. import config
from ..models import ExtractionResult, Failure


class DocumentExtractor:
    """
    Produces a single-page PDF from the first page of a document, annotated
    with "tag@path" so the artifact can be traced back to its source file.
    """

    def extract(self, stream: BinaryIO, tag: str, path: str) -> ExtractionResult:
        try:
            stream.seek(0)
        except OSError:
            return ExtractionResult(failure=Failure.SEEK)

        try:
            data = stream.read()
            with fitz.open(stream=data, filetype="pdf") as src, fitz.open() as out:
                if src.page_count < 1:
                    raise ValueError("document has no pages")
                out.insert_pdf(src, from_page=0, to_page=0)
                page = out.load_page(0)
                annot = page.add_text_annot(fitz.Point(*config.ANNOTATION_POINT), f"{tag}@{path}")
                annot.update()
                thumbnail = out.tobytes()
        except Exception as e:
            logging.debug(f"PyMuPDF failed for {tag}@{path}: {e}")
            return ExtractionResult(failure=Failure.DOCUMENT)

        return ExtractionResult(thumbnail=thumbnail)
