"""
pdfplumber-based text extraction backend.

Better handling of complex layouts and multi-column documents.
Slower than pypdf; used as the fallback when pypdf cannot open a file.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

import pdfplumber

from ..core import get_logger, PDFFileReadError, PDFFileTextExtractionError

logger = get_logger(__name__)


class PDFPlumberDocument:
    """An opened PDF read through pdfplumber."""

    def __init__(self, pdf, filepath: str):
        self.pdf = pdf
        self.filepath = filepath
        self.num_pages = len(pdf.pages)

    def page_text(self, page_num: int) -> str:
        """
        Extract text from a specific page.

        Args:
            page_num: Page number (1-indexed).

        Raises:
            PDFFileTextExtractionError: If the page is missing or unreadable.
        """
        if not 1 <= page_num <= self.num_pages:
            raise PDFFileTextExtractionError(
                self.filepath,
                page_num,
                IndexError(f"page out of range (1-{self.num_pages})")
            )

        try:
            return self.pdf.pages[page_num - 1].extract_text() or ""
        except Exception as e:
            raise PDFFileTextExtractionError(self.filepath, page_num, e)


class PDFPlumberBackend:
    """
    PDF text extraction using pdfplumber library.

    Provides more accurate extraction for complex layouts
    at the cost of slower processing.
    """

    name = "pdfplumber"

    @contextmanager
    def open(self, filepath: Union[str, Path]) -> Iterator[PDFPlumberDocument]:
        """
        Open and parse a PDF, closing it when the block exits.

        Raises:
            PDFFileReadError: If the document cannot be parsed.
        """
        source = str(filepath)

        try:
            pdf = pdfplumber.open(Path(filepath))
        except Exception as e:
            raise PDFFileReadError(source, e)

        try:
            try:
                document = PDFPlumberDocument(pdf, source)
            except Exception as e:
                raise PDFFileReadError(source, e)

            logger.debug(f"Opened {document.num_pages} pages with pdfplumber: {source}")
            yield document
        finally:
            pdf.close()


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m pdf_seekers.extraction.pdfplumber_backend <pdf_file>")
        sys.exit(1)

    backend = PDFPlumberBackend()

    try:
        with backend.open(sys.argv[1]) as doc:
            print(f"{doc.num_pages} pages")
            print(doc.page_text(1)[:500])
    except (PDFFileReadError, PDFFileTextExtractionError) as e:
        print(f"Extraction error: {e.message}")
