"""
pypdf-based text extraction backend.

Fast extraction suitable for most standard PDF files.
Handles encryption detection and empty password decryption.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from pypdf import PasswordType, PdfReader

from ..core import get_logger, PDFFileReadError, PDFFileTextExtractionError

logger = get_logger(__name__)


class PyPDFDocument:
    """An opened PDF read through pypdf."""

    def __init__(self, reader: PdfReader, filepath: str):
        self.reader = reader
        self.filepath = filepath
        self.num_pages = len(reader.pages)

    def page_text(self, page_num: int) -> str:
        """
        Extract text from a specific page.

        Args:
            page_num: Page number (1-indexed).

        Returns:
            Extracted text, empty string for pages without text.

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
            # Convert 1-indexed to 0-indexed
            return self.reader.pages[page_num - 1].extract_text() or ""
        except Exception as e:
            raise PDFFileTextExtractionError(self.filepath, page_num, e)


class PyPDFBackend:
    """
    PDF text extraction using the pypdf library.

    Provides fast extraction for standard PDFs with basic
    encryption handling.
    """

    name = "pypdf"

    @contextmanager
    def open(self, filepath: Union[str, Path]) -> Iterator[PyPDFDocument]:
        """
        Open and parse a PDF.

        Args:
            filepath: Path to the PDF file.

        Yields:
            PyPDFDocument for page access.

        Raises:
            PDFFileReadError: If the document cannot be parsed or decrypted.
        """
        source = str(filepath)

        try:
            reader = PdfReader(Path(filepath))

            if reader.is_encrypted:
                try:
                    result = reader.decrypt("")
                except Exception:
                    result = PasswordType.NOT_DECRYPTED

                if result == PasswordType.NOT_DECRYPTED:
                    raise PDFFileReadError(
                        source,
                        "PDF is encrypted and cannot be decrypted"
                    )

            document = PyPDFDocument(reader, source)

        except PDFFileReadError:
            raise
        except Exception as e:
            raise PDFFileReadError(source, e)

        logger.debug(f"Opened {document.num_pages} pages with pypdf: {source}")
        yield document


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m pdf_seekers.extraction.pypdf_backend <pdf_file>")
        sys.exit(1)

    backend = PyPDFBackend()

    try:
        with backend.open(sys.argv[1]) as doc:
            print(f"{doc.num_pages} pages")
            for page_num in range(1, min(doc.num_pages, 2) + 1):
                print(f"\n=== Page {page_num} ===")
                print(doc.page_text(page_num)[:500])
    except (PDFFileReadError, PDFFileTextExtractionError) as e:
        print(f"Extraction error: {e.message}")
