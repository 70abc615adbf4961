"""
Unified PDF extraction interface with automatic fallback.

Wraps the extraction backends and falls back to the secondary backend
when the primary one cannot open a document. Page-level failures are
never retried: they abort extraction of the whole file.
"""

from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from ..core import get_config, get_logger, ConfigurationError, PDFFileReadError, TRACE
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend

logger = get_logger(__name__)


BACKENDS = {
    "pypdf": PyPDFBackend,
    "pdfplumber": PDFPlumberBackend
}


class PDFExtractor:
    """
    Unified PDF extraction with automatic backend fallback.

    Tries the primary backend first and falls back to the secondary one
    only when the document cannot be opened.
    """

    def __init__(
        self,
        primary_backend: str = None,
        fallback_backend: str = None
    ):
        """
        Initialize the extractor with configured backends.

        Args:
            primary_backend: Name of primary backend ("pypdf" or "pdfplumber").
            fallback_backend: Name of fallback backend, "" or None to disable.
        """
        config = get_config()

        primary_name = primary_backend or config.extraction.primary_backend
        fallback_name = (
            config.extraction.fallback_backend
            if fallback_backend is None else fallback_backend
        )

        if primary_name not in BACKENDS:
            raise ConfigurationError(f"Unknown backend: {primary_name}")

        if fallback_name and fallback_name not in BACKENDS:
            raise ConfigurationError(f"Unknown backend: {fallback_name}")

        self.primary = BACKENDS[primary_name]()
        self.fallback = BACKENDS[fallback_name]() if fallback_name else None

        logger.debug(
            f"Initialized extractor: primary={primary_name}, fallback={fallback_name}"
        )

    def _enter_document(self, filepath: Union[str, Path], stack: ExitStack):
        """Open the document with the primary backend, then the fallback."""
        try:
            return stack.enter_context(self.primary.open(filepath))
        except PDFFileReadError as primary_error:
            if self.fallback is None:
                raise

            logger.debug(f"Primary backend failed: {primary_error.message}")

            try:
                logger.debug(f"Trying fallback backend for: {filepath}")
                return stack.enter_context(self.fallback.open(filepath))
            except PDFFileReadError as fallback_error:
                logger.debug(f"Fallback backend also failed: {fallback_error.message}")
                raise primary_error

    @contextmanager
    def open(self, filepath: Union[str, Path]) -> Iterator:
        """
        Open a PDF with the available backends.

        Yields:
            Backend document exposing `num_pages` and `page_text()`.

        Raises:
            PDFFileReadError: If no backend can open the document.
        """
        with ExitStack() as stack:
            yield self._enter_document(filepath, stack)

    def extract(self, filepath: Union[str, Path]) -> List[Tuple[int, str]]:
        """
        Extract the text of every page of a PDF.

        Args:
            filepath: Path to the PDF file.

        Returns:
            List of (page_number, text) tuples, 1-indexed and contiguous.
            Pages without text yield an empty string.

        Raises:
            PDFFileReadError: If the document cannot be opened.
            PDFFileTextExtractionError: If any page fails; nothing is returned.
        """
        with self.open(filepath) as document:
            logger.log(
                TRACE,
                f"PDF document `{filepath}` with {document.num_pages} pages read successfully."
            )

            return [
                (page_num, document.page_text(page_num))
                for page_num in range(1, document.num_pages + 1)
            ]


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m pdf_seekers.extraction.extractor <pdf_file>")
        sys.exit(1)

    extractor = PDFExtractor()

    pages = extractor.extract(sys.argv[1])
    print(f"Extracted {len(pages)} pages from {sys.argv[1]}")

    total_chars = sum(len(text) for _, text in pages)
    print(f"Total characters: {total_chars:,}")
