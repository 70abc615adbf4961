"""
Keyword-in-context extraction and result metadata building.

For every candidate document returned by the search engine, the
candidate pages are re-examined: a page is confirmed when its text
contains the keyword as a whole space-delimited token, and a crop of the
surrounding tokens is kept for it.
"""

from typing import List

from ..core import get_config, get_logger, PDFFileTextExtractionError, TRACE
from ..extraction import PDFExtractor
from ..utils import crop_around
from .models import PDFMetadata, SearchHit

logger = get_logger(__name__)


def _parse_page_num(path: str, page_num) -> int:
    try:
        return int(page_num)
    except (TypeError, ValueError) as e:
        raise PDFFileTextExtractionError(path, page_num, e)


def _confirm(metadata: PDFMetadata, page_num: int, text: str, keyword: str, window: int) -> None:
    """Add the page to the result when it holds the keyword as a token."""
    if keyword not in text:
        return

    cropped = crop_around(text, keyword, window)

    if cropped is None:
        logger.debug(
            f"{metadata.doc_name} - Page {page_num} contains '{keyword}' only inside "
            f"a larger token, not reported"
        )
        return

    logger.log(TRACE, f"{metadata.doc_name} - Page {page_num} matched '{keyword}'")
    metadata.add_match(page_num, cropped)


def analyze(
    path: str,
    candidate_page_nums: List[str],
    keyword: str,
    window: int = None,
    extractor: PDFExtractor = None
) -> PDFMetadata:
    """
    Build the result metadata of one document by re-reading its PDF.

    Args:
        path: Source file path.
        candidate_page_nums: Page numbers (as stored, e.g. "3") to examine.
        keyword: Search keyword, matched as a substring then as an exact token.
        window: Tokens kept on each side of the keyword. Defaults to config value.
        extractor: Text extractor. Defaults to the configured backends.

    Returns:
        PDFMetadata with the total page count and the confirmed pages.

    Raises:
        PDFFileReadError: If the PDF can no longer be opened.
        PDFFileTextExtractionError: If a candidate page is invalid or unreadable.
    """
    window = get_config().search.context_window if window is None else window
    extractor = extractor or PDFExtractor()

    with extractor.open(path) as document:
        metadata = PDFMetadata(doc_name=path, num_pages=document.num_pages)

        for page_num in candidate_page_nums:
            number = _parse_page_num(path, page_num)
            text = document.page_text(number)
            _confirm(metadata, number, text, keyword, window)

    logger.debug(f"{path} - {len(metadata.matched_page_nums)} of {metadata.num_pages} pages matched")
    return metadata


def analyze_stored(hit: SearchHit, keyword: str, window: int = None) -> PDFMetadata:
    """
    Build the result metadata of one document from its stored content.

    Same confirmation and crop as analyze(), without opening the PDF;
    the page count is the number of stored pages.
    """
    window = get_config().search.context_window if window is None else window

    metadata = PDFMetadata(doc_name=hit.path, num_pages=len(hit.page_nums))

    for page_num, text in zip(hit.page_nums, hit.contents):
        _confirm(metadata, _parse_page_num(hit.path, page_num), text, keyword, window)

    return metadata


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 3:
        print("Usage: python -m pdf_seekers.search.context_extractor <pdf_file> <keyword>")
        sys.exit(1)

    pdf_path, word = sys.argv[1], sys.argv[2]

    with PDFExtractor().open(pdf_path) as doc:
        pages = [str(n) for n in range(1, doc.num_pages + 1)]

    print(analyze(pdf_path, pages, word).show())
