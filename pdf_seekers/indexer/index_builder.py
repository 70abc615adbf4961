"""
Main indexing pipeline for PDF Seekers.

Orchestrates the indexing workflow: classifying the input, enumerating
PDF candidates, extracting page text and adding one index document per
file. Directory runs consult the processing tracker so that re-running
the same directory only indexes new or changed files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Union

from ..core import (
    get_config,
    get_logger,
    PDFFileReadError,
    PDFFileTextExtractionError
)
from ..database import DocumentRepository, IndexHandle
from ..extraction import PDFExtractor, classify, enumerate_pdfs, PathKind
from ..tracking import TrackerPair
from ..utils import get_file_hash

logger = get_logger(__name__)


@dataclass
class IndexingStats:
    """Statistics from an indexing run."""
    files_scanned: int = 0
    files_indexed: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    pages_indexed: int = 0
    errors: List[str] = field(default_factory=list)


class IndexBuilder:
    """
    Orchestrates the PDF indexing pipeline.

    Runs strictly sequentially: each file is one write session holding
    the writer lease for one document add and one commit.
    """

    def __init__(
        self,
        handle: IndexHandle,
        trackers: TrackerPair = None,
        extractor: PDFExtractor = None,
        progress_callback: Callable[[int, int, str], None] = None,
        skip_unreadable_files: bool = None
    ):
        """
        Initialize the index builder.

        Args:
            handle: Opened index to write into.
            trackers: Success/fail logs used in directory mode. Without
                      them every candidate is indexed.
            extractor: Text extractor. Defaults to the configured backends.
            progress_callback: Optional callback(current, total, path)
                               called for every directory candidate.
            skip_unreadable_files: Divert unreadable PDFs to the fail log
                                   instead of aborting. Defaults to config value.
        """
        self.config = get_config()
        self.handle = handle
        self.trackers = trackers
        self.extractor = extractor or PDFExtractor()
        self.repository = DocumentRepository(handle)
        self.progress_callback = progress_callback

        if skip_unreadable_files is None:
            self.skip_unreadable_files = self.config.indexing.skip_unreadable_files
        else:
            self.skip_unreadable_files = skip_unreadable_files

        self.log_every = max(1, self.config.indexing.log_progress_every)

    def build(self, file_or_directory: Union[str, Path]) -> IndexingStats:
        """
        Index a single PDF file or every PDF directly inside a directory.

        Args:
            file_or_directory: Input path, classified lexically.

        Returns:
            IndexingStats with counts for the run.

        Raises:
            DirectoryReadError: If the directory cannot be listed.
            PDFFileReadError: If a file cannot be parsed (file mode, or
                              directory mode with skipping disabled).
            PDFFileTextExtractionError: If a page cannot be extracted (same).
            IndexingError: If the index cannot be written.
        """
        file_or_directory = str(file_or_directory)

        if classify(file_or_directory) is PathKind.DIRECTORY:
            return self.index_directory(file_or_directory)

        stats = IndexingStats(files_scanned=1)
        fingerprint = self._fingerprint(file_or_directory)

        if self.repository.has_document(file_or_directory, fingerprint):
            logger.info(f"{file_or_directory} - Already in index with unchanged content")
            stats.files_skipped += 1
            return stats

        self.index_file(file_or_directory, stats, fingerprint=fingerprint)
        return stats

    def index_file(self, filepath: str, stats: IndexingStats = None, fingerprint: str = None) -> int:
        """
        Extract and index one PDF.

        Args:
            filepath: Path to the PDF file.
            stats: Optional stats accumulator.
            fingerprint: Precomputed file digest, computed when omitted.

        Returns:
            Number of pages indexed.

        Raises:
            PDFFileReadError: If the file cannot be opened or parsed.
            PDFFileTextExtractionError: If any page fails.
            IndexingError: If the document cannot be added or committed.
        """
        stats = stats if stats is not None else IndexingStats()

        if fingerprint is None:
            fingerprint = self._fingerprint(filepath)

        pages = self.extractor.extract(filepath)
        logger.info(f"{filepath} - File read successfully")

        self.repository.add_document(filepath, pages, fingerprint=fingerprint)
        logger.info(f"{filepath} - Indexed {len(pages)} pages")

        stats.files_indexed += 1
        stats.pages_indexed += len(pages)
        return len(pages)

    def index_directory(self, directory: str) -> IndexingStats:
        """
        Index every PDF candidate directly inside a directory.

        Candidates already in the success log are skipped. Rejected
        entries go to the fail log; index store failures abort the run.
        """
        stats = IndexingStats()
        fail_tracker = self.trackers.fail if self.trackers else None

        candidates = enumerate_pdfs(
            directory,
            fail_tracker=fail_tracker,
            extensions=self.config.extraction.supported_extensions
        )
        stats.files_scanned = len(candidates)

        logger.info(f"Starting indexing of {stats.files_scanned} files in {directory}")

        for i, filepath in enumerate(candidates):
            if self.progress_callback:
                self.progress_callback(i + 1, stats.files_scanned, filepath)

            self._index_candidate(filepath, stats)

            if (i + 1) % self.log_every == 0:
                logger.info(
                    f"Progress: {i + 1}/{stats.files_scanned} files "
                    f"({stats.files_indexed} indexed, {stats.files_skipped} skipped, "
                    f"{stats.files_failed} failed)"
                )

        logger.info(
            f"Indexing complete: {stats.files_indexed} files indexed, "
            f"{stats.pages_indexed} pages, {stats.files_skipped} skipped, "
            f"{stats.files_failed} failures"
        )

        return stats

    def _index_candidate(self, filepath: str, stats: IndexingStats) -> None:
        """Run one directory candidate through tracker checks and indexing."""
        try:
            fingerprint = self._fingerprint(filepath)

            if self.trackers and self.trackers.success.contains(filepath, fingerprint):
                logger.info(f"{filepath} - File already captured")
                stats.files_skipped += 1
                return

            if self.repository.has_document(filepath, fingerprint):
                # committed by an earlier run that stopped before logging success
                logger.info(f"{filepath} - Already in index, recording success")
                stats.files_skipped += 1
            else:
                self.index_file(filepath, stats, fingerprint=fingerprint)

        except (PDFFileReadError, PDFFileTextExtractionError) as e:
            if not (self.skip_unreadable_files and self.trackers):
                raise

            stats.files_failed += 1
            stats.errors.append(e.message)
            logger.warning(f"{filepath} - Unreadable, recorded in fail log: {e.message}")
            self.trackers.fail.record(filepath)
            return

        if self.trackers:
            self.trackers.success.record(filepath, fingerprint)

    @staticmethod
    def _fingerprint(filepath: str) -> str:
        try:
            return get_file_hash(filepath)
        except OSError as e:
            raise PDFFileReadError(filepath, e)


def progress_printer(current: int, total: int, filepath: str) -> None:
    """Simple progress callback that prints to console."""
    percent = (current / total) * 100 if total > 0 else 0
    print(f"\r[{percent:5.1f}%] {current}/{total} - {filepath[-50:]:<50}", end="", flush=True)


if __name__ == "__main__":
    import sys

    from ..database import open_or_create
    from ..utils import create_cache_dir_if_not_exists

    if len(sys.argv) < 2:
        print("Usage: python -m pdf_seekers.indexer.index_builder <file_or_directory>")
        sys.exit(1)

    config = get_config()
    cache_root = create_cache_dir_if_not_exists(config.paths.cache_directory)

    builder = IndexBuilder(
        open_or_create(cache_root / config.paths.index_dir),
        trackers=TrackerPair.for_cache(cache_root),
        progress_callback=progress_printer
    )

    stats = builder.build(sys.argv[1])

    print("\n" + "-" * 60)
    print("Indexing Summary:")
    print(f"  Files scanned:  {stats.files_scanned}")
    print(f"  Files indexed:  {stats.files_indexed}")
    print(f"  Files skipped:  {stats.files_skipped}")
    print(f"  Files failed:   {stats.files_failed}")
    print(f"  Pages indexed:  {stats.pages_indexed}")
