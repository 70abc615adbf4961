"""
Integration tests for the full indexing and search pipeline.

Tests the complete flow from PDF files to keyword-in-context results.

SAFETY NOTE: All tests pass an explicit cache root inside the temporary
directory, so the index, trackers and logs never touch real data.
"""

import pytest
from pathlib import Path

from pdf_seekers import api
from pdf_seekers.core.exceptions import QueryParserError
from pdf_seekers.database import DocumentRepository


@pytest.fixture
def cache_root(temp_dir: Path) -> Path:
    return temp_dir / "cache"


@pytest.fixture
def indexed_collection(sample_pdf_collection: Path, cache_root: Path, configured,
                       reset_logger_singleton) -> Path:
    """The sample collection, indexed under the temporary cache root."""
    api.index(str(sample_pdf_collection), cache_root=cache_root)
    return sample_pdf_collection


class TestIndex:
    """Tests for the index operation."""

    def test_creates_cache_layout(self, indexed_collection: Path, cache_root: Path):
        """Test that the index, trackers and logs land under the cache root."""
        assert (cache_root / "index_dir" / "index.db").exists()
        assert (cache_root / "tracking" / "_SUCCESS.txt").exists()
        assert (cache_root / "tracking" / "_FAIL.txt").exists()
        assert list((cache_root / "logs").glob("*.log"))

    def test_documents_stored(self, indexed_collection: Path, cache_root: Path):
        """Test one document per PDF file."""
        handle = api.open_index(cache_root)

        assert DocumentRepository(handle).count() == 2

    def test_reindex_is_idempotent(self, indexed_collection: Path, cache_root: Path):
        """Test that a second run adds nothing."""
        stats = api.index(str(indexed_collection), cache_root=cache_root)

        assert stats.files_indexed == 0
        assert DocumentRepository(api.open_index(cache_root)).count() == 2

    def test_index_single_file(self, sample_pdf: Path, cache_root: Path, configured,
                               reset_logger_singleton):
        """Test file mode through the public entry point."""
        stats = api.index(str(sample_pdf), cache_root=cache_root)

        assert stats.files_indexed == 1
        assert stats.pages_indexed == 2

    def test_reindex_single_file_is_idempotent(self, sample_pdf: Path, cache_root: Path, configured,
                                               reset_logger_singleton):
        """Test that indexing an unchanged file again adds no document."""
        api.index(str(sample_pdf), cache_root=cache_root)

        stats = api.index(str(sample_pdf), cache_root=cache_root)

        assert stats.files_indexed == 0
        assert stats.files_skipped == 1
        assert DocumentRepository(api.open_index(cache_root)).count() == 1

    def test_default_cache_root_from_config(self, sample_pdf: Path, temp_dir: Path, configured,
                                            reset_logger_singleton):
        """Test that the configured cache directory is used when none is given."""
        api.index(str(sample_pdf))

        assert (temp_dir / "cache" / "index_dir" / "index.db").exists()
        assert (temp_dir / "cache" / "logs").is_dir()


class TestSearch:
    """Tests for the search operation."""

    def test_directory_scope(self, indexed_collection: Path, cache_root: Path):
        """Test a keyword found in one document of the directory."""
        results = api.search(str(indexed_collection), "convolutional", cache_root=cache_root)

        assert len(results) == 1
        [metadata] = results
        assert metadata.doc_name == f"{indexed_collection}/yolo.pdf"
        assert metadata.num_pages == 2
        assert metadata.matched_page_nums == [2]
        assert "convolutional" in metadata.cropped_texts[0]

    def test_file_scope(self, indexed_collection: Path, cache_root: Path):
        """Test that file scope keeps only the exact path."""
        yolo = f"{indexed_collection}/yolo.pdf"
        resnet = f"{indexed_collection}/resnet.pdf"

        assert len(api.search(yolo, "convolutional", cache_root=cache_root)) == 1
        assert api.search(resnet, "convolutional", cache_root=cache_root) == []

    def test_absent_keyword(self, indexed_collection: Path, cache_root: Path):
        """Test that a keyword no document contains gives no results."""
        assert api.search(str(indexed_collection), "transformer", cache_root=cache_root) == []

    def test_other_directory_scope_excludes_hits(self, indexed_collection: Path, cache_root: Path,
                                                 temp_dir: Path):
        """Test that hits outside the scope directory are dropped."""
        other = temp_dir / "other"
        other.mkdir()

        assert api.search(str(other), "convolutional", cache_root=cache_root) == []

    def test_stored_context_source(self, indexed_collection: Path, cache_root: Path, configured):
        """Test crops built from the indexed page text."""
        configured.search.context_source = "index"

        [metadata] = api.search(str(indexed_collection), "residual", cache_root=cache_root)

        assert metadata.doc_name == f"{indexed_collection}/resnet.pdf"
        assert metadata.num_pages == 2
        assert metadata.matched_page_nums == [1]
        assert "Deep residual learning" in metadata.cropped_texts[0]

    def test_search_on_fresh_cache(self, sample_pdf_collection: Path, cache_root: Path, configured,
                                   reset_logger_singleton):
        """Test that searching before indexing finds nothing."""
        assert api.search(str(sample_pdf_collection), "residual", cache_root=cache_root) == []

    def test_invalid_query(self, indexed_collection: Path, cache_root: Path):
        """Test that a malformed keyword raises QueryParserError."""
        with pytest.raises(QueryParserError):
            api.search(str(indexed_collection), '"unterminated', cache_root=cache_root)
