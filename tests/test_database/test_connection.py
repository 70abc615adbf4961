"""
Tests for index lifecycle and connection management.

Tests create-or-open, the scoped writer lease, and reader snapshots.
All indexes live in temporary directories.
"""

import sqlite3
from pathlib import Path
from unittest.mock import Mock

import pytest

from pdf_seekers.core.exceptions import (
    IndexCreateError,
    IndexDirectoryCreateError,
    IndexDirectoryOpenError,
    IndexDocumentAddError,
    IndexDocumentCommitError,
    IndexFieldNotFound,
    IndexReaderCreateError,
    IndexWriterCreateError
)
from pdf_seekers.database import connection
from pdf_seekers.database.connection import (
    INDEX_DB_NAME,
    IndexHandle,
    IndexWriter,
    open_or_create
)
from pdf_seekers.database.schema import FieldSpec, Schema, TEXT, build_default_schema


def _count(handle: IndexHandle) -> int:
    with handle.reader() as conn:
        return conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0]


def _doc(path: str = "data/a.pdf"):
    return {"content": ["page one", "page two"], "path": [path], "page_num": ["1", "2"]}


class TestOpenOrCreate:
    """Tests for open_or_create function."""

    def test_creates_directory_and_index(self, temp_dir: Path, configured):
        """Test that a missing directory becomes an empty index."""
        index_path = temp_dir / "cache" / "index_dir"

        handle = open_or_create(index_path)

        assert (index_path / INDEX_DB_NAME).exists()
        assert handle.schema == build_default_schema()
        assert _count(handle) == 0

    def test_reopen_keeps_schema_and_documents(self, temp_dir: Path, configured):
        """Test that reopening an index sees committed documents."""
        handle = open_or_create(temp_dir / "index_dir")
        with handle.writer() as writer:
            writer.add_document(_doc())
            writer.commit()

        reopened = open_or_create(temp_dir / "index_dir")

        assert reopened.schema == build_default_schema()
        assert _count(reopened) == 1

    def test_create_under_file_raises(self, temp_dir: Path, configured):
        """Test that a directory below a regular file cannot be created."""
        blocker = temp_dir / "blocker"
        blocker.write_text("file")

        with pytest.raises(IndexDirectoryCreateError):
            open_or_create(blocker / "index_dir")

    def test_non_empty_directory_without_index_raises(self, temp_dir: Path, configured):
        """Test that foreign content is not treated as an index."""
        index_path = temp_dir / "index_dir"
        index_path.mkdir()
        (index_path / "stray.txt").write_text("hello")

        with pytest.raises(IndexDirectoryOpenError):
            open_or_create(index_path)

    def test_corrupt_index_raises(self, temp_dir: Path, configured):
        """Test that a damaged database file is reported."""
        index_path = temp_dir / "index_dir"
        index_path.mkdir()
        (index_path / INDEX_DB_NAME).write_bytes(b"garbage" * 200)

        with pytest.raises(IndexDirectoryOpenError):
            open_or_create(index_path)

    def test_schema_mismatch_raises(self, temp_dir: Path, configured):
        """Test that an index with other fields is rejected."""
        other = Schema(fields=(FieldSpec("body", TEXT, multi_valued=True),))
        open_or_create(temp_dir / "index_dir", schema=other)

        with pytest.raises(IndexDirectoryOpenError) as exc_info:
            open_or_create(temp_dir / "index_dir")

        assert "schema mismatch" in exc_info.value.message

    def test_create_failure_raises_index_create_error(self, temp_dir: Path, configured, monkeypatch):
        """Test that a failing schema initialization is reported."""
        def broken_create_schema(conn, schema, tokenizer):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(connection, "create_schema", broken_create_schema)

        with pytest.raises(IndexCreateError):
            open_or_create(temp_dir / "index_dir")

    def test_failed_create_leaves_directory_reusable(self, temp_dir: Path, configured):
        """Test that a failed creation can be retried in the same directory."""
        index_path = temp_dir / "index_dir"

        with pytest.raises(IndexCreateError):
            open_or_create(index_path, tokenizer="nosuchtokenizer")

        assert list(index_path.iterdir()) == []

        handle = open_or_create(index_path)

        assert handle.schema == build_default_schema()
        assert _count(handle) == 0


class TestWriter:
    """Tests for the scoped write session."""

    def test_commit_makes_document_visible(self, index_handle):
        """Test that new readers see a committed document."""
        with index_handle.writer() as writer:
            doc_id = writer.add_document(_doc(), source_hash="abc")
            writer.commit()

        assert doc_id == 1
        assert _count(index_handle) == 1

    def test_uncommitted_session_is_rolled_back(self, index_handle):
        """Test that leaving the block without commit discards the work."""
        with index_handle.writer() as writer:
            writer.add_document(_doc())

        assert _count(index_handle) == 0

    def test_exception_releases_lease(self, index_handle):
        """Test that the lease is released when the block raises."""
        with pytest.raises(RuntimeError):
            with index_handle.writer() as writer:
                writer.add_document(_doc())
                raise RuntimeError("boom")

        with index_handle.writer() as writer:
            writer.add_document(_doc())
            writer.commit()

        assert _count(index_handle) == 1

    @pytest.mark.skipif(connection.fcntl is None, reason="advisory locks need fcntl")
    def test_second_writer_is_refused(self, index_handle):
        """Test that only one write lease exists at a time."""
        with index_handle.writer():
            with pytest.raises(IndexWriterCreateError):
                with index_handle.writer():
                    pass

    def test_unknown_field_raises(self, index_handle):
        """Test that undeclared fields are rejected."""
        with index_handle.writer() as writer:
            with pytest.raises(IndexFieldNotFound):
                writer.add_document({"title": ["x"]})

    def test_multiple_values_for_single_valued_field_raises(self, index_handle):
        """Test that path accepts exactly one value."""
        document = _doc()
        document["path"] = ["a.pdf", "b.pdf"]

        with index_handle.writer() as writer:
            with pytest.raises(IndexDocumentAddError):
                writer.add_document(document)

    def test_values_stored_in_order(self, index_handle):
        """Test that content and page_num keep page order."""
        with index_handle.writer() as writer:
            doc_id = writer.add_document(_doc())
            writer.commit()

        with index_handle.reader() as conn:
            rows = conn.execute(
                "SELECT value FROM document_values WHERE doc_id = ? AND field = 'page_num' ORDER BY position",
                (doc_id,)
            ).fetchall()

        assert [row[0] for row in rows] == ["1", "2"]

    def test_commit_failure_raises(self):
        """Test that a failing COMMIT is reported."""
        conn = Mock()
        conn.execute.side_effect = sqlite3.OperationalError("disk I/O error")

        with pytest.raises(IndexDocumentCommitError) as exc_info:
            IndexWriter(conn, build_default_schema(), "cache/index_dir").commit()

        assert "cache/index_dir" in exc_info.value.message

    def test_add_error_names_source_path(self):
        """Test that a failing insert reports the document path."""
        conn = Mock()
        conn.execute.side_effect = sqlite3.OperationalError("database or disk is full")

        with pytest.raises(IndexDocumentAddError) as exc_info:
            IndexWriter(conn, build_default_schema(), "cache/index_dir").add_document(_doc("data/a.pdf"))

        assert "data/a.pdf" in exc_info.value.message

    def test_error_after_engine_rollback_keeps_its_type(self, index_handle):
        """Test that a transaction already rolled back by SQLite is not rolled back twice."""
        with pytest.raises(IndexDocumentAddError):
            with index_handle.writer() as writer:
                writer.add_document(_doc())
                writer.conn.execute("ROLLBACK")
                raise IndexDocumentAddError("data/a.pdf", sqlite3.OperationalError("disk I/O error"))

        assert _count(index_handle) == 0


class TestReader:
    """Tests for read-only snapshots."""

    def test_reader_sees_snapshot(self, index_handle):
        """Test that an open reader does not see later commits."""
        with index_handle.reader() as conn:
            before = conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0]

            with index_handle.writer() as writer:
                writer.add_document(_doc())
                writer.commit()

            during = conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0]

        assert before == during == 0
        assert _count(index_handle) == 1

    def test_reader_is_read_only(self, index_handle):
        """Test that readers cannot write."""
        with index_handle.reader() as conn:
            with pytest.raises(sqlite3.Error):
                conn.execute("INSERT INTO documents (source_hash) VALUES ('x')")

    def test_reader_without_database_raises(self, temp_dir: Path, configured):
        """Test that a missing index cannot be read."""
        handle = IndexHandle(temp_dir / "nowhere", build_default_schema())

        with pytest.raises(IndexReaderCreateError):
            with handle.reader():
                pass
