"""
Tests for file utility functions.

Tests hashing, cache directory resolution, and directory creation.
All tests use temporary files/directories for safety.
"""

import hashlib
from pathlib import Path

import pytest

from pdf_seekers.core.exceptions import DirectoryCreateError
from pdf_seekers.utils.file_utils import (
    get_file_hash,
    get_cache_dir,
    create_cache_dir_if_not_exists,
    ensure_directory
)


class TestGetFileHash:
    """Tests for get_file_hash function."""

    def test_hash_returns_hex_string(self, temp_dir: Path):
        """Test that hash returns a valid hexadecimal string."""
        test_file = temp_dir / "test.txt"
        test_file.write_bytes(b"Hello World")

        hash_value = get_file_hash(test_file)

        assert len(hash_value) == 32
        assert all(c in "0123456789abcdef" for c in hash_value)

    def test_hash_covers_whole_file(self, temp_dir: Path):
        """Test that content beyond the first chunk changes the hash."""
        content = b"x" * 100_000
        file1 = temp_dir / "file1.bin"
        file2 = temp_dir / "file2.bin"
        file1.write_bytes(content + b"A")
        file2.write_bytes(content + b"B")

        assert get_file_hash(file1, chunk_size=4096) != get_file_hash(file2, chunk_size=4096)
        assert get_file_hash(file1, chunk_size=4096) == hashlib.md5(content + b"A").hexdigest()

    def test_same_content_same_hash(self, temp_dir: Path):
        """Test that identical content produces identical hash."""
        file1 = temp_dir / "file1.txt"
        file2 = temp_dir / "file2.txt"
        file1.write_bytes(b"Identical content")
        file2.write_bytes(b"Identical content")

        assert get_file_hash(file1) == get_file_hash(file2)


class TestCacheDir:
    """Tests for cache directory helpers."""

    def test_explicit_path_is_kept(self, temp_dir: Path):
        """Test that an explicit cache path is returned as is."""
        assert get_cache_dir(temp_dir / "cache") == temp_dir / "cache"

    def test_default_is_dot_cache_in_cwd(self, temp_dir: Path, monkeypatch):
        """Test the default cache location."""
        monkeypatch.chdir(temp_dir)

        assert get_cache_dir(None) == Path.cwd() / ".cache"

    def test_create_cache_dir(self, temp_dir: Path):
        """Test that the cache directory is created when missing."""
        cache = create_cache_dir_if_not_exists(temp_dir / "nested" / "cache")

        assert cache.is_dir()

    def test_create_cache_dir_under_file_fails(self, temp_dir: Path):
        """Test that a path under a regular file cannot be created."""
        blocker = temp_dir / "blocker"
        blocker.write_text("file")

        with pytest.raises(DirectoryCreateError):
            create_cache_dir_if_not_exists(blocker / "cache")


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_creates_nested_directories(self, temp_dir: Path):
        """Test creating nested directory structure."""
        nested = temp_dir / "a" / "b" / "c"

        result = ensure_directory(nested)

        assert nested.exists()
        assert result == nested

    def test_existing_directory_is_fine(self, temp_dir: Path):
        """Test that existing directories are left alone."""
        assert ensure_directory(temp_dir) == temp_dir
