"""
File utility functions for PDF Seekers.

Provides common file operations: hashing for change detection,
cache directory resolution, and directory management.
"""

import hashlib
from pathlib import Path
from typing import Optional, Union

from ..core.exceptions import CurrentWorkingDirectoryReadError, DirectoryCreateError


def get_file_hash(filepath: Union[str, Path], chunk_size: int = 65536) -> str:
    """
    Compute MD5 hash of a whole file for change detection.

    Args:
        filepath: Path to the file.
        chunk_size: Number of bytes read per iteration.

    Returns:
        Hexadecimal MD5 hash string.
    """
    filepath = Path(filepath)
    hasher = hashlib.md5()

    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hasher.update(chunk)

    return hasher.hexdigest()


def get_cache_dir(cache_path: Optional[Union[str, Path]] = None) -> Path:
    """
    Return the cache directory, defaulting to `<cwd>/.cache`.

    Args:
        cache_path: Explicit cache directory, or None.

    Returns:
        Cache directory path (not created).

    Raises:
        CurrentWorkingDirectoryReadError: If the working directory is gone.
    """
    if cache_path:
        return Path(cache_path)

    try:
        return Path.cwd() / ".cache"
    except OSError as e:
        raise CurrentWorkingDirectoryReadError(None, e)


def create_cache_dir_if_not_exists(cache_path: Optional[Union[str, Path]] = None) -> Path:
    """
    Resolve the cache directory and create it if missing.

    Args:
        cache_path: Explicit cache directory, or None for the default.

    Returns:
        Path of the existing cache directory.

    Raises:
        DirectoryCreateError: If the directory cannot be created.
    """
    cache_dir = get_cache_dir(cache_path)

    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateError(str(cache_dir), e)

    return cache_dir


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Create directory tree if it doesn't exist.

    Args:
        path: Directory path to create.

    Returns:
        Path object of the directory.

    Raises:
        DirectoryCreateError: If the directory cannot be created.
    """
    path = Path(path)

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateError(str(path), e)

    return path


if __name__ == "__main__":
    import tempfile

    with tempfile.NamedTemporaryFile(delete=False, suffix=".txt") as f:
        f.write(b"Test content for hashing")
        temp_path = Path(f.name)

    print(f"Test file: {temp_path}")
    print(f"Hash: {get_file_hash(temp_path)}")
    print(f"Default cache dir: {get_cache_dir()}")

    temp_path.unlink()
