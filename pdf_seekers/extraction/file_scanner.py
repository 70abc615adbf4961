"""
File classifier and enumerator for PDF discovery.

Classification is purely lexical: a path whose final segment contains no
`.` is treated as a directory, anything else as a file. Enumeration lists
the direct children of a directory (non-recursive) and keeps PDF candidates,
routing every other entry to an optional fail tracker.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Union

from ..core import get_config, get_logger, DirectoryReadError

logger = get_logger(__name__)


class PathKind(str, Enum):
    """Kind of input path as decided by classify()."""
    FILE = "file"
    DIRECTORY = "directory"


def classify(path: Union[str, Path]) -> PathKind:
    """
    Decide whether a path names a file or a directory.

    Only the final `/`-separated segment is inspected. A dotfile such as
    `.gitignore` splits into two parts and is therefore a file.

    Args:
        path: Input path.

    Returns:
        PathKind.DIRECTORY if the last segment has no `.`, else PathKind.FILE.
    """
    last_segment = str(path).split("/")[-1]
    logger.debug(f"Classifying last segment: {last_segment!r}")

    if len(last_segment.split(".")) == 1:
        return PathKind.DIRECTORY
    return PathKind.FILE


def is_directory(path: Union[str, Path]) -> bool:
    """Return True when classify() treats the path as a directory."""
    return classify(path) is PathKind.DIRECTORY


def _list_names(directory: str) -> List[str]:
    """List entry names of a directory, sorted for a stable order."""
    try:
        return sorted(os.listdir(directory))
    except OSError as e:
        raise DirectoryReadError(directory, e)


def list_directory(directory: Union[str, Path]) -> List[str]:
    """
    List every direct child of a directory as `directory/name` paths.

    Raises:
        DirectoryReadError: If the directory cannot be opened.
    """
    directory = str(directory)
    return [f"{directory}/{name}" for name in _list_names(directory)]


def has_extension(name: str, extensions: List[str]) -> bool:
    """Case-insensitive check of a file name's extension (without dot)."""
    suffix = Path(name).suffix.lower().lstrip(".")
    return bool(suffix) and suffix in extensions


def enumerate_pdfs(
    directory: Union[str, Path],
    fail_tracker=None,
    extensions: List[str] = None
) -> List[str]:
    """
    List PDF candidates directly inside a directory.

    Args:
        directory: Directory to list (not recursed into).
        fail_tracker: Optional tracker; rejected entries are recorded on it.
        extensions: Accepted extensions without dot. Defaults to config value.

    Returns:
        Candidate paths built as `directory + "/" + name`.

    Raises:
        DirectoryReadError: If the directory cannot be opened.
    """
    if extensions is None:
        extensions = get_config().extraction.supported_extensions
    extensions = [ext.lower().lstrip(".") for ext in extensions]

    candidates = []

    for path in list_directory(directory):
        name = path.rsplit("/", 1)[-1]

        if has_extension(name, extensions):
            candidates.append(path)
            continue

        if fail_tracker is not None:
            logger.warning(f"{path} - Skipped, not a PDF candidate")
            fail_tracker.record(path)
        else:
            logger.debug(f"{path} - Dropped, not a PDF candidate")

    logger.info(f"Found {len(candidates)} PDF candidates in {directory}")
    return candidates


class FileScanner:
    """
    Discovers PDF candidates directly inside a root directory.

    Thin object wrapper over enumerate_pdfs() carrying the directory,
    accepted extensions and optional fail tracker.
    """

    def __init__(
        self,
        root_directory: Union[str, Path],
        extensions: List[str] = None,
        fail_tracker=None
    ):
        """
        Initialize the file scanner.

        Args:
            root_directory: Directory to scan.
            extensions: List of file extensions to include (e.g., ["pdf"]).
            fail_tracker: Optional tracker receiving rejected entries.
        """
        config = get_config()

        self.root_directory = str(root_directory)
        self.extensions = [
            ext.lower().lstrip(".")
            for ext in (extensions or config.extraction.supported_extensions)
        ]
        self.fail_tracker = fail_tracker

    def scan(self) -> Iterator[str]:
        """
        Yield matching candidate paths.

        Raises:
            DirectoryReadError: If the directory cannot be opened.
        """
        yield from enumerate_pdfs(
            self.root_directory,
            fail_tracker=self.fail_tracker,
            extensions=self.extensions
        )

    def count(self) -> int:
        """Count matching files."""
        return sum(1 for _ in self.scan())

    def list_all(self) -> List[str]:
        """Get all matching files as a list."""
        return list(self.scan())


if __name__ == "__main__":
    import sys

    test_dir = sys.argv[1] if len(sys.argv) > 1 else "."

    print(f"Classified as: {classify(test_dir).value}")
    print("-" * 50)

    for filepath in FileScanner(test_dir).scan():
        print(f"  {filepath}")
