"""
Processing tracker for incremental indexing.

Two append-only text logs record which inputs were indexed (`_SUCCESS.txt`)
and which were rejected (`_FAIL.txt`). A batch consults the success log
before processing a file so re-running a directory only does new work.

Line format: the path, optionally followed by a tab and the fingerprint
of the file at the time it was indexed. Plain path lines are accepted and
match any fingerprint.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..core import get_config, get_logger, FileOpenError, FileWriteError
from ..utils import ensure_directory

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrackerEntry:
    """One line of a tracker log."""
    path: str
    fingerprint: Optional[str] = None

    @classmethod
    def parse(cls, line: str) -> "TrackerEntry":
        path, _, fingerprint = line.rstrip("\r\n").partition("\t")
        return cls(path=path, fingerprint=fingerprint or None)

    def to_line(self) -> str:
        if self.fingerprint:
            return f"{self.path}\t{self.fingerprint}\n"
        return f"{self.path}\n"

    def matches(self, path: str, fingerprint: str = None) -> bool:
        """True if this entry covers the path (and fingerprint, when both are known)."""
        if self.path != path:
            return False
        if self.fingerprint is None or fingerprint is None:
            return True
        return self.fingerprint == fingerprint


class Tracker:
    """Interface of a processing tracker."""

    def load(self) -> List[TrackerEntry]:
        raise NotImplementedError

    def record(self, path: str, fingerprint: str = None) -> None:
        raise NotImplementedError

    def contains(self, path: str, fingerprint: str = None) -> bool:
        """Linear scan of the loaded entries."""
        return any(entry.matches(str(path), fingerprint) for entry in self.load())


class FileTracker(Tracker):
    """
    Tracker persisted as an append-only newline-delimited text file.

    Entries are never deduplicated or removed.
    """

    def __init__(self, log_path: Union[str, Path]):
        self.log_path = Path(log_path)

    def load(self) -> List[TrackerEntry]:
        """
        Read every entry of the log.

        Returns:
            Entries in append order; empty if the log does not exist yet.

        Raises:
            FileOpenError: If an existing log cannot be read.
        """
        if not self.log_path.exists():
            return []

        try:
            with open(self.log_path, "r", encoding="utf-8") as f:
                return [TrackerEntry.parse(line) for line in f if line.strip()]
        except OSError as e:
            raise FileOpenError(str(self.log_path), e)

    def record(self, path: str, fingerprint: str = None) -> None:
        """
        Append one entry, creating the log if absent.

        Raises:
            FileOpenError: If the log cannot be opened for appending.
            FileWriteError: If the entry cannot be written.
        """
        entry = TrackerEntry(path=str(path), fingerprint=fingerprint)

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            f = open(self.log_path, "a", encoding="utf-8")
        except OSError as e:
            raise FileOpenError(str(self.log_path), e)

        with f:
            try:
                f.write(entry.to_line())
            except OSError as e:
                raise FileWriteError(str(self.log_path), e)

        logger.debug(f"{entry.path} - Recorded in {self.log_path.name}")


@dataclass
class TrackerPair:
    """The success and fail logs of one cache root."""
    success: Tracker
    fail: Tracker

    @classmethod
    def for_cache(cls, cache_root: Union[str, Path]) -> "TrackerPair":
        """Build the pair under `<cache_root>/<tracking_dir>/`, creating the directory."""
        paths = get_config().paths
        tracking_dir = ensure_directory(Path(cache_root) / paths.tracking_dir)

        return cls(
            success=FileTracker(tracking_dir / paths.success_log),
            fail=FileTracker(tracking_dir / paths.fail_log)
        )


if __name__ == "__main__":
    import tempfile

    with tempfile.TemporaryDirectory() as tmp:
        trackers = TrackerPair.for_cache(tmp)
        trackers.success.record("data/a.pdf", "abc123")
        trackers.fail.record("data/notes.txt")

        print(f"a.pdf captured: {trackers.success.contains('data/a.pdf', 'abc123')}")
        print(f"a.pdf changed:  {trackers.success.contains('data/a.pdf', 'def456')}")
        print(f"Fail entries: {trackers.fail.load()}")
