"""
External operations of PDF Seekers.

`index()` and `search()` are the two entry points used by the command
line and by library callers. Both derive their working layout from a
cache root:

    <cache_root>/index_dir/             the keyword index
    <cache_root>/tracking/_SUCCESS.txt  files indexed so far
    <cache_root>/tracking/_FAIL.txt     rejected or unreadable inputs
    <cache_root>/logs/                  dated, size-rotated log files
"""

from pathlib import Path
from typing import List, Optional, Union

from .core import get_config, get_logger, setup_logging, set_level
from .database import IndexHandle, open_or_create
from .extraction import PDFExtractor, classify, list_directory, PathKind
from .indexer import IndexBuilder, IndexingStats
from .search import BM25Engine, PDFMetadata, analyze, analyze_stored
from .tracking import TrackerPair
from .utils import create_cache_dir_if_not_exists

logger = get_logger(__name__)


def _prepare(cache_root: Optional[Union[str, Path]], log_level: Optional[str]) -> Path:
    """Resolve and create the cache root, then attach the file log under it."""
    config = get_config()
    cache_dir = create_cache_dir_if_not_exists(cache_root or config.paths.cache_directory)

    level = log_level or config.logging.level

    setup_logging(
        log_level=level,
        log_format=config.logging.format,
        logs_directory=cache_dir / config.paths.logs_dir,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count
    )
    set_level(level)

    return cache_dir


def open_index(cache_dir: Path) -> IndexHandle:
    """Create or open the index under a cache root."""
    return open_or_create(cache_dir / get_config().paths.index_dir)


def index(
    file_or_directory: Union[str, Path],
    cache_root: Optional[Union[str, Path]] = None,
    log_level: Optional[str] = None
) -> IndexingStats:
    """
    Index a single PDF file or every PDF directly inside a directory.

    Args:
        file_or_directory: Input path; a last segment without `.` is a directory.
        cache_root: Cache directory. Defaults to `paths.cache_directory` from config.
        log_level: Verbosity (trace, debug, info, warn, error, off).

    Returns:
        IndexingStats of the completed run.

    Raises:
        PDFSeekerError: The single error that terminated the run.
    """
    cache_dir = _prepare(cache_root, log_level)
    file_or_directory = str(file_or_directory)

    handle = open_index(cache_dir)
    logger.info(f"Index writer ready for {handle.index_path}")

    builder = IndexBuilder(handle, trackers=TrackerPair.for_cache(cache_dir))
    stats = builder.build(file_or_directory)

    logger.info(f"{file_or_directory} - Indexing completed.")
    return stats


def search(
    file_or_directory: Union[str, Path],
    keyword: str,
    cache_root: Optional[Union[str, Path]] = None,
    log_level: Optional[str] = None
) -> List[PDFMetadata]:
    """
    Search the index and build the result metadata of matching documents.

    Args:
        file_or_directory: Scope. A directory keeps hits that are direct
                           children of it; a file keeps the hit for that
                           exact path only.
        keyword: Search keyword.
        cache_root: Cache directory. Defaults to `paths.cache_directory` from config.
        log_level: Verbosity (trace, debug, info, warn, error, off).

    Returns:
        PDFMetadata per matching document in rank order.

    Raises:
        PDFSeekerError: The single error that terminated the search.
    """
    cache_dir = _prepare(cache_root, log_level)
    config = get_config()
    scope = str(file_or_directory)

    handle = open_index(cache_dir)
    hits = BM25Engine().search_hits(handle, keyword)

    by_path = {}
    for hit in hits:
        by_path[hit.path] = hit

    if classify(scope) is PathKind.DIRECTORY:
        children = set(list_directory(scope))
        selected = [hit for path, hit in by_path.items() if path in children]
    else:
        selected = [by_path[scope]] if scope in by_path else []

    if not selected:
        logger.info(f"No matching documents found for '{keyword}' in {scope}")
        return []

    results = []
    extractor = PDFExtractor() if config.search.context_source == "pdf" else None

    for hit in selected:
        if extractor is not None:
            metadata = analyze(hit.path, hit.page_nums, keyword, extractor=extractor)
        else:
            metadata = analyze_stored(hit, keyword)

        logger.info(f"{hit.path} - {len(metadata.matched_page_nums)} matching pages")
        results.append(metadata)

    return results
