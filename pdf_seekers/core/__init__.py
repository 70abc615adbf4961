"""
Core module providing foundational components.

This module contains the configuration loader, centralized logging setup,
and custom exception hierarchy. It has no internal dependencies.
"""

from .config_loader import get_config, reload_config, Config
from .logger import get_logger, setup_logging, set_level, TRACE
from .exceptions import (
    PDFSeekerError,
    ConfigurationError,
    FileOperationsError,
    PDFFileReadError,
    PDFFileTextExtractionError,
    DirectoryReadError,
    CurrentWorkingDirectoryReadError,
    DirectoryCreateError,
    FileOpenError,
    FileWriteError,
    IndexingError,
    IndexDirectoryOpenError,
    IndexDirectoryReadError,
    IndexDirectoryCreateError,
    IndexCreateError,
    IndexWriterCreateError,
    IndexFieldNotFound,
    IndexDocumentAddError,
    IndexDocumentCommitError,
    SearchingError,
    IndexReaderCreateError,
    SearchFieldNotFound,
    QueryParserError,
    KeywordSearchError,
    SearcherDocumentFetchError
)

__all__ = [
    "get_config",
    "reload_config",
    "Config",
    "get_logger",
    "setup_logging",
    "set_level",
    "TRACE",
    "PDFSeekerError",
    "ConfigurationError",
    "FileOperationsError",
    "PDFFileReadError",
    "PDFFileTextExtractionError",
    "DirectoryReadError",
    "CurrentWorkingDirectoryReadError",
    "DirectoryCreateError",
    "FileOpenError",
    "FileWriteError",
    "IndexingError",
    "IndexDirectoryOpenError",
    "IndexDirectoryReadError",
    "IndexDirectoryCreateError",
    "IndexCreateError",
    "IndexWriterCreateError",
    "IndexFieldNotFound",
    "IndexDocumentAddError",
    "IndexDocumentCommitError",
    "SearchingError",
    "IndexReaderCreateError",
    "SearchFieldNotFound",
    "QueryParserError",
    "KeywordSearchError",
    "SearcherDocumentFetchError"
]
