"""
PDF extraction module for PDF Seekers.

Provides input classification, PDF candidate discovery and per-page text
extraction with two backends (pypdf and pdfplumber) and fallback support.
"""

from .file_scanner import (
    FileScanner,
    PathKind,
    classify,
    is_directory,
    enumerate_pdfs,
    list_directory
)
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend
from .extractor import PDFExtractor

__all__ = [
    "FileScanner",
    "PathKind",
    "classify",
    "is_directory",
    "enumerate_pdfs",
    "list_directory",
    "PyPDFBackend",
    "PDFPlumberBackend",
    "PDFExtractor"
]
