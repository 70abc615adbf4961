"""
Search module for FTS5 keyword search with BM25 ranking.

Provides query parsing, ranked retrieval, keyword-in-context
extraction, and result models.
"""

from .models import SearchHit, PDFMetadata
from .query_parser import QueryParser
from .bm25_engine import BM25Engine
from .context_extractor import analyze, analyze_stored

__all__ = [
    "SearchHit",
    "PDFMetadata",
    "QueryParser",
    "BM25Engine",
    "analyze",
    "analyze_stored"
]
