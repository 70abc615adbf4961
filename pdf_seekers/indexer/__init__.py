"""
Indexer module for orchestrating the PDF indexing pipeline.

Coordinates input classification, text extraction, index writes and
processing tracking to build the keyword index.
"""

from .index_builder import IndexBuilder, IndexingStats

__all__ = [
    "IndexBuilder",
    "IndexingStats"
]
