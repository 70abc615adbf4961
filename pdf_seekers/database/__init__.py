"""
Index store module backed by SQLite FTS5.

Provides the index schema, the create-or-open lifecycle with scoped
write sessions, and document reads and writes.
"""

from .schema import (
    FieldSpec,
    Schema,
    build_default_schema,
    get_statistics,
    CONTENT_FIELD,
    PATH_FIELD,
    PAGE_NUM_FIELD
)
from .connection import IndexHandle, IndexWriter, open_or_create
from .repository import DocumentRepository, StoredDocument, add_document, build_document

__all__ = [
    "FieldSpec",
    "Schema",
    "build_default_schema",
    "get_statistics",
    "CONTENT_FIELD",
    "PATH_FIELD",
    "PAGE_NUM_FIELD",
    "IndexHandle",
    "IndexWriter",
    "open_or_create",
    "DocumentRepository",
    "StoredDocument",
    "add_document",
    "build_document"
]
