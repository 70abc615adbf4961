"""
Document repository for the index store.

Builds index documents from extracted pages, adds them through a scoped
write session and reads stored documents back.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..core import get_logger
from .connection import IndexHandle
from .schema import CONTENT_FIELD, PAGE_NUM_FIELD, PATH_FIELD, get_statistics

logger = get_logger(__name__)


@dataclass
class StoredDocument:
    """Represents one indexed source file as stored in the index."""
    id: int
    path: str
    page_nums: List[str] = field(default_factory=list)
    contents: List[str] = field(default_factory=list)
    source_hash: Optional[str] = None
    indexed_at: Optional[str] = None


def build_document(path: str, pages: List[Tuple[int, str]]) -> Dict[str, List[str]]:
    """
    Build the field values of one index document.

    Args:
        path: Source file path.
        pages: (page_number, text) tuples in page order.

    Returns:
        Field name -> values, with content[i] and page_num[i] for the same page.
    """
    return {
        CONTENT_FIELD: [text for _, text in pages],
        PATH_FIELD: [str(path)],
        PAGE_NUM_FIELD: [str(page_num) for page_num, _ in pages]
    }


def add_document(
    handle: IndexHandle,
    path: str,
    pages: List[Tuple[int, str]],
    fingerprint: str = None
) -> int:
    """
    Add one source file as a document and commit it.

    Acquires the writer lease for this single document and releases it
    after the commit; the document is visible to readers opened afterwards.

    Args:
        handle: Opened index.
        path: Source file path.
        pages: (page_number, text) tuples in page order.
        fingerprint: Digest of the source file, kept as bookkeeping.

    Returns:
        Row ID of the new document.

    Raises:
        IndexWriterCreateError: If the writer lease cannot be acquired.
        IndexFieldNotFound: If the schema lacks a required field.
        IndexDocumentAddError: If the document cannot be added.
        IndexDocumentCommitError: If the commit fails.
    """
    for name in (CONTENT_FIELD, PATH_FIELD, PAGE_NUM_FIELD):
        handle.schema.get_field(name)

    document = build_document(path, pages)

    with handle.writer() as writer:
        doc_id = writer.add_document(document, source_hash=fingerprint)
        logger.debug(f"{path} - Added document {doc_id} with {len(pages)} pages")
        writer.commit()

    logger.debug(f"{path} - Committed to index")
    return doc_id


class DocumentRepository:
    """
    Repository for document operations on one index.

    Writes go through add_document(); every read opens a fresh snapshot.
    """

    def __init__(self, handle: IndexHandle):
        self.handle = handle

    def add_document(
        self,
        path: str,
        pages: List[Tuple[int, str]],
        fingerprint: str = None
    ) -> int:
        """Add and commit one document. See the module-level add_document()."""
        return add_document(self.handle, path, pages, fingerprint)

    def has_document(self, path: str, fingerprint: str = None) -> bool:
        """
        Check if a source file is already indexed.

        Args:
            path: Source file path.
            fingerprint: When given, only a document with this digest counts.

        Returns:
            True if a matching document exists.
        """
        sql = """
            SELECT 1 FROM document_values v
            JOIN documents d ON d.id = v.doc_id
            WHERE v.field = ? AND v.value = ?
        """
        params = [PATH_FIELD, str(path)]

        if fingerprint is not None:
            sql += " AND d.source_hash = ?"
            params.append(fingerprint)

        with self.handle.reader() as conn:
            row = conn.execute(sql + " LIMIT 1", params).fetchone()
            return row is not None

    def get_by_id(self, doc_id: int) -> Optional[StoredDocument]:
        """
        Fetch a document by its ID.

        Returns:
            StoredDocument or None.
        """
        with self.handle.reader() as conn:
            return self._load(conn, doc_id)

    def get_by_path(self, path: str) -> List[StoredDocument]:
        """
        Fetch every document stored for a path, oldest first.

        Re-indexing without removal keeps duplicates, so several
        documents may share one path.
        """
        with self.handle.reader() as conn:
            rows = conn.execute(
                "SELECT doc_id FROM document_values WHERE field = ? AND value = ? ORDER BY doc_id",
                (PATH_FIELD, str(path))
            ).fetchall()

            return [self._load(conn, row["doc_id"]) for row in rows]

    def count(self) -> int:
        """Get total document count."""
        with self.handle.reader() as conn:
            row = conn.execute("SELECT COUNT(*) as count FROM documents").fetchone()
            return row["count"]

    def get_statistics(self) -> dict:
        """Get index statistics. See schema.get_statistics()."""
        with self.handle.reader() as conn:
            return get_statistics(conn)

    @staticmethod
    def _load(conn, doc_id: int) -> Optional[StoredDocument]:
        """Assemble a StoredDocument from its rows."""
        row = conn.execute(
            "SELECT id, source_hash, indexed_at FROM documents WHERE id = ?",
            (doc_id,)
        ).fetchone()

        if row is None:
            return None

        values = load_values(conn, doc_id)

        return StoredDocument(
            id=row["id"],
            path=(values.get(PATH_FIELD) or [""])[0],
            page_nums=values.get(PAGE_NUM_FIELD, []),
            contents=values.get(CONTENT_FIELD, []),
            source_hash=row["source_hash"],
            indexed_at=row["indexed_at"]
        )


def load_values(conn, doc_id: int) -> Dict[str, List[str]]:
    """Load the stored values of a document, grouped by field in position order."""
    rows = conn.execute(
        "SELECT field, value FROM document_values WHERE doc_id = ? ORDER BY field, position",
        (doc_id,)
    ).fetchall()

    values: Dict[str, List[str]] = {}
    for row in rows:
        values.setdefault(row["field"], []).append(row["value"])
    return values


if __name__ == "__main__":
    import tempfile

    from .connection import open_or_create

    with tempfile.TemporaryDirectory() as tmp:
        repo = DocumentRepository(open_or_create(f"{tmp}/index_dir"))

        doc_id = repo.add_document(
            "/test/sample.pdf",
            [(1, "This is test content for page one."), (2, "Page two content.")],
            fingerprint="abc123"
        )
        print(f"Inserted document with ID: {doc_id}")
        print(f"File indexed: {repo.has_document('/test/sample.pdf', 'abc123')}")
        print(f"Total documents: {repo.count()}")

        doc = repo.get_by_id(doc_id)
        if doc:
            print(f"Retrieved: {doc.path} pages {doc.page_nums}")
