"""
BM25 search engine using SQLite FTS5.

Executes keyword searches with BM25 ranking over the index documents and
loads the stored fields of the top hits from a single reader snapshot.
"""

import sqlite3
from typing import Dict, List

from ..core import (
    get_config,
    get_logger,
    KeywordSearchError,
    QueryParserError,
    SearchFieldNotFound,
    SearcherDocumentFetchError
)
from ..database import IndexHandle, CONTENT_FIELD, PAGE_NUM_FIELD, PATH_FIELD
from ..database.repository import load_values
from ..database.schema import FTS_TABLE
from .models import SearchHit
from .query_parser import QueryParser

logger = get_logger(__name__)


class BM25Engine:
    """
    Keyword search engine using SQLite FTS5 with BM25 ranking.

    Returns at most `top_k` documents, best first; ties keep index order.
    """

    def __init__(self, top_k: int = None):
        """
        Initialize the search engine with configuration.

        Args:
            top_k: Maximum number of hits. Defaults to config value.
        """
        self.config = get_config()
        self.top_k = top_k or self.config.search.top_k

    def search_hits(self, handle: IndexHandle, query_text: str, limit: int = None) -> List[SearchHit]:
        """
        Execute a keyword search.

        Args:
            handle: Opened index.
            query_text: Query in the free-text syntax of QueryParser.
            limit: Maximum hits. Defaults to top_k.

        Returns:
            Ranked list of SearchHit, best first.

        Raises:
            SearchFieldNotFound: If the schema lacks a searched or stored field.
            IndexReaderCreateError: If the index cannot be opened for reading.
            QueryParserError: If the query is not valid syntax.
            KeywordSearchError: If query execution fails.
            SearcherDocumentFetchError: If a hit cannot be loaded.
        """
        for name in (CONTENT_FIELD, PATH_FIELD, PAGE_NUM_FIELD):
            if not handle.schema.has_field(name):
                raise SearchFieldNotFound(name, KeyError(f"field '{name}' is not in the index schema"))

        match_expression = QueryParser(handle.schema).parse(query_text)

        if match_expression is None:
            logger.debug(f"Query {query_text!r} has no positive term, nothing to match")
            return []

        limit = limit or self.top_k

        with handle.reader() as conn:
            rows = self._execute_search(conn, query_text, match_expression, limit)

            hits = [self._fetch_hit(conn, row["doc_id"], row["score"]) for row in rows]

        logger.debug(f"Search {query_text!r}: {len(hits)} hits")
        return hits

    def _execute_search(self, conn, query_text: str, match_expression: str, limit: int):
        """Execute the FTS5 search query."""
        sql = f"""
            SELECT rowid AS doc_id, bm25({FTS_TABLE}) AS score
            FROM {FTS_TABLE}
            WHERE {FTS_TABLE} MATCH ?
            ORDER BY score, rowid
            LIMIT ?
        """

        try:
            return conn.execute(sql, (match_expression, limit)).fetchall()
        except sqlite3.OperationalError as e:
            if "syntax error" in str(e):
                raise QueryParserError(query_text, e, query=query_text)
            logger.error(f"Search failed: {e}")
            raise KeywordSearchError(query_text, e, query=query_text)
        except sqlite3.Error as e:
            logger.error(f"Search failed: {e}")
            raise KeywordSearchError(query_text, e, query=query_text)

    @staticmethod
    def _fetch_hit(conn, doc_id: int, score: float) -> SearchHit:
        """Load the stored fields of one ranked document."""
        try:
            values = load_values(conn, doc_id)
        except sqlite3.Error as e:
            raise SearcherDocumentFetchError(f"document {doc_id}", e)

        if not values.get(PATH_FIELD):
            raise SearcherDocumentFetchError(
                f"document {doc_id}",
                LookupError(f"no stored '{PATH_FIELD}' value")
            )

        return SearchHit(
            path=values[PATH_FIELD][0],
            page_nums=values.get(PAGE_NUM_FIELD, []),
            contents=values.get(CONTENT_FIELD, []),
            score=score
        )

    def search_keyword(self, handle: IndexHandle, query_text: str) -> Dict[str, List[str]]:
        """
        Map each matching source path to all its stored page numbers.

        When several documents share a path, the later hit's page numbers
        replace the earlier ones.

        Returns:
            Ordered dict of path -> page number strings.
        """
        pages_by_path: Dict[str, List[str]] = {}

        for hit in self.search_hits(handle, query_text):
            pages_by_path[hit.path] = hit.page_nums

        return pages_by_path


if __name__ == "__main__":
    import tempfile

    from ..database import add_document, open_or_create

    with tempfile.TemporaryDirectory() as tmp:
        handle = open_or_create(f"{tmp}/index_dir")

        add_document(handle, "data/yolo.pdf", [
            (1, "You Only Look Once: unified real-time object detection"),
            (2, "A single convolutional network predicts multiple bounding boxes"),
        ])
        add_document(handle, "data/resnet.pdf", [
            (1, "Deep residual learning for image recognition"),
        ])

        engine = BM25Engine()

        for q in ["convolutional", "detection OR residual", "transformer"]:
            print(f"{q!r}: {engine.search_keyword(handle, q)}")
