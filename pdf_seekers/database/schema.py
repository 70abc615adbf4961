"""
Index schema definitions for PDF Seekers.

The logical schema is fixed: `content` (full-text, stored, multi-valued),
`path` (exact string, stored) and `page_num` (exact string, stored,
multi-valued). It is persisted in the `schema_fields` table when an index
is created and compared against on every reopen.

Physical layout on SQLite:
- `documents`: one row per indexed source file.
- `document_values`: stored field values, ordered by position.
- `documents_fts`: contentless FTS5 table, one row per document, holding
  the tokens of every full-text field.
"""

import sqlite3
from dataclasses import dataclass
from typing import List, Tuple

from ..core import get_logger, IndexFieldNotFound

logger = get_logger(__name__)


TEXT = "text"
STRING = "string"

CONTENT_FIELD = "content"
PATH_FIELD = "path"
PAGE_NUM_FIELD = "page_num"

FTS_TABLE = "documents_fts"


@dataclass(frozen=True)
class FieldSpec:
    """
    A single schema field.

    Attributes:
        name: Field name.
        kind: TEXT (tokenized full-text) or STRING (exact match).
        stored: Whether values can be read back from hits.
        multi_valued: Whether a document may carry several values.
    """
    name: str
    kind: str
    stored: bool = True
    multi_valued: bool = False


@dataclass(frozen=True)
class Schema:
    """Ordered collection of fields declared for an index."""
    fields: Tuple[FieldSpec, ...]

    def get_field(self, name: str) -> FieldSpec:
        """
        Look up a field by name.

        Raises:
            IndexFieldNotFound: If the schema has no such field.
        """
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise IndexFieldNotFound(name, KeyError(f"field '{name}' is not declared in the schema"))

    def has_field(self, name: str) -> bool:
        return any(spec.name == name for spec in self.fields)

    @property
    def field_names(self) -> List[str]:
        return [spec.name for spec in self.fields]

    @property
    def text_fields(self) -> List[FieldSpec]:
        return [spec for spec in self.fields if spec.kind == TEXT]


def build_default_schema() -> Schema:
    """Build the three-field schema every PDF Seekers index uses."""
    return Schema(fields=(
        FieldSpec(CONTENT_FIELD, TEXT, stored=True, multi_valued=True),
        FieldSpec(PATH_FIELD, STRING, stored=True, multi_valued=False),
        FieldSpec(PAGE_NUM_FIELD, STRING, stored=True, multi_valued=True),
    ))


SCHEMA_FIELDS_TABLE = """
CREATE TABLE IF NOT EXISTS schema_fields (
    position INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    kind TEXT NOT NULL,
    stored INTEGER NOT NULL,
    multi_valued INTEGER NOT NULL
)
"""

DOCUMENTS_TABLE = """
CREATE TABLE IF NOT EXISTS documents (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source_hash TEXT,
    indexed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

DOCUMENT_VALUES_TABLE = """
CREATE TABLE IF NOT EXISTS document_values (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    doc_id INTEGER NOT NULL,
    field TEXT NOT NULL,
    position INTEGER NOT NULL,
    value TEXT NOT NULL,
    FOREIGN KEY (doc_id) REFERENCES documents(id)
)
"""

DOCUMENT_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_values_doc ON document_values(doc_id, field, position)",
    "CREATE INDEX IF NOT EXISTS idx_values_lookup ON document_values(field, value)",
    "CREATE INDEX IF NOT EXISTS idx_documents_hash ON documents(source_hash)"
]


def _get_fts_table_sql(schema: Schema, tokenizer: str) -> str:
    """Generate FTS5 table creation SQL with one column per text field."""
    columns = ", ".join(spec.name for spec in schema.text_fields)

    return f"""
    CREATE VIRTUAL TABLE IF NOT EXISTS {FTS_TABLE} USING fts5(
        {columns},
        content='',
        tokenize='{tokenizer}'
    )
    """


def create_schema(conn: sqlite3.Connection, schema: Schema, tokenizer: str = "unicode61") -> None:
    """
    Create every table of a fresh index and persist its schema.

    Runs inside the caller's transaction; nothing is committed here.
    Automatic FTS5 segment merging is switched off so every committed
    write stays its own segment.

    Args:
        conn: Connection holding the write lease.
        schema: Fields to declare.
        tokenizer: FTS5 tokenizer definition.
    """
    logger.info("Initializing index schema")

    conn.execute(SCHEMA_FIELDS_TABLE)
    conn.execute(DOCUMENTS_TABLE)
    conn.execute(DOCUMENT_VALUES_TABLE)

    for index_sql in DOCUMENT_INDEXES:
        conn.execute(index_sql)

    conn.execute(_get_fts_table_sql(schema, tokenizer))
    conn.execute(f"INSERT INTO {FTS_TABLE}({FTS_TABLE}, rank) VALUES ('automerge', 0)")

    conn.executemany(
        "INSERT INTO schema_fields (position, name, kind, stored, multi_valued) VALUES (?, ?, ?, ?, ?)",
        [
            (position, spec.name, spec.kind, int(spec.stored), int(spec.multi_valued))
            for position, spec in enumerate(schema.fields)
        ]
    )

    logger.info("Schema initialization complete")


def read_schema(conn: sqlite3.Connection) -> Schema:
    """
    Load the schema persisted in an index.

    Raises:
        sqlite3.DatabaseError: If the file is not an index database.
    """
    rows = conn.execute(
        "SELECT name, kind, stored, multi_valued FROM schema_fields ORDER BY position"
    ).fetchall()

    return Schema(fields=tuple(
        FieldSpec(
            name=row[0],
            kind=row[1],
            stored=bool(row[2]),
            multi_valued=bool(row[3])
        )
        for row in rows
    ))


def get_statistics(conn: sqlite3.Connection) -> dict:
    """
    Get index statistics.

    Returns:
        Dictionary with document, file and page counts.
    """
    stats = {}

    row = conn.execute("SELECT COUNT(*) FROM documents").fetchone()
    stats["total_documents"] = row[0]

    row = conn.execute(
        "SELECT COUNT(DISTINCT value) FROM document_values WHERE field = ?",
        (PATH_FIELD,)
    ).fetchone()
    stats["total_files"] = row[0]

    row = conn.execute(
        "SELECT COUNT(*) FROM document_values WHERE field = ?",
        (PAGE_NUM_FIELD,)
    ).fetchone()
    stats["total_pages"] = row[0]

    row = conn.execute(
        "SELECT MIN(indexed_at), MAX(indexed_at) FROM documents"
    ).fetchone()
    stats["oldest_index"] = row[0]
    stats["newest_index"] = row[1]

    return stats
