"""
Index lifecycle and connection management for PDF Seekers.

An index lives in a directory owned by this package. `open_or_create()`
creates the directory and an empty schema-initialized index when needed,
or reopens an existing one after checking its persisted schema.

Write access is an explicit lease: `IndexHandle.writer()` takes an
exclusive advisory lock on `writer.lock` and a SQLite `BEGIN IMMEDIATE`
transaction, and releases both on every exit path. Readers get a
snapshot of the index as of the moment they were opened.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator, List, Optional, Union

try:  # POSIX-only; elsewhere the SQLite lock alone guards writers
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover
    fcntl = None  # type: ignore

from ..core import (
    get_config,
    get_logger,
    IndexCreateError,
    IndexDirectoryCreateError,
    IndexDirectoryOpenError,
    IndexDirectoryReadError,
    IndexDocumentAddError,
    IndexDocumentCommitError,
    IndexReaderCreateError,
    IndexWriterCreateError
)
from .schema import (
    FTS_TABLE,
    PATH_FIELD,
    Schema,
    build_default_schema,
    create_schema,
    read_schema
)

logger = get_logger(__name__)


INDEX_DB_NAME = "index.db"
WRITER_LOCK_NAME = "writer.lock"


class IndexWriter:
    """
    A single write session on the index.

    Obtained from IndexHandle.writer(); adds documents inside one
    transaction that becomes visible to new readers on commit().
    """

    def __init__(self, conn: sqlite3.Connection, schema: Schema, index_path: str = None):
        self.conn = conn
        self.schema = schema
        self.index_path = index_path
        self.committed = False

    def add_document(self, document: Dict[str, List[str]], source_hash: str = None) -> int:
        """
        Add one document.

        Args:
            document: Field name -> ordered list of values.
            source_hash: Fingerprint of the source file, stored as bookkeeping.

        Returns:
            Row ID of the new document.

        Raises:
            IndexFieldNotFound: If a field is not declared in the schema.
            IndexDocumentAddError: If the values cannot be written.
        """
        specs = {name: self.schema.get_field(name) for name in document}
        subject = (document.get(PATH_FIELD) or [self.index_path])[0]

        for name, values in document.items():
            if not specs[name].multi_valued and len(values) > 1:
                raise IndexDocumentAddError(
                    f"{subject} ({name})",
                    ValueError(f"single-valued field got {len(values)} values")
                )

        try:
            cur = self.conn.execute(
                "INSERT INTO documents (source_hash) VALUES (?)",
                (source_hash,)
            )
            doc_id = cur.lastrowid

            self.conn.executemany(
                "INSERT INTO document_values (doc_id, field, position, value) VALUES (?, ?, ?, ?)",
                [
                    (doc_id, name, position, str(value))
                    for name, values in document.items()
                    if specs[name].stored
                    for position, value in enumerate(values)
                ]
            )

            text_fields = [spec.name for spec in self.schema.text_fields]
            columns = ", ".join(["rowid"] + text_fields)
            placeholders = ", ".join("?" for _ in range(len(text_fields) + 1))

            self.conn.execute(
                f"INSERT INTO {FTS_TABLE} ({columns}) VALUES ({placeholders})",
                [doc_id] + ["\n".join(document.get(name, [])) for name in text_fields]
            )

        except sqlite3.Error as e:
            raise IndexDocumentAddError(subject, e)

        return doc_id

    def commit(self) -> None:
        """
        Commit the session; blocks until the data is durable.

        Raises:
            IndexDocumentCommitError: If the commit fails.
        """
        try:
            self.conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise IndexDocumentCommitError(self.index_path, e)

        self.committed = True


class IndexHandle:
    """
    An opened index directory.

    Hands out read-only connections and scoped write sessions.
    """

    def __init__(
        self,
        index_path: Union[str, Path],
        schema: Schema,
        memory_budget_mb: int = None,
        num_threads: int = None
    ):
        """
        Initialize the handle.

        Args:
            index_path: Index directory.
            schema: Schema persisted in the index.
            memory_budget_mb: Writer page-cache budget. Defaults to config value.
            num_threads: Indexing threads per write session. Defaults to config value.
        """
        config = get_config()

        self.index_path = Path(index_path)
        self.db_path = self.index_path / INDEX_DB_NAME
        self.lock_path = self.index_path / WRITER_LOCK_NAME
        self.schema = schema
        self.memory_budget_mb = memory_budget_mb or config.indexing.writer_memory_mb
        self.num_threads = num_threads or config.indexing.writer_num_threads

    def _create_connection(self) -> sqlite3.Connection:
        """Create a new autocommit connection with WAL journaling."""
        conn = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            timeout=30.0,
            isolation_level=None
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextmanager
    def reader(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for a read-only snapshot of the index.

        Yields:
            Connection inside an open read transaction.

        Raises:
            IndexReaderCreateError: If the index cannot be opened for reading.
        """
        if not self.db_path.exists():
            raise IndexReaderCreateError(str(self.index_path), FileNotFoundError(str(self.db_path)))

        try:
            conn = self._create_connection()
            conn.execute("PRAGMA query_only = ON")
            conn.execute("BEGIN")
            conn.execute("SELECT COUNT(*) FROM documents").fetchone()
        except sqlite3.Error as e:
            raise IndexReaderCreateError(str(self.index_path), e)

        try:
            yield conn
        finally:
            conn.close()

    def _acquire_lock(self):
        """Take the exclusive advisory writer lock, or None where unsupported."""
        if fcntl is None:
            return None

        lock_fp = open(self.lock_path, "a+")
        try:
            fcntl.flock(lock_fp.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            lock_fp.close()
            raise

        lock_fp.seek(0)
        lock_fp.truncate()
        lock_fp.write(str(os.getpid()))
        lock_fp.flush()
        return lock_fp

    @staticmethod
    def _release_lock(lock_fp) -> None:
        if lock_fp is None:
            return
        try:
            fcntl.flock(lock_fp.fileno(), fcntl.LOCK_UN)
        finally:
            lock_fp.close()

    @contextmanager
    def writer(self) -> Generator[IndexWriter, None, None]:
        """
        Context manager for one write session.

        Holds the writer lease for the whole block; anything not committed
        when the block exits is rolled back.

        Yields:
            IndexWriter for adding documents and committing.

        Raises:
            IndexWriterCreateError: If the lease cannot be acquired.
        """
        try:
            lock_fp = self._acquire_lock()
        except OSError as e:
            raise IndexWriterCreateError(str(self.lock_path), e)

        conn = None
        try:
            try:
                conn = self._create_connection()
                conn.execute("PRAGMA synchronous=FULL")
                conn.execute(f"PRAGMA cache_size=-{self.memory_budget_mb * 1024}")
                conn.execute("PRAGMA temp_store=MEMORY")
                # helper threads besides the single indexing thread
                conn.execute(f"PRAGMA threads={max(0, self.num_threads - 1)}")
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise IndexWriterCreateError(str(self.index_path), e)

            writer = IndexWriter(conn, self.schema, str(self.index_path))
            try:
                yield writer
            finally:
                # SQLite may already have rolled back after a failed write
                if not writer.committed and conn.in_transaction:
                    conn.execute("ROLLBACK")
        finally:
            if conn is not None:
                conn.close()
            self._release_lock(lock_fp)


def _remove_partial_index(handle: IndexHandle) -> None:
    """Delete the files left by a failed index creation."""
    for path in (
        handle.db_path,
        handle.db_path.with_name(INDEX_DB_NAME + "-wal"),
        handle.db_path.with_name(INDEX_DB_NAME + "-shm"),
        handle.lock_path
    ):
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning(f"{path} - Could not remove after failed index creation: {e}")


def _is_empty(index_path: Path) -> bool:
    try:
        with os.scandir(index_path) as entries:
            return next(entries, None) is None
    except OSError as e:
        raise IndexDirectoryReadError(str(index_path), e)


def open_or_create(
    index_path: Union[str, Path],
    tokenizer: str = None,
    schema: Optional[Schema] = None
) -> IndexHandle:
    """
    Create or open the index stored in a directory.

    Args:
        index_path: Index directory; created when absent.
        tokenizer: FTS5 tokenizer for a new index. Defaults to config value.
        schema: Expected schema. Defaults to the three-field schema.

    Returns:
        IndexHandle ready for reads and writes.

    Raises:
        IndexDirectoryCreateError: If the directory cannot be created.
        IndexDirectoryReadError: If the directory cannot be listed.
        IndexCreateError: If a new index cannot be initialized.
        IndexDirectoryOpenError: If an existing index is corrupt or its
            persisted schema differs.
    """
    index_path = Path(index_path)
    schema = schema or build_default_schema()
    tokenizer = tokenizer or get_config().search.tokenizer

    try:
        index_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IndexDirectoryCreateError(str(index_path), e)

    logger.debug(f"Index directory ready at {index_path}")

    empty = _is_empty(index_path)
    logger.debug(f"{index_path} - Is index directory empty? {empty}")

    handle = IndexHandle(index_path, schema)

    if empty:
        try:
            with handle.writer() as writer:
                create_schema(writer.conn, schema, tokenizer)
                writer.commit()
        except (IndexWriterCreateError, IndexDocumentCommitError, sqlite3.Error) as e:
            _remove_partial_index(handle)
            raise IndexCreateError(str(index_path), getattr(e, "cause", None) or e)

        logger.info(f"Created new index at {index_path}")
        return handle

    if not handle.db_path.exists():
        raise IndexDirectoryOpenError(
            str(index_path),
            FileNotFoundError(f"no {INDEX_DB_NAME} in non-empty index directory")
        )

    try:
        conn = sqlite3.connect(handle.db_path, timeout=30.0)
        try:
            persisted = read_schema(conn)
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise IndexDirectoryOpenError(str(index_path), e)

    if persisted != schema:
        raise IndexDirectoryOpenError(
            str(index_path),
            ValueError(
                f"schema mismatch: index has {persisted.field_names}, "
                f"expected {schema.field_names}"
            )
        )

    handle.schema = persisted
    logger.debug(f"Read contents successfully of index directory {index_path}")
    return handle
