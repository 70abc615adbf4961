"""
Custom exception hierarchy for PDF Seekers.

Three error families partition the failure space: file and PDF I/O,
index lifecycle, and search. Every variant carries a stable code and the
context (path, field name, page number) needed to render an actionable
message.
"""


class PDFSeekerError(Exception):
    """Base exception for all PDF Seekers errors."""

    code = "PS0000"

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PDFSeekerError):
    """Raised when configuration is invalid or missing."""

    code = "CF0001"


def _format(code: str, name: str, subject, cause) -> str:
    """Render the `[CODE_Name] subject: cause` message shared by all variants."""
    label = f"[{code}_{name}]"
    parts = [str(part) for part in (subject, cause) if part not in (None, "")]

    if not parts:
        return label
    if len(parts) == 1:
        return f"{label} {parts[0]}"
    return f"{label} {parts[0]}: {parts[1]}"


class FileOperationsError(PDFSeekerError):
    """Base class for file and PDF I/O failures."""

    def __init__(self, filepath: str = None, cause: Exception = None, details: dict = None):
        super().__init__(
            _format(self.code, type(self).__name__, filepath, cause),
            details
        )
        self.filepath = filepath
        self.cause = cause


class PDFFileReadError(FileOperationsError):
    """Raised when a PDF document cannot be opened or parsed."""

    code = "FO0001"


class PDFFileTextExtractionError(FileOperationsError):
    """Raised when text cannot be extracted from one page of a PDF."""

    code = "FO0002"

    def __init__(self, filepath: str, page_num, cause: Exception = None):
        reason = f"Page-{page_num} {cause}" if cause is not None else f"Page-{page_num}"
        super().__init__(filepath, reason, details={"page_num": page_num})
        self.page_num = page_num
        self.cause = cause


class DirectoryReadError(FileOperationsError):
    """Raised when the entries of a directory cannot be listed."""

    code = "FO0003"


class CurrentWorkingDirectoryReadError(FileOperationsError):
    """Raised when the current working directory cannot be resolved."""

    code = "FO0004"


class DirectoryCreateError(FileOperationsError):
    """Raised when a directory cannot be created."""

    code = "FO0005"


class FileOpenError(FileOperationsError):
    """Raised when a file cannot be opened for reading or appending."""

    code = "FO0006"


class FileWriteError(FileOperationsError):
    """Raised when a file cannot be written."""

    code = "FO0007"


class IndexingError(PDFSeekerError):
    """Base class for index lifecycle failures."""

    def __init__(self, subject: str = None, cause: Exception = None, details: dict = None):
        super().__init__(
            _format(self.code, type(self).__name__, subject, cause),
            details
        )
        self.subject = subject
        self.cause = cause


class IndexDirectoryOpenError(IndexingError):
    """Raised when an existing index directory cannot be opened."""

    code = "IE0001"


class IndexDirectoryReadError(IndexingError):
    """Raised when the contents of the index directory cannot be listed."""

    code = "IE0002"


class IndexDirectoryCreateError(IndexingError):
    """Raised when the index directory cannot be created."""

    code = "IE0003"


class IndexCreateError(IndexingError):
    """Raised when a new index cannot be created in an empty directory."""

    code = "IE0004"


class IndexWriterCreateError(IndexingError):
    """Raised when the write lease on the index cannot be acquired."""

    code = "IE0005"


class IndexFieldNotFound(IndexingError):
    """Raised when a field required for indexing is missing from the schema."""

    code = "IE0006"

    def __init__(self, field_name: str, cause: Exception = None):
        super().__init__(field_name, cause, details={"field": field_name})
        self.field_name = field_name


class IndexDocumentAddError(IndexingError):
    """Raised when a document cannot be added to the index."""

    code = "IE0007"


class IndexDocumentCommitError(IndexingError):
    """Raised when pending documents cannot be committed."""

    code = "IE0008"


class SearchingError(PDFSeekerError):
    """Base class for search failures."""

    def __init__(self, subject: str = None, cause: Exception = None,
                 query: str = None, details: dict = None):
        super().__init__(
            _format(self.code, type(self).__name__, subject, cause),
            details
        )
        self.subject = subject
        self.cause = cause
        self.query = query


class IndexReaderCreateError(SearchingError):
    """Raised when a read-only view of the index cannot be opened."""

    code = "SE0001"


class SearchFieldNotFound(SearchingError):
    """Raised when a field needed to run or read a search is missing."""

    code = "SE0002"

    def __init__(self, field_name: str, cause: Exception = None):
        super().__init__(field_name, cause, details={"field": field_name})
        self.field_name = field_name


class QueryParserError(SearchingError):
    """Raised when the query text is not valid query syntax."""

    code = "SE0003"


class KeywordSearchError(SearchingError):
    """Raised when the ranked search itself fails."""

    code = "SE0004"


class SearcherDocumentFetchError(SearchingError):
    """Raised when a ranked hit cannot be loaded from the index."""

    code = "SE0005"


if __name__ == "__main__":
    try:
        raise PDFFileTextExtractionError("data/yolo.pdf", 3, ValueError("bad stream"))
    except PDFSeekerError as e:
        print(f"Caught: {e.__class__.__name__}: {e.message}")
        print(f"Details: {e.details}")

    try:
        raise IndexDirectoryCreateError("/readonly/index_dir", PermissionError("denied"))
    except IndexingError as e:
        print(f"Index failure for: {e.subject}")
