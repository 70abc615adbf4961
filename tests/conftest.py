"""
Pytest fixtures and configuration for the test suite.

Provides temporary directories, generated sample PDFs, and temporary
configurations to ensure tests are isolated and safe.
"""

import json
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Callable, Generator, List

import sys
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: List[str]) -> bytes:
    """
    Build a minimal PDF with one line of Helvetica text per page.

    An empty string produces a page without any text.
    """
    font_id = 3 + 2 * len(pages)
    kids = " ".join(f"{3 + 2 * i} 0 R" for i in range(len(pages)))

    objects = [
        "<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>",
    ]

    for i, text in enumerate(pages):
        stream = f"BT /F1 10 Tf 20 700 Td ({_escape(text)}) Tj ET" if text else ""
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Contents {4 + 2 * i} 0 R /Resources << /Font << /F1 {font_id} 0 R >> >> >>"
        )
        objects.append(
            f"<< /Length {len(stream.encode('latin-1'))} >>\nstream\n{stream}\nendstream"
        )

    objects.append("<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []

    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n{body}\nendobj\n".encode("latin-1")

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode("latin-1")
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode("latin-1")

    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode("latin-1")

    return bytes(out)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory, cleaned up after test.
    """
    tmp = tempfile.mkdtemp(prefix="pdf_seekers_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def make_pdf(temp_dir: Path) -> Callable[..., Path]:
    """
    Factory writing a generated PDF into the temporary directory.

    Usage: make_pdf("name.pdf", ["page one text", "page two text"])
    """
    def _make(name: str, pages: List[str], directory: Path = None) -> Path:
        target = Path(directory or temp_dir) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(build_pdf(pages))
        return target

    return _make


@pytest.fixture
def sample_pdf(make_pdf) -> Path:
    """A two-page PDF whose second page mentions 'convolutional'."""
    return make_pdf("yolo.pdf", [
        "You Only Look Once unified real-time object detection",
        "A single convolutional network simultaneously predicts multiple bounding boxes",
    ])


@pytest.fixture
def sample_pdf_collection(temp_dir: Path, make_pdf) -> Path:
    """
    Create a flat data directory with PDFs and one non-PDF entry.

    Returns:
        Path to the data directory.
    """
    data_dir = temp_dir / "data"
    data_dir.mkdir(exist_ok=True)

    make_pdf("resnet.pdf", [
        "Deep residual learning for image recognition",
        "Residual networks are easier to optimize",
    ], directory=data_dir)
    make_pdf("yolo.pdf", [
        "You Only Look Once unified real-time object detection",
        "A single convolutional network simultaneously predicts multiple bounding boxes",
    ], directory=data_dir)

    (data_dir / "notes.txt").write_text("Not a PDF")

    return data_dir


@pytest.fixture
def reset_config_singleton():
    """
    Reset the config singleton between tests.

    This ensures each test gets a fresh config instance.
    """
    from pdf_seekers.core import config_loader
    config_loader._config_instance = None
    yield
    config_loader._config_instance = None


@pytest.fixture
def reset_logger_singleton():
    """
    Reset the logger initialization flag between tests.

    Handlers added to the root logger during the test are removed and
    closed afterwards, so none stays bound to a closed capture stream.
    """
    import logging

    from pdf_seekers.core import logger

    root = logging.getLogger()
    handlers_before = list(root.handlers)

    logger._logger_initialized = False
    yield

    for handler in list(root.handlers):
        if handler not in handlers_before:
            root.removeHandler(handler)
            handler.close()
    logger._logger_initialized = False


@pytest.fixture
def temp_config(temp_dir: Path) -> Generator[Path, None, None]:
    """
    Create a temporary config.json for testing.

    Yields:
        Path to temporary config file.
    """
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    config_data = {
        "paths": {
            "cache_directory": str(temp_dir / "cache")
        },
        "extraction": {
            "primary_backend": "pypdf",
            "fallback_backend": "pdfplumber",
            "supported_extensions": ["pdf"]
        },
        "indexing": {
            "writer_memory_mb": 16,
            "skip_unreadable_files": True,
            "log_progress_every": 1
        },
        "search": {
            "top_k": 10,
            "context_window": 20,
            "context_source": "pdf"
        },
        "logging": {
            "level": "DEBUG",
            "format": "%(levelname)s - %(message)s",
            "max_file_size_mb": 1,
            "backup_count": 1
        }
    }

    config_path = config_dir / "config.json"
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config_data, f)

    yield config_path


@pytest.fixture
def configured(temp_config, reset_config_singleton):
    """
    Load the temporary config into the singleton.

    Yields:
        The loaded Config.
    """
    from pdf_seekers.core.config_loader import get_config
    yield get_config(temp_config)


@pytest.fixture
def index_handle(configured, temp_dir: Path):
    """A fresh, empty index in the temporary directory."""
    from pdf_seekers.database import open_or_create
    return open_or_create(temp_dir / "cache" / "index_dir")
