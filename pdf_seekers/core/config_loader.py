"""
Configuration loader for PDF Seekers.

Loads settings from config.json and provides typed access via dataclasses.
Supports singleton pattern for global access and runtime reload capability.
When no config file can be found, built-in defaults are used.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .exceptions import ConfigurationError


DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)-5.5s | %(name)s - %(message)s"


@dataclass
class PathsConfig:
    """Configuration for the cache layout."""
    cache_directory: Path
    index_dir: str = "index_dir"
    logs_dir: str = "logs"
    tracking_dir: str = "tracking"
    success_log: str = "_SUCCESS.txt"
    fail_log: str = "_FAIL.txt"


@dataclass
class ExtractionConfig:
    """Configuration for PDF extraction settings."""
    primary_backend: str = "pypdf"
    fallback_backend: Optional[str] = "pdfplumber"
    supported_extensions: List[str] = field(default_factory=lambda: ["pdf"])


@dataclass
class IndexingConfig:
    """Configuration for the index writer and batch behavior."""
    writer_memory_mb: int = 1024
    writer_num_threads: int = 1
    skip_unreadable_files: bool = True
    log_progress_every: int = 10


@dataclass
class SearchConfig:
    """Configuration for search and keyword-in-context extraction."""
    top_k: int = 10
    tokenizer: str = "unicode61"
    context_window: int = 20
    context_source: str = "pdf"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    max_file_size_mb: int = 1024
    backup_count: int = 5


CONTEXT_SOURCES = ("pdf", "index")


@dataclass
class Config:
    """
    Main configuration container holding all config sections.

    Provides singleton access via get_config() function.
    """
    paths: PathsConfig
    extraction: ExtractionConfig
    indexing: IndexingConfig
    search: SearchConfig
    logging: LoggingConfig
    project_root: Path = field(default_factory=Path)

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the config.json file.

        Returns:
            Populated Config instance.

        Raises:
            ConfigurationError: If file is missing or invalid.
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)}
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                {"path": str(config_path)}
            )

        project_root = config_path.resolve().parent.parent

        return cls._parse_config(data, project_root)

    @classmethod
    def defaults(cls, project_root: Path = None) -> "Config":
        """Build a Config from built-in defaults only."""
        return cls._parse_config({}, Path(project_root or Path.cwd()))

    @classmethod
    def _parse_config(cls, data: dict, project_root: Path) -> "Config":
        """Parse raw config dict into typed Config object."""
        paths_data = data.get("paths", {})
        paths = PathsConfig(
            cache_directory=cls._resolve_path(paths_data.get("cache_directory", ".cache"), project_root),
            index_dir=paths_data.get("index_dir", "index_dir"),
            logs_dir=paths_data.get("logs_dir", "logs"),
            tracking_dir=paths_data.get("tracking_dir", "tracking"),
            success_log=paths_data.get("success_log", "_SUCCESS.txt"),
            fail_log=paths_data.get("fail_log", "_FAIL.txt")
        )

        ext_data = data.get("extraction", {})
        extraction = ExtractionConfig(
            primary_backend=ext_data.get("primary_backend", "pypdf"),
            fallback_backend=ext_data.get("fallback_backend", "pdfplumber"),
            supported_extensions=[
                ext.lower().lstrip(".")
                for ext in ext_data.get("supported_extensions", ["pdf"])
            ]
        )

        idx_data = data.get("indexing", {})
        indexing = IndexingConfig(
            writer_memory_mb=idx_data.get("writer_memory_mb", 1024),
            writer_num_threads=idx_data.get("writer_num_threads", 1),
            skip_unreadable_files=idx_data.get("skip_unreadable_files", True),
            log_progress_every=idx_data.get("log_progress_every", 10)
        )

        search_data = data.get("search", {})
        search = SearchConfig(
            top_k=search_data.get("top_k", 10),
            tokenizer=search_data.get("tokenizer", "unicode61"),
            context_window=search_data.get("context_window", 20),
            context_source=search_data.get("context_source", "pdf")
        )

        if search.context_source not in CONTEXT_SOURCES:
            raise ConfigurationError(
                f"Unknown context source: {search.context_source}",
                {"allowed": list(CONTEXT_SOURCES)}
            )

        log_data = data.get("logging", {})
        logging_cfg = LoggingConfig(
            level=log_data.get("level", "INFO"),
            format=log_data.get("format", DEFAULT_LOG_FORMAT),
            max_file_size_mb=log_data.get("max_file_size_mb", 1024),
            backup_count=log_data.get("backup_count", 5)
        )

        return cls(
            paths=paths,
            extraction=extraction,
            indexing=indexing,
            search=search,
            logging=logging_cfg,
            project_root=project_root
        )

    @staticmethod
    def _resolve_path(path_str: str, project_root: Path) -> Path:
        """Resolve a path string, making relative paths absolute."""
        path = Path(path_str)
        if path.is_absolute():
            return path
        return project_root / path


_config_instance: Optional[Config] = None


def get_config(config_path: Path = None) -> Config:
    """
    Get the singleton Config instance.

    Args:
        config_path: Optional path to config file. If not provided,
                    searches upward from current directory and falls
                    back to built-in defaults.

    Returns:
        The global Config instance.

    Raises:
        ConfigurationError: If an explicit config file cannot be loaded.
    """
    global _config_instance

    if _config_instance is None or config_path is not None:
        if config_path is None:
            config_path = _find_config_file()

        if config_path is None:
            _config_instance = Config.defaults()
        else:
            _config_instance = Config.from_file(config_path)

    return _config_instance


def _find_config_file() -> Optional[Path]:
    """Search upward from current directory to find config/config.json."""
    current = Path.cwd()

    for _ in range(10):
        config_path = current / "config" / "config.json"
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def reload_config(config_path: Path = None) -> Config:
    """
    Force reload of configuration.

    Args:
        config_path: Optional path to config file.

    Returns:
        Fresh Config instance.
    """
    global _config_instance
    _config_instance = None
    return get_config(config_path)


if __name__ == "__main__":
    try:
        config = get_config()
        print(f"Project root: {config.project_root}")
        print(f"Cache directory: {config.paths.cache_directory}")
        print(f"Primary backend: {config.extraction.primary_backend}")
        print(f"Tokenizer: {config.search.tokenizer}")
    except ConfigurationError as e:
        print(f"Config error: {e.message}")
