"""
Utility module providing shared helper functions.

Contains file operations and keyword-in-context text helpers used across
the application. Depends only on the core module.
"""

from .file_utils import (
    get_file_hash,
    get_cache_dir,
    create_cache_dir_if_not_exists,
    ensure_directory
)
from .text_utils import (
    split_tokens,
    find_token,
    window_bounds,
    crop_around
)

__all__ = [
    "get_file_hash",
    "get_cache_dir",
    "create_cache_dir_if_not_exists",
    "ensure_directory",
    "split_tokens",
    "find_token",
    "window_bounds",
    "crop_around"
]
