"""
Command line interface for PDF Seekers.

Usage:
    pdf-seekers index data/                       # Index every PDF in data/
    pdf-seekers index data/yolo.pdf               # Index a single file
    pdf-seekers search data/ convolutional        # Search within data/
    pdf-seekers search data/yolo.pdf anchor --json
    pdf-seekers --config path/to/config.json index data/
"""

import argparse
import json
import sys
from pathlib import Path

from . import __version__
from .core import PDFSeekerError
from .core.config_loader import reload_config


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="pdf-seekers",
        description="Index PDF files and search them by keyword"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to custom config.json file"
    )

    common = argparse.ArgumentParser(add_help=False)

    common.add_argument(
        "--cache-path",
        type=str,
        default=None,
        help="Cache directory holding the index, trackers and logs (default: paths.cache_directory from config)"
    )

    common.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Verbosity: trace, debug, info, warn, error or off"
    )

    subparsers = parser.add_subparsers(dest="action", required=True)

    index_parser = subparsers.add_parser(
        "index",
        parents=[common],
        help="Index a PDF file or a directory of PDF files"
    )
    index_parser.add_argument("path", help="PDF file or directory")

    search_parser = subparsers.add_parser(
        "search",
        parents=[common],
        help="Search indexed PDF files for a keyword"
    )
    search_parser.add_argument("path", help="PDF file or directory to search within")
    search_parser.add_argument("keyword", help="Keyword to search for")
    search_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON"
    )

    return parser.parse_args(argv)


def run_index(args) -> int:
    """Run the index action."""
    from .api import index

    stats = index(args.path, cache_root=args.cache_path, log_level=args.log_level)

    print(f"{args.path} - Indexing completed.")
    print(f"Files scanned:     {stats.files_scanned:,}")
    print(f"Files indexed:     {stats.files_indexed:,}")
    print(f"Files skipped:     {stats.files_skipped:,}")
    print(f"Files failed:      {stats.files_failed:,}")
    print(f"Pages indexed:     {stats.pages_indexed:,}")

    return 0


def run_search(args) -> int:
    """Run the search action."""
    from .api import search

    results = search(args.path, args.keyword, cache_root=args.cache_path, log_level=args.log_level)

    if args.json:
        print(json.dumps([metadata.to_dict() for metadata in results], indent=2))
        return 0

    if not results:
        print("No matching documents found.")
        return 0

    for metadata in results:
        print("=" * 60)
        print(metadata.show())

    return 0


def main(argv=None) -> int:
    """Main entry point for the pdf-seekers CLI."""
    args = parse_args(argv)

    if not args.path.strip():
        print("Error: path must not be empty", file=sys.stderr)
        return 1

    if args.action == "search" and not args.keyword.strip():
        print("Error: keyword must not be empty", file=sys.stderr)
        return 1

    try:
        if args.config:
            config_path = Path(args.config)
            if not config_path.exists():
                print(f"Error: Config file not found: {config_path}", file=sys.stderr)
                return 1
            reload_config(config_path)

        if args.action == "index":
            return run_index(args)
        return run_search(args)

    except PDFSeekerError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
