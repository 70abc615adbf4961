"""
PDF Seekers Package.

Indexes the text of PDF documents into a persistent SQLite FTS5 index and
answers keyword queries with the matching pages of each document and a
window of text around every match.
"""

__version__ = "0.1.0"
