"""
Tracking module recording processed and rejected inputs across runs.
"""

from .tracker import Tracker, TrackerEntry, FileTracker, TrackerPair

__all__ = [
    "Tracker",
    "TrackerEntry",
    "FileTracker",
    "TrackerPair"
]
