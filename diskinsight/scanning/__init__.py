"""Scanning package for diskinsight.

This package provides the scan drivers and the hashing utility they use:

- ContentHasher: Computes xxh64 digests of file contents with caching.
- TreeScanner: Walks a live directory tree into a ScanResult.
- ArchiveScanner: Reads the members of a zip archive into a ScanResult.

Example:
    >>> from diskinsight.scanning import TreeScanner, ArchiveScanner
    >>> from pathlib import Path
    >>>
    >>> result = TreeScanner(Path("/data")).scan()
    >>> archive_result = ArchiveScanner(Path("/data/backup.zip")).scan()
"""

from .archive_scanner import ArchiveError, ArchiveScanner, scan_archive
from .content_hasher import CHUNK_SIZE, UNREADABLE_HASH, ContentHasher
from .entry_source import SourceEntry, walk_entries
from .tree_scanner import ProgressCallback, TreeScanner, scan, scan_with_progress

__all__ = [
    "CHUNK_SIZE",
    "UNREADABLE_HASH",
    "ArchiveError",
    "ArchiveScanner",
    "ContentHasher",
    "ProgressCallback",
    "SourceEntry",
    "TreeScanner",
    "scan",
    "scan_archive",
    "scan_with_progress",
    "walk_entries",
]
