"""
Models package for the disk usage scanner.

This package provides convenient imports for all data models:
- EntryKind: Enum classifying entries as directories or files
- FileRecord: One file with size, extension, path, mtime and content hash
- DirectoryNode: One directory with direct and combined sizes
- ExtensionGroup: Files sharing a lowercase extension
- ScanResult: The aggregate built by a scan
- ScanSnapshot: Read-only view of an in-progress ScanResult
- DirectorySummary, TypeSummary: Frozen copies handed out by a ScanSnapshot
"""

from .entry_kind import EntryKind
from .data_models import (
    EPOCH,
    DirectoryNode,
    ExtensionGroup,
    FileRecord,
    extension_of,
)
from .scan_result import (
    DirectorySummary,
    ScanResult,
    ScanSnapshot,
    TypeSummary,
    ancestor_chain,
)

__all__ = [
    "EPOCH",
    "EntryKind",
    "FileRecord",
    "DirectoryNode",
    "DirectorySummary",
    "ExtensionGroup",
    "ScanResult",
    "ScanSnapshot",
    "TypeSummary",
    "ancestor_chain",
    "extension_of",
]
