"""diskinsight - Disk usage and duplicate file inventory.

Scans a directory tree or a zip archive into a queryable summary: per-file
metadata, per-extension aggregates, a directory tree with recursive size
totals, and groups of byte-identical files.
"""

__version__ = "0.1.0"

from .models import (
    DirectoryNode,
    EntryKind,
    ExtensionGroup,
    FileRecord,
    ScanResult,
    ScanSnapshot,
)
from .scanning import (
    ArchiveError,
    ArchiveScanner,
    ContentHasher,
    TreeScanner,
    scan,
    scan_archive,
    scan_with_progress,
)

__all__ = [
    "__version__",
    "ArchiveError",
    "ArchiveScanner",
    "ContentHasher",
    "DirectoryNode",
    "EntryKind",
    "ExtensionGroup",
    "FileRecord",
    "ScanResult",
    "ScanSnapshot",
    "TreeScanner",
    "scan",
    "scan_archive",
    "scan_with_progress",
]


def main() -> None:
    """Entry point for the diskinsight CLI application.

    Imports and runs the Typer app from the diskinsight.cli module.
    """
    from diskinsight.cli import app
    app()
