"""
Core data models for the disk usage scanner.

This module contains the following dataclasses:
- FileRecord: One file discovered on disk or inside an archive
- DirectoryNode: One directory of the scanned tree with direct and combined sizes
- ExtensionGroup: All files sharing a lowercase extension
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .scan_result import ScanResult

# Timestamp used when no modification time is available
EPOCH = datetime(1970, 1, 1)


def extension_of(name) -> Optional[str]:
    """Return the lowercase extension of a file name, without the dot.

    Names without a suffix, names ending in a dot and dotfiles such as
    ``.bashrc`` have no extension.

    Args:
        name: File name or path.

    Returns:
        Lowercase extension string, or None.
    """
    suffix = PurePath(name).suffix
    return suffix[1:].lower() or None


@dataclass(frozen=True)
class FileRecord:
    """Represents one file that is not a directory."""
    size: int                         # Bytes (compressed size for archive members)
    ext: Optional[str]                # Lowercase extension, None if absent
    path: Path                        # Full path
    modified: datetime = EPOCH        # Last modification time
    content_hash: int = 0             # xxh64 digest of the full content

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def hash_hex(self) -> str:
        """Digest rendered as 16 lowercase hex characters."""
        return f"{self.content_hash:016x}"


@dataclass
class DirectoryNode:
    """Represents one directory under the scan root.

    ``size`` only counts files located directly in this directory, while
    ``combined_size`` also includes every descendant directory. Children are
    referenced by path and resolved through ``ScanResult.tree``.
    """
    path: Path                                              # Directory path
    size: int = 0                                           # Direct size
    combined_size: int = 0                                  # Direct + descendants
    files: List[FileRecord] = field(default_factory=list)   # Files located here
    directories: List[Path] = field(default_factory=list)   # Immediate children
    parent: Optional[Path] = None                           # Parent path

    def files_as_fake_dir(self) -> "DirectoryNode":
        """Return a synthetic directory holding only this directory's own files.

        Used by front-ends that list a folder's files next to its
        subdirectories without descending into the subtree.
        """
        return DirectoryNode(
            path=Path("Files"),
            size=self.size,
            combined_size=self.size,
            files=list(self.files),
            directories=[],
            parent=self.parent,
        )

    def sorted_subdirs(self, result: "ScanResult") -> List["DirectoryNode"]:
        """Return the immediate children, largest combined size first.

        Args:
            result: ScanResult whose tree holds the child nodes.

        Returns:
            Copies of the child nodes sorted by combined size, descending.
            Children missing from the tree are skipped.
        """
        children = [
            replace(result.tree[child], files=list(result.tree[child].files),
                    directories=list(result.tree[child].directories))
            for child in self.directories
            if child in result.tree
        ]
        children.sort(key=lambda d: (-d.combined_size, str(d.path)))
        return children

    def sorted_files(self) -> List[FileRecord]:
        """Return this directory's own files, largest first."""
        return sorted(self.files, key=lambda f: (-f.size, str(f.path)))


@dataclass
class ExtensionGroup:
    """Aggregate over all files sharing a lowercase extension."""
    ext: str                                                # Extension without the dot
    size: int = 0                                           # Sum of member sizes
    files: List[FileRecord] = field(default_factory=list)   # Member files

    def add(self, file: FileRecord) -> None:
        self.files.append(file)
        self.size += file.size
