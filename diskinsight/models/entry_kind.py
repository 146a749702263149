"""
EntryKind enum for classifying entries yielded by an entry source.

The scan drivers treat every entry as one of two kinds:
1. Directory - linked into the tree, never counted as a file
2. File - anything that is not a directory (regular files, symlinks, devices)
"""

from enum import Enum


class EntryKind(Enum):
    """Classification of a filesystem or archive entry."""
    DIRECTORY = "directory"    # Linked into the tree via record_subdirectory
    FILE = "file"              # Sized, hashed and recorded via record_file
