"""
Aggregation model for a single scan.

ScanResult holds the mutable state a scan driver builds up while walking a
tree or an archive: the global file list, extension groups, the path-keyed
directory tree and the hash-keyed duplicate candidates. It only offers
insertion primitives; classification and traversal live in the drivers.

Example:
    >>> result = ScanResult(root=Path("/data"))
    >>> record = FileRecord(size=5, ext="log", path=Path("/data/a.log"))
    >>> result.record_file(record, Path("/data"), ancestor_chain(Path("/data"), Path("/data")))
    >>> result.tree[Path("/data")].combined_size
    5
"""

import collections.abc
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .data_models import DirectoryNode, ExtensionGroup, FileRecord


def ancestor_chain(containing_dir: Path, root: Path) -> Iterator[Path]:
    """Yield a directory and its ancestors, bounded to the scan root.

    The walk stops at the parent of ``root`` without yielding it, so sizes
    are never attributed to directories outside the scanned subtree. When
    ``root`` has no parent (a filesystem root), the chain runs to the top.

    Args:
        containing_dir: Directory that directly contains a file.
        root: Scan root.

    Yields:
        ``containing_dir`` followed by each ancestor up to ``root``.
    """
    boundary = root.parent if root.parent != root else None
    for ancestor in (containing_dir, *containing_dir.parents):
        if boundary is not None and ancestor == boundary:
            break
        yield ancestor


@dataclass
class ScanResult:
    """Aggregate produced by a tree or archive scan.

    The sorted views (``files_by_size``, ``types_by_size``, ``dirs_by_size``)
    stay empty until the driver finalizes the result. After finalization the
    duplicate map only holds hashes shared by two or more files, and any
    further ``record_*`` call raises RuntimeError.

    Attributes:
        root: Scan root (directory path or archive path).
        filetypes: Extension string to ExtensionGroup.
        files: Every recorded file, in discovery order.
        tree: Directory path to DirectoryNode.
        combined_size: Sum of all recorded file sizes.
        duplicates: Content hash to the files sharing it.
        errors: Diagnostics for skipped entries and unreadable content.
        elapsed: Seconds spent scanning, set at finalization.
    """
    root: Path
    filetypes: Dict[str, ExtensionGroup] = field(default_factory=dict)
    files: List[FileRecord] = field(default_factory=list)
    files_by_size: List[FileRecord] = field(default_factory=list)
    types_by_size: List[ExtensionGroup] = field(default_factory=list)
    dirs_by_size: List[DirectoryNode] = field(default_factory=list)
    tree: Dict[Path, DirectoryNode] = field(default_factory=dict)
    combined_size: int = 0
    duplicates: Dict[int, List[FileRecord]] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    elapsed: float = 0.0
    last_path: Optional[Path] = None
    finalized: bool = False

    def _check_open(self) -> None:
        if self.finalized:
            raise RuntimeError("ScanResult is finalized and can no longer be modified")

    def _ensure_dir(self, path: Path, parent: Optional[Path]) -> DirectoryNode:
        """Return the node for ``path``, creating a zero-size placeholder if needed.

        A placeholder created without a parent gets it filled in here on the
        first visit that knows it; sizes and lists collected so far are kept.
        The root node never gets a parent.
        """
        if path == self.root:
            parent = None
        node = self.tree.get(path)
        if node is None:
            node = DirectoryNode(path=path, parent=parent)
            self.tree[path] = node
        elif node.parent is None and parent is not None:
            node.parent = parent
        return node

    def record_file(
        self,
        file: FileRecord,
        containing_dir: Path,
        ancestors: Iterable[Path],
    ) -> None:
        """Insert a file and propagate its size through the tree.

        Args:
            file: The file to record.
            containing_dir: Directory that directly contains the file.
            ancestors: Ancestor chain from ``containing_dir`` up to the scan
                root, as produced by :func:`ancestor_chain`.
        """
        self._check_open()

        self.files.append(file)

        if file.ext is not None:
            group = self.filetypes.get(file.ext)
            if group is None:
                group = ExtensionGroup(ext=file.ext)
                self.filetypes[file.ext] = group
            group.add(file)

        directory = self._ensure_dir(containing_dir, containing_dir.parent)
        directory.files.append(file)
        directory.size += file.size

        for ancestor in ancestors:
            self._ensure_dir(ancestor, ancestor.parent).combined_size += file.size

        self.combined_size += file.size
        self.last_path = file.path

    def record_subdirectory(self, dir_path: Path, parent_path: Optional[Path]) -> None:
        """Link a directory to its parent without touching any size.

        Args:
            dir_path: The discovered directory.
            parent_path: Its parent, or None for the scan root's own entry.
                No node is created outside the scan root.
        """
        self._check_open()

        self._ensure_dir(dir_path, parent_path)
        if parent_path is not None:
            self._ensure_dir(parent_path, parent_path.parent).directories.append(dir_path)
        self.last_path = dir_path

    def record_hash(self, file: FileRecord) -> None:
        """Add a file to the duplicate candidates of its content hash."""
        self._check_open()
        self.duplicates.setdefault(file.content_hash, []).append(file)

    def record_error(self, message: str) -> None:
        self._check_open()
        self.errors.append(message)

    def freeze(
        self,
        files_by_size: List[FileRecord],
        types_by_size: List[ExtensionGroup],
        dirs_by_size: List[DirectoryNode],
        duplicates: Dict[int, List[FileRecord]],
        elapsed: float,
    ) -> None:
        """Store the derived views and mark the result as finalized."""
        self._check_open()
        self.files_by_size = files_by_size
        self.types_by_size = types_by_size
        self.dirs_by_size = dirs_by_size
        self.duplicates = duplicates
        self.elapsed = elapsed
        self.finalized = True

    def directory(self, path: Path) -> Optional[DirectoryNode]:
        return self.tree.get(Path(path))

    def duplicate_groups(self) -> List[List[FileRecord]]:
        """Return groups of files sharing a content hash, most wasted bytes first.

        Wasted bytes are the bytes that deleting all but one member would
        free. Only groups with two or more members are returned.
        """
        groups = [list(files) for files in self.duplicates.values() if len(files) >= 2]
        groups.sort(
            key=lambda g: (-(g[0].size * (len(g) - 1)), g[0].content_hash)
        )
        return groups

    def snapshot(self) -> "ScanSnapshot":
        """Return a read-only view of this result for progress observers."""
        return ScanSnapshot(self)


@dataclass(frozen=True)
class DirectorySummary:
    """Immutable copy of a DirectoryNode's sizes and links at one instant."""
    path: Path
    size: int
    combined_size: int
    file_count: int
    directories: Tuple[Path, ...]
    parent: Optional[Path]

    @classmethod
    def of(cls, node: DirectoryNode) -> "DirectorySummary":
        return cls(
            path=node.path,
            size=node.size,
            combined_size=node.combined_size,
            file_count=len(node.files),
            directories=tuple(node.directories),
            parent=node.parent,
        )


@dataclass(frozen=True)
class TypeSummary:
    """Immutable copy of an ExtensionGroup's totals at one instant."""
    ext: str
    size: int
    file_count: int

    @classmethod
    def of(cls, group: ExtensionGroup) -> "TypeSummary":
        return cls(ext=group.ext, size=group.size, file_count=len(group.files))


class _SummaryMapping(collections.abc.Mapping):
    """Read-only mapping that hands out immutable summaries of live values."""

    __slots__ = ("_source", "_summarize")

    def __init__(self, source: Mapping, summarize: Callable) -> None:
        self._source = MappingProxyType(source)
        self._summarize = summarize

    def __getitem__(self, key):
        return self._summarize(self._source[key])

    def __iter__(self):
        return iter(self._source)

    def __len__(self) -> int:
        return len(self._source)


class ScanSnapshot:
    """Read-only view of an in-progress ScanResult.

    Handed to progress callbacks during a walk. Counts and totals are
    captured when the snapshot is taken. The ``tree`` and ``filetypes``
    mappings return frozen DirectorySummary and TypeSummary copies, so an
    observer never holds a node, group or list of the scan itself.
    """

    __slots__ = (
        "_root",
        "_file_count",
        "_directory_count",
        "_extension_count",
        "_combined_size",
        "_error_count",
        "_last_path",
        "_tree",
        "_filetypes",
    )

    def __init__(self, result: ScanResult) -> None:
        self._root = result.root
        self._file_count = len(result.files)
        self._directory_count = len(result.tree)
        self._extension_count = len(result.filetypes)
        self._combined_size = result.combined_size
        self._error_count = len(result.errors)
        self._last_path = result.last_path
        self._tree = _SummaryMapping(result.tree, DirectorySummary.of)
        self._filetypes = _SummaryMapping(result.filetypes, TypeSummary.of)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def file_count(self) -> int:
        return self._file_count

    @property
    def directory_count(self) -> int:
        return self._directory_count

    @property
    def extension_count(self) -> int:
        return self._extension_count

    @property
    def combined_size(self) -> int:
        return self._combined_size

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def last_path(self) -> Optional[Path]:
        return self._last_path

    @property
    def tree(self) -> Mapping[Path, DirectorySummary]:
        """Directory path to a frozen summary of that directory."""
        return self._tree

    @property
    def filetypes(self) -> Mapping[str, TypeSummary]:
        """Extension to a frozen summary of its group."""
        return self._filetypes

    def __repr__(self) -> str:
        return (
            f"ScanSnapshot(root={self.root!s}, files={self.file_count}, "
            f"directories={self.directory_count}, bytes={self.combined_size})"
        )
