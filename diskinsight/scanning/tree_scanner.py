"""Tree scanner for live directory trees.

This module provides the TreeScanner class, which walks a directory root and
builds a ScanResult: every file with its size, extension, mtime and content
hash, extension groups, the path-keyed directory tree with combined sizes
bounded to the scan root, and duplicate candidates.

Example:
    >>> from diskinsight.scanning import TreeScanner
    >>> scanner = TreeScanner(Path("/data"))
    >>> result = scanner.scan()
    >>> for file in result.files_by_size[:10]:
    ...     print(f"{file.size:>12,}  {file.path}")
"""

import logging
import os
import stat
import time
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from diskinsight.models import (
    EPOCH,
    EntryKind,
    FileRecord,
    ScanResult,
    ScanSnapshot,
    ancestor_chain,
    extension_of,
)
from diskinsight.views import ViewBuilder

from .content_hasher import UNREADABLE_HASH, ContentHasher
from .entry_source import SourceEntry, walk_entries

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanSnapshot], None]

# Entries resolved ahead of the aggregation loop, per hashing thread
LOOKAHEAD_PER_WORKER = 8

# (entry, file record or None, diagnostic or None)
Resolved = Tuple[SourceEntry, Optional[FileRecord], Optional[str]]


def _modified_time(timestamp: float) -> datetime:
    try:
        return datetime.fromtimestamp(timestamp)
    except (OverflowError, OSError, ValueError):
        return EPOCH


class TreeScanner:
    """Scans a directory tree into a ScanResult.

    The walk is sequential: entries are classified and inserted one at a time
    on the calling thread. With ``hash_workers`` greater than one, metadata
    and content hashes of upcoming entries are computed on a thread pool
    within a bounded look-ahead window, but results are still consumed in
    walk order.

    Entries whose metadata cannot be read are skipped and files whose content
    cannot be read get UNREADABLE_HASH; both are recorded as diagnostics and
    never abort the scan.

    Attributes:
        root: Resolved scan root.
        follow_symlinks: Whether symlinked directories are descended into and
            symlinked files are sized and hashed by their target. When unset,
            a symlinked file is sized and hashed as the link itself (its
            target text).
        hash_workers: Number of hashing threads.
        _hasher: ContentHasher used for duplicate detection.
        _errors: Diagnostics from the most recent scan.

    Example:
        >>> scanner = TreeScanner(Path("/data"), hash_workers=4)
        >>> result = scanner.scan_with_progress(
        ...     lambda snap: print(snap.file_count, snap.combined_size),
        ...     interval_ms=250,
        ... )
    """

    def __init__(
        self,
        root: Path,
        hasher: Optional[ContentHasher] = None,
        follow_symlinks: bool = False,
        hash_workers: int = 1,
    ) -> None:
        """Initialize the TreeScanner.

        Args:
            root: Directory to scan.
            hasher: Optional ContentHasher. If not provided, a new instance
                will be created.
            follow_symlinks: Descend into symlinked directories and size
                symlinked files by their target. Defaults to False.
            hash_workers: Number of threads computing content hashes.
                Defaults to 1 (hash inline).

        Raises:
            ValueError: If root does not exist or is not a directory.
            ValueError: If hash_workers is less than 1.
        """
        resolved_path = Path(root).resolve()
        if not resolved_path.exists():
            raise ValueError(f"Scan root does not exist: {root}")
        if not resolved_path.is_dir():
            raise ValueError(f"Scan root is not a directory: {root}")

        if hash_workers < 1:
            raise ValueError(f"hash_workers must be at least 1, got {hash_workers}")

        self.root = resolved_path
        self.follow_symlinks = follow_symlinks
        self.hash_workers = hash_workers
        self._hasher = hasher if hasher is not None else ContentHasher()
        self._errors: List[str] = []

    def scan(self) -> ScanResult:
        """Scan the tree without progress callbacks.

        Returns:
            The finalized ScanResult.
        """
        return self.scan_with_progress(None, None)

    def scan_with_progress(
        self,
        callback: Optional[ProgressCallback],
        interval_ms: Optional[float],
    ) -> ScanResult:
        """Scan the tree, periodically handing a snapshot to ``callback``.

        After each entry, if more than ``interval_ms`` milliseconds have
        passed since the previous invocation (or since the scan started), the
        callback is called with a read-only ScanSnapshot. The call happens on
        the scanning thread, so a slow callback delays the walk. The sorted
        views are only built once, after the walk.

        Args:
            callback: Observer receiving ScanSnapshot instances, or None.
            interval_ms: Minimum milliseconds between invocations, or None to
                disable callbacks.

        Returns:
            The finalized ScanResult.

        Raises:
            ValueError: If interval_ms is negative.
        """
        if interval_ms is not None and interval_ms < 0:
            raise ValueError(f"interval_ms must not be negative, got {interval_ms}")

        self._errors = []
        started = time.monotonic()
        last_update = started
        result = ScanResult(root=self.root)
        notify = callback is not None and interval_ms is not None

        logger.info("Scanning %s", self.root)

        entries = walk_entries(
            self.root,
            follow_symlinks=self.follow_symlinks,
            on_error=lambda message: self._record(result, message),
        )

        for entry, record, problem in self._resolved_entries(entries):
            if entry.kind is EntryKind.DIRECTORY:
                parent = None if entry.path == self.root else entry.path.parent
                result.record_subdirectory(entry.path, parent)
            elif record is None:
                self._record(result, problem)
            else:
                if problem is not None:
                    self._record(result, problem)
                containing_dir = entry.path.parent
                result.record_file(
                    record,
                    containing_dir,
                    ancestor_chain(containing_dir, self.root),
                )
                result.record_hash(record)

            if notify:
                now = time.monotonic()
                if (now - last_update) * 1000 > interval_ms:
                    callback(result.snapshot())
                    last_update = now

        ViewBuilder().finalize(result, elapsed=time.monotonic() - started)
        logger.info(
            "Scanned %s: %d files, %d bytes in %.2fs",
            self.root,
            len(result.files),
            result.combined_size,
            result.elapsed,
        )
        return result

    def _resolved_entries(self, entries: Iterable[SourceEntry]) -> Iterator[Resolved]:
        """Resolve entries in order, hashing ahead on a pool when configured."""
        if self.hash_workers == 1:
            for entry in entries:
                yield self._resolve(entry)
            return

        window = self.hash_workers * LOOKAHEAD_PER_WORKER
        pending = deque()
        with ThreadPoolExecutor(max_workers=self.hash_workers) as executor:
            try:
                for entry in entries:
                    pending.append(executor.submit(self._resolve, entry))
                    if len(pending) >= window:
                        yield pending.popleft().result()
                while pending:
                    yield pending.popleft().result()
            finally:
                for future in pending:
                    future.cancel()

    def _resolve(self, entry: SourceEntry) -> Resolved:
        """Read metadata and content hash for a file entry.

        Touches no shared scan state, so it may run on a worker thread.
        """
        if entry.kind is EntryKind.DIRECTORY:
            return entry, None, None

        try:
            if self.follow_symlinks:
                stat_result = entry.path.stat()
            else:
                stat_result = entry.path.lstat()
        except PermissionError:
            return entry, None, f"Permission denied: {entry.path}"
        except OSError as e:
            return entry, None, f"Error accessing {entry.path}: {e}"

        problem = None
        if stat.S_ISLNK(stat_result.st_mode):
            # Unfollowed link: size and hash both describe the link itself
            digest = self._hash_link(entry.path)
        else:
            digest = self._hasher.hash_file(entry.path)
        if digest is None:
            digest = UNREADABLE_HASH
            problem = f"Cannot read content of {entry.path}, using sentinel hash"

        record = FileRecord(
            size=stat_result.st_size,
            ext=extension_of(entry.path.name),
            path=entry.path,
            modified=_modified_time(stat_result.st_mtime),
            content_hash=digest,
        )
        return entry, record, problem

    def _hash_link(self, path: Path) -> Optional[int]:
        """Hash the target text of a symlink, or None if it cannot be read."""
        try:
            target = os.readlink(path)
        except OSError as e:
            logger.debug("Cannot read link %s: %s", path, e)
            return None
        return self._hasher.hash_bytes(os.fsencode(target))

    def _record(self, result: ScanResult, message: str) -> None:
        logger.warning(message)
        self._errors.append(message)
        result.record_error(message)

    def get_errors(self) -> List[str]:
        """Get diagnostics recorded during the most recent scan.

        Returns:
            List of error message strings.
        """
        return self._errors.copy()

    @property
    def hasher(self) -> ContentHasher:
        """Get the ContentHasher instance used by this scanner."""
        return self._hasher


def scan(root: Path, hash_workers: int = 1) -> ScanResult:
    """Scan a directory tree and return the finalized ScanResult."""
    return TreeScanner(root, hash_workers=hash_workers).scan()


def scan_with_progress(
    root: Path,
    callback: ProgressCallback,
    interval_ms: Optional[float],
    hash_workers: int = 1,
) -> ScanResult:
    """Scan a directory tree, calling ``callback`` every ``interval_ms`` milliseconds.

    Passing None as ``interval_ms`` disables the callback.
    """
    return TreeScanner(root, hash_workers=hash_workers).scan_with_progress(
        callback, interval_ms
    )
