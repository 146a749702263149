"""Archive scanner for zip containers.

This module provides the ArchiveScanner class, which builds the same
ScanResult shape as TreeScanner from the members of a zip archive. Member
sizes are the compressed sizes reported by the archive index and content
hashes are computed over the decompressed bytes.

A container that cannot be opened or indexed aborts the scan with
ArchiveError. A single member that fails to decompress only loses its hash.

Example:
    >>> from diskinsight.scanning import ArchiveScanner
    >>> result = ArchiveScanner(Path("backup.zip")).scan()
    >>> print(result.combined_size)
"""

import logging
import lzma
import time
import zipfile
import zlib
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import List, Optional, Set, Tuple

from diskinsight.models import (
    EPOCH,
    FileRecord,
    ScanResult,
    ancestor_chain,
    extension_of,
)
from diskinsight.views import ViewBuilder

from .content_hasher import UNREADABLE_HASH, ContentHasher

logger = logging.getLogger(__name__)


class ArchiveError(Exception):
    """Raised when an archive container cannot be opened or its index read."""


def _zip_time(date_time: Tuple[int, int, int, int, int, int]) -> datetime:
    try:
        return datetime(*date_time)
    except ValueError:
        return EPOCH


class ArchiveScanner:
    """Scans the members of a zip archive into a ScanResult.

    The archive path acts as the scan root: member ``a/b/c.txt`` of
    ``/data/x.zip`` is recorded as ``/data/x.zip/a/b/c.txt`` and its size
    propagates up to ``/data/x.zip``. Directories, whether stored as explicit
    members or only implied by member names, are linked into the tree so
    children can be listed the same way as for live trees.

    Attributes:
        archive_path: Resolved path of the archive.
        _hasher: ContentHasher used for in-memory content.
        _errors: Diagnostics from the most recent scan.
    """

    def __init__(self, archive_path: Path, hasher: Optional[ContentHasher] = None) -> None:
        """Initialize the ArchiveScanner.

        Args:
            archive_path: Path to the zip archive.
            hasher: Optional ContentHasher. If not provided, a new instance
                will be created.
        """
        self.archive_path = Path(archive_path).resolve()
        self._hasher = hasher if hasher is not None else ContentHasher()
        self._errors: List[str] = []

    def scan(self) -> ScanResult:
        """Scan every member of the archive.

        Returns:
            The finalized ScanResult.

        Raises:
            ArchiveError: If the archive cannot be opened or its index read.
        """
        self._errors = []
        started = time.monotonic()

        try:
            archive = zipfile.ZipFile(self.archive_path)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
            raise ArchiveError(f"Cannot open archive {self.archive_path}: {e}") from e

        logger.info("Scanning archive %s", self.archive_path)

        result = ScanResult(root=self.archive_path)
        result.record_subdirectory(self.archive_path, None)
        linked: Set[Path] = {self.archive_path}

        with archive:
            for info in archive.infolist():
                member_path = self._member_path(info.filename)
                if member_path is None:
                    continue

                if info.is_dir():
                    self._link_directory(result, member_path, linked)
                    continue

                containing_dir = member_path.parent
                self._link_directory(result, containing_dir, linked)

                digest = self._hash_member(result, archive, info)
                record = FileRecord(
                    size=info.compress_size,
                    ext=extension_of(member_path.name),
                    path=member_path,
                    modified=_zip_time(info.date_time),
                    content_hash=digest,
                )
                result.record_file(
                    record,
                    containing_dir,
                    ancestor_chain(containing_dir, self.archive_path),
                )
                result.record_hash(record)

        ViewBuilder().finalize(result, elapsed=time.monotonic() - started)
        logger.info(
            "Scanned archive %s: %d members, %d compressed bytes",
            self.archive_path,
            len(result.files),
            result.combined_size,
        )
        return result

    def _member_path(self, name: str) -> Optional[Path]:
        """Map a member name to a path under the archive path.

        Empty, ``.`` and ``..`` components are dropped so no member can land
        outside the archive root.
        """
        parts = [
            part
            for part in PurePosixPath(name.replace("\\", "/")).parts
            if part not in ("", "/", ".", "..")
        ]
        if not parts:
            return None
        return self.archive_path.joinpath(*parts)

    def _link_directory(self, result: ScanResult, directory: Path, linked: Set[Path]) -> None:
        """Link ``directory`` and any unlinked ancestors into the tree, once each."""
        chain = []
        current = directory
        while current not in linked:
            chain.append(current)
            current = current.parent

        for path in reversed(chain):
            result.record_subdirectory(path, path.parent)
            linked.add(path)

    def _hash_member(
        self,
        result: ScanResult,
        archive: zipfile.ZipFile,
        info: zipfile.ZipInfo,
    ) -> int:
        """Hash a member's decompressed content, falling back to the sentinel."""
        try:
            data = archive.read(info)
        except (
            zipfile.BadZipFile,
            zlib.error,
            lzma.LZMAError,
            NotImplementedError,
            RuntimeError,
            EOFError,
            OSError,
        ) as e:
            message = f"Cannot read archive member {info.filename}: {e}"
            logger.warning(message)
            self._errors.append(message)
            result.record_error(message)
            return UNREADABLE_HASH
        return self._hasher.hash_bytes(data)

    def get_errors(self) -> List[str]:
        """Get diagnostics recorded during the most recent scan."""
        return self._errors.copy()

    @property
    def hasher(self) -> ContentHasher:
        """Get the ContentHasher instance used by this scanner."""
        return self._hasher


def scan_archive(archive_path: Path) -> ScanResult:
    """Scan a zip archive and return the finalized ScanResult.

    Raises:
        ArchiveError: If the archive cannot be opened or its index read.
    """
    return ArchiveScanner(archive_path).scan()
