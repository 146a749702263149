"""Content hashing utility with caching support.

This module provides the ContentHasher class for computing 64-bit xxHash
digests of file contents, used to group byte-identical files. Digests are
plain unsigned integers; files whose content cannot be read are reported as
None and callers substitute UNREADABLE_HASH.

Example:
    >>> from diskinsight.scanning import ContentHasher
    >>> hasher = ContentHasher()
    >>> digest = hasher.hash_file(Path("/path/to/file.bin"))
    >>> if digest is not None:
    ...     print(f"xxh64: {digest:016x}")
"""

import threading
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import xxhash

# Buffer size for chunked file reading (64KB)
CHUNK_SIZE = 65536

# Digest assigned to content that could not be read
UNREADABLE_HASH = 0


class ContentHasher:
    """Computes xxh64 digests of file contents with caching support.

    The in-memory cache is keyed by (resolved path, modification time), so a
    file that is seen twice is only read once while a modified file is hashed
    again. Files are read in chunks so large files never have to fit in
    memory. A single instance may be shared by several hashing threads.

    Attributes:
        _cache: Dictionary mapping (path, mtime) tuples to integer digests.
        _errors: List of error messages encountered during hashing operations.
        _cache_hits: Counter for cache hits.
        _cache_misses: Counter for cache misses.

    Example:
        >>> hasher = ContentHasher()
        >>> first = hasher.hash_file(Path("file.txt"))
        >>> second = hasher.hash_file(Path("file.txt"))  # Uses cache
        >>> hasher.get_cache_stats()
        {'size': 1, 'hits': 1, 'misses': 1}
    """

    def __init__(self) -> None:
        """Initialize the ContentHasher with an empty cache."""
        self._cache: Dict[Tuple[Path, float], int] = {}
        self._errors: List[str] = []
        self._cache_hits: int = 0
        self._cache_misses: int = 0
        self._lock = threading.Lock()

    def hash_file(self, file_path: Path) -> Optional[int]:
        """Compute the xxh64 digest of a file's full content.

        Args:
            file_path: Path to the file to hash.

        Returns:
            The digest as an unsigned 64-bit integer, or None if the file
            could not be read (missing, permission denied, I/O error or not
            a regular file).
        """
        try:
            resolved_path = file_path.resolve()

            if not resolved_path.is_file():
                self._record_error(f"Not a regular file: {file_path}")
                return None

            mtime = resolved_path.stat().st_mtime
            cache_key = (resolved_path, mtime)
            with self._lock:
                cached = self._cache.get(cache_key)
                if cached is not None:
                    self._cache_hits += 1
                    return cached
                self._cache_misses += 1

            digest = self._compute_hash(resolved_path)

            if digest is not None:
                with self._lock:
                    self._cache[cache_key] = digest

            return digest

        except PermissionError:
            self._record_error(f"Permission denied: {file_path}")
            return None
        except FileNotFoundError:
            self._record_error(f"File not found: {file_path}")
            return None
        except OSError as e:
            self._record_error(f"OS error reading {file_path}: {e}")
            return None

    def hash_bytes(self, data: bytes) -> int:
        """Compute the xxh64 digest of in-memory content."""
        return xxhash.xxh64(data).intdigest()

    def _compute_hash(self, file_path: Path) -> Optional[int]:
        """Compute the digest by reading the file in chunks.

        Args:
            file_path: Resolved path to the file to hash.

        Returns:
            The digest, or None if an error occurred.
        """
        try:
            hasher = xxhash.xxh64()

            with open(file_path, "rb") as f:
                while True:
                    chunk = f.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    hasher.update(chunk)

            return hasher.intdigest()

        except PermissionError:
            self._record_error(f"Permission denied reading: {file_path}")
            return None
        except OSError as e:
            self._record_error(f"Error reading {file_path}: {e}")
            return None

    def _record_error(self, message: str) -> None:
        with self._lock:
            self._errors.append(message)

    def clear_cache(self) -> None:
        """Clear the digest cache and reset the hit/miss counters."""
        with self._lock:
            self._cache.clear()
            self._cache_hits = 0
            self._cache_misses = 0

    def get_cache_stats(self) -> Dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary containing:
            - 'size': Number of entries in the cache
            - 'hits': Number of cache hits
            - 'misses': Number of cache misses
        """
        with self._lock:
            return {
                "size": len(self._cache),
                "hits": self._cache_hits,
                "misses": self._cache_misses,
            }

    def get_errors(self) -> List[str]:
        """Get list of errors encountered during hashing operations."""
        with self._lock:
            return self._errors.copy()

    def clear_errors(self) -> None:
        """Clear the list of accumulated errors."""
        with self._lock:
            self._errors.clear()
