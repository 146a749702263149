"""Entry source for live directory trees.

Turns ``os.walk`` output into a flat stream of SourceEntry values: the scan
root first, then, for every visited directory, its subdirectories followed by
its files. Listing failures are reported through a callback and never stop
the walk.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional, Set, Tuple

from diskinsight.models import EntryKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceEntry:
    """One entry yielded by the entry source."""
    path: Path
    kind: EntryKind


def walk_entries(
    root: Path,
    follow_symlinks: bool = False,
    on_error: Optional[Callable[[str], None]] = None,
) -> Iterator[SourceEntry]:
    """Yield every entry below ``root``, including ``root`` itself.

    Symlinked directories are reported as directories. They are only
    descended into when ``follow_symlinks`` is set, in which case directories
    already visited (by device and inode) are not entered again so link
    cycles terminate.

    Args:
        root: Directory to walk.
        follow_symlinks: Descend into symlinked directories.
        on_error: Called with a message for every directory that could not
            be listed.

    Yields:
        SourceEntry values in walk order.
    """

    def report(error: OSError) -> None:
        message = f"Cannot list directory {error.filename}: {error.strerror or error}"
        logger.warning(message)
        if on_error is not None:
            on_error(message)

    yield SourceEntry(root, EntryKind.DIRECTORY)

    # Track visited directories by (device, inode) to detect cycles
    visited_dirs: Set[Tuple[int, int]] = set()
    if follow_symlinks:
        try:
            root_stat = root.stat()
            visited_dirs.add((root_stat.st_dev, root_stat.st_ino))
        except OSError as e:
            report(e)

    for dirpath, dirnames, filenames in os.walk(root, onerror=report, followlinks=follow_symlinks):
        current = Path(dirpath)

        if follow_symlinks:
            dirs_to_skip = []
            for dirname in dirnames:
                try:
                    dir_stat = (current / dirname).stat()
                except OSError:
                    # Dangling link or vanished directory
                    dirs_to_skip.append(dirname)
                    continue
                dir_id = (dir_stat.st_dev, dir_stat.st_ino)
                if dir_id in visited_dirs:
                    logger.debug("Skipping already visited directory %s", current / dirname)
                    dirs_to_skip.append(dirname)
                else:
                    visited_dirs.add(dir_id)

            for dirname in dirnames:
                yield SourceEntry(current / dirname, EntryKind.DIRECTORY)
            for dirname in dirs_to_skip:
                dirnames.remove(dirname)
        else:
            for dirname in dirnames:
                yield SourceEntry(current / dirname, EntryKind.DIRECTORY)

        for filename in filenames:
            yield SourceEntry(current / filename, EntryKind.FILE)
