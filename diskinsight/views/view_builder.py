"""Sorted read-only projections of a finished scan.

The view functions are pure: they copy what they sort and never mutate the
ScanResult they read. Every ordering is descending by size with a secondary
ascending key (path or extension) so equal sizes always come out in the same
order.

Example:
    >>> from diskinsight.views import ViewBuilder
    >>> builder = ViewBuilder(workers=3)
    >>> builder.finalize(result, elapsed=1.5)
    >>> result.files_by_size[0].path
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from diskinsight.models import DirectoryNode, ExtensionGroup, FileRecord, ScanResult

logger = logging.getLogger(__name__)


def files_by_size(files: Iterable[FileRecord]) -> List[FileRecord]:
    """Return all files, largest first."""
    return sorted(files, key=lambda f: (-f.size, str(f.path)))


def types_by_size(filetypes: Mapping[str, ExtensionGroup]) -> List[ExtensionGroup]:
    """Return extension groups, largest cumulative size first.

    Each returned group is a copy whose member files are themselves sorted
    largest first.
    """
    groups = [
        replace(group, files=files_by_size(group.files))
        for group in filetypes.values()
    ]
    groups.sort(key=lambda g: (-g.size, g.ext))
    return groups


def dirs_by_size(tree: Mapping[Path, DirectoryNode]) -> List[DirectoryNode]:
    """Return all directories ranked by their direct size, largest first.

    The ranking uses the bytes of files located directly in each directory,
    not the combined size of its subtree.
    """
    dirs = [
        replace(node, files=list(node.files), directories=list(node.directories))
        for node in tree.values()
    ]
    dirs.sort(key=lambda d: (-d.size, str(d.path)))
    return dirs


def duplicate_groups(
    duplicates: Mapping[int, List[FileRecord]],
) -> Dict[int, List[FileRecord]]:
    """Collapse the duplicate candidates to hashes shared by two or more files."""
    return {
        digest: list(files)
        for digest, files in duplicates.items()
        if len(files) >= 2
    }


class ViewBuilder:
    """Computes the derived views of a ScanResult and finalizes it.

    The three sorted views read disjoint parts of the result, so they are
    built concurrently on a thread pool when ``workers`` is greater than one.

    Args:
        workers: Number of threads used to build the views.

    Raises:
        ValueError: If workers is less than 1.
    """

    def __init__(self, workers: int = 3) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.workers = workers

    def build(self, result: ScanResult):
        """Compute the sorted views without modifying the result.

        Returns:
            Tuple of (files_by_size, types_by_size, dirs_by_size, duplicates).
        """
        if self.workers == 1:
            files_view = files_by_size(result.files)
            types_view = types_by_size(result.filetypes)
            dirs_view = dirs_by_size(result.tree)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                files_future = executor.submit(files_by_size, result.files)
                types_future = executor.submit(types_by_size, result.filetypes)
                dirs_future = executor.submit(dirs_by_size, result.tree)
                files_view = files_future.result()
                types_view = types_future.result()
                dirs_view = dirs_future.result()

        return files_view, types_view, dirs_view, duplicate_groups(result.duplicates)

    def finalize(self, result: ScanResult, elapsed: float = 0.0) -> ScanResult:
        """Build the views, collapse duplicates and freeze the result.

        Finalizing an already finalized result is a no-op.
        """
        if result.finalized:
            return result

        files_view, types_view, dirs_view, groups = self.build(result)
        result.freeze(
            files_by_size=files_view,
            types_by_size=types_view,
            dirs_by_size=dirs_view,
            duplicates=groups,
            elapsed=elapsed,
        )
        logger.debug(
            "Finalized scan of %s: %d files, %d directories, %d duplicate groups",
            result.root,
            len(result.files),
            len(result.tree),
            len(groups),
        )
        return result


def build_views(result: ScanResult, elapsed: float = 0.0) -> ScanResult:
    """Finalize ``result`` with a default ViewBuilder."""
    return ViewBuilder().finalize(result, elapsed=elapsed)
