"""View building package for diskinsight.

This package turns a finished ScanResult into its sorted read-only views:
files by size, extension groups by size, directories by direct size, and the
collapsed duplicate groups.

Example:
    >>> from diskinsight.views import ViewBuilder
    >>> ViewBuilder().finalize(result)
    >>> for group in result.types_by_size[:5]:
    ...     print(group.ext, group.size)
"""

from .view_builder import (
    ViewBuilder,
    build_views,
    dirs_by_size,
    duplicate_groups,
    files_by_size,
    types_by_size,
)

__all__ = [
    "ViewBuilder",
    "build_views",
    "dirs_by_size",
    "duplicate_groups",
    "files_by_size",
    "types_by_size",
]
