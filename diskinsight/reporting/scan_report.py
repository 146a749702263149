"""ScanReport for writing finished scans to a plain-text report file.

This module provides the ScanReport class, which writes a sectioned report
(header, summary, largest files, file types, directories, duplicate groups
and diagnostics) for a finalized ScanResult.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from rich.filesize import decimal

from diskinsight.models import ScanResult


class ScanReport:
    """Writer for plain-text scan reports.

    Usage:
        with ScanReport(Path("scan.log")) as report:
            report.write(result, top=20)

    Attributes:
        SEPARATOR: The 65-character separator line used between sections.
    """

    SEPARATOR = "=" * 65

    def __init__(self, report_path: Optional[Path] = None) -> None:
        """Initialize the ScanReport.

        Args:
            report_path: Optional path for the report file. If not provided,
                generates a timestamped filename in the current directory.

        Raises:
            OSError: If the report file path is not writable.
        """
        self._start_timestamp = datetime.now()
        self._file_handle: Optional[TextIO] = None

        if report_path is None:
            timestamp_str = self._start_timestamp.strftime("%Y-%m-%d_%H-%M-%S")
            self._report_path = Path.cwd() / f"scan_report_{timestamp_str}.log"
        else:
            self._report_path = Path(report_path)

        self._validate_path()

    def _validate_path(self) -> None:
        """Validate that the report file path is writable.

        Raises:
            OSError: If the parent directory doesn't exist or is not writable.
        """
        parent = self._report_path.parent
        if not parent.exists():
            raise OSError(f"Parent directory does not exist: {parent}")
        if not parent.is_dir():
            raise OSError(f"Parent path is not a directory: {parent}")
        try:
            test_file = parent / f".diskinsight_test_{id(self)}"
            test_file.touch()
            test_file.unlink()
        except PermissionError:
            raise OSError(f"Permission denied: cannot write to {parent}")

    def __enter__(self) -> "ScanReport":
        """Open the report file.

        Raises:
            OSError: If the file cannot be opened for writing.
        """
        try:
            self._file_handle = open(self._report_path, "w", encoding="utf-8")
        except OSError as e:
            raise OSError(f"Cannot open report file for writing: {e}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._file_handle is not None:
            try:
                self._file_handle.close()
            except OSError as e:
                print(f"Warning: Error closing report file: {e}", file=sys.stderr)
            finally:
                self._file_handle = None

    def get_report_path(self) -> Path:
        return self._report_path

    def write(self, result: ScanResult, top: int = 20) -> None:
        """Write every section of the report.

        Args:
            result: Finalized ScanResult.
            top: Maximum number of rows per ranked section.
        """
        self.log_header(result)
        self.log_summary(result)
        self.log_largest_files(result, top)
        self.log_types(result, top)
        self.log_directories(result, top)
        self.log_duplicates(result, top)
        self.log_errors(result)

    def log_header(self, result: ScanResult) -> None:
        self._write_separator()
        self._write_line("diskinsight - Scan Report")
        self._write_separator()
        self._write_line(f"Timestamp: {self._format_timestamp(self._start_timestamp)}")
        self._write_line(f"Root: {result.root}")
        self._write_line("")

    def log_summary(self, result: ScanResult) -> None:
        self._write_separator()
        self._write_line("SUMMARY")
        self._write_separator()
        self._write_line(f"Files: {len(result.files):,}")
        self._write_line(f"Directories: {len(result.tree):,}")
        self._write_line(f"File types: {len(result.filetypes):,}")
        self._write_line(f"Total size: {decimal(result.combined_size)} ({result.combined_size:,} bytes)")
        self._write_line(f"Duplicate groups: {len(result.duplicates):,}")
        self._write_line(f"Duration: {result.elapsed:.2f}s")
        self._write_line("")

    def log_largest_files(self, result: ScanResult, top: int) -> None:
        self._write_section("LARGEST FILES")
        for file in result.files_by_size[:top]:
            self._write_line(f"{decimal(file.size):>10}  {file.path}", indent=2)
        self._write_line("")

    def log_types(self, result: ScanResult, top: int) -> None:
        self._write_section("FILE TYPES")
        for group in result.types_by_size[:top]:
            self._write_line(
                f"{decimal(group.size):>10}  .{group.ext} ({len(group.files):,} files)",
                indent=2,
            )
        self._write_line("")

    def log_directories(self, result: ScanResult, top: int) -> None:
        """Write directories ranked by the size of their own files."""
        self._write_section("DIRECTORIES")
        for node in result.dirs_by_size[:top]:
            self._write_line(
                f"{decimal(node.size):>10}  {node.path} (total {decimal(node.combined_size)})",
                indent=2,
            )
        self._write_line("")

    def log_duplicates(self, result: ScanResult, top: int) -> None:
        self._write_section("DUPLICATES")
        for i, group in enumerate(result.duplicate_groups()[:top], start=1):
            wasted = group[0].size * (len(group) - 1)
            self._write_line(
                f"Group {i}: {len(group)} copies of {decimal(group[0].size)} "
                f"(hash {group[0].hash_hex}, {decimal(wasted)} reclaimable)"
            )
            for file in group:
                self._write_line(f"- {file.path}", indent=2)
        self._write_line("")

    def log_errors(self, result: ScanResult) -> None:
        if not result.errors:
            return
        self._write_section("ERRORS")
        self._write_line(f"Total errors: {len(result.errors)}")
        for error in result.errors:
            self._write_line(f"- {error}", indent=2)
        self._write_line("")

    def _format_timestamp(self, dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    def _write_section(self, title: str) -> None:
        self._write_separator()
        self._write_line(title)
        self._write_separator()

    def _write_separator(self) -> None:
        self._write_line(self.SEPARATOR)

    def _write_line(self, text: str, indent: int = 0) -> None:
        """Write a line to the report file with optional indentation."""
        if self._file_handle is None:
            print(
                f"Warning: Attempted to write to closed report file: {text}",
                file=sys.stderr,
            )
            return

        try:
            self._file_handle.write(" " * indent + text + "\n")
        except OSError as e:
            print(f"Warning: Error writing to report file: {e}", file=sys.stderr)
