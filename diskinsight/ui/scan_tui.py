"""Terminal User Interface for diskinsight scan results.

This module provides the ScanTUI class, a Rich-based read-only presentation
of a finished ScanResult plus a live progress display fed by scan snapshots.

Example:
    from diskinsight.ui import ScanTUI

    tui = ScanTUI()
    progress, callback = tui.create_progress_callback(root)
    with progress:
        result = scanner.scan_with_progress(callback, interval_ms=100)
    tui.display_scan_summary(result)
    tui.display_largest_files(result, limit=20)
"""

from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from diskinsight.models import ScanResult, ScanSnapshot


class ScanTUI:
    """Rich-based Terminal User Interface for scan results.

    Args:
        console: Optional Rich Console instance for output. If None, creates
            a new Console. Pass a custom Console for testing (e.g., with
            StringIO file for output capture).

    Attributes:
        console: The Rich Console instance used for all output.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def display_scan_summary(self, result: ScanResult) -> None:
        """Display the headline numbers of a finished scan in a panel."""
        header_text = (
            f"Root: {result.root}\n"
            f"Files: {len(result.files):,}\n"
            f"Directories: {len(result.tree):,}\n"
            f"File types: {len(result.filetypes):,}\n"
            f"Total size: {self._format_size(result.combined_size)}\n"
            f"Duplicate groups: {len(result.duplicates):,}\n"
            f"Duration: {self._format_duration(result.elapsed)}"
        )
        self.console.print(Panel(header_text, title="Scan Results", border_style="blue"))

        if result.errors:
            self.console.print(
                f"[yellow]{len(result.errors)} entr{'y' if len(result.errors) == 1 else 'ies'} "
                f"could not be fully read.[/yellow]"
            )

    def display_largest_files(self, result: ScanResult, limit: int = 20) -> None:
        """Display the largest files, largest first."""
        table = Table(title="Files by size, largest first")
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Size", justify="right", style="green")
        table.add_column("Path", style="white")

        for idx, file in enumerate(result.files_by_size[:limit], start=1):
            table.add_row(str(idx), self._format_size(file.size), self._truncate_name(str(file.path)))

        self.console.print(table)

    def display_types(self, result: ScanResult, limit: int = 20) -> None:
        """Display extension groups, largest cumulative size first."""
        table = Table(title="Files by type, largest first")
        table.add_column("Type", style="magenta")
        table.add_column("Files", justify="right")
        table.add_column("Size", justify="right", style="green")
        table.add_column("Largest file", style="white")

        for group in result.types_by_size[:limit]:
            largest = group.files[0].name if group.files else ""
            table.add_row(
                f".{group.ext}",
                f"{len(group.files):,}",
                self._format_size(group.size),
                self._truncate_name(largest, max_length=40),
            )

        self.console.print(table)

    def display_directories(self, result: ScanResult, limit: int = 20) -> None:
        """Display directories ranked by the size of their own files."""
        table = Table(title="Directories by own size, largest first")
        table.add_column("Own size", justify="right", style="green")
        table.add_column("Total size", justify="right")
        table.add_column("Files", justify="right")
        table.add_column("Path", style="white")

        for node in result.dirs_by_size[:limit]:
            table.add_row(
                self._format_size(node.size),
                self._format_size(node.combined_size),
                f"{len(node.files):,}",
                self._truncate_name(str(node.path)),
            )

        self.console.print(table)

    def display_directory(self, result: ScanResult, path: Path) -> None:
        """Display one directory: its subdirectories by total size, then its own files.

        The directory's own files are summarized as a synthetic ``Files``
        entry placed among the subdirectories according to its size.
        """
        node = result.directory(path)
        if node is None:
            self.console.print(f"[red]Not in scan:[/red] {path}")
            return

        own_files = node.files_as_fake_dir()
        entries = node.sorted_subdirs(result)
        if own_files.files:
            entries.append(own_files)
            entries.sort(key=lambda d: -d.combined_size)

        table = Table(title=f"{node.path} ({self._format_size(node.combined_size)})")
        table.add_column("Size", justify="right", style="green")
        table.add_column("Name", style="white")
        for entry in entries:
            label = "[dim]<files>[/dim]" if entry is own_files else f"{entry.path.name}/"
            table.add_row(self._format_size(entry.combined_size), label)
        self.console.print(table)

        if own_files.files:
            files_table = Table(title="Files")
            files_table.add_column("Size", justify="right", style="green")
            files_table.add_column("Name", style="white")
            for file in node.sorted_files():
                files_table.add_row(self._format_size(file.size), file.name)
            self.console.print(files_table)

    def display_duplicates(self, result: ScanResult, limit: int = 20) -> None:
        """Display duplicate groups, most reclaimable bytes first."""
        groups = result.duplicate_groups()
        if not groups:
            self.console.print("[green]No duplicate files found.[/green]")
            return

        table = Table(title="Duplicate files")
        table.add_column("Group #", justify="right", style="cyan", no_wrap=True)
        table.add_column("Copies", justify="right")
        table.add_column("Size", justify="right", style="green")
        table.add_column("Reclaimable", justify="right", style="yellow")
        table.add_column("Files", style="white")

        for idx, group in enumerate(groups[:limit], start=1):
            size = group[0].size
            table.add_row(
                str(idx),
                str(len(group)),
                self._format_size(size),
                self._format_size(size * (len(group) - 1)),
                "\n".join(self._truncate_name(str(f.path)) for f in group),
            )

        self.console.print(table)

    def display_errors(self, errors: List[str]) -> None:
        if not errors:
            return
        error_text = "\n".join(f"- {error}" for error in errors)
        self.console.print(Panel(error_text, title="Errors", border_style="red"))

    def create_progress_callback(
        self, root: Path
    ) -> tuple[Progress, Callable[[ScanSnapshot], None]]:
        """Create a progress display and a snapshot callback for a running scan.

        The caller must use the returned Progress as a context manager around
        the scan so the display renders and cleans up.

        Example:
            progress, callback = tui.create_progress_callback(root)
            with progress:
                result = scanner.scan_with_progress(callback, interval_ms=100)
        """
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TextColumn("{task.fields[files]} files"),
            TextColumn("[green]{task.fields[size]}[/green]"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        task_id = progress.add_task(f"Scanning {root}...", total=None, files="0", size="0 B")

        def callback(snapshot: ScanSnapshot) -> None:
            progress.update(
                task_id,
                files=f"{snapshot.file_count:,}",
                size=self._format_size(snapshot.combined_size),
            )

        return progress, callback

    def _format_size(self, bytes_size: int) -> str:
        """Convert bytes to human-readable format (e.g., "10.5 MB")."""
        if bytes_size < 1024:
            return f"{bytes_size} B"
        elif bytes_size < 1024 * 1024:
            return f"{bytes_size / 1024:.1f} KB"
        elif bytes_size < 1024 * 1024 * 1024:
            return f"{bytes_size / (1024 * 1024):.1f} MB"
        else:
            return f"{bytes_size / (1024 * 1024 * 1024):.1f} GB"

    def _format_duration(self, seconds: float) -> str:
        if seconds < 0:
            seconds = 0
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.1f}s"

    def _truncate_name(self, name: str, max_length: int = 60) -> str:
        """Truncate long names, keeping the end of the path."""
        if len(name) > max_length:
            return "..." + name[-(max_length - 3):]
        return name
