"""
diskinsight - CLI Interface.

A command-line interface for inventorying disk usage and finding duplicate
files in a directory tree or a zip archive.

Usage Examples:
    # Scan a directory
    diskinsight scan /path/to/data

    # Show the 50 largest entries of every view, with duplicate groups
    diskinsight scan /path/to/data --top 50 --duplicates

    # Scan a zip archive (sizes are compressed sizes)
    diskinsight scan backup.zip

    # Hash on 4 threads and write a report file
    diskinsight scan /path/to/data --workers 4 --log-file scan.log --verbose
"""

import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from diskinsight import __version__
from diskinsight.models import ScanResult
from diskinsight.reporting import ScanReport
from diskinsight.scanning import ArchiveError, ArchiveScanner, TreeScanner
from diskinsight.ui import ScanTUI

# Default milliseconds between live progress updates
DEFAULT_PROGRESS_INTERVAL_MS = 100

# Initialize Typer app
app = typer.Typer(
    name="diskinsight",
    help="Inventory disk usage and find duplicate files.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for consistent output formatting
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"diskinsight v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library log records through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def validate_scan_path(path: Path) -> None:
    """
    Validate that the provided path exists and is readable.

    Args:
        path: Directory or archive to scan.

    Raises:
        typer.Exit: If validation fails with descriptive error message.
    """
    if not path.exists():
        console.print(f"[red]Error:[/red] Path does not exist: {path}")
        raise typer.Exit(1)

    if not os.access(path, os.R_OK):
        console.print(f"[red]Error:[/red] Permission denied - cannot read: {path}")
        raise typer.Exit(1)


def validate_positive(value: int) -> int:
    """Validate that a count option is at least 1."""
    if value < 1:
        raise typer.BadParameter("Value must be at least 1")
    return value


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """diskinsight - Inventory disk usage and find duplicate files."""
    pass


@app.command()
def scan(
    path: Path = typer.Argument(
        ...,
        help="Directory or zip archive to scan.",
        exists=False,  # We do our own validation
    ),
    top: int = typer.Option(
        20,
        "--top",
        "-t",
        help="Number of rows shown per table.",
        callback=validate_positive,
    ),
    duplicates: bool = typer.Option(
        False,
        "--duplicates",
        "-d",
        help="Show groups of identical files.",
    ),
    directory: Optional[Path] = typer.Option(
        None,
        "--directory",
        "-D",
        help="Also show the breakdown of one scanned directory.",
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        "-w",
        help="Threads used for content hashing (directory scans only).",
        callback=validate_positive,
    ),
    progress_ms: int = typer.Option(
        DEFAULT_PROGRESS_INTERVAL_MS,
        "--progress-ms",
        "-p",
        help="Milliseconds between progress updates; 0 disables the display.",
    ),
    follow_symlinks: bool = typer.Option(
        False,
        "--follow-symlinks",
        help="Descend into symlinked directories.",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Path for a plain-text report file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output.",
    ),
) -> None:
    """
    Scan a directory tree or a zip archive.

    Displays the largest files, file types and directories found. A path
    pointing to a regular file is read as a zip archive, in which case sizes
    are the archive's compressed sizes.
    """
    validate_scan_path(path)
    configure_logging(verbose)

    # Create report if log file specified
    report: Optional[ScanReport] = None
    if log_file:
        try:
            report = ScanReport(log_file)
        except OSError as e:
            console.print(
                f"[yellow]Warning:[/yellow] Cannot write report file: {e}. "
                "Continuing without report."
            )
            report = None

    tui = ScanTUI(console=console)

    try:
        if path.is_file():
            result = ArchiveScanner(path).scan()
        else:
            result = run_tree_scan(
                tui,
                TreeScanner(path, follow_symlinks=follow_symlinks, hash_workers=workers),
                progress_ms,
            )

        tui.display_scan_summary(result)
        tui.display_largest_files(result, limit=top)
        tui.display_types(result, limit=top)
        tui.display_directories(result, limit=top)
        if directory is not None:
            tui.display_directory(result, resolve_in_scan(result, directory))
        if duplicates:
            tui.display_duplicates(result, limit=top)
        if verbose:
            tui.display_errors(result.errors)

        if report is not None:
            with report:
                report.write(result, top=top)
            console.print(f"[dim]Report written to: {report.get_report_path()}[/dim]")

    except KeyboardInterrupt:
        console.print("\n[yellow]Scan interrupted by user.[/yellow]")
        raise typer.Exit(130)

    except ArchiveError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except PermissionError as e:
        console.print(f"[red]Error:[/red] Permission denied - {e}")
        raise typer.Exit(1)

    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def run_tree_scan(tui: ScanTUI, scanner: TreeScanner, progress_ms: int) -> ScanResult:
    """Run a tree scan, showing live progress unless it is disabled."""
    if progress_ms <= 0:
        return scanner.scan()

    progress, callback = tui.create_progress_callback(scanner.root)
    with progress:
        return scanner.scan_with_progress(callback, interval_ms=progress_ms)


def resolve_in_scan(result: ScanResult, directory: Path) -> Path:
    """Map a user supplied directory onto a tree key of ``result``.

    Relative paths are taken relative to the scan root, which also lets
    archive-internal directories be addressed by their member path.
    """
    if directory.is_absolute():
        return directory.resolve() if directory.exists() else directory
    return result.root / directory


if __name__ == "__main__":
    app()
