"""Pytest fixtures for diskinsight tests."""

import io
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest
from rich.console import Console

from diskinsight.ui import ScanTUI


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: tests that scan real directory trees")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    The path is resolved so it compares equal to the paths scanners report.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def scenario_tree(temp_dir: Path) -> Path:
    """Create the two-level scenario tree.

    Creates:
        R/
        ├── a.log (5 bytes)
        └── b/
            └── c.log (10 bytes)

    Returns:
        Path to R.
    """
    root = temp_dir / "R"
    root.mkdir()
    (root / "a.log").write_bytes(b"x" * 5)
    (root / "b").mkdir()
    (root / "b" / "c.log").write_bytes(b"y" * 10)
    return root


@pytest.fixture
def nested_tree(temp_dir: Path) -> Path:
    """Create a deeper tree with known sizes, extensions and duplicates.

    Creates:
        root/
        ├── readme.TXT (100 bytes)
        ├── Makefile (50 bytes, no extension)
        ├── docs/
        │   ├── guide.txt (200 bytes)
        │   └── api/
        │       └── index.html (300 bytes)
        ├── media/
        │   ├── photo.jpg (1000 bytes, same content as backup/photo-copy.jpg)
        │   └── empty/
        └── backup/
            └── photo-copy.jpg (1000 bytes)

    Returns:
        Path to root.
    """
    root = temp_dir / "root"
    root.mkdir()
    (root / "readme.TXT").write_bytes(b"r" * 100)
    (root / "Makefile").write_bytes(b"m" * 50)

    docs = root / "docs"
    docs.mkdir()
    (docs / "guide.txt").write_bytes(b"g" * 200)
    (docs / "api").mkdir()
    (docs / "api" / "index.html").write_bytes(b"h" * 300)

    media = root / "media"
    media.mkdir()
    (media / "photo.jpg").write_bytes(b"\xff\xd8" * 500)
    (media / "empty").mkdir()

    backup = root / "backup"
    backup.mkdir()
    (backup / "photo-copy.jpg").write_bytes(b"\xff\xd8" * 500)

    return root


@pytest.fixture
def make_zip(temp_dir: Path) -> Callable[..., Path]:
    """Return a factory writing a zip archive from a name-to-content mapping.

    Names ending in ``/`` are written as explicit directory members.

    Example:
        archive = make_zip("data.zip", {"a/b.txt": b"hello", "empty/": b""})
    """

    def _make_zip(
        name: str,
        members: Dict[str, bytes],
        compression: int = zipfile.ZIP_DEFLATED,
    ) -> Path:
        archive_path = temp_dir / name
        with zipfile.ZipFile(archive_path, "w", compression=compression) as archive:
            for member_name, content in members.items():
                archive.writestr(member_name, content)
        return archive_path

    return _make_zip


@pytest.fixture
def tui_with_output() -> tuple[ScanTUI, io.StringIO]:
    """Create a ScanTUI writing plain text to a StringIO.

    Returns:
        Tuple of (ScanTUI instance, StringIO for reading output).
    """
    output = io.StringIO()
    console = Console(file=output, force_terminal=False, color_system=None, width=200)
    return ScanTUI(console=console), output
