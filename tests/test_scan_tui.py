"""Tests for the ScanTUI class."""

import io
from pathlib import Path

import pytest

from diskinsight.scanning import TreeScanner
from diskinsight.ui import ScanTUI


class TestScanTUIDisplay:
    """Tests for display methods with captured console output."""

    def test_display_scan_summary(self, tui_with_output: tuple[ScanTUI, io.StringIO], scenario_tree: Path) -> None:
        tui, output = tui_with_output
        result = TreeScanner(scenario_tree).scan()

        tui.display_scan_summary(result)

        text = output.getvalue()
        assert "Scan Results" in text
        assert "Files: 2" in text
        assert "Total size: 15 B" in text
        assert "Duplicate groups: 0" in text

    def test_display_largest_files(self, tui_with_output: tuple[ScanTUI, io.StringIO], scenario_tree: Path) -> None:
        tui, output = tui_with_output
        result = TreeScanner(scenario_tree).scan()

        tui.display_largest_files(result, limit=1)

        text = output.getvalue()
        assert "c.log" in text
        assert "a.log" not in text

    def test_display_types(self, tui_with_output: tuple[ScanTUI, io.StringIO], nested_tree: Path) -> None:
        tui, output = tui_with_output
        result = TreeScanner(nested_tree).scan()

        tui.display_types(result)

        text = output.getvalue()
        assert ".jpg" in text
        assert ".txt" in text
        assert text.index(".jpg") < text.index(".txt")

    def test_display_directories(self, tui_with_output: tuple[ScanTUI, io.StringIO], nested_tree: Path) -> None:
        tui, output = tui_with_output
        result = TreeScanner(nested_tree).scan()

        tui.display_directories(result)

        text = output.getvalue()
        assert "Own size" in text
        assert "Total size" in text

    def test_display_directory_lists_children_and_files(
        self, tui_with_output: tuple[ScanTUI, io.StringIO], nested_tree: Path
    ) -> None:
        tui, output = tui_with_output
        result = TreeScanner(nested_tree).scan()

        tui.display_directory(result, nested_tree)

        text = output.getvalue()
        assert "docs/" in text
        assert "media/" in text
        assert "<files>" in text
        assert "readme.TXT" in text
        assert "Makefile" in text

    def test_display_directory_unknown_path(self, tui_with_output: tuple[ScanTUI, io.StringIO], scenario_tree: Path) -> None:
        tui, output = tui_with_output
        result = TreeScanner(scenario_tree).scan()

        tui.display_directory(result, scenario_tree / "nope")

        assert "Not in scan" in output.getvalue()

    def test_display_duplicates(self, tui_with_output: tuple[ScanTUI, io.StringIO], nested_tree: Path) -> None:
        tui, output = tui_with_output
        result = TreeScanner(nested_tree).scan()

        tui.display_duplicates(result)

        text = output.getvalue()
        assert "Duplicate files" in text
        assert "photo.jpg" in text
        assert "photo-copy.jpg" in text

    def test_display_no_duplicates(self, tui_with_output: tuple[ScanTUI, io.StringIO], scenario_tree: Path) -> None:
        tui, output = tui_with_output
        result = TreeScanner(scenario_tree).scan()

        tui.display_duplicates(result)

        assert "No duplicate files found" in output.getvalue()

    def test_progress_callback_updates_task(self, tui_with_output: tuple[ScanTUI, io.StringIO], scenario_tree: Path) -> None:
        tui, _ = tui_with_output
        progress, callback = tui.create_progress_callback(scenario_tree)

        with progress:
            result = TreeScanner(scenario_tree).scan_with_progress(callback, interval_ms=0)
            callback(result.snapshot())

        task = progress.tasks[0]
        assert task.fields["files"] == "2"
        assert task.fields["size"] == "15 B"


class TestScanTUIFormatting:
    """Tests for formatting helpers."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (1023, "1023 B"),
            (2048, "2.0 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (3 * 1024 ** 3, "3.0 GB"),
        ],
    )
    def test_format_size(self, size: int, expected: str) -> None:
        assert ScanTUI()._format_size(size) == expected

    def test_truncate_name_keeps_tail(self) -> None:
        name = "/very/long/" + "x" * 100 + "/file.txt"
        truncated = ScanTUI()._truncate_name(name, max_length=20)

        assert len(truncated) == 20
        assert truncated.startswith("...")
        assert truncated.endswith("file.txt")
