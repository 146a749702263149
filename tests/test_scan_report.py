"""Unit tests for ScanReport class."""

from pathlib import Path

import pytest

from diskinsight.reporting import ScanReport
from diskinsight.scanning import TreeScanner


class TestScanReportInit:
    """Tests for ScanReport initialization."""

    def test_explicit_path(self, temp_dir: Path) -> None:
        report_path = temp_dir / "report.log"
        report = ScanReport(report_path)

        assert report.get_report_path() == report_path
        assert not report_path.exists()

    def test_default_path_is_timestamped(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(temp_dir)

        report = ScanReport()

        assert report.get_report_path().parent == Path.cwd()
        assert report.get_report_path().name.startswith("scan_report_")

    def test_missing_parent_raises(self, temp_dir: Path) -> None:
        with pytest.raises(OSError, match="Parent directory does not exist"):
            ScanReport(temp_dir / "missing" / "report.log")

    def test_parent_is_file_raises(self, temp_dir: Path) -> None:
        blocker = temp_dir / "blocker"
        blocker.write_text("file")

        with pytest.raises(OSError, match="not a directory"):
            ScanReport(blocker / "report.log")


class TestScanReportContent:
    """Tests for the written report sections."""

    def test_sections_in_order(self, temp_dir: Path, nested_tree: Path) -> None:
        result = TreeScanner(nested_tree).scan()
        report_path = temp_dir / "report.log"

        with ScanReport(report_path) as report:
            report.write(result, top=3)

        content = report_path.read_text(encoding="utf-8")
        titles = ["SUMMARY", "LARGEST FILES", "FILE TYPES", "DIRECTORIES", "DUPLICATES"]
        positions = [content.index(title) for title in titles]
        assert positions == sorted(positions)
        assert "diskinsight - Scan Report" in content
        assert "ERRORS" not in content

    def test_summary_values(self, temp_dir: Path, scenario_tree: Path) -> None:
        result = TreeScanner(scenario_tree).scan()
        report_path = temp_dir / "report.log"

        with ScanReport(report_path) as report:
            report.write(result)

        content = report_path.read_text(encoding="utf-8")
        assert "Files: 2" in content
        assert "Directories: 2" in content
        assert "(15 bytes)" in content

    def test_top_limits_rows(self, temp_dir: Path, nested_tree: Path) -> None:
        result = TreeScanner(nested_tree).scan()
        report_path = temp_dir / "report.log"

        with ScanReport(report_path) as report:
            report.log_largest_files(result, top=1)

        lines = [line for line in report_path.read_text(encoding="utf-8").splitlines() if line.startswith("  ")]
        assert len(lines) == 1
        assert lines[0].endswith(".jpg")

    def test_duplicate_group_lists_members(self, temp_dir: Path, nested_tree: Path) -> None:
        result = TreeScanner(nested_tree).scan()
        report_path = temp_dir / "report.log"

        with ScanReport(report_path) as report:
            report.log_duplicates(result, top=10)

        content = report_path.read_text(encoding="utf-8")
        assert "Group 1: 2 copies" in content
        assert str(nested_tree / "media" / "photo.jpg") in content
        assert str(nested_tree / "backup" / "photo-copy.jpg") in content

    def test_errors_section(self, temp_dir: Path, scenario_tree: Path) -> None:
        result = TreeScanner(scenario_tree).scan()
        result.errors.append("Permission denied: /somewhere")
        report_path = temp_dir / "report.log"

        with ScanReport(report_path) as report:
            report.log_errors(result)

        content = report_path.read_text(encoding="utf-8")
        assert "Total errors: 1" in content
        assert "- Permission denied: /somewhere" in content

    def test_write_after_close_warns(self, temp_dir: Path, scenario_tree: Path, capsys: pytest.CaptureFixture) -> None:
        result = TreeScanner(scenario_tree).scan()
        report = ScanReport(temp_dir / "report.log")

        report.log_summary(result)

        assert "closed report file" in capsys.readouterr().err
