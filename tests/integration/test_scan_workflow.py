"""
Integration tests for the complete scan workflow.

Tests cover:
- Entry source ordering on a real tree
- Directory scan followed by a written report
- A stored zip of a tree aggregating like the tree itself
- Results refusing modification after finalization
"""

import zipfile
from pathlib import Path

import pytest

from diskinsight.models import EntryKind, FileRecord
from diskinsight.reporting import ScanReport
from diskinsight.scanning import ArchiveScanner, TreeScanner, walk_entries


@pytest.mark.integration
class TestEntrySource:
    """Tests for walk_entries against real directories."""

    def test_root_first_then_children_before_files(self, scenario_tree: Path):
        entries = list(walk_entries(scenario_tree))

        assert entries[0].path == scenario_tree
        assert entries[0].kind == EntryKind.DIRECTORY
        kinds = {entry.path: entry.kind for entry in entries}
        assert kinds == {
            scenario_tree: EntryKind.DIRECTORY,
            scenario_tree / "a.log": EntryKind.FILE,
            scenario_tree / "b": EntryKind.DIRECTORY,
            scenario_tree / "b" / "c.log": EntryKind.FILE,
        }
        paths = [entry.path for entry in entries]
        assert paths.index(scenario_tree / "b") < paths.index(scenario_tree / "b" / "c.log")

    def test_unlistable_root_reported(self, temp_dir: Path):
        messages = []

        entries = list(walk_entries(temp_dir / "gone", on_error=messages.append))

        assert len(entries) == 1
        assert len(messages) == 1
        assert "Cannot list directory" in messages[0]


@pytest.mark.integration
class TestScanAndReport:
    """Scan a tree and write its report."""

    def test_scan_then_report(self, nested_tree: Path, temp_dir: Path):
        result = TreeScanner(nested_tree, hash_workers=2).scan()
        report_path = temp_dir / "report.log"

        with ScanReport(report_path) as report:
            report.write(result, top=10)

        content = report_path.read_text(encoding="utf-8")
        assert f"Root: {nested_tree}" in content
        assert "Files: 6" in content
        assert "Duplicate groups: 1" in content
        assert str(nested_tree / "docs" / "api") in content

    def test_result_is_read_only_after_scan(self, scenario_tree: Path):
        result = TreeScanner(scenario_tree).scan()
        late = FileRecord(size=1, ext="log", path=scenario_tree / "late.log")

        with pytest.raises(RuntimeError):
            result.record_file(late, scenario_tree, [])
        with pytest.raises(RuntimeError):
            result.record_hash(late)


@pytest.mark.integration
class TestArchiveMatchesTree:
    """A stored (uncompressed) zip of a tree aggregates like the tree."""

    @pytest.fixture
    def stored_copy(self, nested_tree: Path, temp_dir: Path) -> Path:
        archive_path = temp_dir / "copy.zip"
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_STORED) as archive:
            for path in sorted(nested_tree.rglob("*")):
                archive.write(path, path.relative_to(nested_tree).as_posix())
        return archive_path

    def test_same_aggregates(self, nested_tree: Path, stored_copy: Path):
        tree_result = TreeScanner(nested_tree).scan()
        zip_result = ArchiveScanner(stored_copy).scan()

        assert zip_result.combined_size == tree_result.combined_size
        assert len(zip_result.files) == len(tree_result.files)
        assert len(zip_result.tree) == len(tree_result.tree)
        assert {g.ext: g.size for g in zip_result.types_by_size} == {
            g.ext: g.size for g in tree_result.types_by_size
        }

    def test_same_duplicates(self, nested_tree: Path, stored_copy: Path):
        tree_groups = TreeScanner(nested_tree).scan().duplicate_groups()
        zip_groups = ArchiveScanner(stored_copy).scan().duplicate_groups()

        assert [sorted(f.name for f in g) for g in zip_groups] == [
            sorted(f.name for f in g) for g in tree_groups
        ]
        assert zip_groups[0][0].content_hash == tree_groups[0][0].content_hash

    def test_same_directory_sizes(self, nested_tree: Path, stored_copy: Path):
        tree_result = TreeScanner(nested_tree).scan()
        zip_result = ArchiveScanner(stored_copy).scan()

        for path, node in tree_result.tree.items():
            mirrored = stored_copy / path.relative_to(nested_tree)
            assert zip_result.tree[mirrored].combined_size == node.combined_size
