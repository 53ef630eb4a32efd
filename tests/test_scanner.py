"""
Unit tests for the folder scanner.
"""

import tempfile
from pathlib import Path

import pytest

from file_organizer.errors import NotFoundError
from file_organizer.scanner import apply_display_name_edits, load_entries


def create_files(base_path: Path, names: list) -> None:
    """Create small text files under base_path."""
    for name in names:
        (base_path / name).write_text(f"content of {name}")


class TestLoadEntries:
    """Tests for load_entries function."""

    def test_empty_directory(self):
        """Empty directory returns empty list."""
        with tempfile.TemporaryDirectory() as tmp:
            assert load_entries(tmp) == []

    def test_files_found(self):
        """Files directly in the folder are found."""
        with tempfile.TemporaryDirectory() as tmp:
            create_files(Path(tmp), ["a.txt", "b.pdf"])

            entries = load_entries(tmp)

            assert [e.current_name for e in entries] == ["a.txt", "b.pdf"]

    def test_subfolders_ignored(self):
        """Subfolders and their files are not listed."""
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            create_files(base, ["top.txt"])
            (base / "report").mkdir()
            create_files(base / "report", ["report.pdf"])

            entries = load_entries(tmp)

            assert [e.current_name for e in entries] == ["top.txt"]

    def test_entry_paths_absolute(self):
        """Original and current paths start out equal and absolute."""
        with tempfile.TemporaryDirectory() as tmp:
            create_files(Path(tmp), ["a.txt"])

            entry = load_entries(tmp)[0]

            assert Path(entry.original_path).is_absolute()
            assert entry.current_path == entry.original_path
            assert entry.display_name == "a.txt"
            assert Path(entry.current_path).exists()

    def test_sorted_case_insensitively(self):
        """Entries are sorted by name regardless of case."""
        with tempfile.TemporaryDirectory() as tmp:
            create_files(Path(tmp), ["b.txt", "A.txt", "c.txt"])

            names = [e.current_name for e in load_entries(tmp)]

            assert names == ["A.txt", "b.txt", "c.txt"]

    def test_missing_folder_raises(self):
        """Missing folder raises NotFoundError."""
        with pytest.raises(NotFoundError):
            load_entries("/nonexistent/folder/for/tests")

    def test_not_found_is_file_not_found(self):
        """NotFoundError can be caught as FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_entries("/nonexistent/folder/for/tests")

    def test_file_path_raises(self):
        """A file instead of a folder is rejected."""
        with tempfile.TemporaryDirectory() as tmp:
            create_files(Path(tmp), ["a.txt"])

            with pytest.raises(NotADirectoryError):
                load_entries(Path(tmp) / "a.txt")

    def test_rescan_replaces_listing(self):
        """Scanning again reflects the folder, not the earlier list."""
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            create_files(base, ["a.txt"])
            first = load_entries(tmp)

            create_files(base, ["b.txt"])
            second = load_entries(tmp)

            assert len(first) == 1
            assert [e.current_name for e in second] == ["a.txt", "b.txt"]


class TestApplyDisplayNameEdits:
    """Tests for apply_display_name_edits function."""

    def test_edit_by_name(self):
        """Edits keyed by current file name are applied."""
        with tempfile.TemporaryDirectory() as tmp:
            create_files(Path(tmp), ["old.txt"])
            entries = load_entries(tmp)

            apply_display_name_edits(entries, {"old.txt": "new.txt"})

            assert entries[0].display_name == "new.txt"
            assert entries[0].rename_requested

    def test_edit_by_index(self):
        """Edits keyed by list position are applied."""
        with tempfile.TemporaryDirectory() as tmp:
            create_files(Path(tmp), ["a.txt", "b.txt"])
            entries = load_entries(tmp)

            apply_display_name_edits(entries, {1: "z.txt"})

            assert entries[0].display_name == "a.txt"
            assert entries[1].display_name == "z.txt"

    @pytest.mark.parametrize("blank", ["", "   ", None])
    def test_blank_edit_reverts(self, blank):
        """Blank edits revert the display name to the current name."""
        with tempfile.TemporaryDirectory() as tmp:
            create_files(Path(tmp), ["a.txt"])
            entries = load_entries(tmp)
            entries[0].display_name = "something.txt"

            apply_display_name_edits(entries, {"a.txt": blank})

            assert entries[0].display_name == "a.txt"
            assert not entries[0].rename_requested

    def test_whitespace_trimmed(self):
        """Surrounding whitespace is stripped from edits."""
        with tempfile.TemporaryDirectory() as tmp:
            create_files(Path(tmp), ["a.txt"])
            entries = load_entries(tmp)

            apply_display_name_edits(entries, {"a.txt": "  b.txt  "})

            assert entries[0].display_name == "b.txt"

    def test_unknown_keys_ignored(self):
        """Edits for unknown files or indexes are ignored."""
        with tempfile.TemporaryDirectory() as tmp:
            create_files(Path(tmp), ["a.txt"])
            entries = load_entries(tmp)

            apply_display_name_edits(entries, {"missing.txt": "x.txt", 5: "y.txt"})

            assert entries[0].display_name == "a.txt"
