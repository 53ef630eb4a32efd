"""
Unit tests for the Excel rename manifest.
"""

import tempfile
from pathlib import Path

import openpyxl
import pytest

from file_organizer.manifest import (
    MANIFEST_HEADER,
    export_manifest,
    load_rename_manifest,
)
from file_organizer.scanner import apply_display_name_edits, load_entries


def create_test_xlsx(rows: list, sheet_name: str = "Sheet1") -> Path:
    """
    Create a temporary XLSX file with rows in Columns A and B.

    Args:
        rows: List of (file name, new name) tuples
        sheet_name: Name for the worksheet

    Returns:
        Path to the temporary XLSX file
    """
    workbook = openpyxl.Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_name

    for row_idx, (file_name, new_name) in enumerate(rows, start=1):
        worksheet.cell(row=row_idx, column=1, value=file_name)
        worksheet.cell(row=row_idx, column=2, value=new_name)

    temp_file = tempfile.NamedTemporaryFile(suffix=".xlsx", delete=False)
    temp_path = Path(temp_file.name)
    temp_file.close()
    workbook.save(temp_path)
    workbook.close()

    return temp_path


class TestLoadRenameManifest:
    """Tests for load_rename_manifest function."""

    def test_basic_rows(self):
        xlsx_path = create_test_xlsx([("old.txt", "new.txt"), ("a.pdf", "b.pdf")])
        try:
            result = load_rename_manifest(xlsx_path)
            assert result == {"old.txt": "new.txt", "a.pdf": "b.pdf"}
        finally:
            xlsx_path.unlink()

    def test_header_row_skipped(self):
        xlsx_path = create_test_xlsx([MANIFEST_HEADER, ("old.txt", "new.txt")])
        try:
            assert load_rename_manifest(xlsx_path) == {"old.txt": "new.txt"}
        finally:
            xlsx_path.unlink()

    def test_whitespace_trimmed(self):
        xlsx_path = create_test_xlsx([("  old.txt ", "  new.txt  ")])
        try:
            assert load_rename_manifest(xlsx_path) == {"old.txt": "new.txt"}
        finally:
            xlsx_path.unlink()

    def test_empty_new_name_kept_as_blank(self):
        """An empty Column B is returned as a blank edit."""
        xlsx_path = create_test_xlsx([("old.txt", None)])
        try:
            assert load_rename_manifest(xlsx_path) == {"old.txt": ""}
        finally:
            xlsx_path.unlink()

    def test_empty_rows_and_duplicates_skipped(self):
        xlsx_path = create_test_xlsx([
            ("a.txt", "x.txt"),
            (None, "orphan.txt"),
            ("a.txt", "y.txt"),
        ])
        try:
            assert load_rename_manifest(xlsx_path) == {"a.txt": "x.txt"}
        finally:
            xlsx_path.unlink()

    def test_numeric_values_converted(self):
        xlsx_path = create_test_xlsx([(2024, "report")])
        try:
            assert load_rename_manifest(xlsx_path) == {"2024": "report"}
        finally:
            xlsx_path.unlink()

    def test_named_sheet(self):
        xlsx_path = create_test_xlsx([("a.txt", "b.txt")], sheet_name="Renames")
        try:
            assert load_rename_manifest(xlsx_path, "Renames") == {"a.txt": "b.txt"}
        finally:
            xlsx_path.unlink()

    def test_missing_sheet(self):
        xlsx_path = create_test_xlsx([("a.txt", "b.txt")])
        try:
            with pytest.raises(ValueError) as exc_info:
                load_rename_manifest(xlsx_path, "Nope")
            assert "not found" in str(exc_info.value)
        finally:
            xlsx_path.unlink()

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_rename_manifest("/nonexistent/manifest.xlsx")

    def test_invalid_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            bad = Path(tmp) / "bad.xlsx"
            bad.write_text("not a workbook")

            with pytest.raises(ValueError) as exc_info:
                load_rename_manifest(bad)
            assert "Failed to open manifest" in str(exc_info.value)


class TestExportManifest:
    """Tests for export_manifest function."""

    def test_export_then_edit_then_load(self):
        """An exported manifest can be edited and fed back as edits."""
        with tempfile.TemporaryDirectory() as tmp:
            folder = Path(tmp) / "files"
            folder.mkdir()
            (folder / "a.txt").write_text("A")
            (folder / "b.txt").write_text("B")
            entries = load_entries(folder)
            xlsx_path = Path(tmp) / "manifest.xlsx"

            export_manifest(entries, xlsx_path)

            workbook = openpyxl.load_workbook(xlsx_path)
            worksheet = workbook.active
            assert [c.value for c in worksheet[1]] == list(MANIFEST_HEADER)
            assert worksheet["A2"].value == "a.txt"
            assert worksheet["B2"].value == "a.txt"
            worksheet["B3"] = "renamed.txt"
            workbook.save(xlsx_path)
            workbook.close()

            edits = load_rename_manifest(xlsx_path)
            apply_display_name_edits(entries, edits)

            assert [e.display_name for e in entries] == ["a.txt", "renamed.txt"]
            assert [e.rename_requested for e in entries] == [False, True]

    def test_export_empty_list(self):
        with tempfile.TemporaryDirectory() as tmp:
            xlsx_path = export_manifest([], Path(tmp) / "out" / "manifest.xlsx")

            assert xlsx_path.exists()
            assert load_rename_manifest(xlsx_path) == {}
