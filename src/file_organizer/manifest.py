"""
Excel rename manifest for editing display names outside the tool.

This module is responsible for:
- Exporting the scanned file list to an XLSX file (Column A: file name,
  Column B: new name, pre-filled with the current display name)
- Reading the edited manifest back using openpyxl
- Treating all values as strings and trimming whitespace
- Skipping the header row, empty rows and duplicate file names
- Logging warnings for skipped rows
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

import openpyxl
from openpyxl.styles import Font

from .types import FileEntry

logger = logging.getLogger(__name__)

MANIFEST_HEADER = ("File Name", "New Name")


def load_rename_manifest(
    xlsx_path: Union[str, Path],
    sheet_name: Optional[str] = None
) -> Dict[str, str]:
    """
    Load display-name edits from an XLSX manifest.

    Column A holds the current file name and Column B the desired name.
    An empty Column B yields an empty edit, which apply_display_name_edits()
    treats as "keep the current name".

    Args:
        xlsx_path: Path to the XLSX file
        sheet_name: Optional sheet name (defaults to active sheet)

    Returns:
        Dict mapping current file name to desired name, in row order

    Raises:
        FileNotFoundError: If the manifest doesn't exist
        ValueError: If the file cannot be parsed or the sheet is missing
    """
    path = Path(xlsx_path)

    if not path.exists():
        raise FileNotFoundError(f"Manifest file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    logger.info(f"Loading rename manifest from: {path}")

    try:
        # data_only=True to get values instead of formulas
        workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
    except Exception as e:
        raise ValueError(f"Failed to open manifest: {e}") from e

    edits: Dict[str, str] = {}
    row_count = 0
    skipped_count = 0
    duplicate_count = 0

    try:
        if sheet_name:
            if sheet_name not in workbook.sheetnames:
                available = ", ".join(workbook.sheetnames)
                raise ValueError(
                    f"Sheet '{sheet_name}' not found. Available: {available}"
                )
            worksheet = workbook[sheet_name]
        else:
            worksheet = workbook.active
        logger.debug(f"Using sheet: {worksheet.title}")

        for row in worksheet.iter_rows(min_col=1, max_col=2, values_only=True):
            row_count += 1
            file_cell = row[0] if len(row) > 0 else None
            name_cell = row[1] if len(row) > 1 else None

            file_name = str(file_cell).strip() if file_cell is not None else ""
            new_name = str(name_cell).strip() if name_cell is not None else ""

            if row_count == 1 and file_name == MANIFEST_HEADER[0]:
                continue

            if not file_name:
                skipped_count += 1
                logger.debug(f"Row {row_count}: Empty file name, skipping")
                continue

            if file_name in edits:
                duplicate_count += 1
                logger.warning(f"Row {row_count}: Duplicate '{file_name}', skipping")
                continue

            edits[file_name] = new_name

    finally:
        workbook.close()

    logger.info(
        f"Loaded {len(edits)} manifest rows "
        f"(skipped {skipped_count} empty, {duplicate_count} duplicates)"
    )
    return edits


def export_manifest(
    entries: Sequence[FileEntry],
    xlsx_path: Union[str, Path]
) -> Path:
    """
    Write the file list to an XLSX manifest for editing.

    Args:
        entries: Scanned entries
        xlsx_path: Where to write the manifest

    Returns:
        Path of the written file
    """
    path = Path(xlsx_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    workbook = openpyxl.Workbook()
    worksheet = workbook.active
    worksheet.title = "Files"

    worksheet.append(list(MANIFEST_HEADER))
    for cell in worksheet[1]:
        cell.font = Font(bold=True)

    for entry in entries:
        worksheet.append([entry.current_name, entry.display_name])

    longest = max((len(e.current_name) for e in entries), default=10)
    worksheet.column_dimensions["A"].width = min(max(longest + 2, 12), 80)
    worksheet.column_dimensions["B"].width = min(max(longest + 2, 12), 80)

    workbook.save(path)
    workbook.close()

    logger.info(f"Wrote manifest with {len(entries)} files to: {path}")
    return path
