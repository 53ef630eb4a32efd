"""
Rename reconciliation, run before files are organized.

Applies the display names the user chose so that the organize step
works on stable, confirmed file names. Every failure is recorded and
the remaining renames still go ahead.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .types import FileEntry, RenameError
from .utils import is_valid_file_name, normalize_path, safe_move_file

logger = logging.getLogger(__name__)


def rename_entry(
    entry: FileEntry,
    folder_root: Union[str, Path]
) -> Optional[RenameError]:
    """
    Rename one entry to its display name inside folder_root.

    Args:
        entry: Entry whose display name differs from its current name
        folder_root: Folder the renamed file is placed in

    Returns:
        None on success (entry.current_path is updated), or a RenameError
        describing why the rename was not applied
    """
    old_name = entry.current_name
    new_name = entry.display_name

    if not is_valid_file_name(new_name):
        logger.warning(f"Invalid new name for {old_name}: {new_name!r}")
        return RenameError(old_name, f"Invalid file name: {new_name!r}")

    new_path = os.path.join(normalize_path(folder_root), new_name)
    success, message = safe_move_file(entry.current_path, new_path)

    if not success:
        logger.error(f"Error renaming {old_name} to {new_name}: {message}")
        return RenameError(old_name, message)

    logger.info(f"Renamed: {old_name} -> {new_name}")
    entry.current_path = new_path
    return None


def reconcile(
    entries: Sequence[FileEntry],
    folder_root: Union[str, Path]
) -> Tuple[Sequence[FileEntry], List[RenameError]]:
    """
    Apply pending renames to a scanned file list.

    Entries whose display name is blank or equal to the current name are
    left alone. A failed rename leaves the entry's current path unchanged;
    the file is still organized under its old name afterwards.

    Args:
        entries: Entries with user-edited display names
        folder_root: The selected folder

    Returns:
        Tuple of (entries, errors) where errors lists every failed rename
    """
    errors: List[RenameError] = []
    attempted = 0

    for entry in entries:
        if not entry.display_name or not entry.display_name.strip():
            # Blank edits are never applied
            entry.display_name = entry.current_name
            continue

        if not entry.rename_requested:
            continue

        attempted += 1
        error = rename_entry(entry, folder_root)
        if error is not None:
            errors.append(error)

    if attempted:
        logger.info(
            f"Applied {attempted - len(errors)} of {attempted} renames "
            f"({len(errors)} failed)"
        )
    return entries, errors
