"""
Folder scanner for building the list of files to organize.

This module is responsible for:
- Listing the files directly inside the selected folder (non-recursive)
- Ignoring subfolders, including stem folders from earlier runs
- Creating FileEntry objects with absolute paths
- Applying user edits to display names, reverting blank edits
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Union

from .errors import NotFoundError
from .types import FileEntry
from .utils import normalize_path

logger = logging.getLogger(__name__)


def load_entries(folder_path: Union[str, Path]) -> List[FileEntry]:
    """
    Load the files of a folder as FileEntry objects.

    Each call produces a fresh list; a previous scan of the same (or
    another) folder is not merged in.

    Args:
        folder_path: The folder selected by the user

    Returns:
        List of FileEntry objects sorted case-insensitively by name

    Raises:
        NotFoundError: If the folder doesn't exist
        NotADirectoryError: If the path is not a folder
    """
    if not folder_path or not os.path.exists(folder_path):
        raise NotFoundError(f"Selected folder does not exist: {folder_path}")

    if not os.path.isdir(folder_path):
        raise NotADirectoryError(f"Path is not a folder: {folder_path}")

    root = normalize_path(folder_path)
    logger.info(f"Scanning folder: {root}")

    entries: List[FileEntry] = []
    skipped_dirs = 0

    with os.scandir(root) as it:
        for dir_entry in it:
            if not dir_entry.is_file():
                skipped_dirs += 1
                continue
            entries.append(FileEntry.from_path(os.path.join(root, dir_entry.name)))

    entries.sort(key=lambda e: (e.current_name.lower(), e.current_name))

    logger.info(f"Found {len(entries)} files (ignored {skipped_dirs} other entries)")
    return entries


def apply_display_name_edits(
    entries: List[FileEntry],
    edits: Dict[Union[int, str], str]
) -> List[FileEntry]:
    """
    Apply display-name edits made by the user.

    An edit is keyed either by the entry's position in the list or by its
    current file name. A blank edit is discarded: the display name reverts
    to the current file name, so no rename will be requested.

    Args:
        entries: Entries from load_entries()
        edits: Mapping of index or current file name to new display name

    Returns:
        The same list, with display names updated in place
    """
    by_name = {entry.current_name: entry for entry in entries}

    for key, new_name in edits.items():
        if isinstance(key, int):
            if not 0 <= key < len(entries):
                logger.warning(f"Ignoring edit for unknown index {key}")
                continue
            entry = entries[key]
        else:
            entry = by_name.get(key)
            if entry is None:
                logger.warning(f"Ignoring edit for unknown file '{key}'")
                continue

        cleaned = new_name.strip() if new_name else ""
        if not cleaned:
            logger.debug(f"Blank name for '{entry.current_name}', edit discarded")
            entry.display_name = entry.current_name
            continue

        entry.display_name = cleaned
        logger.debug(f"Display name for '{entry.current_name}' set to '{cleaned}'")

    return entries
