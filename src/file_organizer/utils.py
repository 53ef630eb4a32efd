r"""
Path utilities for normalizing paths and moving single files safely.

This module provides:
- normalize_path(): Normalize paths to absolute form, preserving UNC
- is_valid_file_name(): Check a user-supplied name is a plain file name
- safe_move_file(): Move a file without ever overwriting the destination
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Tuple, Union

logger = logging.getLogger(__name__)

UNC_PREFIX = "\\\\"
EXTENDED_PATH_PREFIX = "\\\\?\\"


def normalize_path(path: Union[str, Path]) -> str:
    """
    Normalize a path to absolute form, preserving UNC paths.

    This function:
    - Converts Path objects to strings
    - Resolves relative paths to absolute
    - Preserves UNC paths (\\\\server\\share) without breaking them

    Args:
        path: A file path as string or Path object

    Returns:
        Normalized absolute path as string
    """
    path_str = str(path)

    if path_str.startswith(EXTENDED_PATH_PREFIX):
        return path_str

    if path_str.startswith(UNC_PREFIX):
        # Path.resolve() can mangle server/share, so only tidy separators
        parts = path_str[2:].replace("/", "\\").split("\\")
        cleaned = [part for i, part in enumerate(parts) if part or i < 2]
        return UNC_PREFIX + "\\".join(cleaned)

    try:
        return str(Path(path_str).resolve())
    except (OSError, ValueError):
        return os.path.abspath(os.path.normpath(path_str))


def is_valid_file_name(name: str) -> bool:
    """
    Check that a name can be used as a file name inside a folder.

    Rejects blank names, "." and "..", and anything containing a path
    separator (which would move the file somewhere else).
    """
    if not name or not name.strip():
        return False
    if name in (".", ".."):
        return False
    separators = {"/", "\\", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators):
        return False
    return "\0" not in name


def safe_move_file(
    src: Union[str, Path],
    dest: Union[str, Path]
) -> Tuple[bool, str]:
    """
    Move a single file, refusing to overwrite an existing destination.

    shutil.move silently replaces an existing file on POSIX, so the
    destination is checked first. A destination that is the same file
    as the source (case-only rename on a case-insensitive filesystem)
    is allowed.

    Args:
        src: Source file path
        dest: Destination file path

    Returns:
        Tuple of (success: bool, message: str)
        On success: (True, "Moved successfully")
        On failure: (False, "Error description")

    Raises:
        Nothing - all errors are caught and returned as (False, message)
    """
    src_str = str(src)
    dest_str = str(dest)

    if not os.path.exists(src_str):
        return (False, f"Source file not found: {src_str}")

    if os.path.lexists(dest_str) and not _same_file(src_str, dest_str):
        return (False, f"Destination already exists: {dest_str}")

    try:
        shutil.move(src_str, dest_str)
        return (True, "Moved successfully")

    except shutil.Error as e:
        return (False, f"Move failed: {e}")

    except PermissionError as e:
        return (False, f"Permission denied: {_format_os_error(e)}")

    except OSError as e:
        error_code = getattr(e, "winerror", None)

        if error_code == 32:
            return (False, f"File is locked or in use: {_format_os_error(e)}")
        elif error_code == 123:
            return (False, f"Invalid file name: {_format_os_error(e)}")
        elif error_code == 206:
            return (False, f"Path too long: {_format_os_error(e)}")
        else:
            return (False, _format_os_error(e))


def _same_file(a: str, b: str) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def _format_os_error(e: OSError) -> str:
    """
    Format an OS error, including the Windows error code if available.

    Args:
        e: The exception to format

    Returns:
        Formatted error string
    """
    error_code = getattr(e, "winerror", None)
    if error_code is not None:
        return f"[WinError {error_code}] {e}"
    return str(e)
