"""
File organizer that moves each file into a folder named after its stem.

This module is responsible for:
- Deriving the target folder name from the file's base name
- Creating the target folder if it doesn't exist (idempotent)
- Moving the file into it, never overwriting an existing file
- Skipping the organizer's own executable/script
- Emitting ordered progress events, continuing past per-file failures
- Stopping between files when a cancel event is set
- Recording per-file results and statistics for reporting
"""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Union

from .errors import OrganizeError
from .types import (
    EventKind,
    FileEntry,
    OrganizeResult,
    OrganizeStatus,
    ProgressEvent,
)
from .utils import normalize_path, safe_move_file

logger = logging.getLogger(__name__)

# Files with this stem are the tool itself and are never moved
RESERVED_STEM = "organize"


def compute_percent(processed: int, total: int) -> int:
    """Integer percentage of processed files, truncated toward zero."""
    if total <= 0:
        return 100
    return (processed * 100) // total


def is_reserved(stem: str) -> bool:
    return stem.lower() == RESERVED_STEM


def create_stem_folder(folder_path: Union[str, Path]) -> None:
    """
    Create a target folder, leaving an existing folder untouched.

    Raises:
        OrganizeError: If the folder can't be created (e.g. a file with
            the same name is in the way)
    """
    try:
        Path(folder_path).mkdir(exist_ok=True)
    except OSError as e:
        raise OrganizeError(f"Could not create folder {folder_path}: {e}") from e


def move_into_folder(
    src_path: Union[str, Path],
    folder_path: Union[str, Path]
) -> str:
    """
    Move a file into a folder, keeping its name.

    Returns:
        The new path of the file

    Raises:
        OrganizeError: If the move fails; the file stays where it was
    """
    dest_path = os.path.join(str(folder_path), os.path.basename(str(src_path)))
    success, message = safe_move_file(src_path, dest_path)
    if not success:
        raise OrganizeError(message)
    return dest_path


class FileOrganizer:
    """
    Moves each file of a folder into a subfolder named after its stem.

    An organizer runs once; call reset_stats() before organizing another
    entry list with the same instance.
    """

    def __init__(self, folder_root: Union[str, Path]):
        """
        Initialize the organizer.

        Args:
            folder_root: The selected folder; stem folders are created in it
        """
        self.folder_root = normalize_path(folder_root)
        self.results: List[OrganizeResult] = []
        self.cancelled = False
        self.processed = 0
        self.total = 0
        self._started = False
        self._stats: Dict[OrganizeStatus, int] = {status: 0 for status in OrganizeStatus}

    @property
    def percent(self) -> int:
        return compute_percent(self.processed, self.total)

    def organize(
        self,
        entries: Sequence[FileEntry],
        cancel_event: Optional[threading.Event] = None
    ) -> Iterator[ProgressEvent]:
        """
        Organize entries, lazily yielding progress events.

        For every entry that isn't skipped, yields a "Creating folder"
        event, then (if the folder exists) a "Moving" event, then exactly
        one success or error event. The first two carry the percentage
        before the file is processed, the last one the percentage after.

        Args:
            entries: Entries to organize, in order; moved entries get their
                current_path updated
            cancel_event: Optional event checked before each entry

        Returns:
            Iterator of ProgressEvent objects

        Raises:
            RuntimeError: If this organizer has already been started
        """
        if self._started:
            raise RuntimeError("Organizer has already run; call reset_stats() first")
        self._started = True
        self.total = len(entries)
        return self._run(entries, cancel_event)

    def _run(
        self,
        entries: Sequence[FileEntry],
        cancel_event: Optional[threading.Event]
    ) -> Iterator[ProgressEvent]:
        logger.info(f"Organizing {self.total} files in {self.folder_root}")

        for index, entry in enumerate(entries):
            if cancel_event is not None and cancel_event.is_set():
                self._cancel_remaining(entries[index:])
                return

            file_name = entry.current_name
            stem = entry.stem

            if is_reserved(stem):
                logger.info(f"Skipping organizer file: {file_name}")
                self.processed += 1
                self._record(entry, None, OrganizeStatus.SKIPPED, "Organizer file left in place")
                continue

            target_folder = os.path.join(self.folder_root, stem)
            percent = self.percent

            try:
                yield ProgressEvent(percent, f"Creating folder: {stem}")
                create_stem_folder(target_folder)

                yield ProgressEvent(percent, f"Moving {file_name} to {stem}")
                source_path = entry.current_path
                dest_path = move_into_folder(source_path, target_folder)

            except OrganizeError as e:
                logger.error(f"Failed to organize {file_name}: {e}")
                self._record(entry, None, OrganizeStatus.ERROR, str(e))
                yield ProgressEvent(self.percent, f"Error: {e}", EventKind.ERROR)
                continue

            self.processed += 1
            entry.current_path = dest_path
            logger.info(f"Moved: {source_path} -> {dest_path}")
            self._record(entry, dest_path, OrganizeStatus.SUCCESS, f"Moved to {stem}", source_path)
            yield ProgressEvent(
                self.percent,
                f"Success: {file_name} moved to {stem}",
                EventKind.SUCCESS
            )

        logger.info(f"Completed organizing {self.total} files")

    def _cancel_remaining(self, remaining: Sequence[FileEntry]) -> None:
        logger.warning(f"Run cancelled, {len(remaining)} files not processed")
        self.cancelled = True
        for entry in remaining:
            self._record(entry, None, OrganizeStatus.CANCELLED, "Run cancelled")

    def _record(
        self,
        entry: FileEntry,
        dest_path: Optional[str],
        status: OrganizeStatus,
        message: str,
        source_path: Optional[str] = None
    ) -> None:
        self.results.append(OrganizeResult(
            file_name=entry.current_name if dest_path is None else os.path.basename(dest_path),
            source_path=source_path or entry.current_path,
            dest_path=dest_path,
            status=status,
            message=message
        ))
        self._stats[status] += 1

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about organized files.

        Returns:
            Dictionary mapping status names to counts
        """
        return {status.value: count for status, count in self._stats.items()}

    def get_summary(self) -> str:
        """
        Get a human-readable summary of the run.

        Returns:
            Formatted summary string
        """
        stats = self.get_stats()
        total = sum(stats.values())

        lines = [f"Organize Summary ({total} total):"]
        lines.append(f"  Moved: {stats.get('success', 0)}")

        if stats.get("skipped", 0):
            lines.append(f"  Skipped: {stats.get('skipped', 0)}")
        if stats.get("error", 0):
            lines.append(f"  Errors: {stats.get('error', 0)}")
        if stats.get("cancelled", 0):
            lines.append(f"  Not processed (cancelled): {stats.get('cancelled', 0)}")

        return "\n".join(lines)

    def reset_stats(self) -> None:
        """Reset results and statistics so the organizer can run again."""
        self.results = []
        self.cancelled = False
        self.processed = 0
        self.total = 0
        self._started = False
        self._stats = {status: 0 for status in OrganizeStatus}


def organize(
    entries: Sequence[FileEntry],
    folder_root: Union[str, Path],
    cancel_event: Optional[threading.Event] = None
) -> Iterator[ProgressEvent]:
    """
    Organize entries into stem folders under folder_root.

    Convenience wrapper around FileOrganizer for callers that only need
    the event stream.
    """
    return FileOrganizer(folder_root).organize(entries, cancel_event)
