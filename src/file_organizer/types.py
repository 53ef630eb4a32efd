"""
Type definitions and data classes for the file organizer application.

This module defines:
- FileEntry: Data class for a scanned file (original path, current path, display name)
- ProgressEvent: Immutable (percent, message) pair emitted while organizing
- EventKind: Enum classifying progress events
- RenameError: Record describing a rename that could not be applied
- OrganizeResult: Data class representing the outcome for one file
- OrganizeStatus: Enum for organize outcomes
- RunState: Enum for the lifecycle of an organize run
- ReportEntry: Data class for CSV report rows
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(slots=True)
class FileEntry:
    """
    Represents a file discovered when a folder is scanned.

    Attributes:
        original_path: Absolute path at scan time (never changes)
        current_path: Absolute path on disk, updated by renames and moves
        display_name: User-editable name the file should end up with
    """
    original_path: str
    current_path: str
    display_name: str

    @classmethod
    def from_path(cls, path: str) -> "FileEntry":
        """Create an entry whose display name is the file's base name."""
        return cls(
            original_path=path,
            current_path=path,
            display_name=os.path.basename(path)
        )

    @property
    def current_name(self) -> str:
        return os.path.basename(self.current_path)

    @property
    def stem(self) -> str:
        """Current base name without its final extension."""
        return os.path.splitext(self.current_name)[0]

    @property
    def rename_requested(self) -> bool:
        """True when a non-blank display name differs from the current name."""
        name = self.display_name.strip() if self.display_name else ""
        return bool(name) and self.display_name != self.current_name


class EventKind(Enum):
    """Kind of a progress event."""
    STEP = "step"            # Creating folder / moving file
    SUCCESS = "success"      # File moved
    ERROR = "error"          # File failed
    COMPLETE = "complete"    # Forced final event of a finished run
    CANCELLED = "cancelled"  # Final event of a cancelled run


@dataclass(frozen=True)
class ProgressEvent:
    """One step of an organize run, consumed in emission order."""
    percent: int
    message: str
    kind: EventKind = EventKind.STEP

    @property
    def is_terminal(self) -> bool:
        """True for the per-file success/error events."""
        return self.kind in (EventKind.SUCCESS, EventKind.ERROR)

    def __str__(self) -> str:
        return f"[{self.percent:3d}%] {self.message}"


@dataclass(frozen=True)
class RenameError:
    """A rename that was requested but could not be applied."""
    file_name: str
    reason: str

    def __str__(self) -> str:
        return f"Error renaming {self.file_name}: {self.reason}"


class OrganizeStatus(Enum):
    """Status of organizing a single file."""
    SUCCESS = "success"      # Moved into its stem folder
    SKIPPED = "skipped"      # Reserved stem, left in place
    ERROR = "error"          # Failed, file left where it was
    CANCELLED = "cancelled"  # Not attempted, run was cancelled


@dataclass
class OrganizeResult:
    """Result of organizing one file."""
    file_name: str
    source_path: str
    dest_path: Optional[str]
    status: OrganizeStatus
    message: str


class RunState(Enum):
    """Lifecycle of an organize run."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReportStatus(Enum):
    """Status values for CSV report (human-readable)."""
    MOVED = "MOVED"
    SKIPPED = "SKIPPED"
    ERROR = "ERROR"
    CANCELLED = "CANCELLED"
    RENAME_ERROR = "RENAME_ERROR"

    @classmethod
    def from_organize_status(cls, status: OrganizeStatus):
        """Convert OrganizeStatus to ReportStatus."""
        mapping = {
            OrganizeStatus.SUCCESS: cls.MOVED,
            OrganizeStatus.SKIPPED: cls.SKIPPED,
            OrganizeStatus.ERROR: cls.ERROR,
            OrganizeStatus.CANCELLED: cls.CANCELLED,
        }
        return mapping.get(status, cls.ERROR)


@dataclass
class ReportEntry:
    """Entry for the CSV report."""
    timestamp: str
    file_name: str
    status: str
    source_path: str
    dest_path: str
    message: str
