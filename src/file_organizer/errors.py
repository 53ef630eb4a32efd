"""
Exceptions raised by the file organizer.

Per-file problems during renaming are collected as RenameError records
(see types.py) and per-file problems during organizing become error
progress events, so only the exceptions below ever reach a caller.
"""


class FileOrganizerError(Exception):
    """Base error for the project."""


class NotFoundError(FileOrganizerError, FileNotFoundError):
    """The selected folder does not exist."""


class PreconditionError(FileOrganizerError, ValueError):
    """A run cannot start; reported to the user before any work."""


class NoFolderSelectedError(PreconditionError):
    def __init__(self, message: str = "Please select a folder first!"):
        super().__init__(message)


class NoFilesError(PreconditionError):
    def __init__(self, message: str = "No files to organize!"):
        super().__init__(message)


class RunInProgressError(FileOrganizerError, RuntimeError):
    """An organize run is already in flight for this folder."""


class OrganizeError(FileOrganizerError):
    """A single file could not be organized."""
