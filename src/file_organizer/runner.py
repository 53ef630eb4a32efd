"""
Background runner for organize runs.

This module is responsible for:
- Checking preconditions (folder selected, files present)
- Allowing at most one run in flight per folder
- Applying pending renames synchronously on the caller's thread
- Organizing on a worker thread so the caller stays responsive
- Delivering progress events in order via a queue and an optional callback
- Emitting the final 100% event and firing the completion signal once
- Cooperative cancellation between files
"""

import logging
import os
import queue
import threading
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Set, Union

from .errors import NoFilesError, NoFolderSelectedError, RunInProgressError
from .organizer import FileOrganizer
from .reconciler import reconcile
from .types import (
    EventKind,
    FileEntry,
    OrganizeResult,
    ProgressEvent,
    RenameError,
    RunState,
)
from .utils import normalize_path

logger = logging.getLogger(__name__)

COMPLETE_MESSAGE = "Organization complete!"
CANCELLED_MESSAGE = "Organization cancelled."

# Marks the end of the event queue
_END = object()

EventCallback = Callable[[ProgressEvent], None]


class OrganizeRun:
    """
    Handle for one organize run started by OrganizeRunner.

    Events can be consumed by iterating events() on any thread, or by
    the on_event callback given to OrganizeRunner.start(), which is
    called on the worker thread.
    """

    def __init__(
        self,
        entries: Sequence[FileEntry],
        organizer: FileOrganizer,
        rename_errors: List[RenameError]
    ):
        self.entries = entries
        self.organizer = organizer
        self.rename_errors = rename_errors
        self.error: Optional[BaseException] = None
        self._queue: "queue.Queue" = queue.Queue()
        self._cancel = threading.Event()
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def cancelled(self) -> bool:
        return self.organizer.cancelled

    @property
    def results(self) -> List[OrganizeResult]:
        return self.organizer.results

    @property
    def summary(self) -> str:
        return self.organizer.get_summary()

    def cancel(self) -> None:
        """Ask the worker to stop before the next file. A move in progress finishes."""
        self._cancel.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the run completes. Returns False on timeout."""
        return self._done.wait(timeout)

    def events(self) -> Iterator[ProgressEvent]:
        """
        Iterate over progress events in emission order.

        Blocks while the worker is busy and ends after the final event.
        Intended for a single consumer.
        """
        while True:
            item = self._queue.get()
            if item is _END:
                return
            yield item


class OrganizeRunner:
    """
    Runs the rename and organize steps for one selected folder.

    At most one run per folder is in flight at a time, across every
    runner in the process, whatever the embedding application does with
    its controls.
    """

    # Folders with a run in flight, keyed by folder_key()
    _active_folders: Set[str] = set()
    _active_lock = threading.Lock()

    def __init__(self, folder_root: Union[str, Path, None]):
        self.folder_root = normalize_path(folder_root) if folder_root else ""
        self._state = RunState.IDLE
        self._lock = threading.Lock()
        self.current_run: Optional[OrganizeRun] = None

    @staticmethod
    def folder_key(folder_root: str) -> str:
        """Key identifying a folder, so differently spelled paths share a guard."""
        return os.path.normcase(normalize_path(folder_root))

    @classmethod
    def is_folder_busy(cls, folder_root: Union[str, Path]) -> bool:
        with cls._active_lock:
            return cls.folder_key(str(folder_root)) in cls._active_folders

    @property
    def state(self) -> RunState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is RunState.RUNNING

    def start(
        self,
        entries: Sequence[FileEntry],
        on_event: Optional[EventCallback] = None,
        on_complete: Optional[Callable[[OrganizeRun], None]] = None
    ) -> OrganizeRun:
        """
        Apply pending renames, then organize entries on a worker thread.

        Args:
            entries: Scanned entries with the user's display names
            on_event: Optional callable(event), called on the worker thread
            on_complete: Optional callable(run), called once when finished,
                while the folder is still claimed by this run

        Returns:
            OrganizeRun handle; rename_errors is already filled in

        Raises:
            NoFolderSelectedError: If no folder was selected
            NoFilesError: If there is nothing to organize
            RunInProgressError: If a run is already in flight for the folder
        """
        if not self.folder_root:
            raise NoFolderSelectedError()
        if not entries:
            raise NoFilesError()

        self._claim()

        try:
            entries, rename_errors = reconcile(entries, self.folder_root)
            for error in rename_errors:
                logger.warning(str(error))

            run = OrganizeRun(entries, FileOrganizer(self.folder_root), rename_errors)
            self.current_run = run
            # Not a daemon, so interpreter exit waits for a move in progress
            run._thread = threading.Thread(
                target=self._work,
                args=(run, on_event, on_complete),
                name="organize-worker",
                daemon=False
            )
            run._thread.start()
        except BaseException:
            self._release(RunState.IDLE)
            raise

        return run

    def _claim(self) -> None:
        key = self.folder_key(self.folder_root)
        with self._active_lock:
            if key in self._active_folders:
                raise RunInProgressError(
                    f"An organize run is already in progress for {self.folder_root}"
                )
            self._active_folders.add(key)
        with self._lock:
            self._state = RunState.RUNNING

    def _release(self, final_state: RunState) -> None:
        with self._lock:
            self._state = final_state
        with self._active_lock:
            self._active_folders.discard(self.folder_key(self.folder_root))

    def _work(
        self,
        run: OrganizeRun,
        on_event: Optional[EventCallback],
        on_complete: Optional[Callable[[OrganizeRun], None]]
    ) -> None:
        def emit(event: ProgressEvent) -> None:
            run._queue.put(event)
            if on_event is not None:
                try:
                    on_event(event)
                except Exception as e:
                    logger.error(f"Progress callback failed: {e}")

        try:
            for event in run.organizer.organize(run.entries, run._cancel):
                emit(event)
        except Exception as e:
            # Individual files never raise; this is a bug or a vanished folder
            logger.exception("Organize run failed unexpectedly")
            run.error = e
            emit(ProgressEvent(run.organizer.percent, f"Error: {e}", EventKind.ERROR))

        if run.organizer.cancelled:
            final_state = RunState.CANCELLED
            emit(ProgressEvent(run.organizer.percent, CANCELLED_MESSAGE, EventKind.CANCELLED))
        else:
            final_state = RunState.COMPLETED
            emit(ProgressEvent(100, COMPLETE_MESSAGE, EventKind.COMPLETE))

        logger.info(run.organizer.get_summary())

        try:
            if on_complete is not None:
                try:
                    on_complete(run)
                except Exception as e:
                    logger.error(f"Completion callback failed: {e}")
        finally:
            # The folder is freed only after the completion callback, and
            # before events() ends or wait() returns
            self._release(final_state)
            run._queue.put(_END)
            run._done.set()
