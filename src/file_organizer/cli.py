"""
Command-line interface for the file organizer.

Usage:
    file-organizer FOLDER [--rename OLD=NEW ...] [--manifest FILE.xlsx]
                          [--report FILE.csv] [--list] [--export-manifest FILE.xlsx]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .errors import NotFoundError, PreconditionError, RunInProgressError
from .manifest import export_manifest, load_rename_manifest
from .report import write_report
from .runner import OrganizeRunner
from .scanner import apply_display_name_edits, load_entries
from .types import OrganizeStatus

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FILE_ERRORS = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """
    Configure logging for a CLI run.

    Console output is limited to warnings unless verbose is set; the
    optional log file always receives debug output.
    """
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    handlers: List[logging.Handler] = [console]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    # force=True so repeated runs in one process don't stack handlers
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)


def parse_rename_args(values: List[str]) -> Dict[str, str]:
    """
    Parse --rename OLD=NEW values.

    Raises:
        ValueError: If a value has no '=' or an empty OLD part
    """
    edits: Dict[str, str] = {}
    for value in values:
        old, sep, new = value.partition("=")
        if not sep or not old.strip():
            raise ValueError(f"Invalid --rename value '{value}', expected OLD=NEW")
        edits[old.strip()] = new
    return edits


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="file-organizer",
        description=(
            "Move every file of a folder into its own subfolder, "
            "named after the file without its extension."
        ),
    )
    parser.add_argument("folder", type=Path, help="Folder whose files are organized")
    parser.add_argument(
        "--rename",
        action="append",
        default=[],
        metavar="OLD=NEW",
        help="Rename a file before organizing (repeatable)",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        help="XLSX manifest with file names (Column A) and new names (Column B)",
    )
    parser.add_argument("--sheet", help="Manifest sheet name (default: active sheet)")
    parser.add_argument(
        "--export-manifest",
        type=Path,
        metavar="FILE",
        help="Write the file list to an XLSX manifest and exit",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the files that would be organized and exit",
    )
    parser.add_argument("--report", type=Path, help="Write a CSV report of the run")
    parser.add_argument("--log-file", type=Path, help="Write a debug log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    try:
        entries = load_entries(args.folder)
    except (NotFoundError, NotADirectoryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.list:
        for entry in entries:
            print(entry.current_name)
        print(f"{len(entries)} files")
        return EXIT_OK

    if args.export_manifest:
        path = export_manifest(entries, args.export_manifest)
        print(f"Manifest written to {path}")
        return EXIT_OK

    try:
        edits: Dict = {}
        if args.manifest:
            edits.update(load_rename_manifest(args.manifest, args.sheet))
        edits.update(parse_rename_args(args.rename))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    apply_display_name_edits(entries, edits)

    runner = OrganizeRunner(args.folder)
    try:
        run = runner.start(entries)
    except (PreconditionError, RunInProgressError) as e:
        print(e, file=sys.stderr)
        return EXIT_USAGE

    for error in run.rename_errors:
        print(error, file=sys.stderr)

    try:
        for event in run.events():
            print(event, flush=True)
    except KeyboardInterrupt:
        print("Cancelling after the current file...", file=sys.stderr)
        run.cancel()
        try:
            run.wait()
        except KeyboardInterrupt:
            print(
                "Interrupted again; exiting once the current file has moved.",
                file=sys.stderr
            )
            return EXIT_INTERRUPTED
        for event in run.events():
            print(event, flush=True)

    print(run.summary)

    if args.report:
        path = write_report(run.results, args.report, run.rename_errors)
        print(f"Report written to {path}")

    failed = any(r.status is OrganizeStatus.ERROR for r in run.results)
    return EXIT_FILE_ERRORS if failed or run.error else EXIT_OK
