"""
CSV report of an organize run.

One row per rename error, then one row per organized file.
"""

import csv
import logging
from dataclasses import astuple, fields
from datetime import datetime
from pathlib import Path
from typing import Iterable, Union

from .types import OrganizeResult, RenameError, ReportEntry, ReportStatus

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [f.name for f in fields(ReportEntry)]


def build_report_entries(
    results: Iterable[OrganizeResult],
    rename_errors: Iterable[RenameError] = ()
) -> list:
    """Convert rename errors and organize results into report rows."""
    timestamp = datetime.now().isoformat(timespec="seconds")
    rows = []

    for error in rename_errors:
        rows.append(ReportEntry(
            timestamp=timestamp,
            file_name=error.file_name,
            status=ReportStatus.RENAME_ERROR.value,
            source_path="",
            dest_path="",
            message=error.reason
        ))

    for result in results:
        rows.append(ReportEntry(
            timestamp=timestamp,
            file_name=result.file_name,
            status=ReportStatus.from_organize_status(result.status).value,
            source_path=result.source_path,
            dest_path=result.dest_path or "",
            message=result.message
        ))

    return rows


def write_report(
    results: Iterable[OrganizeResult],
    report_path: Union[str, Path],
    rename_errors: Iterable[RenameError] = ()
) -> Path:
    """
    Write a CSV report of an organize run.

    Args:
        results: Per-file results from FileOrganizer.results
        report_path: Where to write the CSV
        rename_errors: Rename errors from the reconcile step

    Returns:
        Path of the written report
    """
    path = Path(report_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = build_report_entries(results, rename_errors)

    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(REPORT_COLUMNS)
        for row in rows:
            writer.writerow(astuple(row))

    logger.info(f"Wrote report with {len(rows)} rows to: {path}")
    return path
