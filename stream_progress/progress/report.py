"""
Progress reports emitted by a session.
Defines report kinds, the structured display update, and the shared formatter.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .estimator import estimate_completion, format_clock, format_elapsed, percent_complete


INITIALIZING_OPERATION = "Initializing"


class ReportKind(Enum):
    INITIAL = "initial"
    PERIODIC = "periodic"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class ProgressReport:
    """Structured update handed to the progress display"""
    kind: ReportKind
    activity: str
    status: str
    current_operation: str
    display_id: int
    items_seen: int
    percent: Optional[int] = None  # None when the total is unknown
    eta: Optional[datetime] = None
    completed: bool = False

    def log_line(self) -> str:
        """Two-line text for the logging sink"""
        return f"{self.activity}: {self.status}\n{self.current_operation}"


def format_status(
    items_seen: int,
    status_suffix: str,
    total_expected: Optional[int] = None,
    percent: Optional[int] = None,
) -> str:
    """
    Status text for a report.

    Example: with a total of 1500 and 40 items seen,
    "  40 / 1500 (2%) records processed"
    """
    if not total_expected:
        return f"{items_seen} {status_suffix}"
    width = len(str(total_expected))
    return f"{items_seen:>{width}} / {total_expected} ({percent}%) {status_suffix}"


def build_report(
    kind: ReportKind,
    activity: str,
    status_suffix: str,
    items_seen: int,
    total_expected: Optional[int],
    display_id: int,
    start_time: Optional[datetime],
    now: datetime,
    logger: Optional[logging.Logger] = None,
) -> ProgressReport:
    """Build the report of the given kind from the session's current counters"""
    if kind is ReportKind.TERMINAL:
        return ProgressReport(
            kind=kind,
            activity="",
            status="",
            current_operation="",
            display_id=display_id,
            items_seen=items_seen,
            completed=True,
        )

    percent = percent_complete(items_seen, total_expected)
    status = format_status(items_seen, status_suffix, total_expected, percent)

    if kind is ReportKind.INITIAL:
        return ProgressReport(
            kind=kind,
            activity=activity,
            status=status,
            current_operation=INITIALIZING_OPERATION,
            display_id=display_id,
            items_seen=items_seen,
            percent=percent,
        )

    elapsed = now - (start_time or now)
    current_operation = f"Elapsed: {format_elapsed(elapsed)}"
    eta = None
    if total_expected:
        eta = estimate_completion(now, elapsed, items_seen, total_expected, logger=logger)
        current_operation += f"  Expected completion: {format_clock(eta)}"

    return ProgressReport(
        kind=kind,
        activity=activity,
        status=status,
        current_operation=current_operation,
        display_id=display_id,
        items_seen=items_seen,
        percent=percent,
        eta=eta,
    )
