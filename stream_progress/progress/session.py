"""
Progress sessions over streamed sequences.

A session counts items as they pass through a pipeline stage and publishes a
report when it begins, at every multiple of its interval, and when it ends.
Items are handed back untouched.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Iterator, Optional, TypeVar

from ..config import DEFAULT_INTERVAL, MAX_INTERVAL, validate_progress_settings
from ..error_handler import SessionClosed, handle_error
from ..logging_config import get_logger
from .report import ProgressReport, ReportKind, build_report

T = TypeVar("T")

Display = Callable[[ProgressReport], Any]


class ProgressSession:
    """
    One pass of the progress estimator over one streamed sequence.

    Usage:
        with ProgressSession("Import", "records processed", total_expected=len(rows)) as session:
            for row in rows:
                store(session.observe(row))

    Args:
        activity: Display name of the monitored operation
        status_suffix: Unit label appended to the count
        total_expected: Number of items expected; None or 0 disables percent and ETA
        interval: Items between periodic reports
        display_id: Progress display slot this session writes to
        display: Callable receiving each ProgressReport
        logger: Logging sink; defaults to the package progress logger
        clock: Returns the current time; defaults to datetime.now
        max_interval: Upper bound accepted for interval
    """

    def __init__(
        self,
        activity: str,
        status_suffix: str = "items processed",
        total_expected: Optional[int] = None,
        interval: int = DEFAULT_INTERVAL,
        display_id: int = 0,
        *,
        display: Optional[Display] = None,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_interval: int = MAX_INTERVAL,
    ):
        validate_progress_settings(interval, display_id, total_expected, max_interval)

        self.activity = activity
        self.status_suffix = status_suffix
        self.total_expected = total_expected or None
        self.interval = interval
        self.display_id = display_id
        self.display = display
        self.logger = logger or get_logger(__name__)
        self.clock = clock or datetime.now

        self.start_time: Optional[datetime] = None
        self.items_seen = 0
        self.started = False
        self.closed = False

    def begin(self) -> "ProgressSession":
        """Start the session and emit the initializing report"""
        if self.started:
            return self
        self.start_time = self.clock()
        self.started = True
        self._emit(ReportKind.INITIAL)
        return self

    def observe(self, item: T) -> T:
        """
        Count one item and return it unchanged.

        Emits a periodic report when the count reaches a multiple of the
        interval. Begins the session first if begin() was not called.
        """
        if self.closed:
            raise SessionClosed(f"{self.activity!r} session (display {self.display_id}) has ended")
        if not self.started:
            self.begin()

        self.items_seen += 1
        if self.items_seen % self.interval == 0:
            self._emit(ReportKind.PERIODIC)
        return item

    def end(self) -> Optional[ProgressReport]:
        """
        Emit the terminal report that clears this display slot.

        Only the first call emits; later calls return None.
        """
        if self.closed:
            return None
        self.closed = True
        return self._emit(ReportKind.TERMINAL)

    def _emit(self, kind: ReportKind) -> ProgressReport:
        report = build_report(
            kind,
            activity=self.activity,
            status_suffix=self.status_suffix,
            items_seen=self.items_seen,
            total_expected=self.total_expected,
            display_id=self.display_id,
            start_time=self.start_time,
            now=self.clock(),
            logger=self.logger,
        )

        if kind is ReportKind.TERMINAL:
            self.logger.debug(f"{self.activity}: finished after {self.items_seen} {self.status_suffix}")
        else:
            self.logger.info(report.log_line())

        if self.display is not None:
            try:
                self.display(report)
            except Exception as e:
                # Pass-through must survive a broken display
                handle_error(e, f"progress display {self.display_id}", level=logging.WARNING, log=self.logger)

        return report

    def __enter__(self) -> "ProgressSession":
        return self.begin()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end()
        return False

    def __repr__(self) -> str:
        return (
            f"ProgressSession(activity={self.activity!r}, items_seen={self.items_seen}, "
            f"total_expected={self.total_expected}, interval={self.interval}, "
            f"display_id={self.display_id}, closed={self.closed})"
        )


def begin(
    activity: str,
    status_suffix: str = "items processed",
    total_expected: Optional[int] = None,
    interval: int = DEFAULT_INTERVAL,
    display_id: int = 0,
    **session_kwargs,
) -> ProgressSession:
    """Create a session and emit its initializing report."""
    session = ProgressSession(
        activity,
        status_suffix,
        total_expected,
        interval,
        display_id,
        **session_kwargs,
    )
    return session.begin()


def track(
    iterable: Iterable[T],
    activity: str,
    status_suffix: str = "items processed",
    total_expected: Optional[int] = None,
    interval: int = DEFAULT_INTERVAL,
    display_id: int = 0,
    **session_kwargs,
) -> Iterator[T]:
    """
    Wrap an iterable so every item flows through a progress session.

    Settings are validated immediately; InvalidConfiguration is raised here,
    not on first iteration. The session begins when iteration starts and
    ends when the iterable is exhausted or raises, or when the generator is
    closed or garbage collected.

    If total_expected is omitted, len(iterable) is used when available.
    """
    if total_expected is None:
        try:
            total_expected = len(iterable)  # type: ignore[arg-type]
        except TypeError:
            total_expected = None

    session = ProgressSession(
        activity,
        status_suffix,
        total_expected,
        interval,
        display_id,
        **session_kwargs,
    )
    return _pass_through(session, iterable)


def _pass_through(session: ProgressSession, iterable: Iterable[T]) -> Iterator[T]:
    with session:
        for item in iterable:
            yield session.observe(item)
