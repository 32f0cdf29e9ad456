"""
Completion estimates for streamed progress.

Percent complete is a plain integer ratio. The ETA comes from an empirical
decay-weighted extrapolation that was tuned by trial and error. It is a
best-effort hint and gets more accurate as the remaining count shrinks.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from ..error_handler import EstimationFailure, estimation_step, handle_error


def format_elapsed(elapsed: timedelta) -> str:
    """Format a duration as HH:MM:SS. Hours are not wrapped at 24."""
    total_seconds = max(int(elapsed.total_seconds()), 0)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_clock(moment: datetime) -> str:
    """Wall-clock HH:MM:SS of a timestamp"""
    return moment.strftime("%H:%M:%S")


def percent_complete(items_seen: int, total_expected: Optional[int]) -> Optional[int]:
    """
    Integer percent of total_expected reached, or None when the total is unknown.

    Overshooting the total reports 100, never more and never a wrapped value.
    """
    if not total_expected:
        return None
    return min(100 * items_seen // total_expected, 100)


@estimation_step("fudge factor")
def fudge_factor(remaining: int, items_seen: int) -> float:
    """
    Per-item decay weight used by the ETA extrapolation.

    Undefined for remaining < 3 (logarithm of a non-positive value) and
    negative for remaining == 3, both of which callers treat as "imminent".
    """
    return (1 + math.log10(math.log10(math.log(remaining)))) / items_seen / 1000


@estimation_step("completion extrapolation")
def seconds_to_add(elapsed: timedelta, remaining: int, items_seen: int) -> float:
    elapsed_ms = elapsed.total_seconds() * 1000
    return elapsed_ms * remaining * fudge_factor(remaining, items_seen)


def estimate_completion(
    now: datetime,
    elapsed: timedelta,
    items_seen: int,
    total_expected: int,
    logger: Optional[logging.Logger] = None,
) -> datetime:
    """
    Estimate the wall-clock time the stream will finish.

    Returns `now` when nothing remains, when the extrapolation is not
    positive, or when it breaks down arithmetically. Breakdowns are logged
    as a warning to `logger` (the session's logging sink when given).
    """
    remaining = total_expected - items_seen
    if remaining <= 0:
        return now

    try:
        seconds = seconds_to_add(elapsed, remaining, items_seen)
        if not math.isfinite(seconds) or seconds <= 0:
            return now
        return now + timedelta(seconds=seconds)
    except EstimationFailure as e:
        handle_error(e, "estimate_completion", level=logging.WARNING, log=logger)
        return now
    except OverflowError as e:
        handle_error(EstimationFailure("completion timestamp", e), "estimate_completion", level=logging.WARNING, log=logger)
        return now
