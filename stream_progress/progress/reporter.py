"""
Progress reporter fan-out.
Forwards each report to every registered callback.
"""

import logging
from typing import Callable, List

from ..error_handler import handle_error
from .report import ProgressReport


class ProgressReporter:
    """
    Display sink that emits each report to registered callbacks.
    A failing callback is logged and skipped; the others still run.
    """

    def __init__(self, *callbacks: Callable[[ProgressReport], object]):
        self.callbacks: List[Callable] = list(callbacks)
        self.last_report = None

    def add_callback(self, callback: Callable):
        """Register callback: callback(report)"""
        self.callbacks.append(callback)

    def remove_callback(self, callback: Callable):
        """Remove a callback"""
        if callback in self.callbacks:
            self.callbacks.remove(callback)

    def __call__(self, report: ProgressReport):
        self.last_report = report
        for callback in list(self.callbacks):
            try:
                callback(report)
            except Exception as e:
                handle_error(e, f"progress callback {getattr(callback, '__name__', callback)!r}", level=logging.WARNING)
