"""
Stream Progress
===============

Progress reporting for streamed sequences: items pass through unchanged
while a session periodically reports count, percent complete, elapsed time
and an estimated completion time.
"""

__version__ = "0.1.0"
__author__ = "Stream Progress"

# Export key classes for convenience
from .config import Config
from .error_handler import EstimationFailure, InvalidConfiguration, ProgressError, SessionClosed
from .progress import ProgressReport, ProgressReporter, ProgressSession, ReportKind, TqdmDisplay, begin, track
