# Progress tracking utilities
from .estimator import estimate_completion, format_elapsed, percent_complete
from .report import ProgressReport, ReportKind, build_report
from .session import ProgressSession, begin, track
from .display import TqdmDisplay
from .reporter import ProgressReporter

__all__ = [
    'estimate_completion',
    'format_elapsed',
    'percent_complete',
    'ProgressReport',
    'ReportKind',
    'build_report',
    'ProgressSession',
    'begin',
    'track',
    'TqdmDisplay',
    'ProgressReporter',
]
