"""
Console progress display backed by tqdm.
One bar per display slot, so concurrent sessions don't overwrite each other.
"""

import sys
from typing import Dict, IO, Optional

from tqdm import tqdm

from .report import ProgressReport


class TqdmDisplay:
    """Renders progress reports as tqdm bars, one per display_id"""

    def __init__(self, file: Optional[IO[str]] = None, disable: bool = False, leave: bool = False):
        self.file = file
        self.disable = disable
        self.leave = leave
        self.bars: Dict[int, tqdm] = {}

    def __call__(self, report: ProgressReport):
        if report.completed:
            self.clear(report.display_id)
            return

        bar = self.bars.get(report.display_id)
        known_total = report.percent is not None
        if bar is None or (bar.total is not None) != known_total:
            self.clear(report.display_id)
            bar = self._open_bar(report, known_total)

        bar.n = report.percent if known_total else report.items_seen
        bar.set_description_str(report.activity, refresh=False)
        bar.set_postfix_str(f"{report.status} | {report.current_operation}", refresh=False)
        bar.refresh()

    def _open_bar(self, report: ProgressReport, known_total: bool) -> tqdm:
        bar = tqdm(
            total=100 if known_total else None,
            desc=report.activity,
            unit="%" if known_total else "it",
            position=report.display_id,
            leave=self.leave,
            file=self.file or sys.stderr,
            disable=self.disable,
        )
        self.bars[report.display_id] = bar
        return bar

    def clear(self, display_id: int):
        """Close and forget the bar for a slot"""
        bar = self.bars.pop(display_id, None)
        if bar is not None:
            bar.close()

    def close(self):
        for display_id in list(self.bars):
            self.clear(display_id)
