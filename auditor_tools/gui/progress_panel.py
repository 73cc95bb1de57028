# auditor_tools/gui/progress_panel.py

import math
from dataclasses import dataclass
from typing import Callable, Optional

BAR_WIDTH = 20


@dataclass(frozen=True)
class ProgressSnapshot:
    """Everything a progress display needs, computed from the current state only."""
    is_processing: bool = False
    current: int = 0
    total: int = 0
    category: str = ""
    percent: Optional[int] = None  # None means indeterminate
    counter_text: str = ""
    status_message: str = ""

    @property
    def indeterminate(self) -> bool:
        return self.percent is None


def compute_percent(current: int, total: int) -> Optional[int]:
    """Rounded percentage (half up), capped at 100. None when the total is unknown."""
    if total <= 0:
        return None
    return max(0, min(100, math.floor(current * 100 / total + 0.5)))


class ProgressView:
    """
    Pure render-on-read progress display. `update` only looks at its arguments,
    so calling it twice with the same values yields the same snapshot and text.
    An optional sink receives each snapshot (the Qt panel and the CLI bar use it).
    """

    def __init__(self, sink: Optional[Callable[[ProgressSnapshot], None]] = None):
        self.sink = sink
        self.snapshot = ProgressSnapshot()

    def update(self, current: int, total: int, category: str, is_processing: bool,
               status_message: str) -> ProgressSnapshot:
        if total > 0:
            counter_text = f"{current} / {total}"
        else:
            counter_text = "..."
        self.snapshot = ProgressSnapshot(
            is_processing=bool(is_processing),
            current=current,
            total=total,
            category=category or "",
            percent=compute_percent(current, total),
            counter_text=counter_text,
            status_message=status_message or "",
        )
        if self.sink is not None:
            self.sink(self.snapshot)
        return self.snapshot

    def render(self) -> str:
        """A plain-text rendering of the last snapshot."""
        snap = self.snapshot
        lines = []
        if snap.is_processing:
            if snap.indeterminate:
                bar = "~" * BAR_WIDTH
            else:
                filled = snap.percent * BAR_WIDTH // 100
                bar = "#" * filled + "-" * (BAR_WIDTH - filled)
            line = f"[{bar}] {snap.counter_text}"
            if snap.category:
                line += f" {snap.category}"
            lines.append(line)
        if snap.status_message:
            lines.append(snap.status_message)
        return "\n".join(lines)
