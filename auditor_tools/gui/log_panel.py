# auditor_tools/gui/log_panel.py

"""
Incremental rendering of the log stream.

IncrementalLogView decides, on every state change, whether the log display
needs a full re-render (threshold changed, log cleared) or only an append of the
entries that arrived since the last update. It never talks to a widget directly:
it drives a RenderTarget, so the same logic feeds the Qt table model, the rich
console of the CLI, and the in-memory target used by the tests.
"""

import logging
from typing import List, Optional, Protocol, Sequence

from auditor_tools.core.event_log import LogEntry, Severity, filter_entries

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "No logs yet"


class LogLine:
    """One rendered node. Nodes are compared by identity, never by value."""
    __slots__ = ("entry",)

    def __init__(self, entry: LogEntry):
        self.entry = entry

    @property
    def severity(self) -> Severity:
        return self.entry.severity

    @property
    def message(self) -> str:
        return self.entry.message

    @property
    def time_text(self) -> str:
        return self.entry.local_time()

    @property
    def text(self) -> str:
        return f"{self.time_text} [{self.severity.value}] {self.message}"

    def __repr__(self) -> str:
        return f"LogLine({self.severity.value}, {self.message!r})"


class RenderTarget(Protocol):
    def replace_contents(self, nodes: Sequence[LogLine]): ...

    def append_nodes(self, nodes: Sequence[LogLine]): ...

    def show_placeholder(self, text: str): ...

    def remove_placeholder(self) -> bool: ...

    def scroll_to_end(self): ...


class MemoryRenderTarget:
    """A headless RenderTarget that simply keeps the nodes in a list."""

    def __init__(self):
        self.nodes: List[LogLine] = []
        self.placeholder: Optional[str] = None
        self.scroll_requests = 0

    def replace_contents(self, nodes: Sequence[LogLine]):
        self.nodes = list(nodes)
        self.placeholder = None

    def append_nodes(self, nodes: Sequence[LogLine]):
        self.nodes.extend(nodes)

    def show_placeholder(self, text: str):
        self.placeholder = text

    def remove_placeholder(self) -> bool:
        had_placeholder = self.placeholder is not None
        self.placeholder = None
        return had_placeholder

    def scroll_to_end(self):
        self.scroll_requests += 1

    def messages(self) -> List[str]:
        return [node.message for node in self.nodes]


class IncrementalLogView:
    """
    Renders a growing log into a RenderTarget without redrawing what is already shown.

    `last_rendered_count` is the raw length of the log at the last update (the
    high-water mark), not the number of admitted entries.
    """

    def __init__(self, target: RenderTarget, placeholder_text: str = PLACEHOLDER_TEXT):
        self.target = target
        self.placeholder_text = placeholder_text
        self.last_rendered_count = 0
        self.last_threshold: Optional[Severity] = None
        self.last_epoch: Optional[int] = None

    def update(self, logs: Sequence[LogEntry], threshold, epoch: Optional[int] = None):
        threshold = Severity.parse(threshold)
        needs_full_render = (
            threshold != self.last_threshold
            or len(logs) < self.last_rendered_count
            or (epoch is not None and epoch != self.last_epoch)
        )
        self.last_threshold = threshold
        if epoch is not None:
            self.last_epoch = epoch

        if needs_full_render:
            self._full_render(logs, threshold)
        elif len(logs) > self.last_rendered_count:
            self._append(logs, threshold)

    def _full_render(self, logs: Sequence[LogEntry], threshold: Severity):
        self.last_rendered_count = 0
        nodes = [LogLine(entry) for entry in filter_entries(logs, threshold)]
        self.target.replace_contents(nodes)
        if nodes:
            self.target.scroll_to_end()
        else:
            self.target.show_placeholder(self.placeholder_text)
        self.last_rendered_count = len(logs)
        logger.debug(f"Full log render: {len(nodes)} of {len(logs)} entries shown at {threshold.value}.")

    def _append(self, logs: Sequence[LogEntry], threshold: Severity):
        new_entries = [logs[i] for i in range(self.last_rendered_count, len(logs))]
        nodes = [LogLine(entry) for entry in filter_entries(new_entries, threshold)]
        if nodes:
            self.target.remove_placeholder()
            self.target.append_nodes(nodes)
            self.target.scroll_to_end()
        self.last_rendered_count = len(logs)
