# auditor_tools/core/input_resolver.py

"""
Turns heterogeneous drag-and-drop and file-dialog inputs into one canonical path.

A drop can carry any mix of three payloads: a native OS path list, a browser-style
file list and a browser-style item list. Each payload is examined by a small pure
strategy function; the strategies run in a fixed priority order and the first one
that produces a path wins. Nothing is merged: a drop of several files yields the
first usable one only.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

RELATIVE_PATH_WARNING = ("Dropped item only exposes a relative path ({path}); "
                         "folders may not resolve correctly this way.")


# --- Raw Event Shapes ---

@dataclass(frozen=True)
class DroppedFile:
    """A file entry from a browser-style file list."""
    name: str = ""
    path: Optional[str] = None
    relative_path: Optional[str] = None


@dataclass(frozen=True)
class DroppedItem:
    """An entry from a browser-style item list. Only `kind == "file"` items carry files."""
    kind: str
    file: Optional[DroppedFile] = None


@dataclass(frozen=True)
class DropEvent:
    native_paths: Tuple[str, ...] = ()
    files: Tuple[DroppedFile, ...] = ()
    items: Tuple[DroppedItem, ...] = ()


@dataclass(frozen=True)
class Resolution:
    """The outcome of a successful drop resolution."""
    path: str
    strategy: str
    warning: Optional[str] = None
    attempts: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


class NoUsablePathError(Exception):
    """Raised when no strategy could extract a path from a drop event."""

    def __init__(self, attempts: Sequence[Tuple[str, str]]):
        self.attempts = tuple(attempts)
        detail = "; ".join(f"{name}: {outcome}" for name, outcome in self.attempts)
        super().__init__(f"No usable path in drop event ({detail})")


# --- Strategies ---
# Each one is a pure function: DropEvent -> Optional[str].

def from_native_paths(event: DropEvent) -> Optional[str]:
    for path in event.native_paths:
        if path:
            return path
    return None


def from_file_path(event: DropEvent) -> Optional[str]:
    for dropped in event.files:
        if dropped.path:
            return dropped.path
    return None


def from_file_relative_path(event: DropEvent) -> Optional[str]:
    for dropped in event.files:
        if dropped.relative_path:
            return dropped.relative_path
    return None


def from_item_list(event: DropEvent) -> Optional[str]:
    for item in event.items:
        if item.kind == "file" and item.file is not None and item.file.path:
            return item.file.path
    return None


# (name, strategy, payload-present check, warns-on-success)
DROP_STRATEGIES: List[Tuple[str, Callable[[DropEvent], Optional[str]], Callable[[DropEvent], bool], bool]] = [
    ("native_paths", from_native_paths, lambda e: bool(e.native_paths), False),
    ("file_path", from_file_path, lambda e: bool(e.files), False),
    ("file_relative_path", from_file_relative_path, lambda e: bool(e.files), True),
    ("item_path", from_item_list, lambda e: bool(e.items), False),
]


def resolve_drop(event: DropEvent) -> Resolution:
    """
    Runs the drop strategies in priority order and returns the first hit.

    Every strategy that is tried is recorded in the attempt list (and logged at
    DEBUG), so a failed resolution can be diagnosed from its exception.

    Raises:
        NoUsablePathError: if no strategy produced a path.
    """
    attempts = []
    for name, strategy, has_payload, warns in DROP_STRATEGIES:
        if not has_payload(event):
            attempts.append((name, "no input"))
            logger.debug(f"Drop strategy '{name}' skipped: no input to examine.")
            continue
        path = strategy(event)
        if path:
            attempts.append((name, "resolved"))
            logger.debug(f"Drop strategy '{name}' resolved '{path}'.")
            warning = RELATIVE_PATH_WARNING.format(path=path) if warns else None
            return Resolution(path=path, strategy=name, warning=warning, attempts=tuple(attempts))
        attempts.append((name, "no path"))
        logger.debug(f"Drop strategy '{name}' found input but no usable path.")
    raise NoUsablePathError(attempts)


def resolve_dialog(value) -> Optional[str]:
    """
    Normalizes a file-dialog return value. A string is used as-is, a non-empty
    list/tuple contributes its first element, and anything empty means the user
    cancelled (returns None).
    """
    if isinstance(value, str):
        return value or None
    if isinstance(value, (list, tuple)):
        for candidate in value:
            if candidate:
                return str(candidate)
        return None
    if value is None:
        return None
    return str(value) or None
