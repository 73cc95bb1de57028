# auditor_tools/core/event_log.py

import datetime
from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    """
    Severity tags carried by every log entry.

    The rank orders severities from most to least restrictive: a threshold
    admits every entry whose rank is less than or equal to its own.
    """
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def admits(self, other: "Severity") -> bool:
        """Returns True if an entry of severity `other` passes this threshold."""
        return other.rank <= self.rank

    @classmethod
    def parse(cls, label) -> "Severity":
        """
        Converts a free-form label (e.g. "warn", "Error", Severity.INFO) into a
        Severity. Unknown labels fall back to INFO, the least restrictive rank.
        """
        if isinstance(label, Severity):
            return label
        text = str(label or "").strip().upper()
        text = _ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            return cls.INFO


_RANKS = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}
_ALIASES = {"WARN": "WARNING", "ERR": "ERROR", "CRITICAL": "ERROR", "DEBUG": "INFO"}


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class LogEntry:
    """A single immutable, timestamped log line."""
    severity: Severity
    message: str
    timestamp: datetime.datetime = field(default_factory=_utc_now)

    @classmethod
    def create(cls, severity, message: str) -> "LogEntry":
        return cls(Severity.parse(severity), str(message))

    def local_time(self) -> str:
        """The entry's timestamp rendered as local wall-clock time (HH:MM:SS)."""
        return self.timestamp.astimezone().strftime("%H:%M:%S")


def filter_entries(entries, threshold: Severity) -> list:
    """Returns the entries admitted by `threshold`, in their original order."""
    return [entry for entry in entries if threshold.admits(entry.severity)]
