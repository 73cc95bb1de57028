# tests/test_event_log.py

import datetime

import pytest

from auditor_tools.core.event_log import LogEntry, Severity, filter_entries


@pytest.mark.parametrize("label, expected", [
    ("info", Severity.INFO),
    ("WARNING", Severity.WARNING),
    ("warn", Severity.WARNING),
    ("Error", Severity.ERROR),
    (Severity.ERROR, Severity.ERROR),
    ("verbose", Severity.INFO),  # unknown labels are the least restrictive
    (None, Severity.INFO),
])
def test_parse_severity_labels(label, expected):
    assert Severity.parse(label) is expected


def test_ranks_order_error_before_info():
    assert Severity.ERROR.rank < Severity.WARNING.rank < Severity.INFO.rank


def test_threshold_admits_equal_or_more_severe_entries():
    assert Severity.WARNING.admits(Severity.ERROR)
    assert Severity.WARNING.admits(Severity.WARNING)
    assert not Severity.WARNING.admits(Severity.INFO)
    assert Severity.INFO.admits(Severity.INFO)
    assert not Severity.ERROR.admits(Severity.WARNING)


def test_filter_entries_keeps_order():
    entries = [LogEntry.create("INFO", "a"), LogEntry.create("ERROR", "b"),
               LogEntry.create("WARN", "c"), LogEntry.create("INFO", "d")]
    assert [e.message for e in filter_entries(entries, Severity.WARNING)] == ["b", "c"]
    assert [e.message for e in filter_entries(entries, Severity.INFO)] == ["a", "b", "c", "d"]


def test_log_entry_has_utc_timestamp_and_is_frozen():
    entry = LogEntry.create("warn", "disk almost full")
    assert entry.severity is Severity.WARNING
    assert entry.timestamp.tzinfo is not None
    assert entry.timestamp.utcoffset() == datetime.timedelta(0)
    assert len(entry.local_time()) == 8
    with pytest.raises(AttributeError):
        entry.message = "changed"
