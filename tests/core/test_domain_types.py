"""Domain Types — verifies id wrappers, method enum and header timestamps.

Tests:
    - Header timestamps use a numeric UTC offset
    - Naive datetimes are treated as UTC
    - parse_timestamp inverts format_timestamp
    - ALL_METHODS covers the CRUD verbs
"""

from datetime import datetime, timedelta, timezone

from crudserve.core.domain_types import (
    ALL_METHODS, INITIAL_REVISION, HttpMethod, ItemId,
    ensure_aware, format_timestamp, parse_timestamp,
)


def test_format_timestamp_utc():
    ts = datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
    assert format_timestamp(ts) == "2024-01-02 15:04:05+0000"


def test_format_timestamp_keeps_offset():
    tz = timezone(timedelta(hours=-7))
    ts = datetime(2024, 1, 2, 8, 4, 5, 999, tzinfo=tz)
    assert format_timestamp(ts) == "2024-01-02 08:04:05-0700"


def test_format_timestamp_naive_is_utc():
    assert format_timestamp(datetime(2024, 1, 2, 15, 4, 5)) == "2024-01-02 15:04:05+0000"


def test_ensure_aware_leaves_aware_values():
    tz = timezone(timedelta(hours=2))
    ts = datetime(2024, 1, 2, tzinfo=tz)
    assert ensure_aware(ts) is ts


def test_parse_timestamp_inverts_format():
    ts = datetime(2024, 6, 30, 23, 59, 1, tzinfo=timezone(timedelta(hours=5, minutes=30)))
    parsed = parse_timestamp(format_timestamp(ts))
    assert parsed == ts
    assert parsed.utcoffset() == timedelta(hours=5, minutes=30)


def test_crud_methods_are_routed():
    for method in ("GET", "POST", "PUT", "DELETE"):
        assert method in ALL_METHODS
    assert HttpMethod.POST == "POST"


def test_identity_and_revision_types():
    assert ItemId("abc") == "abc"
    assert INITIAL_REVISION == 1
