"""Domain Types — identifiers, revisions and the wire timestamp format.

Invariants:
    - ItemId and UserId wrap str — ids travel in URLs and headers as text
    - Revisions start at INITIAL_REVISION and only ever increase
    - Header timestamps always carry a numeric UTC offset (YYYY-MM-DD HH:MM:SS±ZZZZ)
    - Naive datetimes are UTC (SQLite drops tzinfo on the way back)

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare against request.method without conversion
"""

from datetime import datetime, timezone
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ItemId = NewType("ItemId", str)
UserId = NewType("UserId", str)


# ─── Value Types ─────────────────────────────────────────────────

Revision = NewType("Revision", int)

INITIAL_REVISION = Revision(1)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S%z"


# ─── Enums ───────────────────────────────────────────────────────

class HttpMethod(str, Enum):
    """Methods routed to dispatch endpoints. Dispatchers answer 405 for the rest."""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


ALL_METHODS: list[str] = [m.value for m in HttpMethod]


# ─── Timestamps ──────────────────────────────────────────────────

def ensure_aware(ts: datetime) -> datetime:
    """Attach UTC to naive datetimes, leave aware ones untouched."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def format_timestamp(ts: datetime) -> str:
    """Render ts for the Item-Timestamp header, e.g. 2024-01-02 15:04:05+0000."""
    return ensure_aware(ts).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT)
