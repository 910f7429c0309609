"""Item Envelope — metadata returned by a store when an item is created or read.

Invariants:
    - id + rev identify one item version; rev starts at 1 and strictly increases
    - ts is timezone-aware (naive values are normalized to UTC on validation)
    - JSON keys follow the original envelope: type, id, user, rev, ts

Design Decisions:
    - Pydantic over dataclass: the client re-validates the same model from JSON
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from crudserve.core.domain_types import (
    INITIAL_REVISION, ItemId, UserId, ensure_aware,
)


class ItemInfo(BaseModel):
    """Envelope for one stored item version."""
    type: str = Field(description="Name of the store that owns the item")
    id: ItemId
    user: UserId
    rev: int = Field(INITIAL_REVISION, ge=INITIAL_REVISION)
    ts: datetime

    @field_validator("ts")
    @classmethod
    def normalize_ts(cls, v: datetime) -> datetime:
        return ensure_aware(v)
