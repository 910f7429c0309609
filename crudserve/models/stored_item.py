"""StoredItem ORM — one row per item across every SQL-backed store.

Invariants:
    - id is a UUID primary key, unique across stores
    - (id, store) locates an item; a store never reads another store's rows
    - rev starts at 1 and only increases
    - data holds the item exactly as its shape dumps it in JSON mode

Design Decisions:
    - Single generic table with a JSON column: item shapes are owner-supplied and
      unknown here, so no per-shape tables (ADR: generic dispatch core)
    - created_at timezone-aware; SQLite returns it naive, domain_types.ensure_aware fixes it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from crudserve.db.base import Base


class StoredItem(Base):
    """StoredItem — persisted item data plus its envelope fields."""
    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    store: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)
    rev: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    data: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
