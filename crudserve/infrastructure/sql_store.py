"""SQL Store — ItemStore persisted through SQLAlchemy async sessions.

Invariants:
    - Rows are written with the item dumped in JSON mode and read back through
      the store's item shape
    - Ids that are not UUIDs are reported as not found, never as backend errors
    - A row whose data no longer fits the item shape is a StoreError
    - SQLAlchemy failures arrive as DatabaseError via DatabaseSessionManager.session()

Design Decisions:
    - session_scope injected: production uses the lifespan singleton, tests pass a
      scope over an in-memory engine
    - One shared items table, filtered by store name (see models/stored_item.py)
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import AsyncContextManager, Callable

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crudserve.core.domain_types import INITIAL_REVISION, ItemId, UserId
from crudserve.core.errors import ItemNotFoundError, StoreError
from crudserve.infrastructure import database
from crudserve.models.stored_item import StoredItem
from crudserve.schemas.item import ItemInfo

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]


class SqlStore:
    """Store backed by the items table."""

    def __init__(
        self, name: str, item_shape: type[BaseModel],
        session_scope: SessionScope = database.session_scope,
        user_id: UserId = UserId("anonymous"),
    ):
        self._name = name
        self._item_shape = item_shape
        self._session_scope = session_scope
        self._user_id = user_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def item_shape(self) -> type[BaseModel]:
        return self._item_shape

    async def add(self, item: BaseModel) -> ItemInfo:
        row = StoredItem(
            id=uuid.uuid4(),
            store=self._name,
            user_id=self._user_id,
            rev=INITIAL_REVISION,
            data=item.model_dump(mode="json"),
            created_at=datetime.now(timezone.utc),
        )
        async with self._session_scope() as db:
            db.add(row)
            await db.commit()
        return self._info(row)

    async def get(self, item_id: ItemId) -> tuple[BaseModel, ItemInfo]:
        try:
            key = uuid.UUID(str(item_id))
        except ValueError:
            raise ItemNotFoundError(self._name, item_id) from None

        async with self._session_scope() as db:
            result = await db.execute(
                select(StoredItem).where(
                    StoredItem.id == key, StoredItem.store == self._name,
                ),
            )
            row = result.scalar_one_or_none()
        if row is None:
            raise ItemNotFoundError(self._name, item_id)

        try:
            item = self._item_shape.model_validate(row.data)
        except ValidationError as e:
            logger.error(
                f"Stored {self._name} item {item_id} does not decode: {e}",
                extra={"store": self._name},
            )
            raise StoreError(
                f"stored {self._name} item {item_id} does not match "
                f"{self._item_shape.__name__}",
            ) from e
        return item, self._info(row)

    def _info(self, row: StoredItem) -> ItemInfo:
        return ItemInfo(
            type=self._name,
            id=ItemId(str(row.id)),
            user=UserId(row.user_id),
            rev=row.rev,
            ts=row.created_at,
        )
