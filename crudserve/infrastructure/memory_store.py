"""Memory Store — dict-backed ItemStore for tests, demos and single-process use.

Invariants:
    - Items are deep-copied on add and on get: callers never share state with the store
    - Ids are UUID4 strings; every item starts at INITIAL_REVISION
    - Unknown ids raise ItemNotFoundError

Design Decisions:
    - No lock: add/get never await between reading and writing the dict, so the
      event loop cannot interleave two calls
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel

from crudserve.core.domain_types import INITIAL_REVISION, ItemId, UserId
from crudserve.core.errors import ItemNotFoundError, StoreError
from crudserve.schemas.item import ItemInfo


class MemoryStore:
    """In-process store keyed by item id."""

    def __init__(
        self, name: str, item_shape: type[BaseModel],
        user_id: UserId = UserId("anonymous"),
    ):
        self._name = name
        self._item_shape = item_shape
        self._user_id = user_id
        self._items: dict[ItemId, tuple[BaseModel, ItemInfo]] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def item_shape(self) -> type[BaseModel]:
        return self._item_shape

    def __len__(self) -> int:
        return len(self._items)

    async def add(self, item: BaseModel) -> ItemInfo:
        if not isinstance(item, self._item_shape):
            raise StoreError(
                f"{self._name} stores {self._item_shape.__name__}, "
                f"not {type(item).__name__}",
            )
        info = ItemInfo(
            type=self._name,
            id=ItemId(str(uuid.uuid4())),
            user=self._user_id,
            rev=INITIAL_REVISION,
            ts=datetime.now(timezone.utc),
        )
        self._items[info.id] = (item.model_copy(deep=True), info)
        return info

    async def get(self, item_id: ItemId) -> tuple[BaseModel, ItemInfo]:
        try:
            item, info = self._items[item_id]
        except KeyError:
            raise ItemNotFoundError(self._name, item_id) from None
        return item.model_copy(deep=True), info
