"""Boundary Protocols — contracts between the dispatch core and its collaborators.

Invariants:
    - The core never imports a concrete store or operation
    - Stores signal failure by raising StoreError (ItemNotFoundError for unknown ids)
    - Operations signal failure through the second element of their result tuple

Design Decisions:
    - Protocol over ABC: structural subtyping, owners never inherit from the core
    - Async store methods: implementations do IO; the core awaits them and nothing else
    - Operations may be sync or async: sync ones are moved to the thread pool by the dispatcher
"""

from typing import Any, Protocol

from pydantic import BaseModel

from crudserve.core.domain_types import ItemId
from crudserve.schemas.item import ItemInfo


class ItemStore(Protocol):
    """Contract for a resource store — served at /<name> and /<name>/<id>."""

    @property
    def name(self) -> str: ...

    @property
    def item_shape(self) -> type[BaseModel]: ...

    async def add(self, item: BaseModel) -> ItemInfo: ...

    async def get(self, item_id: ItemId) -> tuple[BaseModel, ItemInfo]: ...


class Operation(Protocol):
    """Contract for a custom operation — served as a single POST endpoint.

    The request annotation must be a pydantic model class and the return
    annotation a two-element tuple: tuple[Response, Exception | None].
    """

    def process(self, request: Any) -> tuple[Any, Exception | None]: ...


class AsyncOperation(Protocol):
    """Async flavour of Operation — awaited on the event loop."""

    async def process(self, request: Any) -> tuple[Any, Exception | None]: ...
