"""Bindings — immutable records tying a route to a store or an operation.

Invariants:
    - Created once by the Registry, never mutated (frozen dataclasses)
    - Store name and item shape captured at registration, not re-read per request
    - OperationBinding.process is the bound method found by signature inspection

Design Decisions:
    - Separate module: registry and both dispatchers import bindings, not each other
"""

from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel

from crudserve.core.repository_protocols import ItemStore
from crudserve.core.signatures import ProcessSignature


@dataclass(frozen=True)
class StoreBinding:
    """A resource store served at /<name> and /<name>/<id>."""
    name: str
    item_shape: type[BaseModel]
    store: ItemStore

    @property
    def path(self) -> str:
        return "/" + self.name


@dataclass(frozen=True)
class OperationBinding:
    """A custom operation served as POST <path>."""
    path: str
    operation: object
    signature: ProcessSignature

    @property
    def process(self) -> Callable[[BaseModel], Any]:
        return self.operation.process

    @property
    def request_shape(self) -> type[BaseModel]:
        return self.signature.request_shape

    @property
    def type_name(self) -> str:
        return type(self.operation).__name__
