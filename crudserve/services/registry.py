"""Registry — builder-style table of stores and operations, bound to a router once.

Invariants:
    - Append-only: bindings keep registration order and are never removed
    - Malformed stores/operations raise RegistrationError at registration, not request time
    - Store names and operation paths are literal: "{" and "}" are refused
    - Duplicate route paths are rejected at bind(), before any route is added
    - bind() freezes the registry: later register_*() or bind() calls raise RegistrationError
    - Every route accepts every method; dispatchers answer 405 themselves

Design Decisions:
    - Explicit registration calls, no auto-discovery (ADR: ExMA no convention-over-config)
    - register_*() return self so startup code reads as one chain
    - All methods routed to the dispatchers: the 405 message stays ours, not the framework's
"""

import logging

from fastapi import APIRouter

from crudserve.core.domain_types import ALL_METHODS
from crudserve.core.errors import ErrorContext, RegistrationError
from crudserve.core.repository_protocols import ItemStore
from crudserve.core.signatures import inspect_process, is_model_class
from crudserve.services.bindings import OperationBinding, StoreBinding
from crudserve.services.operation_dispatch import make_operation_endpoint
from crudserve.services.store_dispatch import ITEM_PATH_PARAM, make_store_endpoint

logger = logging.getLogger(__name__)


class Registry:
    """Stores and operations to expose over HTTP. Built at startup, frozen by bind()."""

    def __init__(self):
        self._stores: list[StoreBinding] = []
        self._operations: list[OperationBinding] = []
        self._frozen = False

    @property
    def stores(self) -> tuple[StoreBinding, ...]:
        return tuple(self._stores)

    @property
    def operations(self) -> tuple[OperationBinding, ...]:
        return tuple(self._operations)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register_store(self, store: ItemStore) -> "Registry":
        """Append a store binding for /<store.name>."""
        self._check_open()
        name = store.name
        if not isinstance(name, str) or not name or "/" in name:
            raise RegistrationError(
                f"{type(store).__name__} has invalid store name {name!r}",
            )
        if _has_template_chars(name):
            raise RegistrationError(
                f"store name {name!r} must not contain path template braces",
                context=ErrorContext(store=name),
            )
        shape = store.item_shape
        if not is_model_class(shape):
            raise RegistrationError(
                f"store {name} item shape {shape!r} is not a pydantic model class",
                context=ErrorContext(store=name),
            )
        self._stores.append(
            StoreBinding(name=name, item_shape=shape, store=store),
        )
        return self

    def register_operation(self, path: str, operation: object) -> "Registry":
        """Append an operation binding for POST <path>. Fails fast on bad signatures."""
        self._check_open()
        if not isinstance(path, str) or not path.startswith("/"):
            raise RegistrationError(
                f"operation path {path!r} must start with '/'",
                context=ErrorContext(operation=str(path)),
            )
        if _has_template_chars(path):
            raise RegistrationError(
                f"operation path {path!r} must not contain path template braces",
                context=ErrorContext(operation=path),
            )
        signature = inspect_process(operation)
        self._operations.append(
            OperationBinding(path=path, operation=operation, signature=signature),
        )
        return self

    def bind(self, router: APIRouter) -> None:
        """Add every binding's routes to router and freeze the registry."""
        self._check_open()
        self._check_unique_paths()

        for binding in self._stores:
            endpoint = make_store_endpoint(binding)
            router.add_api_route(
                binding.path, endpoint, methods=ALL_METHODS,
                response_model=None, name=f"store:{binding.name}",
                tags=["stores"],
            )
            router.add_api_route(
                f"{binding.path}/{{{ITEM_PATH_PARAM}:path}}", endpoint,
                methods=ALL_METHODS, response_model=None,
                name=f"store:{binding.name}:item", tags=["stores"],
            )
            logger.info(
                f"Bound store {binding.path} ({binding.item_shape.__name__})",
                extra={"store": binding.name},
            )

        for binding in self._operations:
            router.add_api_route(
                binding.path, make_operation_endpoint(binding),
                methods=ALL_METHODS, response_model=None,
                name=f"operation:{binding.path}", tags=["operations"],
            )
            logger.info(
                f"Bound operation {binding.path} "
                f"({binding.type_name}.process({binding.request_shape.__name__}))",
                extra={"operation": binding.path},
            )

        self._frozen = True

    def _check_open(self) -> None:
        if self._frozen:
            raise RegistrationError("registry is already bound to a router")

    def _check_unique_paths(self) -> None:
        """Reject stores sharing a name and operations shadowing any route."""
        store_paths: set[str] = set()
        for binding in self._stores:
            if binding.path in store_paths:
                raise RegistrationError(
                    f"duplicate store name {binding.name}",
                    context=ErrorContext(store=binding.name),
                )
            store_paths.add(binding.path)

        operation_paths: set[str] = set()
        for binding in self._operations:
            if binding.path in operation_paths:
                raise RegistrationError(
                    f"duplicate operation path {binding.path}",
                    context=ErrorContext(operation=binding.path),
                )
            operation_paths.add(binding.path)
            for store_path in store_paths:
                if binding.path == store_path or binding.path.startswith(store_path + "/"):
                    raise RegistrationError(
                        f"operation path {binding.path} collides with store {store_path}",
                        context=ErrorContext(operation=binding.path),
                    )


def _has_template_chars(segment: str) -> bool:
    """Starlette would read {...} as a path parameter."""
    return "{" in segment or "}" in segment
