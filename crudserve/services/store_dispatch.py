"""Store Dispatch — create and read flows for every registered resource store.

Invariants:
    - POST /<name> creates; POST to any sub-path is 400
    - GET /<name>/<id> reads; any other path shape is 404 with the expected pattern
    - Read failures of any kind (unknown id, StoreError, foreign exceptions from
      owner-supplied stores) are indistinguishable 404s
    - Create failures of any kind come back as StoreError "failed to add: ..." (500)
    - store.add() is only reached after decoding and validation succeed
    - Every other method is 405 with the fixed CRUD message

Design Decisions:
    - One endpoint closure per binding: the route carries its binding, no lookup per request
    - Sub-path captured as the item_path path param: works under any router prefix
    - Envelope mirrored into Item-* headers so clients can read metadata without the body
"""

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from crudserve.core.domain_types import HttpMethod, ItemId, format_timestamp
from crudserve.core.errors import (
    ErrorContext, InvalidPathError, MethodNotAllowedError,
    RouteNotFoundError, StoreError,
)
from crudserve.schemas.item import ItemInfo
from crudserve.services.bindings import StoreBinding
from crudserve.services.decode_request import decode_and_validate

logger = logging.getLogger(__name__)

ITEM_PATH_PARAM = "item_path"

CRUD_METHODS_MESSAGE = (
    "CRUD: Create with POST, Read with GET, Update with PUT, Delete with DELETE."
)


def make_store_endpoint(binding: StoreBinding):
    """Build the endpoint serving both /<name> and /<name>/{item_path}."""

    async def store_endpoint(request: Request) -> Response:
        logger.debug(f"HTTP {request.method} {request.url.path}")
        if request.method == HttpMethod.POST:
            return await create_item(binding, request)
        if request.method == HttpMethod.GET:
            return await read_item(binding, request)
        raise MethodNotAllowedError(
            CRUD_METHODS_MESSAGE, context=_context(binding, request),
        )

    store_endpoint.__name__ = f"store_{binding.name}"
    return store_endpoint


async def create_item(binding: StoreBinding, request: Request) -> JSONResponse:
    """POST /<name> {...} -> envelope + Item-* headers."""
    context = _context(binding, request)
    if ITEM_PATH_PARAM in request.path_params:
        raise InvalidPathError(f"Expecting POST {binding.path}", context=context)

    item = await decode_and_validate(
        request, binding.item_shape, binding.name, context,
    )

    try:
        info = await binding.store.add(item)
    except StoreError as e:
        raise StoreError(f"failed to add: {e.message}", context=context) from e
    except Exception as e:
        logger.error(
            f"Store {binding.name} add() raised {type(e).__name__}: {e}",
            extra={"store": binding.name},
        )
        raise StoreError(f"failed to add: {e}", context=context) from e

    logger.info(
        f"Created {binding.name} item {info.id} rev {info.rev}",
        extra={"store": binding.name},
    )
    return JSONResponse(
        content=info.model_dump(mode="json"), headers=create_headers(info),
    )


async def read_item(binding: StoreBinding, request: Request) -> JSONResponse:
    """GET /<name>/<id> -> item + Item-Timestamp / Item-Revision headers."""
    context = _context(binding, request)
    expecting = f"Expecting GET {binding.path}/<id>"
    item_id = request.path_params.get(ITEM_PATH_PARAM)
    if not item_id or "/" in item_id:
        raise RouteNotFoundError(expecting, context=context)

    try:
        item, info = await binding.store.get(ItemId(item_id))
    except StoreError as e:
        logger.info(
            f"Read {binding.path}/{item_id} failed: {e.message}",
            extra={"store": binding.name, "error_code": e.code},
        )
        raise RouteNotFoundError(expecting, context=context) from e
    except Exception as e:
        logger.warning(
            f"Read {binding.path}/{item_id} raised {type(e).__name__}: {e}",
            extra={"store": binding.name},
        )
        raise RouteNotFoundError(expecting, context=context) from e

    return JSONResponse(
        content=item.model_dump(mode="json"), headers=read_headers(info),
    )


def create_headers(info: ItemInfo) -> dict[str, str]:
    return {
        "Item-ID": str(info.id),
        "Item-User-ID": str(info.user),
        **read_headers(info),
    }


def read_headers(info: ItemInfo) -> dict[str, str]:
    return {
        "Item-Timestamp": format_timestamp(info.ts),
        "Item-Revision": str(info.rev),
    }


def _context(binding: StoreBinding, request: Request) -> ErrorContext:
    return ErrorContext(path=request.url.path, store=binding.name)
