"""CrudServe Client — async httpx wrapper for the create/read/operation endpoints.

Invariants:
    - Bodies are sent as the model's own JSON dump (model_dump_json)
    - Every non-2xx response raises RemoteError carrying status, code and message
    - Read metadata comes from Item-Revision / Item-Timestamp headers, not the body
    - Update/Delete are not offered: the server does not implement them

Design Decisions:
    - httpx.AsyncClient with an injectable transport: tests drive an app in-process
      through ASGITransport, production talks to a real server
    - Usable as an async context manager so connections are always released
"""

import logging
from datetime import datetime
from typing import Any, NamedTuple, TypeVar

import httpx
from pydantic import BaseModel

from crudserve.core.domain_types import ItemId, parse_timestamp
from crudserve.core.errors import ErrorContext, RemoteError
from crudserve.schemas.item import ItemInfo

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_JSON_HEADERS = {"Content-Type": "application/json"}


class ItemRead(NamedTuple):
    """An item read back from a store, with its header metadata."""
    item: BaseModel
    rev: int
    ts: datetime


class CrudClient:
    """Client for one CrudServe server."""

    def __init__(
        self, base_url: str, transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self._server = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self._server, transport=transport, timeout=timeout,
        )

    @property
    def server(self) -> str:
        return self._server

    async def __aenter__(self) -> "CrudClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def add(self, store: str, item: BaseModel) -> ItemInfo:
        """POST /<store> — create an item, return its envelope."""
        res = await self._http.post(
            f"/{store}", content=item.model_dump_json(), headers=_JSON_HEADERS,
        )
        _raise_for_error(res)
        return ItemInfo.model_validate(res.json())

    async def get(self, store: str, item_id: ItemId, shape: type[M]) -> ItemRead:
        """GET /<store>/<id> — read an item back into shape."""
        res = await self._http.get(f"/{store}/{item_id}")
        _raise_for_error(res)
        return ItemRead(
            item=shape.model_validate(res.json()),
            rev=int(res.headers["Item-Revision"]),
            ts=parse_timestamp(res.headers["Item-Timestamp"]),
        )

    async def call(
        self, path: str, request: BaseModel,
        response_shape: type[M] | None = None,
    ) -> M | Any:
        """POST <path> — invoke an operation; decode into response_shape if given."""
        res = await self._http.post(
            path, content=request.model_dump_json(), headers=_JSON_HEADERS,
        )
        _raise_for_error(res)
        data = res.json()
        if response_shape is None:
            return data
        return response_shape.model_validate(data)


def _raise_for_error(res: httpx.Response) -> None:
    """Turn an error envelope (or any non-2xx answer) into RemoteError."""
    if res.is_success:
        return
    error: dict = {}
    try:
        body = res.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
    message = error.get("message") or res.text or res.reason_phrase
    logger.debug(f"HTTP {res.request.method} {res.request.url.path} -> {res.status_code}")
    raise RemoteError(
        message,
        error.get("code", "HTTP_ERROR"),
        res.status_code,
        context=ErrorContext(path=res.request.url.path),
    )
