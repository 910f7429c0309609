"""Store Dispatch — create/read flows, path shapes, validation and method handling.

Tests cover:
    - POST /<store> returns the envelope and mirrors it into Item-* headers
    - GET /<store>/<id> round-trips the created item with timestamp/revision headers
    - Unknown ids and malformed read paths are 404 with the expected pattern
    - POST to a sub-path is 400; bad JSON and failed validation are 400, store untouched
    - Storage failures are 500 on create and 404 on read, whatever their type
    - Validation hooks may fail with their own exception classes
    - Every other method is 405 with the CRUD message
"""

import re
from unittest.mock import AsyncMock

import pytest

from crudserve.services.store_dispatch import CRUD_METHODS_MESSAGE

TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}[+-]\d{4}$")


async def _create(client, body=None):
    res = await client.post("/widgets", json=body or {"name": "bolt", "size": 3})
    assert res.status_code == 200
    return res


@pytest.mark.asyncio
async def test_create_returns_envelope(client):
    res = await _create(client)
    body = res.json()
    assert set(body) == {"type", "id", "user", "rev", "ts"}
    assert body["type"] == "widgets"
    assert body["user"] == "u-1"
    assert body["rev"] == 1
    assert res.headers["content-type"] == "application/json"


@pytest.mark.asyncio
async def test_create_mirrors_envelope_into_headers(client):
    res = await _create(client)
    body = res.json()
    assert res.headers["Item-ID"] == body["id"]
    assert res.headers["Item-User-ID"] == "u-1"
    assert res.headers["Item-Revision"] == "1"
    assert TIMESTAMP.match(res.headers["Item-Timestamp"])
    assert res.headers["Item-Timestamp"].endswith("+0000")


@pytest.mark.asyncio
async def test_read_round_trips_item(client):
    created = await _create(client, {"name": "nut", "size": 7, "tags": ["m4"]})
    item_id = created.json()["id"]

    res = await client.get(f"/widgets/{item_id}")
    assert res.status_code == 200
    assert res.json() == {"name": "nut", "size": 7, "tags": ["m4"]}
    assert res.headers["Item-Revision"] == "1"
    assert res.headers["Item-Timestamp"] == created.headers["Item-Timestamp"]
    assert "Item-ID" not in res.headers
    assert "Item-User-ID" not in res.headers


@pytest.mark.asyncio
async def test_read_unknown_id_is_404(client):
    res = await client.get("/widgets/does-not-exist")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Expecting GET /widgets/<id>"


@pytest.mark.parametrize("path", ["/widgets", "/widgets/", "/widgets/a/b"])
@pytest.mark.asyncio
async def test_malformed_read_path_is_404(client, path):
    res = await client.get(path)
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Expecting GET /widgets/<id>"


@pytest.mark.parametrize("path", ["/widgets/", "/widgets/abc"])
@pytest.mark.asyncio
async def test_create_on_sub_path_is_400(client, widget_store, path):
    res = await client.post(path, json={"name": "bolt"})
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Expecting POST /widgets"
    assert len(widget_store) == 0


@pytest.mark.parametrize("content", [b"", b"{not json", b"[]", b'{"size": 1}'])
@pytest.mark.asyncio
async def test_undecodable_body_is_400(client, widget_store, content):
    res = await client.post(
        "/widgets", content=content,
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "DECODE_ERROR"
    assert error["message"] == "Cannot parse body as JSON widgets"
    assert error["details"]
    assert len(widget_store) == 0


@pytest.mark.asyncio
async def test_declarative_constraint_is_decode_error(client):
    res = await client.post("/widgets", json={"name": "bolt", "size": -1})
    assert res.status_code == 400
    details = res.json()["error"]["details"]
    assert details[0]["field"] == "size"


@pytest.mark.asyncio
async def test_failed_validation_never_reaches_store(client, widget_store, monkeypatch):
    add = AsyncMock()
    monkeypatch.setattr(widget_store, "add", add)

    res = await client.post("/widgets", json={"name": "invalid"})

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "invalid widgets: name must not be 'invalid'"
    add.assert_not_awaited()


@pytest.mark.asyncio
async def test_storage_failure_on_create_is_500(client):
    res = await client.post("/broken", json={"label": "x"})
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "STORAGE_ERROR"
    assert error["message"] == "failed to add: backend unavailable"
    assert error["context"]["store"] == "broken"


@pytest.mark.asyncio
async def test_storage_failure_on_read_is_404(client):
    res = await client.get("/broken/123")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Expecting GET /broken/<id>"


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH"])
@pytest.mark.parametrize("path", ["/widgets", "/widgets/abc", "/broken", "/broken/abc"])
@pytest.mark.asyncio
async def test_other_methods_are_405(client, method, path):
    res = await client.request(method, path, json={"name": "bolt"})
    assert res.status_code == 405
    error = res.json()["error"]
    assert error["code"] == "METHOD_NOT_ALLOWED"
    assert error["message"] == CRUD_METHODS_MESSAGE


def test_crud_message_names_all_four_verbs():
    assert CRUD_METHODS_MESSAGE == (
        "CRUD: Create with POST, Read with GET, "
        "Update with PUT, Delete with DELETE."
    )


@pytest.mark.asyncio
async def test_each_create_gets_a_new_id(client):
    first = (await _create(client)).json()["id"]
    second = (await _create(client)).json()["id"]
    assert first != second


@pytest.mark.asyncio
async def test_foreign_exception_on_create_is_wrapped_500(client):
    res = await client.post("/leaky", json={"label": "ok"})
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "STORAGE_ERROR"
    assert error["message"] == "failed to add: disk full"
    assert error["context"]["store"] == "leaky"


@pytest.mark.asyncio
async def test_foreign_exception_on_read_is_404(client):
    res = await client.get("/leaky/abc")
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["message"] == "Expecting GET /leaky/<id>"


@pytest.mark.asyncio
async def test_custom_validation_exception_is_400(client):
    res = await client.post("/leaky", json={"label": "bad"})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "invalid leaky: label 'bad' is reserved"
