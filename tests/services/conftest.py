"""Service test fixtures — registry, app and ASGI test client.

Invariants:
    - Every test gets a fresh registry and app (bind() freezes a registry)
    - Stores are in-memory unless a test needs SQL behaviour

Design Decisions:
    - httpx AsyncClient over ASGITransport: exercises routing, dispatch and error
      handlers in-process without a server
    - Sample shapes live in sample_targets.py so tests can import them directly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from crudserve.core.domain_types import UserId
from crudserve.infrastructure.memory_store import MemoryStore
from crudserve.main import create_app
from crudserve.services.registry import Registry
from tests.services.sample_targets import (
    AsyncUpper, CrateLabel, Echo, FailingStore, LeakyStore, NotATuple,
    ScalarAnswer, StringFailure, Widget, WrongArity,
)


@pytest.fixture
def widget_store():
    return MemoryStore("widgets", Widget, user_id=UserId("u-1"))


@pytest.fixture
def echo():
    return Echo()


@pytest.fixture
def crate_label():
    return CrateLabel()


@pytest.fixture
def registry(widget_store, echo, crate_label):
    return (
        Registry()
        .register_store(widget_store)
        .register_store(FailingStore())
        .register_store(LeakyStore())
        .register_operation("/echo", echo)
        .register_operation("/ops/upper", AsyncUpper())
        .register_operation("/ops/wrong-arity", WrongArity())
        .register_operation("/ops/not-a-tuple", NotATuple())
        .register_operation("/ops/string-failure", StringFailure())
        .register_operation("/ops/length", ScalarAnswer())
        .register_operation("/ops/crate-label", crate_label)
    )


@pytest.fixture
def app(registry):
    return create_app(registry)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
