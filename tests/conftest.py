"""
Shared pytest fixtures.

Outbound website fetches never touch the network: every registry built here
routes through an httpx.MockTransport that serves a few canned hosts.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from direct_api.dispatcher import Dispatcher
from direct_api.server import create_app
from direct_api.sessions import SessionStore
from direct_api.tools import default_registry

PAGES = {
    "example.test": (200, "hello"),
    "missing.test": (404, "no such page"),
    "large.test": (200, "x" * 5000),
}


def fake_web(request: httpx.Request) -> httpx.Response:
    host = request.url.host
    if host == "slow.test":
        raise httpx.ReadTimeout("timed out", request=request)
    if host not in PAGES:
        raise httpx.ConnectError("Name or service not known", request=request)
    status_code, text = PAGES[host]
    return httpx.Response(status_code, text=text)


@pytest.fixture
def transport():
    return httpx.MockTransport(fake_web)


@pytest.fixture
def tools(transport):
    return default_registry(transport=transport)


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def dispatcher(store, tools):
    return Dispatcher(store, tools)


@pytest.fixture
def initialized_session(store):
    """Session id that has already completed the handshake."""
    store.register("abc")
    store.initialize("abc", {"name": "test-client", "version": "0.1.0"})
    return "abc"


@pytest.fixture
def client(store, tools):
    with TestClient(create_app(store=store, tools=tools)) as test_client:
        yield test_client


def rpc(method, params=None, request_id=1):
    """Build a request envelope the way clients send it."""
    return {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params or {}}
