"""
Dispatcher state machine and per-method contracts.
"""

import pytest

from conftest import rpc
from direct_api.errors import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    NotInitialized,
    SessionNotFound,
)


async def test_unknown_session(dispatcher):
    with pytest.raises(SessionNotFound):
        await dispatcher.dispatch("nope", rpc("ping"))


class TestInitialize:
    async def test_returns_server_identity(self, dispatcher, store):
        store.register("abc")

        response = await dispatcher.dispatch("abc", rpc("initialize", {
            "client": {"name": "direct-mcp-client", "version": "1.0.0"},
            "capabilities": {},
        }, request_id=7))

        assert response == {
            "jsonrpc": "2.0",
            "id": 7,
            "result": {
                "server": {"name": "direct-api-server", "version": "1.0.0"},
                "capabilities": {},
            },
        }
        session = store.get("abc")
        assert session.initialized is True
        assert session.client_info == {"name": "direct-mcp-client", "version": "1.0.0"}

    async def test_is_idempotent_and_overwrites_client_info(self, dispatcher, store):
        store.register("abc")

        await dispatcher.dispatch("abc", rpc("initialize", {"client": {"name": "one"}}))
        response = await dispatcher.dispatch("abc", rpc("initialize", {"client": {"name": "two"}}))

        assert "result" in response
        assert store.get("abc").initialized is True
        assert store.get("abc").client_info == {"name": "two"}

    async def test_without_params(self, dispatcher, store):
        store.register("abc")

        response = await dispatcher.dispatch("abc", {"jsonrpc": "2.0", "id": "init", "method": "initialize"})

        assert response["id"] == "init"
        assert store.get("abc").client_info is None


class TestBeforeInitialize:
    @pytest.mark.parametrize("method", ["listTools", "callTool", "ping", "doesNotExist"])
    async def test_every_other_method_is_refused(self, dispatcher, store, method):
        store.register("abc")

        with pytest.raises(NotInitialized):
            await dispatcher.dispatch("abc", rpc(method))

        assert store.get("abc").initialized is False


class TestAfterInitialize:
    async def test_ping(self, dispatcher, initialized_session):
        response = await dispatcher.dispatch(initialized_session, rpc("ping", request_id="p-1"))
        assert response == {"jsonrpc": "2.0", "id": "p-1", "result": None}

    async def test_list_tools(self, dispatcher, initialized_session):
        response = await dispatcher.dispatch(initialized_session, rpc("listTools"))

        tools = response["result"]["tools"]
        assert [tool["name"] for tool in tools] == ["fetchWebsite"]

    async def test_list_tools_unaffected_by_tool_calls(self, dispatcher, initialized_session):
        before = await dispatcher.dispatch(initialized_session, rpc("listTools"))
        await dispatcher.dispatch(initialized_session, rpc("callTool", {
            "name": "fetchWebsite", "arguments": {"url": "https://example.test"},
        }))
        after = await dispatcher.dispatch(initialized_session, rpc("listTools"))

        assert before["result"] == after["result"]

    async def test_unknown_method(self, dispatcher, initialized_session):
        response = await dispatcher.dispatch(initialized_session, rpc("tools/list", request_id=9))

        assert response == {
            "jsonrpc": "2.0",
            "id": 9,
            "error": {"code": METHOD_NOT_FOUND, "message": "Method not supported"},
        }

    async def test_malformed_envelope(self, dispatcher, initialized_session):
        response = await dispatcher.dispatch(initialized_session, {"id": 3, "method": 42})

        assert response["id"] == 3
        assert response["error"]["code"] == INVALID_REQUEST


class TestCallTool:
    async def test_fetch_website(self, dispatcher, initialized_session):
        response = await dispatcher.dispatch(initialized_session, rpc("callTool", {
            "name": "fetchWebsite", "arguments": {"url": "https://example.test"},
        }, request_id=3))

        assert response["id"] == 3
        assert response["result"]["content"][0]["text"] == "Content from https://example.test:\n\nhello"

    @pytest.mark.parametrize("arguments", [{}, {"url": ""}, None])
    async def test_missing_url(self, dispatcher, initialized_session, arguments):
        response = await dispatcher.dispatch(initialized_session, rpc("callTool", {
            "name": "fetchWebsite", "arguments": arguments,
        }))

        assert response["error"] == {
            "code": INVALID_PARAMS,
            "message": "Invalid params: url is required",
        }

    @pytest.mark.parametrize("url", ["not a url", "ftp://example.test/file", "example.test"])
    async def test_malformed_url_is_a_tool_error(self, dispatcher, initialized_session, url):
        response = await dispatcher.dispatch(initialized_session, rpc("callTool", {
            "name": "fetchWebsite", "arguments": {"url": url},
        }))

        assert "error" not in response
        assert response["result"]["isError"] is True
        assert response["result"]["content"][0]["text"] == (
            "Error fetching website: url must be an absolute http(s) URL"
        )

    async def test_unreachable_url_is_a_tool_error(self, dispatcher, initialized_session):
        response = await dispatcher.dispatch(initialized_session, rpc("callTool", {
            "name": "fetchWebsite", "arguments": {"url": "https://unreachable.test"},
        }))

        assert "error" not in response
        assert response["result"]["isError"] is True
        assert "Name or service not known" in response["result"]["content"][0]["text"]

    @pytest.mark.parametrize("name", ["otherTool", None, ["fetchWebsite"]])
    async def test_unknown_tool(self, dispatcher, initialized_session, name):
        response = await dispatcher.dispatch(initialized_session, rpc("callTool", {
            "name": name, "arguments": {"url": "https://example.test"},
        }))

        assert response["error"]["code"] == METHOD_NOT_FOUND
