"""Unit tests for the JSON-RPC dispatcher."""

import asyncio
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from src.mcp_transport.schemas import MCPErrorCodes, MCPJSONRPCResponse
from src.mcp_transport.service import dispatch


def mock_client(responder=None):
    sent: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        if responder is not None:
            return await responder(request)
        return httpx.Response(200, json=["electronics", "jewelery", "men's clothing", "women's clothing"])

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), sent


def rpc(method, params=None, id=1):
    message = {"jsonrpc": "2.0", "method": method, "id": id}
    if params is not None:
        message["params"] = params
    return message


class TestMCPJSONRPCResponse:
    def test_success_wire_format(self):
        wire = MCPJSONRPCResponse.success("a", {"x": 1}).to_wire()
        assert wire == {"jsonrpc": "2.0", "id": "a", "result": {"x": 1}}

    def test_error_wire_format(self):
        wire = MCPJSONRPCResponse.error_response(None, -32700, "Parse error").to_wire()
        assert wire == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}


class TestDispatch:
    """Tests for method routing and error mapping."""

    @pytest.mark.asyncio
    async def test_initialize(self, tenant_store, settings):
        client, _ = mock_client()

        response = await dispatch(rpc("initialize", {"protocolVersion": "2024-11-05"}, id="req-1"), "1", tenant_store, client, settings)

        assert response.id == "req-1"
        assert response.error is None
        result = response.result
        assert result["protocolVersion"] == "2024-11-05"
        assert result["capabilities"] == {"tools": {"listChanged": False}}
        assert result["serverInfo"]["name"] == "FashionHub MCP Server"
        assert result["serverInfo"]["metadata"] == {
            "merchantId": 1,
            "merchantSlug": "fashionhub",
            "toolsCount": 4,
        }

    @pytest.mark.asyncio
    async def test_tools_list(self, tenant_store, settings):
        client, _ = mock_client()

        response = await dispatch(rpc("tools/list"), 1, tenant_store, client, settings)

        tools = response.result["tools"]
        assert [t["name"] for t in tools] == ["get_products", "get_product_by_id", "get_categories", "create_order"]
        assert tools[1]["inputSchema"]["required"] == ["product_id"]
        assert tools[0]["inputSchema"]["properties"]["category"]["description"] == 'Filter by category (e.g., "jewelery")'

    @pytest.mark.asyncio
    async def test_tools_call_get_categories(self, tenant_store, settings):
        client, sent = mock_client()

        response = await dispatch(
            rpc("tools/call", {"name": "get_categories", "arguments": {}}, id=7),
            1, tenant_store, client, settings,
        )

        assert response.id == 7
        result = response.result
        assert result["isError"] is False
        assert result["content"][0]["type"] == "text"
        payload = json.loads(result["content"][0]["text"])
        assert payload["success"] is True
        assert payload["status"] == 200
        assert "jewelery" in payload["data"]
        assert sent[0].headers["X-API-Key"] == "abc123"

    @pytest.mark.asyncio
    async def test_tools_call_missing_argument_is_tool_error(self, tenant_store, settings):
        client, sent = mock_client()

        response = await dispatch(
            rpc("tools/call", {"name": "get_product_by_id", "arguments": {}}),
            1, tenant_store, client, settings,
        )

        assert response.error is None
        assert response.result["isError"] is True
        assert "product_id" in response.result["content"][0]["text"]
        assert sent == []

    @pytest.mark.asyncio
    async def test_unknown_tool(self, tenant_store, settings):
        client, sent = mock_client()

        response = await dispatch(
            rpc("tools/call", {"name": "do_magic", "arguments": {}}, id="x"),
            1, tenant_store, client, settings,
        )

        assert response.id == "x"
        assert response.error.code == MCPErrorCodes.TOOL_NOT_FOUND == -32601
        assert "do_magic" in response.error.message
        assert sent == []

    @pytest.mark.asyncio
    async def test_omitted_arguments_with_required_parameters(self, tenant_store, settings):
        client, sent = mock_client()

        response = await dispatch(rpc("tools/call", {"name": "create_order"}), 1, tenant_store, client, settings)

        assert response.error.code == MCPErrorCodes.INVALID_PARAMS
        assert "userId" in response.error.message
        assert sent == []

    @pytest.mark.asyncio
    async def test_omitted_arguments_without_required_parameters(self, tenant_store, settings):
        client, sent = mock_client()

        response = await dispatch(rpc("tools/call", {"name": "get_categories"}), 1, tenant_store, client, settings)

        assert response.result["isError"] is False
        assert len(sent) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [None, {"arguments": {}}, {"name": 5}])
    async def test_malformed_call_params(self, tenant_store, settings, params):
        client, _ = mock_client()
        message = rpc("tools/call", id=3)
        message["params"] = params

        response = await dispatch(message, 1, tenant_store, client, settings)

        assert response.id == 3
        assert response.error.code == MCPErrorCodes.INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_unknown_method(self, tenant_store, settings):
        client, _ = mock_client()

        response = await dispatch(rpc("resources/list"), 1, tenant_store, client, settings)

        assert response.error.code == MCPErrorCodes.METHOD_NOT_FOUND
        assert response.error.message == "Method not found: resources/list"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["ping", "notifications/initialized"])
    async def test_acknowledged_methods(self, tenant_store, settings, method):
        client, _ = mock_client()

        response = await dispatch(rpc(method, id=9), 1, tenant_store, client, settings)

        assert response.to_wire() == {"jsonrpc": "2.0", "id": 9, "result": {}}
        assert tenant_store.get_calls == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message,expected_id", [
        ([1, 2], None),
        ("tools/list", None),
        ({"jsonrpc": "2.0", "id": 4}, 4),
        ({"jsonrpc": "2.0", "id": 5, "method": 12}, 5),
    ])
    async def test_invalid_request(self, tenant_store, settings, message, expected_id):
        client, _ = mock_client()

        response = await dispatch(message, 1, tenant_store, client, settings)

        assert response.id == expected_id
        assert response.error.code == MCPErrorCodes.INVALID_REQUEST

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_id", [1.5, -3, "abc", 0])
    async def test_any_json_id_is_echoed(self, tenant_store, settings, request_id):
        client, _ = mock_client()

        response = await dispatch(rpc("tools/list", id=request_id), 1, tenant_store, client, settings)

        assert response.error is None
        assert response.to_wire()["id"] == request_id
        assert type(response.to_wire()["id"]) is type(request_id)

    @pytest.mark.asyncio
    async def test_unknown_tenant(self, tenant_store, settings):
        client, _ = mock_client()

        response = await dispatch(rpc("initialize", id=2), "999", tenant_store, client, settings)

        assert response.id == 2
        assert response.error.code == MCPErrorCodes.TENANT_NOT_FOUND
        assert response.error.message == "Merchant '999' not found"

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_internal_error(self, settings):
        store = AsyncMock()
        store.get_tenant.side_effect = RuntimeError("database went away")
        client, _ = mock_client()

        response = await dispatch(rpc("tools/list", id="r"), 1, store, client, settings)

        assert response.id == "r"
        assert response.error.code == MCPErrorCodes.INTERNAL_ERROR
        assert "database went away" in response.error.message

    @pytest.mark.asyncio
    async def test_concurrent_calls_keep_their_ids(self, tenant_store, settings):
        async def responder(request):
            # the first request finishes last
            if request.url.path.endswith("/42"):
                await asyncio.sleep(0.05)
            return httpx.Response(200, json={"path": request.url.path})

        client, _ = mock_client(responder)

        slow, fast = await asyncio.gather(
            dispatch(
                rpc("tools/call", {"name": "get_product_by_id", "arguments": {"product_id": "42"}}, id=1),
                1, tenant_store, client, settings,
            ),
            dispatch(
                rpc("tools/call", {"name": "get_product_by_id", "arguments": {"product_id": "7"}}, id=2),
                1, tenant_store, client, settings,
            ),
        )

        assert slow.id == 1
        assert json.loads(slow.result["content"][0]["text"])["data"] == {"path": "/products/42"}
        assert fast.id == 2
        assert json.loads(fast.result["content"][0]["text"])["data"] == {"path": "/products/7"}


class TestScenarios:
    @pytest.mark.asyncio
    async def test_single_public_get_tool(self, snapshot_factory, store_factory, settings):
        store = store_factory([snapshot_factory(apis=[{
            "id": 1,
            "method": "GET",
            "url": "https://shop.test/products/categories",
            "tool_name": "get_categories",
        }])])
        client, sent = mock_client()

        response = await dispatch(
            rpc("tools/call", {"name": "get_categories", "arguments": {}}),
            1, store, client, settings,
        )

        assert list(response.result) == ["content", "isError"]
        content = response.result["content"]
        assert len(content) == 1 and content[0]["type"] == "text"
        assert json.loads(content[0]["text"])["success"] is True
        assert "authorization" not in sent[0].headers

    @pytest.mark.asyncio
    async def test_tools_list_is_byte_identical_across_calls(self, tenant_store, settings):
        client, _ = mock_client()

        first = await dispatch(rpc("tools/list"), 1, tenant_store, client, settings)
        second = await dispatch(rpc("tools/list"), 1, tenant_store, client, settings)

        assert json.dumps(first.to_wire()) == json.dumps(second.to_wire())
        names = [t["name"] for t in first.result["tools"]]
        assert len(names) == len(set(names)) == 4
