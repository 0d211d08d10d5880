"""Route-level tests for the rpc and stream transports."""

from unittest.mock import patch

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.config import get_settings
from src.dependencies import get_http_client
from src.mcp_transport.router import router as mcp_router
from src.registry.store import get_tenant_store


def _initialize_payload() -> dict:
    return {
        "jsonrpc": "2.0",
        "id": "req-1",
        "method": "initialize",
        "params": {
            "protocolVersion": "2024-11-05",
            "capabilities": {},
            "clientInfo": {"name": "test", "version": "1.0"},
        },
    }


def _tool_call_payload(name: str, arguments: dict | None = None) -> dict:
    return {
        "jsonrpc": "2.0",
        "id": "req-2",
        "method": "tools/call",
        "params": {
            "name": name,
            "arguments": arguments or {},
        },
    }


class FiniteStream:
    """Stands in for DiscoveryStream, emitting the two discovery events only."""

    instances: list["FiniteStream"] = []

    def __init__(self, server_info, tools_list, **kwargs):
        self.server_info = server_info
        self.tools_list = tools_list
        self.kwargs = kwargs
        FiniteStream.instances.append(self)

    async def events(self):
        from src.mcp_transport.stream import format_sse_event

        yield format_sse_event("server-info", self.server_info)
        yield format_sse_event("tools-list", self.tools_list)


@pytest.fixture
def client(tenant_store, settings):
    app = FastAPI()
    app.include_router(mcp_router)

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["electronics", "jewelery"])

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

    async def mock_store():
        return tenant_store

    async def mock_http_client():
        return http_client

    app.dependency_overrides[get_tenant_store] = mock_store
    app.dependency_overrides[get_http_client] = mock_http_client
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client


def test_rpc_initialize_succeeds(client):
    response = client.post("/api/mcp/merchants/1/rpc", json=_initialize_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "req-1"
    assert body["result"]["protocolVersion"] == "2024-11-05"
    assert "error" not in body


def test_rpc_tool_call(client):
    response = client.post("/api/mcp/merchants/1/rpc", json=_tool_call_payload("get_categories"))

    assert response.status_code == 200
    body = response.json()
    assert body["result"]["isError"] is False
    assert "jewelery" in body["result"]["content"][0]["text"]


def test_rpc_unknown_tool(client):
    response = client.post("/api/mcp/merchants/1/rpc", json=_tool_call_payload("do_magic"))

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "req-2"
    assert body["error"]["code"] == -32601
    assert "result" not in body


def test_rpc_malformed_json_is_parse_error(client):
    response = client.post(
        "/api/mcp/merchants/1/rpc",
        content=b'{"jsonrpc": "2.0", "method": ',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "jsonrpc": "2.0",
        "id": None,
        "error": {"code": -32700, "message": "Parse error"},
    }


def test_rpc_unknown_merchant(client):
    response = client.post("/api/mcp/merchants/999/rpc", json=_initialize_payload())

    assert response.status_code == 200
    assert response.json()["error"]["code"] == -32001


def test_stream_unknown_merchant_returns_404(client):
    response = client.get("/api/mcp/merchants/999/stream")

    assert response.status_code == 404
    body = response.json()
    assert body["error"]["code"] == -32001
    assert body["id"] is None


def test_stream_emits_discovery_events(client, settings):
    FiniteStream.instances.clear()

    with patch("src.mcp_transport.router.DiscoveryStream", FiniteStream):
        response = client.get("/api/mcp/merchants/1/stream")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache, no-transform"
    assert response.headers["x-accel-buffering"] == "no"

    events = [block for block in response.text.split("\n\n") if block]
    assert events[0].startswith("event: server-info\ndata: ")
    assert events[1].startswith("event: tools-list\ndata: ")
    assert '"get_categories"' in events[1]

    stream = FiniteStream.instances[0]
    assert stream.server_info["serverInfo"]["metadata"]["toolsCount"] == 4
    assert stream.kwargs["heartbeat_interval"] == settings.MCP_HEARTBEAT_SECONDS
