"""Push-only discovery and liveness stream.

Per connection: ``server-info`` once, ``tools-list`` once, then a
``heartbeat`` every interval until the client goes away. The heartbeat
task belongs to the connection and is cancelled when the generator
closes, whichever way it closes.
"""

import asyncio
import json
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

import structlog


logger = structlog.get_logger("mcp.stream")

SERVER_INFO_EVENT = "server-info"
TOOLS_LIST_EVENT = "tools-list"
HEARTBEAT_EVENT = "heartbeat"


def format_sse_event(event: str, data: Any) -> str:
    """Frame one event in text/event-stream format."""
    return f"event: {event}\ndata: {json.dumps(data, separators=(',', ':'))}\n\n"


def heartbeat_payload() -> dict[str, str]:
    return {"timestamp": datetime.now(timezone.utc).isoformat()}


class DiscoveryStream:
    """One streaming connection.

    Attributes:
        server_info: Payload of the server-info event (the initialize result).
        tools_list: Payload of the tools-list event (the tools/list result).
        heartbeat_interval: Seconds between heartbeats.
        heartbeat_task: The running heartbeat task while the stream is live.
        closed: True once the stream has stopped emitting.
    """

    def __init__(
        self,
        server_info: dict[str, Any],
        tools_list: dict[str, Any],
        heartbeat_interval: float = 30.0,
        is_disconnected: Callable[[], Awaitable[bool]] | None = None,
        tenant_id: int | str | None = None,
    ) -> None:
        self.server_info = server_info
        self.tools_list = tools_list
        self.heartbeat_interval = heartbeat_interval
        self.is_disconnected = is_disconnected
        self.tenant_id = tenant_id
        self.heartbeat_task: asyncio.Task | None = None
        self.closed = False

    async def _heartbeat(self, queue: asyncio.Queue) -> None:
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            await queue.put(heartbeat_payload())

    async def events(self) -> AsyncIterator[str]:
        """Yield framed events until disconnect or cancellation."""
        queue: asyncio.Queue = asyncio.Queue()
        logger.info("stream_opened", tenant_id=self.tenant_id)
        try:
            yield format_sse_event(SERVER_INFO_EVENT, self.server_info)
            yield format_sse_event(TOOLS_LIST_EVENT, self.tools_list)

            self.heartbeat_task = asyncio.create_task(self._heartbeat(queue))
            while True:
                payload = await queue.get()
                if self.is_disconnected is not None and await self.is_disconnected():
                    break
                yield format_sse_event(HEARTBEAT_EVENT, payload)
        finally:
            await self.close()

    async def close(self) -> None:
        """Stop the heartbeat task. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        task = self.heartbeat_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("stream_closed", tenant_id=self.tenant_id)
