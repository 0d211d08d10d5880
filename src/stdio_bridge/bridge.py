"""Forward newline-delimited JSON-RPC from stdio to a merchant's rpc endpoint.

Requests are forwarded concurrently and replies are written as soon as
they arrive, so reply order follows completion, not submission. Clients
must correlate by ``id``. Each reply is one line, written under a lock.
"""

import asyncio
import json
import threading
from collections.abc import AsyncIterator
from typing import Any, TextIO

import httpx
import structlog

from .framing import FramingError, MessageFramer


logger = structlog.get_logger("stdio_bridge")

PARSE_ERROR = -32700
INTERNAL_ERROR = -32603
DEFAULT_FORWARD_TIMEOUT_SECONDS = 120.0


def rpc_endpoint(base_url: str, merchant_id: str) -> str:
    return f"{base_url.rstrip('/')}/api/mcp/merchants/{merchant_id}/rpc"


def error_message(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "error": {"code": code, "message": message},
        "id": request_id,
    }


def _request_id(message: Any) -> Any:
    if isinstance(message, dict):
        return message.get("id")
    return None


def _is_jsonrpc_response(body: Any) -> bool:
    return (
        isinstance(body, dict)
        and body.get("jsonrpc") == "2.0"
        and ("result" in body or "error" in body)
    )


async def read_lines(stream: TextIO) -> AsyncIterator[str]:
    """Yield lines from a blocking text stream without blocking the loop.

    The reader runs on a daemon thread, so a pending read never keeps the
    process alive after the bridge is cancelled.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def reader() -> None:
        try:
            for line in iter(stream.readline, ""):
                loop.call_soon_threadsafe(queue.put_nowait, line)
            loop.call_soon_threadsafe(queue.put_nowait, None)
        except RuntimeError:
            # event loop already closed after shutdown
            return

    threading.Thread(target=reader, name="stdio-bridge-reader", daemon=True).start()

    while True:
        line = await queue.get()
        if line is None:
            return
        yield line


class StdioBridge:
    """Adapter between a line stream and the HTTP JSON-RPC endpoint.

    Attributes:
        client: HTTP client used for forwarding.
        rpc_url: Merchant rpc endpoint.
        output: Stream receiving one JSON line per reply.
        timeout: Per-request forwarding timeout.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        rpc_url: str,
        output: TextIO,
        timeout: float = DEFAULT_FORWARD_TIMEOUT_SECONDS,
    ) -> None:
        self.client = client
        self.rpc_url = rpc_url
        self.output = output
        self.timeout = timeout
        self.framer = MessageFramer()
        self._write_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()

    async def write(self, message: dict[str, Any]) -> None:
        line = json.dumps(message, separators=(",", ":"), ensure_ascii=False)
        async with self._write_lock:
            self.output.write(line + "\n")
            self.output.flush()

    async def forward(self, message: Any) -> dict[str, Any]:
        """POST one message and return the JSON-RPC reply.

        Network failures and replies that are not JSON-RPC shaped become an
        internal error carrying the original id.
        """
        request_id = _request_id(message)
        try:
            response = await self.client.post(self.rpc_url, json=message, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.warning("forward_failed", id=request_id, error=str(e))
            return error_message(request_id, INTERNAL_ERROR, f"Gateway request failed: {e}")

        try:
            body = response.json()
        except ValueError:
            body = None

        if not _is_jsonrpc_response(body):
            logger.warning("invalid_gateway_reply", id=request_id, status=response.status_code)
            return error_message(
                request_id,
                INTERNAL_ERROR,
                f"Invalid JSON-RPC reply from gateway (HTTP {response.status_code})",
            )
        return body

    async def handle_message(self, message: Any) -> None:
        try:
            reply = await self.forward(message)
        except Exception as e:
            logger.error("forward_error", error=str(e), exc_info=True)
            reply = error_message(_request_id(message), INTERNAL_ERROR, str(e))
        await self.write(reply)

    async def process_line(self, line: str) -> None:
        """Frame one input line; start forwarding when a message completes."""
        try:
            message = self.framer.feed(line)
        except FramingError as e:
            await self.write(error_message(None, PARSE_ERROR, str(e)))
            return

        if message is None:
            return

        task = asyncio.create_task(self.handle_message(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for every in-flight request to be answered."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def run(self, input_stream: TextIO) -> None:
        """Serve until EOF on the input stream, then finish in-flight requests."""
        try:
            async for line in read_lines(input_stream):
                await self.process_line(line)
            await self.drain()
        finally:
            for task in list(self._tasks):
                task.cancel()
