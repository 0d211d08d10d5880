"""Command line entry point: ``python -m src.stdio_bridge <merchant_id> [base_url]``."""

import argparse
import asyncio
import os
import signal
import sys

import httpx
import structlog

from src.logging_config import configure_logging

from .bridge import DEFAULT_FORWARD_TIMEOUT_SECONDS, StdioBridge, rpc_endpoint


DEFAULT_BASE_URL = "http://localhost:8000"

logger = structlog.get_logger("stdio_bridge")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="merchant-mcp-bridge",
        description="Bridge a merchant MCP server to stdio for IDE clients.",
    )
    parser.add_argument("merchant_id", nargs="?", default=os.environ.get("MERCHANT_ID"))
    parser.add_argument(
        "base_url",
        nargs="?",
        default=os.environ.get("API_BASE_URL") or os.environ.get("BASE_URL") or DEFAULT_BASE_URL,
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_FORWARD_TIMEOUT_SECONDS,
        help="Seconds to wait for each gateway reply",
    )
    return parser.parse_args(argv)


async def run_bridge(merchant_id: str, base_url: str, timeout: float) -> None:
    loop = asyncio.get_running_loop()
    current = asyncio.current_task()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, current.cancel)
        except (NotImplementedError, RuntimeError):
            # add_signal_handler is unavailable on Windows event loops
            pass

    url = rpc_endpoint(base_url, merchant_id)
    logger.info("bridge_started", merchant_id=merchant_id, rpc_url=url)
    async with httpx.AsyncClient() as client:
        bridge = StdioBridge(client, url, sys.stdout, timeout=timeout)
        await bridge.run(sys.stdin)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not args.merchant_id:
        print("Error: MERCHANT_ID required", file=sys.stderr)
        return 1

    # stdout carries protocol lines only
    configure_logging(
        level=os.environ.get("BRIDGE_LOG_LEVEL", "WARNING"),
        log_format="console",
        stream=sys.stderr,
    )

    try:
        asyncio.run(run_bridge(str(args.merchant_id), args.base_url, args.timeout))
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
