"""Write IDE MCP configuration files for every merchant.

Usage:
    python -m src.client_config --base-url http://localhost:8000 --output-dir .
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

import httpx

from .generator import build_stdio_config, build_stream_config, fetch_servers


STDIO_CONFIG_FILE = "cursor-mcp-config.json"
STREAM_CONFIG_FILE = "cursor-mcp-http-config.json"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="merchant-mcp-config",
        description="Generate IDE MCP server configuration for all merchants.",
    )
    parser.add_argument("--base-url", default=os.environ.get("BASE_URL", "http://localhost:8000"))
    parser.add_argument("--output-dir", default=".", type=Path)
    parser.add_argument("--bridge-command", default=None, help="Executable used to launch the stdio bridge")
    return parser.parse_args(argv)


async def generate(base_url: str, output_dir: Path, bridge_command: str | None = None) -> int:
    async with httpx.AsyncClient(timeout=30.0) as client:
        servers = await fetch_servers(client, base_url)

    if not servers:
        print("No MCP servers found. Seed at least one merchant first.", file=sys.stderr)
        return 1

    output_dir.mkdir(parents=True, exist_ok=True)
    stdio_path = output_dir / STDIO_CONFIG_FILE
    stream_path = output_dir / STREAM_CONFIG_FILE
    stdio_path.write_text(
        json.dumps(build_stdio_config(servers, base_url, command=bridge_command), indent=2),
        encoding="utf-8",
    )
    stream_path.write_text(json.dumps(build_stream_config(servers), indent=2), encoding="utf-8")

    print(f"Found {len(servers)} MCP servers")
    print(f"stdio config: {stdio_path}")
    print(f"HTTP config: {stream_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        return asyncio.run(generate(args.base_url, args.output_dir, args.bridge_command))
    except httpx.HTTPError as e:
        print(f"Error generating config: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
