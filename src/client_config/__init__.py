"""Client config - IDE configuration artifacts for merchant MCP servers."""

from .generator import build_stdio_config, build_stream_config, fetch_servers


__all__ = [
    "build_stdio_config",
    "build_stream_config",
    "fetch_servers",
]
