"""Stdio bridge - local process adapting stdio JSON-RPC onto the rpc endpoint."""

from .bridge import StdioBridge, rpc_endpoint
from .framing import FramingError, MessageFramer


__all__ = [
    "StdioBridge",
    "rpc_endpoint",
    "FramingError",
    "MessageFramer",
]
