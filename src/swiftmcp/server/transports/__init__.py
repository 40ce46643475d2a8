# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Transport adapters for swiftmcp servers."""

from __future__ import annotations

from .base import BaseTransport, SessionTransport, StreamTransport, TransportFactory
from .sse import SSEOptions, SSETransport
from .stdio import StdioSessionTransport, StdioTransport


__all__ = [
    "BaseTransport",
    "SSEOptions",
    "SSETransport",
    "SessionTransport",
    "StdioSessionTransport",
    "StdioTransport",
    "StreamTransport",
    "TransportFactory",
]
