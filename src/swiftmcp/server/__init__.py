# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Server runtime: registries, routing, sessions and transports."""

from __future__ import annotations

from .core import MCPServer
from .events import (
    ConnectEvent,
    DisconnectEvent,
    Observers,
    RootsChangedEvent,
    SessionErrorEvent,
    SessionEvent,
    Subscription,
)
from .pool import SessionPool
from .registry import Registry, RegistrySnapshot
from .session import MCPSession, SessionConfig, SessionState
from .transports import SSEOptions, StreamTransport


__all__ = [
    "ConnectEvent",
    "DisconnectEvent",
    "MCPServer",
    "MCPSession",
    "Observers",
    "Registry",
    "RegistrySnapshot",
    "RootsChangedEvent",
    "SSEOptions",
    "SessionConfig",
    "SessionErrorEvent",
    "SessionEvent",
    "SessionPool",
    "SessionState",
    "StreamTransport",
    "Subscription",
]
