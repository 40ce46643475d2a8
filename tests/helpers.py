# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Shared test helpers: in-memory client/server wiring for sessions."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from mcp.client.session import ClientSession
from mcp.shared.memory import create_client_server_memory_streams

from swiftmcp import MCPServer, MCPSession, Prompt, Resource, ResourceTemplate, SessionConfig, Tool
from swiftmcp.server.registry import Registry
from swiftmcp.server.transports import StreamTransport


FAST_CONFIG = SessionConfig(keepalive_interval=None, negotiation_interval=0.01)


def make_session(*entities: Any, config: SessionConfig | None = None, auth: Any = None) -> MCPSession:
    """Build a session over a registry holding *entities*."""
    registry = Registry()
    for entity in entities:
        if isinstance(entity, Tool):
            registry.add_tool(entity)
        elif isinstance(entity, Resource):
            registry.add_resource(entity)
        elif isinstance(entity, ResourceTemplate):
            registry.add_resource_template(entity)
        elif isinstance(entity, Prompt):
            registry.add_prompt(entity)
        else:  # pragma: no cover - misuse in a test
            raise TypeError(f"Cannot register {entity!r}")
    registry.freeze()
    return MCPSession(registry.snapshot(), name="test", version="0.0.1", auth=auth, config=config or FAST_CONFIG)


@asynccontextmanager
async def connected_client(
    target: MCPSession | MCPServer, *, auth: Any = None, **client_kwargs: Any
) -> AsyncIterator[tuple[ClientSession, MCPSession]]:
    """Connect an SDK client to *target* over memory streams.

    Yields once the session is active. A server target admits the session into
    its pool and releases it on exit.
    """
    async with create_client_server_memory_streams() as (client_streams, server_streams):
        transport = StreamTransport(*server_streams)
        if isinstance(target, MCPServer):
            session = target.create_session(auth=auth)
            connecting = asyncio.create_task(target.admit(session, transport))
        else:
            session = target
            connecting = asyncio.create_task(session.connect(transport))

        async with ClientSession(*client_streams, **client_kwargs) as client:
            try:
                await client.initialize()
                await connecting
                yield client, session
            finally:
                if not connecting.done():
                    connecting.cancel()
                if isinstance(target, MCPServer):
                    await target.release(session)
                else:
                    await session.close()
