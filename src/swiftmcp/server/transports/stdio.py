# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""STDIO transport: one implicit session over the process's standard streams.

Framing (newline-delimited JSON-RPC) is delegated to the SDK's
``stdio_server`` helper.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Any, Callable

from mcp.server.stdio import stdio_server

from .base import BaseTransport, SessionTransport


if TYPE_CHECKING:  # pragma: no cover
    from ..core import MCPServer
    from ..session import MCPSession


def get_stdio_server() -> Callable[[], AbstractAsyncContextManager[Any]]:
    """Return the SDK's stdio context manager.

    Separated into a helper so tests can patch it with in-memory streams.
    """
    return stdio_server


class StdioSessionTransport(SessionTransport):
    def open(self) -> AbstractAsyncContextManager[Any]:
        return get_stdio_server()()


class StdioTransport(BaseTransport):
    """Serve a single session over STDIO until stdin closes."""

    TRANSPORT = ("stdio", "STDIO", "Standard IO")

    def __init__(self, server: MCPServer) -> None:
        super().__init__(server)
        self._session: MCPSession | None = None

    async def start(self) -> None:
        session = self.server.create_session()
        self._session = session
        await self.server.admit(session, StdioSessionTransport())

    async def wait(self) -> None:
        if self._session is not None:
            await self._session.wait_disconnected()

    async def stop(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            await self.server.release(session)


__all__ = ["StdioSessionTransport", "StdioTransport", "get_stdio_server"]
