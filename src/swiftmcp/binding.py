# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Ambient registration target for the ``@tool``-style decorators.

Inside ``with server.binding():`` each decorator registers what it decorates on
that server; outside of it the decorators only attach their spec to the
function.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING


if TYPE_CHECKING:  # pragma: no cover
    from .server import MCPServer


_ACTIVE_SERVER: ContextVar[MCPServer | None] = ContextVar("_swiftmcp_active_server", default=None)


def get_active_server() -> MCPServer | None:
    """Return the server currently binding definitions, if any."""
    return _ACTIVE_SERVER.get()


def set_active_server(server: MCPServer) -> Token[MCPServer | None]:
    return _ACTIVE_SERVER.set(server)


def reset_active_server(token: Token[MCPServer | None]) -> None:
    _ACTIVE_SERVER.reset(token)


__all__ = ["get_active_server", "reset_active_server", "set_active_server"]
