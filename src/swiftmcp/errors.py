# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Exception hierarchy for swiftmcp.

Protocol failures are reported with the SDK's ``McpError`` so the client sees a
coded JSON-RPC error. The classes here cover the remaining kinds: engine
invariant violations and failures a tool wants shown to its caller verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class SwiftMCPError(Exception):
    """Base class for every error raised by swiftmcp itself."""


class UnexpectedStateError(SwiftMCPError):
    """An engine invariant was violated.

    ``extras`` carries optional structured context for whoever debugs the
    failure; it is never sent to the client.
    """

    def __init__(self, message: str, extras: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.extras: dict[str, Any] = dict(extras or {})


class UserError(UnexpectedStateError):
    """Raised by tools to report a failure whose message is safe to show as-is."""


class SessionAlreadyConnectedError(UnexpectedStateError):
    """``connect`` was called on a session that is already bound to a transport."""


class SessionClosedError(UnexpectedStateError):
    """The session has been closed and accepts no further calls."""


class AuthenticationError(SwiftMCPError):
    """Raised by an ``authenticate`` callable to reject a connection."""


__all__ = [
    "AuthenticationError",
    "SessionAlreadyConnectedError",
    "SessionClosedError",
    "SwiftMCPError",
    "UnexpectedStateError",
    "UserError",
]
