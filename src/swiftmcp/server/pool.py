# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Tracking of the sessions a server has accepted.

The pool is used for enumeration and broadcast only; each session routes its
own requests. While a session is pooled its events are forwarded to the
host's observers through a dedicated subscription, which is cancelled when the
session leaves the pool.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from typing import Any

from .events import ConnectEvent, DisconnectEvent, Observers, Subscription
from .session import MCPSession, SessionState


class SessionPool:
    """Ordered collection of active sessions."""

    def __init__(self, observers: Observers) -> None:
        self._observers = observers
        self._sessions: dict[MCPSession, Subscription] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[MCPSession]:
        return iter(tuple(self._sessions))

    def __contains__(self, session: object) -> bool:
        return session in self._sessions

    @property
    def sessions(self) -> tuple[MCPSession, ...]:
        return tuple(self._sessions)

    async def add(self, session: MCPSession) -> None:
        """Pool *session*, forward its events and announce :class:`ConnectEvent`."""
        if session in self._sessions:
            return
        self._sessions[session] = session.subscribe(self._observers.emit)
        await self._observers.emit(ConnectEvent(session))

    async def discard(self, session: MCPSession) -> bool:
        """Remove *session* and announce :class:`DisconnectEvent`.

        Returns ``False`` when the session was not pooled.
        """
        forwarding = self._sessions.pop(session, None)
        if forwarding is None:
            return False
        forwarding.cancel()
        await self._observers.emit(DisconnectEvent(session))
        return True

    async def broadcast(self, send: Callable[[MCPSession], Awaitable[Any]]) -> None:
        """Call *send* for every active session; failures are logged per session."""
        for session in self:
            if session.state is not SessionState.ACTIVE:
                continue
            try:
                await send(session)
            except Exception:
                self._observers.logger.warning("Broadcast to %r failed", session, exc_info=True)


__all__ = ["SessionPool"]
