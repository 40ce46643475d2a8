# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Per-connection session lifecycle.

An :class:`MCPSession` is created for every accepted connection from a
snapshot of the host's registries. It binds to exactly one transport, learns
the client's capabilities, keeps the connection alive with periodic pings and
tracks the client's logging level and roots. Requests are dispatched one at a
time in arrival order.

State machine::

    UNCONNECTED --connect()--> NEGOTIATING --> ACTIVE --close()--> CLOSED

``close()`` may be called from any state and is idempotent.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
import logging
import math
from typing import TYPE_CHECKING, Any

import anyio
from anyio.streams.memory import MemoryObjectSendStream
from mcp.server.lowlevel.server import Server
from mcp.server.session import ServerSession

from .. import types
from ..errors import SessionAlreadyConnectedError, SessionClosedError, UnexpectedStateError
from ..utils import get_logger
from .events import Listener, Observers, RootsChangedEvent, SessionErrorEvent, Subscription
from .router import RequestRouter


if TYPE_CHECKING:  # pragma: no cover
    from .registry import RegistrySnapshot
    from .transports.base import SessionTransport


class SessionState(str, Enum):
    UNCONNECTED = "unconnected"
    NEGOTIATING = "negotiating"
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(slots=True)
class SessionConfig:
    """Timing knobs for a session.

    Attributes:
        keepalive_interval: Seconds between pings; ``None`` disables keepalive.
        request_timeout: Seconds to wait for the client to answer a ping or
            the initial ``roots/list``; ``None`` waits forever.
        negotiation_attempts: How many times to look for the client's
            capabilities before giving up.
        negotiation_interval: Seconds between those attempts.
    """

    keepalive_interval: float | None = 1.0
    request_timeout: float | None = 5.0
    negotiation_attempts: int = 10
    negotiation_interval: float = 0.1


class MCPSession:
    """One client connection and the state the server keeps for it."""

    def __init__(
        self,
        registry: RegistrySnapshot,
        *,
        name: str,
        version: str | None = None,
        instructions: str | None = None,
        auth: Any = None,
        config: SessionConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._registry = registry
        self._auth = auth
        self._config = config or SessionConfig()
        self._logger = logger or get_logger("swiftmcp.session")
        self._observers = Observers(self._logger)

        self._server: Server[Any, Any] = Server(name, version=version, instructions=instructions)
        RequestRouter(registry, self, self._logger).install(self._server)

        self._state = SessionState.UNCONNECTED
        self._transport: SessionTransport | None = None
        self._server_session: ServerSession | None = None
        self._client_capabilities: types.ClientCapabilities | None = None
        self._logging_level: types.LoggingLevel = "info"
        self._roots: tuple[types.Root, ...] = ()

        self._runner: asyncio.Task[None] | None = None
        self._keepalive: asyncio.Task[None] | None = None
        self._background: set[asyncio.Task[None]] = set()
        self._disconnected = asyncio.Event()

    # //////////////////////////////////////////////////////////////////
    # State
    # //////////////////////////////////////////////////////////////////

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def auth(self) -> Any:
        """Opaque value produced by the host's ``authenticate`` callable."""
        return self._auth

    @property
    def registry(self) -> RegistrySnapshot:
        return self._registry

    @property
    def server(self) -> Server[Any, Any]:
        """The low-level SDK server carrying this session's request handlers."""
        return self._server

    @property
    def client_capabilities(self) -> types.ClientCapabilities | None:
        """Capabilities the client declared, or ``None`` if they could not be learned."""
        return self._client_capabilities

    @property
    def logging_level(self) -> types.LoggingLevel:
        return self._logging_level

    @property
    def roots(self) -> tuple[types.Root, ...]:
        return self._roots

    @property
    def disconnected(self) -> bool:
        return self._disconnected.is_set()

    def set_logging_level(self, level: types.LoggingLevel) -> None:
        if level not in types.LOGGING_LEVELS:
            raise ValueError(f"Unknown logging level: {level!r}")
        self._logging_level = level

    def accepts_log_level(self, level: types.LoggingLevel) -> bool:
        """Whether a message at *level* passes the client's logging threshold."""
        return types.LOGGING_LEVELS.index(level) >= types.LOGGING_LEVELS.index(self._logging_level)

    def subscribe(self, listener: Listener, event_type: type | None = None) -> Subscription:
        """Receive :class:`RootsChangedEvent` and :class:`SessionErrorEvent` for this session."""
        return self._observers.subscribe(listener, event_type)

    # //////////////////////////////////////////////////////////////////
    # Lifecycle
    # //////////////////////////////////////////////////////////////////

    async def connect(self, transport: SessionTransport) -> None:
        """Bind *transport*, negotiate capabilities and start keepalive.

        Returns once the session is active.

        Raises:
            SessionAlreadyConnectedError: If a transport is already bound.
            SessionClosedError: If the session was closed.
        """
        if self._state is SessionState.CLOSED:
            raise SessionClosedError("Session is closed")
        if self._transport is not None:
            raise SessionAlreadyConnectedError("Session is already connected")

        self._transport = transport
        self._state = SessionState.NEGOTIATING

        bound: asyncio.Future[ServerSession] = asyncio.get_running_loop().create_future()
        self._runner = asyncio.create_task(self._run(transport, bound))
        try:
            session = await bound
        except Exception:
            await self.close()
            raise
        self._server_session = session

        self._client_capabilities = await self._negotiate(session)
        if self._client_capabilities is None:
            self._logger.warning("could not infer client capabilities")
        elif self._client_capabilities.roots is not None and self._client_capabilities.roots.listChanged:
            try:
                self._roots = await self._list_roots(session)
            except Exception:
                self._logger.error("could not list roots", exc_info=True)

        if self._state is SessionState.CLOSED:
            return
        if self._config.keepalive_interval is not None:
            self._keepalive = asyncio.create_task(self._keepalive_loop(session, self._config.keepalive_interval))
        self._state = SessionState.ACTIVE

    async def close(self) -> None:
        """Stop keepalive and release the transport. Safe to call repeatedly."""
        if self._state is SessionState.CLOSED:
            return
        self._state = SessionState.CLOSED

        current = asyncio.current_task()
        tasks = [
            task
            for task in (self._keepalive, *self._background, self._runner)
            if task is not None and task is not current and not task.done()
        ]
        for task in tasks:
            task.cancel()
        for outcome in await asyncio.gather(*tasks, return_exceptions=True):
            if isinstance(outcome, Exception):
                self._logger.error("Error while closing session", exc_info=outcome)
        self._disconnected.set()

    async def wait_disconnected(self) -> None:
        """Wait until the transport stops delivering messages."""
        await self._disconnected.wait()

    async def request_sampling(self, params: types.CreateMessageRequestParams) -> types.CreateMessageResult:
        """Ask the client to sample its model (``sampling/createMessage``)."""
        session = self._require_server_session()
        request = types.ServerRequest(types.CreateMessageRequest(params=params))
        return await session.send_request(request, types.CreateMessageResult)

    async def send_log_message(self, level: types.LoggingLevel, data: Any, *, logger: str | None = None) -> None:
        """Send ``notifications/message`` if *level* passes the client's threshold."""
        session = self._require_server_session()
        if self.accepts_log_level(level):
            await session.send_log_message(level=level, data=data, logger=logger)

    def _require_server_session(self) -> ServerSession:
        if self._state is SessionState.CLOSED:
            raise SessionClosedError("Session is closed")
        if self._server_session is None:
            raise UnexpectedStateError("Session is not connected")
        return self._server_session

    # //////////////////////////////////////////////////////////////////
    # Background work
    # //////////////////////////////////////////////////////////////////

    async def _run(self, transport: SessionTransport, bound: asyncio.Future[ServerSession]) -> None:
        try:
            async with transport.open() as (read_stream, write_stream):
                init_options = self._server.create_initialization_options()
                async with ServerSession(read_stream, write_stream, init_options) as session:
                    bound.set_result(session)
                    queue_send, queue_recv = anyio.create_memory_object_stream[Any](math.inf)
                    async with anyio.create_task_group() as tg, queue_recv:
                        tg.start_soon(self._drain_incoming, session, queue_send)
                        async for message in queue_recv:
                            await self._server._handle_message(message, session, {}, raise_exceptions=False)
        except Exception as exc:
            if not bound.done():
                bound.set_exception(exc)
            else:
                self._logger.error("Session transport failed", exc_info=True)
                await self._observers.emit(SessionErrorEvent(self, exc))
        finally:
            if not bound.done():
                bound.set_exception(SessionClosedError("Session closed before the transport was ready"))
            self._disconnected.set()

    async def _drain_incoming(self, session: ServerSession, queue: MemoryObjectSendStream[Any]) -> None:
        # Keeps the SDK receive loop free so responses to server-sent requests
        # are delivered while a handler is still running.
        async with queue:
            async for message in session.incoming_messages:
                await queue.send(message)

    async def _negotiate(self, session: ServerSession) -> types.ClientCapabilities | None:
        for _ in range(self._config.negotiation_attempts):
            params = session.client_params
            if params is not None:
                return params.capabilities
            await asyncio.sleep(self._config.negotiation_interval)
        return None

    async def _list_roots(self, session: ServerSession) -> tuple[types.Root, ...]:
        with anyio.fail_after(self._config.request_timeout):
            result = await session.list_roots()
        return tuple(result.roots)

    async def _keepalive_loop(self, session: ServerSession, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            if self._disconnected.is_set():
                return
            try:
                with anyio.fail_after(self._config.request_timeout):
                    await session.send_ping()
            except Exception as exc:
                self._logger.debug("Keepalive ping failed: %r", exc)
                await self._observers.emit(SessionErrorEvent(self, exc))

    def schedule_roots_refresh(self) -> None:
        """Re-fetch the client's roots in the background and emit :class:`RootsChangedEvent`."""
        if self._server_session is None or self._state is SessionState.CLOSED:
            return
        task = asyncio.create_task(self._refresh_roots(self._server_session))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _refresh_roots(self, session: ServerSession) -> None:
        try:
            roots = await self._list_roots(session)
        except Exception as exc:
            self._logger.error("could not refresh roots", exc_info=True)
            await self._observers.emit(SessionErrorEvent(self, exc))
            return
        self._roots = roots
        await self._observers.emit(RootsChangedEvent(self, roots))

    def __repr__(self) -> str:
        return f"<MCPSession {self._server.name!r} state={self._state.value}>"


__all__ = ["MCPSession", "SessionConfig", "SessionState"]
