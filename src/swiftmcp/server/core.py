# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Host-facing server object.

:class:`MCPServer` owns the shared registries, the session pool and the
transport registry. Applications register their tools, resources, resource
templates and prompts, then call :meth:`MCPServer.start` (or
:meth:`MCPServer.serve`) with ``"stdio"`` or ``"sse"``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Literal

from .. import types
from ..binding import reset_active_server, set_active_server
from ..prompt import Prompt, extract_prompt
from ..resource import Resource, extract_resource
from ..resource_template import ResourceTemplate, extract_resource_template
from ..tool import Tool, extract_tool
from ..utils import get_logger, maybe_await_with_args
from .events import Listener, Observers, Subscription
from .pool import SessionPool
from .registry import Registry, RegistrySnapshot
from .session import MCPSession, SessionConfig
from .transports import BaseTransport, SessionTransport, SSEOptions, SSETransport, StdioTransport, TransportFactory


if TYPE_CHECKING:  # pragma: no cover
    from starlette.requests import Request


TransportLiteral = Literal["stdio", "sse"]
Authenticate = Callable[["Request"], Any]


def _stdio_factory(server: MCPServer, **options: Any) -> BaseTransport:
    if options:
        unexpected = ", ".join(sorted(options))
        raise TypeError(f"Unsupported STDIO options: {unexpected}")
    return StdioTransport(server)


def _sse_factory(server: MCPServer, *, sse: SSEOptions | Mapping[str, Any] | None = None) -> BaseTransport:
    if isinstance(sse, Mapping):
        sse = SSEOptions(**sse)
    return SSETransport(server, sse)


def _resolve(target: Any, extract: Callable[[Any], Any], expected: type, kind: str) -> Any:
    if isinstance(target, expected):
        return target
    spec = extract(target) if callable(target) else None
    if spec is None:
        raise TypeError(f"Expected a {kind} or a function decorated with @{kind.lower().replace(' ', '_')}")
    return spec


class MCPServer:
    """An MCP server that can run over STDIO or SSE."""

    def __init__(
        self,
        name: str,
        *,
        version: str = "1.0.0",
        instructions: str | None = None,
        authenticate: Authenticate | None = None,
        session_config: SessionConfig | None = None,
    ) -> None:
        self.name = name
        self.version = version
        self.instructions = instructions
        self._authenticate = authenticate
        self._session_config = session_config or SessionConfig()
        self._logger = get_logger(f"swiftmcp.server.{name}")

        self._registry = Registry()
        self._snapshot: RegistrySnapshot | None = None
        self._observers = Observers(self._logger)
        self._pool = SessionPool(self._observers)

        self._transport: BaseTransport | None = None
        self._transport_factories: dict[str, TransportFactory] = {}
        self.register_transport("stdio", _stdio_factory)
        self.register_transport("sse", _sse_factory, aliases=("server-sent-events",))

    # //////////////////////////////////////////////////////////////////
    # Registration
    # //////////////////////////////////////////////////////////////////

    def add_tool(self, target: Tool | Callable[..., Any]) -> Tool:
        tool: Tool = _resolve(target, extract_tool, Tool, "Tool")
        self._registry.add_tool(tool)
        return tool

    def add_resource(self, target: Resource | Callable[..., Any]) -> Resource:
        resource: Resource = _resolve(target, extract_resource, Resource, "Resource")
        self._registry.add_resource(resource)
        return resource

    def add_resource_template(self, target: ResourceTemplate | Callable[..., Any]) -> ResourceTemplate:
        template: ResourceTemplate = _resolve(target, extract_resource_template, ResourceTemplate, "Resource template")
        self._registry.add_resource_template(template)
        return template

    def add_prompt(self, target: Prompt | Callable[..., Any]) -> Prompt:
        prompt: Prompt = _resolve(target, extract_prompt, Prompt, "Prompt")
        self._registry.add_prompt(prompt)
        return prompt

    @contextmanager
    def binding(self) -> Iterator[MCPServer]:
        """Register everything decorated inside the block on this server."""
        token = set_active_server(self)
        try:
            yield self
        finally:
            reset_active_server(token)

    # //////////////////////////////////////////////////////////////////
    # Sessions and events
    # //////////////////////////////////////////////////////////////////

    @property
    def sessions(self) -> tuple[MCPSession, ...]:
        return self._pool.sessions

    def subscribe(self, listener: Listener, event_type: type | None = None) -> Subscription:
        """Observe connect/disconnect events and the events of every pooled session."""
        return self._observers.subscribe(listener, event_type)

    def create_session(self, *, auth: Any = None) -> MCPSession:
        """Build a session over the registries; freezes them on first use."""
        if self._snapshot is None:
            self._registry.freeze()
            self._snapshot = self._registry.snapshot()
        return MCPSession(
            self._snapshot,
            name=self.name,
            version=self.version,
            instructions=self.instructions,
            auth=auth,
            config=self._session_config,
            logger=self._logger,
        )

    async def admit(self, session: MCPSession, transport: SessionTransport) -> None:
        """Connect *session* over *transport* and add it to the pool."""
        await session.connect(transport)
        await self._pool.add(session)

    async def release(self, session: MCPSession) -> None:
        """Close *session* and drop it from the pool. Safe to call repeatedly."""
        await session.close()
        await self._pool.discard(session)

    async def authenticate_request(self, request: Request) -> Any:
        if self._authenticate is None:
            return None
        return await maybe_await_with_args(self._authenticate, request)

    async def log_message(self, level: types.LoggingLevel, data: Any, *, logger: str | None = None) -> None:
        """Send a log notification to every active session."""
        await self._pool.broadcast(lambda session: session.send_log_message(level, data, logger=logger))

    # //////////////////////////////////////////////////////////////////
    # Transport registry
    # //////////////////////////////////////////////////////////////////

    def register_transport(self, name: str, factory: TransportFactory, *, aliases: Iterable[str] | None = None) -> None:
        for key in (name, *(aliases or ())):
            self._transport_factories[key.lower()] = factory

    def _transport_for_name(self, name: str, **options: Any) -> BaseTransport:
        factory = self._transport_factories.get(name.lower())
        if factory is None:
            raise ValueError(f"Unsupported transport '{name}'.")
        transport = factory(self, **options)
        if not isinstance(transport, BaseTransport):  # pragma: no cover - defensive
            raise TypeError("Transport factory must return a BaseTransport instance")
        return transport

    # //////////////////////////////////////////////////////////////////
    # Lifecycle
    # //////////////////////////////////////////////////////////////////

    @property
    def transport(self) -> BaseTransport | None:
        return self._transport

    async def start(
        self,
        transport: TransportLiteral | str = "stdio",
        *,
        sse: SSEOptions | Mapping[str, Any] | None = None,
    ) -> None:
        """Start serving; returns once the transport is ready.

        ``"stdio"`` serves one session over the standard streams. ``"sse"``
        starts an HTTP server creating one session per connection.

        The registries freeze once the transport is ready or when the first
        session is created. A failed start leaves them open for a retry.
        """
        if self._transport is not None:
            raise RuntimeError(f"Server {self.name!r} is already started")
        options: dict[str, Any] = {"sse": sse} if sse is not None else {}
        instance = self._transport_for_name(transport, **options)
        self._logger.info("Serving %s via %s", self.name, instance.transport_display_name)
        self._transport = instance
        try:
            await instance.start()
        except BaseException:
            self._transport = None
            raise
        self._registry.freeze()

    async def stop(self) -> None:
        """Tear down the transport and close every session."""
        transport, self._transport = self._transport, None
        if transport is not None:
            await transport.stop()
        for session in self._pool:
            await self.release(session)

    async def serve(
        self,
        transport: TransportLiteral | str = "stdio",
        *,
        sse: SSEOptions | Mapping[str, Any] | None = None,
    ) -> None:
        """Start, wait until the transport is finished, then stop."""
        await self.start(transport, sse=sse)
        instance = self._transport
        try:
            if instance is not None:
                await instance.wait()
        finally:
            await self.stop()


__all__ = ["Authenticate", "MCPServer", "TransportLiteral"]
