# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Server-Sent Events transport: one session per HTTP connection.

Clients open a ``GET`` stream on ``SSEOptions.endpoint`` and post their
messages to ``SSEOptions.message_path``. Each stream is authenticated through
the host's ``authenticate`` callable before a session is created for it; the
session is released as soon as the stream ends.

The Starlette app is served by ``uvicorn.Server`` in a background task so
:meth:`SSETransport.start` returns once the socket is listening.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mcp.server.sse import SseServerTransport
from mcp.server.transport_security import TransportSecuritySettings
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Mount, Route
from uvicorn import Config, Server

from ...errors import AuthenticationError
from ...utils import get_logger
from .base import BaseTransport, StreamTransport


if TYPE_CHECKING:  # pragma: no cover
    from ..core import MCPServer
    from ..session import MCPSession


@dataclass(slots=True)
class SSEOptions:
    """Where and how the SSE server listens."""

    endpoint: str = "/sse"
    port: int = 8080
    host: str = "127.0.0.1"
    message_path: str = "/messages/"
    log_level: str = "info"
    security_settings: TransportSecuritySettings | None = None
    graceful_shutdown_timeout: float = 5.0

    def __post_init__(self) -> None:
        for label, path in (("endpoint", self.endpoint), ("message_path", self.message_path)):
            if not path.startswith("/"):
                raise ValueError(f"SSE {label} must start with '/', got {path!r}")
        if not self.message_path.endswith("/"):
            self.message_path += "/"
        if self.endpoint.rstrip("/") == self.message_path.rstrip("/"):
            raise ValueError("SSE endpoint and message_path must differ")

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}{self.endpoint}"


class SSETransport(BaseTransport):
    """Serve many concurrent sessions over HTTP + SSE."""

    TRANSPORT = ("sse", "SSE", "Server-Sent Events")

    def __init__(self, server: MCPServer, options: SSEOptions | None = None) -> None:
        super().__init__(server)
        self._options = options or SSEOptions()
        self._sse = SseServerTransport(self._options.message_path, security_settings=self._options.security_settings)
        self._sessions: set[MCPSession] = set()
        self._uvicorn: Server | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self._logger = get_logger("swiftmcp.transport.sse")

    @property
    def options(self) -> SSEOptions:
        return self._options

    def build_app(self) -> Starlette:
        """Return the ASGI app exposing the SSE and message endpoints."""
        return Starlette(
            routes=[
                Route(self._options.endpoint, endpoint=self._handle_sse, methods=["GET"]),
                Mount(self._options.message_path, app=self._sse.handle_post_message),
            ]
        )

    async def _handle_sse(self, request: Request) -> Response:
        try:
            auth = await self.server.authenticate_request(request)
        except AuthenticationError as exc:
            self._logger.info("Rejected SSE connection from %s: %s", request.client, exc)
            return PlainTextResponse(str(exc) or "Unauthorized", status_code=401)
        except Exception:
            self._logger.exception("Error creating session")
            return PlainTextResponse("Error creating session", status_code=500)

        session = self.server.create_session(auth=auth)
        async with self._sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
            self._sessions.add(session)
            try:
                await self.server.admit(session, StreamTransport(read_stream, write_stream))
                await session.wait_disconnected()
            finally:
                self._sessions.discard(session)
                await self.server.release(session)
        return Response()

    async def start(self) -> None:
        if self._serve_task is not None:
            raise RuntimeError("SSE transport is already running")

        options = self._options
        config = Config(
            app=self.build_app(),
            host=options.host,
            port=options.port,
            log_level=options.log_level,
            lifespan="off",
            timeout_graceful_shutdown=options.graceful_shutdown_timeout,
        )
        self._uvicorn = Server(config)
        self._serve_task = asyncio.create_task(self._serve(self._uvicorn))

        while not self._uvicorn.started:
            if self._serve_task.done():
                self._serve_task.result()
                raise RuntimeError("SSE server stopped during startup")
            await asyncio.sleep(0.01)
        self._logger.info("server is running on SSE at %s", options.url)

    async def _serve(self, server: Server) -> None:
        try:
            await server.serve()
        except SystemExit as exc:
            # uvicorn exits the process when it cannot bind.
            raise RuntimeError(f"SSE server failed to start (exit status {exc.code})") from None

    async def wait(self) -> None:
        if self._serve_task is not None:
            await asyncio.shield(self._serve_task)

    async def stop(self) -> None:
        for session in list(self._sessions):
            await self.server.release(session)
        task, self._serve_task = self._serve_task, None
        if self._uvicorn is not None:
            self._uvicorn.should_exit = True
        if task is not None:
            try:
                await task
            except Exception:
                self._logger.error("SSE server stopped with an error", exc_info=True)
        self._uvicorn = None


__all__ = ["SSEOptions", "SSETransport"]
