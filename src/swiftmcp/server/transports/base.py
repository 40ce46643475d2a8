# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Transport primitives.

Two layers live here:

* :class:`SessionTransport` hands one session the pair of message streams it
  talks over. :meth:`SessionTransport.open` is entered by the session's runner
  and exited when the session closes or the peer goes away.
* :class:`BaseTransport` is what :meth:`MCPServer.start` launches: it accepts
  connections, creates sessions for them and stops on :meth:`stop`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream


if TYPE_CHECKING:  # pragma: no cover
    from mcp.shared.message import SessionMessage

    from ..core import MCPServer


ReadStream = MemoryObjectReceiveStream["SessionMessage | Exception"]
WriteStream = MemoryObjectSendStream["SessionMessage"]


class SessionTransport(ABC):
    """Supplies the message streams for a single session."""

    @abstractmethod
    def open(self) -> Any:
        """Return an async context manager yielding ``(read_stream, write_stream)``."""


class StreamTransport(SessionTransport):
    """Wraps streams that are already open, e.g. one SSE connection or a test pipe.

    The streams are closed when the session releases them.
    """

    def __init__(self, read_stream: ReadStream, write_stream: WriteStream) -> None:
        self._read_stream = read_stream
        self._write_stream = write_stream

    @asynccontextmanager
    async def open(self) -> AsyncIterator[tuple[ReadStream, WriteStream]]:
        try:
            yield self._read_stream, self._write_stream
        finally:
            await self._read_stream.aclose()
            await self._write_stream.aclose()


class BaseTransport(ABC):
    """Common base for server-level transports.

    Subclasses receive the owning :class:`MCPServer` so they can create and
    admit sessions through it.
    """

    TRANSPORT: ClassVar[tuple[str, ...]] = ()

    def __init__(self, server: MCPServer) -> None:
        self._server = server

    @property
    def server(self) -> MCPServer:
        return self._server

    @property
    def transport_display_name(self) -> str:
        return self.TRANSPORT[-1] if self.TRANSPORT else type(self).__name__

    @abstractmethod
    async def start(self) -> None:
        """Begin accepting connections and return once ready."""

    @abstractmethod
    async def wait(self) -> None:
        """Block until the transport has nothing left to serve."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop accepting connections and close every session it created."""

    async def run(self) -> None:
        await self.start()
        try:
            await self.wait()
        finally:
            await self.stop()


@runtime_checkable
class TransportFactory(Protocol):
    """Callable that builds a transport for an :class:`MCPServer`."""

    def __call__(self, server: MCPServer, **options: Any) -> BaseTransport:  # pragma: no cover - protocol
        ...


__all__ = ["BaseTransport", "ReadStream", "SessionTransport", "StreamTransport", "TransportFactory", "WriteStream"]
