# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Per-call context handed to tool handlers.

The context exposes the authenticated value of the calling session, progress
reporting tied to the request's progress token, and a four-level logger that
sends ``notifications/message`` to the client.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from . import types


if TYPE_CHECKING:  # pragma: no cover
    from mcp.server.session import ServerSession
    from mcp.shared.context import RequestContext

    from .server.session import MCPSession


_CURRENT_CONTEXT: ContextVar[Context | None] = ContextVar("swiftmcp_current_context", default=None)


def get_context() -> Context:
    """Return the context of the tool call being handled.

    Raises:
        LookupError: If called outside of a tool call.
    """
    ctx = _CURRENT_CONTEXT.get()
    if ctx is None:
        raise LookupError("No active context; get_context() only works inside a tool call")
    return ctx


@contextmanager
def context_scope(ctx: Context) -> Iterator[Context]:
    """Make *ctx* the ambient context for the duration of the block."""
    token = _CURRENT_CONTEXT.set(ctx)
    try:
        yield ctx
    finally:
        _CURRENT_CONTEXT.reset(token)


class ContextLogger:
    """Sends log notifications for one tool call.

    Messages below the session's current logging level are dropped. The wire
    payload is ``{"message": ..., "context": ...}``.
    """

    __slots__ = ("_ctx",)

    def __init__(self, ctx: Context) -> None:
        self._ctx = ctx

    async def debug(self, message: str, data: Mapping[str, Any] | None = None) -> None:
        await self._emit("debug", message, data)

    async def info(self, message: str, data: Mapping[str, Any] | None = None) -> None:
        await self._emit("info", message, data)

    async def warn(self, message: str, data: Mapping[str, Any] | None = None) -> None:
        await self._emit("warning", message, data)

    warning = warn

    async def error(self, message: str, data: Mapping[str, Any] | None = None) -> None:
        await self._emit("error", message, data)

    async def _emit(self, level: types.LoggingLevel, message: str, data: Mapping[str, Any] | None) -> None:
        if not self._ctx.mcp_session.accepts_log_level(level):
            return
        await self._ctx.server_session.send_log_message(
            level=level,
            data={"message": message, "context": dict(data) if data is not None else None},
            related_request_id=self._ctx.related_request_id,
        )


@dataclass(slots=True)
class Context:
    """Per-call view of the session handed to tool handlers.

    ``log`` sends notifications only at or above the session's logging level,
    which is ``info`` until the client calls ``logging/setLevel``. ``debug``
    messages are dropped before that.
    """

    mcp_session: MCPSession
    request_context: RequestContext[ServerSession, Any, Any]
    log: ContextLogger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.log = ContextLogger(self)

    @property
    def session(self) -> Any:
        """The value the host's ``authenticate`` callable returned for this connection."""
        return self.mcp_session.auth

    @property
    def server_session(self) -> ServerSession:
        return self.request_context.session

    @property
    def request_id(self) -> types.RequestId:
        return self.request_context.request_id

    @property
    def related_request_id(self) -> str:
        """The request id in the form notifications carry to tie them to this call."""
        return str(self.request_id)

    @property
    def progress_token(self) -> types.ProgressToken | None:
        meta = self.request_context.meta
        return None if meta is None else meta.progressToken

    async def report_progress(self, progress: float, total: float | None = None, *, message: str | None = None) -> None:
        """Send a progress notification; does nothing if the client sent no progress token."""
        token = self.progress_token
        if token is None:
            return
        await self.server_session.send_progress_notification(
            progress_token=token,
            progress=progress,
            total=total,
            message=message,
            related_request_id=self.related_request_id,
        )


__all__ = ["Context", "ContextLogger", "context_scope", "get_context"]
