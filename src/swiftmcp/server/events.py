# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Session and server lifecycle events.

Listeners subscribe through :meth:`Observers.subscribe` and receive every event
(or only events of one type) until they cancel the returned
:class:`Subscription`. Listeners may be sync or async; a failing listener is
logged and never affects the emitter or the other listeners.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

from ..utils import get_logger, maybe_await_with_args


if TYPE_CHECKING:  # pragma: no cover
    from .. import types
    from .session import MCPSession


@dataclass(frozen=True, slots=True)
class SessionEvent:
    session: MCPSession


@dataclass(frozen=True, slots=True)
class ConnectEvent(SessionEvent):
    """A session was accepted and added to the pool."""


@dataclass(frozen=True, slots=True)
class DisconnectEvent(SessionEvent):
    """A session's transport went away and the session was removed."""


@dataclass(frozen=True, slots=True)
class RootsChangedEvent(SessionEvent):
    roots: tuple[types.Root, ...]


@dataclass(frozen=True, slots=True)
class SessionErrorEvent(SessionEvent):
    error: BaseException


Listener = Callable[[Any], "Awaitable[None] | None"]


@dataclass(eq=False, slots=True)
class _Entry:
    listener: Listener
    event_type: type | None


class Subscription:
    """Handle returned by :meth:`Observers.subscribe`."""

    __slots__ = ("_observers", "_entry")

    def __init__(self, observers: Observers, entry: _Entry) -> None:
        self._observers = observers
        self._entry = entry

    @property
    def active(self) -> bool:
        return self._entry in self._observers._entries

    def cancel(self) -> None:
        """Stop delivering events. Cancelling twice is harmless."""
        try:
            self._observers._entries.remove(self._entry)
        except ValueError:
            pass

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


class Observers:
    """Ordered set of event listeners."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._entries: list[_Entry] = []
        self._logger = logger or get_logger("swiftmcp.events")

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def __len__(self) -> int:
        return len(self._entries)

    def subscribe(self, listener: Listener, event_type: type | None = None) -> Subscription:
        entry = _Entry(listener, event_type)
        self._entries.append(entry)
        return Subscription(self, entry)

    async def emit(self, event: SessionEvent) -> None:
        for entry in list(self._entries):
            if entry.event_type is not None and not isinstance(event, entry.event_type):
                continue
            try:
                await maybe_await_with_args(entry.listener, event)
            except Exception:
                self._logger.exception("Listener %r failed while handling %s", entry.listener, type(event).__name__)


__all__ = [
    "ConnectEvent",
    "DisconnectEvent",
    "Listener",
    "Observers",
    "RootsChangedEvent",
    "SessionErrorEvent",
    "SessionEvent",
    "Subscription",
]
