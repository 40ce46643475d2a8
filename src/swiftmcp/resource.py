# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Static resource definitions.

``load`` may be sync or async and returns one entry or a list of entries. An
entry is ``str`` (text), ``bytes`` (binary, sent base64-encoded) or a mapping
with ``text`` or ``blob`` and optionally ``mimeType``. Every entry is stamped
with the resource's own URI and name when it is read.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from . import types
from .binding import get_active_server
from .completion import Completer


ResourceFn = Callable[[], Any]

_RESOURCE_ATTR = "__swiftmcp_resource__"


@dataclass(slots=True)
class Resource:
    uri: str
    name: str
    load: ResourceFn
    description: str | None = None
    mime_type: str | None = None
    complete: Completer | None = None

    def to_wire(self) -> types.Resource:
        return types.Resource(uri=self.uri, name=self.name, description=self.description, mimeType=self.mime_type)


def resource(
    uri: str,
    *,
    name: str | None = None,
    description: str | None = None,
    mime_type: str | None = None,
) -> Callable[[ResourceFn], ResourceFn]:
    """Mark a zero-argument callable as the loader for *uri*."""

    def decorator(fn: ResourceFn) -> ResourceFn:
        spec = Resource(
            uri=uri,
            name=name or fn.__name__,
            load=fn,
            description=description if description is not None else (fn.__doc__ or "").strip() or None,
            mime_type=mime_type,
        )
        setattr(fn, _RESOURCE_ATTR, spec)

        server = get_active_server()
        if server is not None:
            server.add_resource(spec)
        return fn

    return decorator


def extract_resource(fn: Callable[..., Any]) -> Resource | None:
    spec = getattr(fn, _RESOURCE_ATTR, None)
    return spec if isinstance(spec, Resource) else None


__all__ = ["Resource", "ResourceFn", "extract_resource", "resource"]
