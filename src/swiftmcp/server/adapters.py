# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Normalization of handler return values into wire results.

Tool handlers may return a plain string, a single content item or a full
``{content, isError?}`` envelope; :func:`normalize_tool_result` turns any of
those into ``CallToolResult``. Resource loaders return one or many entries;
:func:`stamp_resource_contents` turns them into resource contents that carry
the identity of the resource they were read from.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from typing import Any, Union

from pydantic import TypeAdapter

from .. import types


__all__ = ["normalize_tool_result", "stamp_resource_contents"]

_CONTENT_TYPES = (
    types.TextContent,
    types.ImageContent,
    types.AudioContent,
    types.ResourceLink,
    types.EmbeddedResource,
)
_CONTENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(types.ContentBlock)

ResourceContents = Union[types.TextResourceContents, types.BlobResourceContents]


def normalize_tool_result(value: Any) -> types.CallToolResult:
    """Coerce a tool's return value into ``CallToolResult``.

    Envelopes pass through unchanged, so normalizing twice is a no-op.

    Raises:
        TypeError: If *value* is none of the accepted shapes.
        pydantic.ValidationError: If a mapping claims to be an envelope or a
            content item but does not validate as one.
    """
    if isinstance(value, types.CallToolResult):
        return value
    if isinstance(value, str):
        return types.CallToolResult(content=[types.TextContent(type="text", text=value)])
    if isinstance(value, _CONTENT_TYPES):
        return types.CallToolResult(content=[value])
    if isinstance(value, Mapping):
        if "content" in value:
            return types.CallToolResult.model_validate(dict(value))
        if "type" in value:
            return types.CallToolResult(content=[_CONTENT_ADAPTER.validate_python(dict(value))])
    raise TypeError(f"Unsupported tool result of type {type(value).__name__}")


def stamp_resource_contents(
    result: Any, *, uri: str, name: str, mime_type: str | None
) -> list[ResourceContents]:
    """Convert loader output into resource contents stamped with *uri* and *name*.

    An entry may override the MIME type but never the URI or name.
    """
    entries = list(result) if isinstance(result, (list, tuple)) else [result]
    return [_stamp(entry, uri=uri, name=name, mime_type=mime_type) for entry in entries]


def _stamp(entry: Any, *, uri: str, name: str, mime_type: str | None) -> ResourceContents:
    payload: dict[str, Any]
    if isinstance(entry, str):
        payload = {"text": entry}
    elif isinstance(entry, (bytes, bytearray)):
        payload = {"blob": bytes(entry)}
    elif isinstance(entry, (types.TextResourceContents, types.BlobResourceContents)):
        payload = entry.model_dump(by_alias=True, exclude_none=True)
    elif isinstance(entry, Mapping):
        payload = dict(entry)
    else:
        raise TypeError(f"Unsupported resource entry of type {type(entry).__name__}")

    if isinstance(payload.get("blob"), (bytes, bytearray)):
        payload["blob"] = base64.b64encode(payload["blob"]).decode("ascii")
    payload.pop("uri", None)
    payload.pop("name", None)

    stamped: dict[str, Any] = {"uri": uri, "name": name}
    if mime_type is not None:
        stamped["mimeType"] = mime_type
    stamped.update(payload)

    if "blob" in stamped:
        return types.BlobResourceContents.model_validate(stamped)
    if "text" in stamped:
        return types.TextResourceContents.model_validate(stamped)
    raise TypeError("Resource entries need a 'text' or 'blob' field")
