# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Builders for tool content items."""

from __future__ import annotations

import base64
from pathlib import Path

import anyio
import filetype
import httpx

from . import types


DEFAULT_IMAGE_MIME_TYPE = "image/png"


async def image_content(
    *,
    url: str | None = None,
    path: str | Path | None = None,
    data: bytes | None = None,
    timeout: float = 30.0,
    client: httpx.AsyncClient | None = None,
) -> types.ImageContent:
    """Build an ``ImageContent`` item from exactly one source.

    The MIME type is sniffed from the bytes and falls back to ``image/png``
    when the format is not recognised. A caller-owned *client* is used for
    *url* when given and left open afterwards.

    Raises:
        ValueError: If zero or several sources are given.
        httpx.HTTPStatusError: If fetching *url* returns an error status.
    """
    if sum(source is not None for source in (url, path, data)) != 1:
        raise ValueError("Provide exactly one of 'url', 'path' or 'data'")

    if url is not None:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
                response = await owned.get(url)
        else:
            response = await client.get(url, timeout=timeout)
        response.raise_for_status()
        raw = response.content
    elif path is not None:
        raw = await anyio.Path(path).read_bytes()
    else:
        raw = bytes(data or b"")

    mime_type = filetype.guess_mime(raw) or DEFAULT_IMAGE_MIME_TYPE
    return types.ImageContent(type="image", data=base64.b64encode(raw).decode("ascii"), mimeType=mime_type)


__all__ = ["image_content"]
