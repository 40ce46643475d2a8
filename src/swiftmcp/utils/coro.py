# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Helpers for calling handlers that may or may not be coroutines."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar


T = TypeVar("T")


async def maybe_await_with_args(fn: Callable[..., Awaitable[T] | T], *args: Any, **kwargs: Any) -> T:
    """Call *fn* with the given arguments and await the result if needed."""
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result


__all__ = ["maybe_await_with_args"]
