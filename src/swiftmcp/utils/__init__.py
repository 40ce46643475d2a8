# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Utility helpers for swiftmcp."""

from __future__ import annotations

from .coro import maybe_await_with_args
from .logger import get_logger, setup_logger
from .uri_template import UriTemplate, match_template


__all__ = [
    "UriTemplate",
    "get_logger",
    "match_template",
    "maybe_await_with_args",
    "setup_logger",
]
