# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Re-export of the MCP wire schema.

The reference SDK ships the protocol's Pydantic models under ``mcp.types``.
swiftmcp re-exports them so applications have a single import site, and adds
the ordered tuple of logging severities the engine compares against.
"""

from __future__ import annotations

from typing import Final

from mcp import types as _types


__all__ = tuple(name for name in dir(_types) if not name.startswith("_")) + ("LOGGING_LEVELS",)

globals().update({name: getattr(_types, name) for name in __all__ if name != "LOGGING_LEVELS"})

#: Logging severities from least to most severe.
LOGGING_LEVELS: Final[tuple[str, ...]] = (
    "debug",
    "info",
    "notice",
    "warning",
    "error",
    "critical",
    "alert",
    "emergency",
)
