# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""swiftmcp: a session engine for Model Context Protocol servers."""

from __future__ import annotations

from . import types
from .completion import CompletionResult
from .content import image_content
from .context import Context, get_context
from .errors import (
    AuthenticationError,
    SessionAlreadyConnectedError,
    SessionClosedError,
    SwiftMCPError,
    UnexpectedStateError,
    UserError,
)
from .prompt import Prompt, PromptArgument, prompt
from .resource import Resource, resource
from .resource_template import ResourceTemplate, TemplateArgument, resource_template
from .server import (
    ConnectEvent,
    DisconnectEvent,
    MCPServer,
    MCPSession,
    RootsChangedEvent,
    SessionConfig,
    SessionErrorEvent,
    SSEOptions,
)
from .tool import Tool, tool


__all__ = [
    "AuthenticationError",
    "CompletionResult",
    "ConnectEvent",
    "Context",
    "DisconnectEvent",
    "MCPServer",
    "MCPSession",
    "Prompt",
    "PromptArgument",
    "Resource",
    "ResourceTemplate",
    "RootsChangedEvent",
    "SSEOptions",
    "SessionAlreadyConnectedError",
    "SessionClosedError",
    "SessionConfig",
    "SessionErrorEvent",
    "SwiftMCPError",
    "TemplateArgument",
    "Tool",
    "UnexpectedStateError",
    "UserError",
    "get_context",
    "image_content",
    "prompt",
    "resource",
    "resource_template",
    "tool",
    "types",
]
