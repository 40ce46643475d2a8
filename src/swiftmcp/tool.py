# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Tool definitions.

A tool is registered either directly::

    server.add_tool(Tool(name="add", execute=add, parameters=AddParams))

or with the ambient decorator inside :meth:`MCPServer.binding`::

    with server.binding():

        @tool(parameters=AddParams)
        async def add(args: AddParams, context: Context) -> str:
            return str(args.a + args.b)

``execute`` receives the validated parameter model (or the raw argument
mapping when the tool declares no parameters) and the per-call
:class:`~swiftmcp.context.Context`. It may be sync or async.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from . import types
from .binding import get_active_server
from .utils.schema import model_input_schema


if TYPE_CHECKING:  # pragma: no cover
    from .context import Context


ToolFn = Callable[[Any, "Context"], Any]

_TOOL_ATTR = "__swiftmcp_tool__"


@dataclass(slots=True)
class Tool:
    name: str
    execute: ToolFn
    description: str | None = None
    parameters: type[BaseModel] | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tool name must be a non-empty string")
        if self.parameters is not None and not (
            isinstance(self.parameters, type) and issubclass(self.parameters, BaseModel)
        ):
            raise TypeError(f"Tool '{self.name}' parameters must be a pydantic BaseModel subclass")

    @property
    def input_schema(self) -> dict[str, Any]:
        return model_input_schema(self.parameters)

    def parse_arguments(self, arguments: Mapping[str, Any] | None) -> Any:
        """Validate *arguments* against ``parameters``.

        Raises:
            pydantic.ValidationError: If the arguments do not fit the model.
        """
        raw = dict(arguments or {})
        if self.parameters is None:
            return raw
        return self.parameters.model_validate(raw)

    def to_wire(self) -> types.Tool:
        return types.Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


def tool(
    name: str | None = None,
    *,
    description: str | None = None,
    parameters: type[BaseModel] | None = None,
) -> Callable[[ToolFn], ToolFn]:
    """Mark a callable as a tool and register it with the binding server, if any.

    The description defaults to the function's docstring.
    """

    def decorator(fn: ToolFn) -> ToolFn:
        doc = description if description is not None else (fn.__doc__ or "").strip() or None
        spec = Tool(name=name or fn.__name__, execute=fn, description=doc, parameters=parameters)
        setattr(fn, _TOOL_ATTR, spec)

        server = get_active_server()
        if server is not None:
            server.add_tool(spec)
        return fn

    return decorator


def extract_tool(fn: Callable[..., Any]) -> Tool | None:
    """Return the :class:`Tool` attached to *fn* by :func:`tool`, if present."""
    spec = getattr(fn, _TOOL_ATTR, None)
    return spec if isinstance(spec, Tool) else None


__all__ = ["Tool", "ToolFn", "extract_tool", "tool"]
