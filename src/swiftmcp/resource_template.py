# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Parametrized resources addressed by a ``{variable}`` URI template.

``load`` receives a ``dict[str, str]`` of the variables extracted from the
requested URI and returns entries in the same shapes a static
:class:`~swiftmcp.resource.Resource` accepts.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from . import types
from .binding import get_active_server
from .completion import Completer, complete_argument
from .utils.uri_template import UriTemplate


ResourceTemplateFn = Callable[[dict[str, str]], Any]

_TEMPLATE_ATTR = "__swiftmcp_resource_template__"


@dataclass(slots=True)
class TemplateArgument:
    name: str
    description: str | None = None
    complete: Completer | None = None
    enum: Sequence[str] | None = None


@dataclass(slots=True)
class ResourceTemplate:
    """A resource template and its completable arguments.

    Placeholders without a matching entry in ``arguments`` get a bare
    :class:`TemplateArgument`, so every variable is completable (with an empty
    result) and listed in declaration order.
    """

    uri_template: str
    name: str
    load: ResourceTemplateFn
    arguments: list[TemplateArgument] = field(default_factory=list)
    description: str | None = None
    mime_type: str | None = None
    matcher: UriTemplate = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.matcher = UriTemplate(self.uri_template)
        declared = {argument.name for argument in self.arguments}
        unknown = declared.difference(self.matcher.variables)
        if unknown:
            raise ValueError(
                f"Resource template {self.uri_template!r} declares arguments missing from the URI: "
                + ", ".join(sorted(unknown))
            )
        self.arguments = list(self.arguments) + [
            TemplateArgument(name=variable) for variable in self.matcher.variables if variable not in declared
        ]

    def argument(self, name: str) -> TemplateArgument | None:
        return next((argument for argument in self.arguments if argument.name == name), None)

    async def complete(self, name: str, value: str) -> types.Completion:
        return await complete_argument(self.argument(name), value)

    def to_wire(self) -> types.ResourceTemplate:
        return types.ResourceTemplate(
            uriTemplate=self.uri_template, name=self.name, description=self.description, mimeType=self.mime_type
        )


def resource_template(
    uri_template: str,
    *,
    name: str | None = None,
    description: str | None = None,
    mime_type: str | None = None,
    arguments: Sequence[TemplateArgument] = (),
) -> Callable[[ResourceTemplateFn], ResourceTemplateFn]:
    """Mark a callable as the loader for every URI matching *uri_template*."""

    def decorator(fn: ResourceTemplateFn) -> ResourceTemplateFn:
        spec = ResourceTemplate(
            uri_template=uri_template,
            name=name or fn.__name__,
            load=fn,
            arguments=list(arguments),
            description=description if description is not None else (fn.__doc__ or "").strip() or None,
            mime_type=mime_type,
        )
        setattr(fn, _TEMPLATE_ATTR, spec)

        server = get_active_server()
        if server is not None:
            server.add_resource_template(spec)
        return fn

    return decorator


def extract_resource_template(fn: Callable[..., Any]) -> ResourceTemplate | None:
    spec = getattr(fn, _TEMPLATE_ATTR, None)
    return spec if isinstance(spec, ResourceTemplate) else None


__all__ = [
    "ResourceTemplate",
    "ResourceTemplateFn",
    "TemplateArgument",
    "extract_resource_template",
    "resource_template",
]
