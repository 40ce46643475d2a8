# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Registries of tools, resources, resource templates and prompts.

The host populates a :class:`Registry` before serving. Each session receives a
:class:`RegistrySnapshot`, an immutable view whose lookups need no locking.
Keys are unique within each collection and registration order is kept for
list responses.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Annotated, Generic, TypeVar

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from ..prompt import Prompt
from ..resource import Resource
from ..resource_template import ResourceTemplate
from ..tool import Tool
from ..utils.uri_template import match_template


__all__ = ["Registry", "RegistrySnapshot", "normalize_uri"]

_URI_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(Annotated[AnyUrl, UrlConstraints(host_required=False)])

T = TypeVar("T")


def normalize_uri(uri: str) -> str:
    """Return *uri* as the wire schema would render it.

    Request URIs arrive parsed as ``AnyUrl`` (``https://example.com`` becomes
    ``https://example.com/``), so registered URIs are compared in the same form.
    Strings that are not valid URLs are returned untouched.
    """
    try:
        return str(_URI_ADAPTER.validate_python(uri))
    except ValidationError:
        return uri


class _Collection(Generic[T]):
    def __init__(self, kind: str) -> None:
        self.kind = kind
        self.items: dict[str, T] = {}

    def add(self, key: str, item: T) -> None:
        if key in self.items:
            raise ValueError(f"{self.kind} '{key}' is already registered")
        self.items[key] = item


@dataclass(frozen=True, slots=True)
class RegistrySnapshot:
    """Read-only view of a registry at the moment a session was created."""

    tools: Mapping[str, Tool] = field(default_factory=dict)
    resources: Mapping[str, Resource] = field(default_factory=dict)
    resource_templates: Mapping[str, ResourceTemplate] = field(default_factory=dict)
    prompts: Mapping[str, Prompt] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("tools", "resources", "resource_templates", "prompts"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def tool(self, name: str) -> Tool | None:
        return self.tools.get(name)

    def prompt(self, name: str) -> Prompt | None:
        return self.prompts.get(name)

    def resource(self, uri: str) -> Resource | None:
        return self.resources.get(normalize_uri(uri))

    def resource_template(self, uri_template: str) -> ResourceTemplate | None:
        return self.resource_templates.get(uri_template)

    def match_resource_template(self, uri: str) -> tuple[ResourceTemplate, dict[str, str]] | None:
        """Return the first template, in registration order, matching *uri*."""
        return match_template(
            ((template.matcher, template) for template in self.resource_templates.values()),
            uri,
        )


class Registry:
    """Mutable registry owned by the host until it is frozen at startup."""

    def __init__(self) -> None:
        self._tools: _Collection[Tool] = _Collection("Tool")
        self._resources: _Collection[Resource] = _Collection("Resource")
        self._templates: _Collection[ResourceTemplate] = _Collection("Resource template")
        self._prompts: _Collection[Prompt] = _Collection("Prompt")
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject further registrations; sessions may now be created."""
        self._frozen = True

    def _check_open(self, kind: str) -> None:
        if self._frozen:
            raise RuntimeError(f"{kind} registration attempted after server startup")

    def add_tool(self, tool: Tool) -> None:
        self._check_open("Tool")
        self._tools.add(tool.name, tool)

    def add_resource(self, resource: Resource) -> None:
        self._check_open("Resource")
        self._resources.add(normalize_uri(resource.uri), resource)

    def add_resource_template(self, template: ResourceTemplate) -> None:
        self._check_open("Resource template")
        self._templates.add(template.uri_template, template)

    def add_prompt(self, prompt: Prompt) -> None:
        self._check_open("Prompt")
        self._prompts.add(prompt.name, prompt)

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            tools=self._tools.items,
            resources=self._resources.items,
            resource_templates=self._templates.items,
            prompts=self._prompts.items,
        )
