# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Prompt definitions.

``load`` receives the caller's arguments as ``dict[str, str]`` and returns the
prompt text, which is sent back as a single user message. Arguments marked
``required`` are checked before ``load`` runs.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from . import types
from .binding import get_active_server
from .completion import Completer, complete_argument


PromptFn = Callable[[dict[str, str]], Any]

_PROMPT_ATTR = "__swiftmcp_prompt__"


@dataclass(slots=True)
class PromptArgument:
    name: str
    description: str | None = None
    required: bool = False
    enum: Sequence[str] | None = None
    complete: Completer | None = None


@dataclass(slots=True)
class Prompt:
    name: str
    load: PromptFn
    description: str | None = None
    arguments: list[PromptArgument] = field(default_factory=list)

    def __post_init__(self) -> None:
        names = [argument.name for argument in self.arguments]
        if len(names) != len(set(names)):
            raise ValueError(f"Prompt '{self.name}' declares duplicate argument names")

    def argument(self, name: str) -> PromptArgument | None:
        return next((argument for argument in self.arguments if argument.name == name), None)

    def missing_arguments(self, supplied: dict[str, str]) -> list[str]:
        return [argument.name for argument in self.arguments if argument.required and argument.name not in supplied]

    async def complete(self, name: str, value: str) -> types.Completion:
        return await complete_argument(self.argument(name), value)

    def to_wire(self) -> types.Prompt:
        return types.Prompt(
            name=self.name,
            description=self.description,
            arguments=[
                types.PromptArgument(name=argument.name, description=argument.description, required=argument.required)
                for argument in self.arguments
            ],
        )


def prompt(
    name: str | None = None,
    *,
    description: str | None = None,
    arguments: Sequence[PromptArgument] = (),
) -> Callable[[PromptFn], PromptFn]:
    """Mark a callable as a prompt loader."""

    def decorator(fn: PromptFn) -> PromptFn:
        spec = Prompt(
            name=name or fn.__name__,
            load=fn,
            description=description if description is not None else (fn.__doc__ or "").strip() or None,
            arguments=list(arguments),
        )
        setattr(fn, _PROMPT_ATTR, spec)

        server = get_active_server()
        if server is not None:
            server.add_prompt(spec)
        return fn

    return decorator


def extract_prompt(fn: Callable[..., Any]) -> Prompt | None:
    spec = getattr(fn, _PROMPT_ATTR, None)
    return spec if isinstance(spec, Prompt) else None


__all__ = ["Prompt", "PromptArgument", "PromptFn", "extract_prompt", "prompt"]
