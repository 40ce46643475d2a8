# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Argument completion for prompts and resource templates.

Each completable argument resolves suggestions in a fixed order: its own
completer when one is attached, otherwise a fuzzy match of the partial value
against the argument's enumerated values, otherwise nothing. Whatever a
completer returns is checked against the wire shape before it leaves the
server; at most :data:`MAX_COMPLETION_VALUES` suggestions are ever sent.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field
from rapidfuzz import fuzz, process, utils as fuzz_utils

from . import types
from .utils import maybe_await_with_args


MAX_COMPLETION_VALUES: Final[int] = 100

#: Minimum rapidfuzz ``WRatio`` score for an enumerated value to be suggested.
FUZZY_SCORE_CUTOFF: Final[float] = 60.0


@dataclass(slots=True)
class CompletionResult:
    """Completion payload returned by completers.

    Mirrors ``types.Completion`` with a Pythonic ``has_more`` spelling.
    """

    values: Iterable[str]
    total: int | None = None
    has_more: bool | None = None


CompletionReturn = Union[CompletionResult, types.Completion, Mapping[str, Any], Iterable[str], None]
Completer = Callable[[str], Union[CompletionReturn, Awaitable[CompletionReturn]]]


class CompletableArgument(Protocol):
    """Shape shared by prompt and resource-template arguments."""

    name: str
    complete: Completer | None
    enum: Sequence[str] | None


class CompletionShape(BaseModel):
    """The only completion payload the server will send."""

    model_config = ConfigDict(extra="forbid")

    values: list[str] = Field(max_length=MAX_COMPLETION_VALUES)
    total: int | None = None
    hasMore: bool | None = None  # noqa: N815


def coerce_completion(value: CompletionReturn) -> types.Completion:
    """Validate a completer's return value and convert it to ``types.Completion``.

    Raises:
        TypeError: If *value* is not one of the supported return shapes.
        pydantic.ValidationError: If the payload breaks the completion shape,
            for example by carrying more than 100 values.
    """
    data: dict[str, Any]
    if value is None:
        data = {"values": []}
    elif isinstance(value, CompletionResult):
        data = {"values": list(value.values), "total": value.total, "hasMore": value.has_more}
    elif isinstance(value, types.Completion):
        data = value.model_dump(exclude_none=True)
    elif isinstance(value, Mapping):
        data = dict(value)
    elif isinstance(value, str):
        data = {"values": [value]}
    elif isinstance(value, Iterable):
        data = {"values": list(value)}
    else:
        raise TypeError(f"Unsupported completion result: {type(value).__name__}")

    shape = CompletionShape.model_validate(data)
    return types.Completion(values=shape.values, total=shape.total, hasMore=shape.hasMore)


def fuzzy_complete(value: str, choices: Sequence[str], *, score_cutoff: float = FUZZY_SCORE_CUTOFF) -> CompletionResult:
    """Rank *choices* by typo-tolerant similarity to the partial *value*.

    ``total`` reports how many choices matched, even when more than
    :data:`MAX_COMPLETION_VALUES` did. An empty partial value matches nothing.
    """
    if not value or not choices:
        return CompletionResult(values=[])

    matches = process.extract(
        value,
        choices,
        scorer=fuzz.WRatio,
        processor=fuzz_utils.default_process,
        limit=None,
        score_cutoff=score_cutoff,
    )
    ranked = [choice for choice, _score, _index in matches]
    return CompletionResult(
        values=ranked[:MAX_COMPLETION_VALUES],
        total=len(ranked),
        has_more=len(ranked) > MAX_COMPLETION_VALUES or None,
    )


async def run_completer(completer: Completer, value: str) -> types.Completion:
    """Call *completer* with the partial *value* and validate what it returns."""
    return coerce_completion(await maybe_await_with_args(completer, value))


async def complete_argument(argument: CompletableArgument | None, value: str) -> types.Completion:
    """Resolve suggestions for *value* of *argument*.

    An unknown argument (``None``) yields an empty suggestion set.
    """
    if argument is None:
        return coerce_completion(None)
    if argument.complete is not None:
        return await run_completer(argument.complete, value)
    if argument.enum:
        return coerce_completion(fuzzy_complete(value, argument.enum))
    return coerce_completion(None)


__all__ = [
    "MAX_COMPLETION_VALUES",
    "CompletableArgument",
    "Completer",
    "CompletionResult",
    "CompletionShape",
    "coerce_completion",
    "complete_argument",
    "fuzzy_complete",
    "run_completer",
]
