# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Completion requests for prompts, templates and resources."""

from __future__ import annotations

from mcp.shared.exceptions import McpError
import pytest

from swiftmcp import CompletionResult, Prompt, PromptArgument, Resource, ResourceTemplate, TemplateArgument, types
from tests.helpers import connected_client, make_session


COUNTRY_PROMPT = Prompt(
    name="travel",
    load=lambda arguments: f"Plan a trip to {arguments.get('country', 'anywhere')}",
    arguments=[PromptArgument(name="country", enum=["japan", "france"]), PromptArgument(name="notes")],
)


def _prompt_ref(name: str) -> types.PromptReference:
    return types.PromptReference(type="ref/prompt", name=name)


def _resource_ref(uri: str) -> types.ResourceTemplateReference:
    return types.ResourceTemplateReference(type="ref/resource", uri=uri)


@pytest.mark.anyio
async def test_enum_argument_is_fuzzy_matched() -> None:
    async with connected_client(make_session(COUNTRY_PROMPT)) as (client, _):
        result = await client.complete(_prompt_ref("travel"), {"name": "country", "value": "jap"})

    assert result.completion.values == ["japan"]
    assert result.completion.total == 1


@pytest.mark.anyio
async def test_unknown_or_plain_argument_completes_to_nothing() -> None:
    async with connected_client(make_session(COUNTRY_PROMPT)) as (client, _):
        plain = await client.complete(_prompt_ref("travel"), {"name": "notes", "value": "x"})
        unknown = await client.complete(_prompt_ref("travel"), {"name": "missing", "value": "x"})

    assert plain.completion.values == []
    assert unknown.completion.values == []


@pytest.mark.anyio
async def test_template_argument_uses_its_completer() -> None:
    async def complete_table(value: str) -> CompletionResult:
        tables = ["users", "orders", "invoices"]
        return CompletionResult(values=[t for t in tables if t.startswith(value)], total=len(tables))

    template = ResourceTemplate(
        "db://{table}",
        "tables",
        load=lambda variables: variables["table"],
        arguments=[TemplateArgument(name="table", complete=complete_table)],
    )

    async with connected_client(make_session(template)) as (client, _):
        result = await client.complete(_resource_ref("db://{table}"), {"name": "table", "value": "or"})

    assert result.completion.values == ["orders"]
    assert result.completion.total == 3


@pytest.mark.anyio
async def test_static_resource_completion() -> None:
    with_completer = Resource(uri="mem://colors", name="colors", load=lambda: "", complete=lambda value: ["red"])
    without = Resource(uri="mem://plain", name="plain", load=lambda: "")

    async with connected_client(make_session(with_completer, without)) as (client, _):
        result = await client.complete(_resource_ref("mem://colors"), {"name": "any", "value": "r"})
        with pytest.raises(McpError) as excinfo:
            await client.complete(_resource_ref("mem://plain"), {"name": "any", "value": "r"})

    assert result.completion.values == ["red"]
    assert excinfo.value.error.code == 0
    assert excinfo.value.error.message == "Resource does not support completion"


@pytest.mark.anyio
async def test_unknown_reference_is_an_unexpected_state() -> None:
    async with connected_client(make_session(COUNTRY_PROMPT)) as (client, _):
        with pytest.raises(McpError) as prompt_error:
            await client.complete(_prompt_ref("nope"), {"name": "country", "value": "j"})
        with pytest.raises(McpError) as resource_error:
            await client.complete(_resource_ref("db://{missing}"), {"name": "x", "value": ""})

    assert prompt_error.value.error.code == 0
    assert prompt_error.value.error.message == "Unknown prompt"
    assert resource_error.value.error.message == "Unknown resource"


@pytest.mark.anyio
async def test_oversized_completer_result_is_internal_error() -> None:
    flood = Prompt(
        name="flood",
        load=lambda arguments: "",
        arguments=[PromptArgument(name="word", complete=lambda value: [str(i) for i in range(101)])],
    )

    async with connected_client(make_session(flood)) as (client, _):
        with pytest.raises(McpError) as excinfo:
            await client.complete(_prompt_ref("flood"), {"name": "word", "value": ""})

    assert excinfo.value.error.code == types.INTERNAL_ERROR
