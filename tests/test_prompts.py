# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Prompt listing and rendering over a live session."""

from __future__ import annotations

from mcp.shared.exceptions import McpError
import pytest

from swiftmcp import MCPServer, Prompt, PromptArgument, prompt, types
from tests.helpers import connected_client, make_session


def _greet(arguments: dict[str, str]) -> str:
    return f"Say hello to {arguments['name']}"


GREET = Prompt(
    name="greet",
    load=_greet,
    description="Generate a greeting",
    arguments=[PromptArgument(name="name", description="Person to greet", required=True), PromptArgument("tone")],
)


@pytest.mark.anyio
async def test_list_prompts_reports_arguments() -> None:
    async with connected_client(make_session(GREET)) as (client, _):
        result = await client.list_prompts()

    (listed,) = result.prompts
    assert listed.name == "greet"
    assert [(arg.name, arg.required) for arg in listed.arguments or []] == [("name", True), ("tone", False)]


@pytest.mark.anyio
async def test_get_prompt_returns_single_user_message() -> None:
    async with connected_client(make_session(GREET)) as (client, _):
        result = await client.get_prompt("greet", {"name": "Ada"})

    assert result.description == "Generate a greeting"
    (message,) = result.messages
    assert message.role == "user"
    assert message.content.text == "Say hello to Ada"


@pytest.mark.anyio
async def test_missing_required_argument_is_rejected_before_load() -> None:
    calls: list[dict[str, str]] = []

    def load(arguments: dict[str, str]) -> str:
        calls.append(arguments)
        return "never"

    needs_topic = Prompt(name="needs-topic", load=load, arguments=[PromptArgument(name="topic", required=True)])

    async with connected_client(make_session(needs_topic)) as (client, _):
        with pytest.raises(McpError) as excinfo:
            await client.get_prompt("needs-topic", {})

    assert excinfo.value.error.code == types.INVALID_REQUEST
    assert excinfo.value.error.message == "Missing required argument: topic"
    assert calls == []


@pytest.mark.anyio
async def test_unknown_prompt_and_loader_failure() -> None:
    async def broken(arguments: dict[str, str]) -> str:
        raise RuntimeError("template missing")

    session = make_session(Prompt(name="broken", load=broken))

    async with connected_client(session) as (client, _):
        with pytest.raises(McpError) as unknown:
            await client.get_prompt("nope")
        with pytest.raises(McpError) as failed:
            await client.get_prompt("broken")

    assert unknown.value.error.code == types.METHOD_NOT_FOUND
    assert failed.value.error.code == types.INTERNAL_ERROR
    assert failed.value.error.message == "Error loading prompt: template missing"


@pytest.mark.anyio
async def test_decorated_prompt_registers_inside_binding() -> None:
    server = MCPServer("prompts")

    with server.binding():

        @prompt("summarize", arguments=[PromptArgument(name="topic", required=True)])
        async def summarize(arguments: dict[str, str]) -> str:
            """Summarize a topic."""
            return f"Summarize {arguments['topic']}"

    async with connected_client(server) as (client, _):
        listed = await client.list_prompts()
        result = await client.get_prompt("summarize", {"topic": "tides"})

    assert listed.prompts[0].description == "Summarize a topic."
    assert result.messages[0].content.text == "Summarize tides"
