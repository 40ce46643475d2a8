# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Tool listing and invocation over a live session."""

from __future__ import annotations

from mcp.shared.exceptions import McpError
from pydantic import BaseModel
import pytest

from swiftmcp import Context, Tool, UserError, get_context, types
from tests.helpers import connected_client, make_session


class EchoParams(BaseModel):
    text: str


class FetchParams(BaseModel):
    url: str
    retries: int = 0


async def echo(args: EchoParams, ctx: Context) -> str:
    return args.text


ECHO = Tool(name="echo", execute=echo, description="Echo the given text", parameters=EchoParams)


@pytest.mark.anyio
async def test_list_tools_reports_input_schema() -> None:
    async with connected_client(make_session(ECHO)) as (client, _):
        result = await client.list_tools()

    (listed,) = result.tools
    assert listed.name == "echo"
    assert listed.description == "Echo the given text"
    assert listed.inputSchema["type"] == "object"
    assert listed.inputSchema["required"] == ["text"]
    assert "title" not in listed.inputSchema
    assert "title" not in listed.inputSchema["properties"]["text"]


@pytest.mark.anyio
async def test_call_tool_returns_text_content() -> None:
    async with connected_client(make_session(ECHO)) as (client, _):
        result = await client.call_tool("echo", {"text": "hello"})

    assert not result.isError
    assert [item.text for item in result.content] == ["hello"]


@pytest.mark.anyio
async def test_unknown_tool_is_method_not_found() -> None:
    calls: list[object] = []
    spy = Tool(name="spy", execute=lambda args, ctx: calls.append(args) or "ok")

    async with connected_client(make_session(spy)) as (client, _):
        with pytest.raises(McpError) as excinfo:
            await client.call_tool("missing", {})

    assert excinfo.value.error.code == types.METHOD_NOT_FOUND
    assert excinfo.value.error.message == "Unknown tool: missing"
    assert calls == []


@pytest.mark.anyio
async def test_invalid_arguments_are_rejected_before_execute() -> None:
    calls: list[object] = []

    def fetch(args: FetchParams, ctx: Context) -> str:
        calls.append(args)
        return args.url

    tool = Tool(name="fetch", execute=fetch, parameters=FetchParams)

    async with connected_client(make_session(tool)) as (client, _):
        with pytest.raises(McpError) as excinfo:
            await client.call_tool("fetch", {"retries": "many"})

    error = excinfo.value.error
    assert error.code == types.INVALID_PARAMS
    assert error.message == "Invalid fetch parameters"
    assert {tuple(item["loc"]) for item in error.data} == {("url",), ("retries",)}
    assert calls == []


@pytest.mark.anyio
async def test_user_error_message_is_shown_verbatim() -> None:
    def fetch(args: FetchParams, ctx: Context) -> str:
        raise UserError("bad url")

    tool = Tool(name="fetch", execute=fetch, parameters=FetchParams)

    async with connected_client(make_session(tool)) as (client, _):
        result = await client.call_tool("fetch", {"url": "nope"})

    assert result.isError is True
    assert result.content[0].text == "bad url"


@pytest.mark.anyio
async def test_unexpected_failure_becomes_error_result() -> None:
    def explode(args: dict[str, object], ctx: Context) -> str:
        raise ValueError(42)

    async with connected_client(make_session(Tool(name="explode", execute=explode))) as (client, _):
        result = await client.call_tool("explode", {})

    assert result.isError is True
    assert result.content[0].text == "Error: 42"


@pytest.mark.anyio
async def test_unsupported_return_value_becomes_error_result() -> None:
    tool = Tool(name="odd", execute=lambda args, ctx: 3.14)

    async with connected_client(make_session(tool)) as (client, _):
        result = await client.call_tool("odd", {})

    assert result.isError is True
    assert result.content[0].text.startswith("Error: Unsupported tool result")


@pytest.mark.anyio
async def test_tools_may_return_envelopes_and_content_items() -> None:
    def envelope(args: dict[str, object], ctx: Context) -> dict[str, object]:
        return {"content": [{"type": "text", "text": "soft failure"}], "isError": True}

    def image(args: dict[str, object], ctx: Context) -> types.ImageContent:
        return types.ImageContent(type="image", data="aGk=", mimeType="image/png")

    session = make_session(Tool(name="envelope", execute=envelope), Tool(name="image", execute=image))
    async with connected_client(session) as (client, _):
        soft = await client.call_tool("envelope", {})
        picture = await client.call_tool("image", {})

    assert soft.isError is True
    assert soft.content[0].text == "soft failure"
    assert picture.content[0].type == "image"


@pytest.mark.anyio
async def test_execute_receives_raw_arguments_and_ambient_context() -> None:
    seen: dict[str, object] = {}

    def inspect_call(args: dict[str, object], ctx: Context) -> str:
        seen["args"] = args
        seen["same_context"] = get_context() is ctx
        seen["auth"] = ctx.session
        return "done"

    session = make_session(Tool(name="inspect", execute=inspect_call), auth={"user": "ada"})
    async with connected_client(session) as (client, _):
        await client.call_tool("inspect", {"a": 1})

    assert seen == {"args": {"a": 1}, "same_context": True, "auth": {"user": "ada"}}
    with pytest.raises(LookupError):
        get_context()


@pytest.mark.anyio
async def test_tools_capability_follows_registry() -> None:
    async with connected_client(make_session()) as (client, _):
        capabilities = client.get_server_capabilities()

    assert capabilities is not None
    assert capabilities.tools is None
    assert capabilities.logging is not None


@pytest.mark.anyio
async def test_schemaless_tool_returning_string() -> None:
    hi = Tool(name="echo", execute=lambda args, ctx: "hi")

    async with connected_client(make_session(hi)) as (client, _):
        result = await client.call_tool("echo", {"anything": True})

    assert not result.isError
    assert result.model_dump(exclude_none=True)["content"] == [{"type": "text", "text": "hi"}]
