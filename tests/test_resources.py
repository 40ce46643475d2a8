# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Resource and resource-template reads over a live session."""

from __future__ import annotations

import base64

from mcp.shared.exceptions import McpError
import pytest

from swiftmcp import Resource, ResourceTemplate, types
from tests.helpers import connected_client, make_session


def _static(uri: str, text: str) -> Resource:
    return Resource(uri=uri, name=uri.rsplit("/", 1)[-1], load=lambda: text, mime_type="text/plain")


LOG_TEMPLATE = ResourceTemplate(
    "file:///logs/{name}.log", "log-files", load=lambda variables: "x", mime_type="text/plain"
)


@pytest.mark.anyio
async def test_list_resources_and_templates() -> None:
    session = make_session(_static("file:///a.log", "A"), _static("file:///b.log", "B"), LOG_TEMPLATE)

    async with connected_client(session) as (client, _):
        resources = await client.list_resources()
        templates = await client.list_resource_templates()

    assert [str(item.uri) for item in resources.resources] == ["file:///a.log", "file:///b.log"]
    assert [item.uriTemplate for item in templates.resourceTemplates] == ["file:///logs/{name}.log"]


@pytest.mark.anyio
async def test_read_static_resource() -> None:
    session = make_session(_static("file:///a.log", "A"), _static("file:///b.log", "B"))

    async with connected_client(session) as (client, _):
        result = await client.read_resource("file:///b.log")

    (entry,) = result.contents
    assert isinstance(entry, types.TextResourceContents)
    assert entry.text == "B"
    assert str(entry.uri) == "file:///b.log"
    assert entry.mimeType == "text/plain"


@pytest.mark.anyio
async def test_template_read_is_tagged_with_request_uri_and_template_name() -> None:
    seen: list[dict[str, str]] = []

    def load(variables: dict[str, str]) -> str:
        seen.append(variables)
        return "x"

    template = ResourceTemplate("file:///logs/{name}.log", "log-files", load=load)

    async with connected_client(make_session(template)) as (client, _):
        result = await client.read_resource("file:///logs/app.log")

    (entry,) = result.contents
    assert entry.text == "x"
    assert str(entry.uri) == "file:///logs/app.log"
    assert entry.model_dump()["name"] == "log-files"
    assert seen == [{"name": "app"}]


@pytest.mark.anyio
async def test_template_read_is_stamped_with_the_filled_template() -> None:
    template = ResourceTemplate("file:///logs/{name}.log", "log-files", load=lambda variables: variables["name"])

    async with connected_client(make_session(template)) as (client, _):
        result = await client.read_resource("file:///logs/my%7Eapp.log")

    (entry,) = result.contents
    assert entry.text == "my~app"
    assert str(entry.uri) == "file:///logs/my~app.log"


@pytest.mark.anyio
async def test_static_resource_wins_over_matching_template() -> None:
    session = make_session(_static("file:///logs/app.log", "static"), LOG_TEMPLATE)

    async with connected_client(session) as (client, _):
        result = await client.read_resource("file:///logs/app.log")

    assert result.contents[0].text == "static"


@pytest.mark.anyio
async def test_multiple_entries_and_binary_contents() -> None:
    def load() -> list[object]:
        return ["first", b"\x89PNG", {"text": "{}", "mimeType": "application/json"}]

    resource = Resource(uri="mem://bundle", name="bundle", load=load)

    async with connected_client(make_session(resource)) as (client, _):
        result = await client.read_resource("mem://bundle")

    first, blob, data = result.contents
    assert first.text == "first"
    assert isinstance(blob, types.BlobResourceContents)
    assert base64.b64decode(blob.blob) == b"\x89PNG"
    assert data.mimeType == "application/json"
    assert all(str(item.uri) == "mem://bundle" for item in result.contents)


@pytest.mark.anyio
async def test_unknown_resource_is_method_not_found() -> None:
    async with connected_client(make_session(LOG_TEMPLATE)) as (client, _):
        with pytest.raises(McpError) as excinfo:
            await client.read_resource("file:///etc/hosts")

    assert excinfo.value.error.code == types.METHOD_NOT_FOUND
    assert excinfo.value.error.message == "Unknown resource: file:///etc/hosts"


@pytest.mark.anyio
async def test_loader_failure_is_internal_error() -> None:
    async def load() -> str:
        raise OSError("disk gone")

    resource = Resource(uri="file:///broken", name="broken", load=load)

    async with connected_client(make_session(resource)) as (client, _):
        with pytest.raises(McpError) as excinfo:
            await client.read_resource("file:///broken")

    error = excinfo.value.error
    assert error.code == types.INTERNAL_ERROR
    assert error.message == "Error reading resource: disk gone"
    assert error.data == {"uri": "file:///broken"}


@pytest.mark.anyio
async def test_mapping_entries_from_static_and_template_loaders() -> None:
    static = Resource(uri="file:///a.log", name="a", load=lambda: {"text": "A"})
    logs = ResourceTemplate("file:///logs/{name}.log", "log-files", load=lambda variables: {"text": variables["name"]})

    async with connected_client(make_session(static, logs)) as (client, _):
        a = await client.read_resource("file:///a.log")
        x = await client.read_resource("file:///logs/x.log")
        with pytest.raises(McpError) as excinfo:
            await client.read_resource("file:///b.log")

    assert a.contents[0].text == "A"
    assert x.contents[0].text == "x"
    assert x.contents[0].model_dump()["name"] == "log-files"
    assert excinfo.value.error.code == types.METHOD_NOT_FOUND
