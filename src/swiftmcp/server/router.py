# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Request routing for one session.

:class:`RequestRouter` installs a handler for each supported request kind on a
low-level SDK ``Server``. Handlers read only the registry snapshot and the
request body; the only session state they touch is the logging level and the
roots refresh, both owned by the :class:`~swiftmcp.server.session.MCPSession`
the router was built for.

Failures map onto the wire as follows:

* unknown tool, resource or prompt: ``METHOD_NOT_FOUND``
* tool arguments failing validation: ``INVALID_PARAMS``
* missing required prompt argument: ``INVALID_REQUEST``
* resource or prompt ``load`` raising: ``INTERNAL_ERROR``
* unknown completion target: :class:`~swiftmcp.errors.UnexpectedStateError`
* tool ``execute`` raising: a successful result with ``isError: true``
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NoReturn

from mcp.server.lowlevel.server import Server, request_ctx
from mcp.shared.exceptions import McpError
from pydantic import ValidationError

from .. import types
from ..completion import run_completer
from ..context import Context, context_scope
from ..errors import UnexpectedStateError, UserError
from ..utils import maybe_await_with_args
from .adapters import normalize_tool_result, stamp_resource_contents


if TYPE_CHECKING:  # pragma: no cover
    import logging

    from .registry import RegistrySnapshot
    from .session import MCPSession


def _fail(code: int, message: str, data: Any | None = None) -> NoReturn:
    raise McpError(types.ErrorData(code=code, message=message, data=data))


class RequestRouter:
    """Binds protocol requests to the entries of a registry snapshot."""

    def __init__(self, registry: RegistrySnapshot, session: MCPSession, logger: logging.Logger) -> None:
        self._registry = registry
        self._session = session
        self._logger = logger

    def install(self, server: Server[Any, Any]) -> None:
        """Register handlers on *server* for every capability with entries.

        The SDK advertises a capability exactly when its request handler is
        present, so capabilities follow the registry contents.
        """
        handlers = server.request_handlers
        registry = self._registry

        if registry.tools:
            handlers[types.ListToolsRequest] = self.list_tools
            handlers[types.CallToolRequest] = self.call_tool
        if registry.resources or registry.resource_templates:
            handlers[types.ListResourcesRequest] = self.list_resources
            handlers[types.ListResourceTemplatesRequest] = self.list_resource_templates
            handlers[types.ReadResourceRequest] = self.read_resource
        if registry.prompts:
            handlers[types.ListPromptsRequest] = self.list_prompts
            handlers[types.GetPromptRequest] = self.get_prompt
        handlers[types.CompleteRequest] = self.complete
        handlers[types.SetLevelRequest] = self.set_logging_level

        server.notification_handlers[types.RootsListChangedNotification] = self.roots_list_changed

    # //////////////////////////////////////////////////////////////////
    # Tools
    # //////////////////////////////////////////////////////////////////

    async def list_tools(self, request: types.ListToolsRequest) -> types.ServerResult:
        tools = [tool.to_wire() for tool in self._registry.tools.values()]
        return types.ServerResult(types.ListToolsResult(tools=tools))

    async def call_tool(self, request: types.CallToolRequest) -> types.ServerResult:
        name = request.params.name
        tool = self._registry.tool(name)
        if tool is None:
            _fail(types.METHOD_NOT_FOUND, f"Unknown tool: {name}")

        try:
            arguments = tool.parse_arguments(request.params.arguments)
        except ValidationError as exc:
            _fail(
                types.INVALID_PARAMS,
                f"Invalid {name} parameters",
                exc.errors(include_url=False, include_context=False, include_input=False),
            )

        ctx = Context(mcp_session=self._session, request_context=request_ctx.get())
        try:
            with context_scope(ctx):
                output = await maybe_await_with_args(tool.execute, arguments, ctx)
            result = normalize_tool_result(output)
        except UserError as exc:
            self._logger.debug("Tool %s reported a user error: %s", name, exc)
            result = _error_result(str(exc))
        except Exception as exc:
            self._logger.warning("Tool %s failed", name, exc_info=True)
            result = _error_result(f"Error: {exc}")
        return types.ServerResult(result)

    # //////////////////////////////////////////////////////////////////
    # Resources
    # //////////////////////////////////////////////////////////////////

    async def list_resources(self, request: types.ListResourcesRequest) -> types.ServerResult:
        resources = [resource.to_wire() for resource in self._registry.resources.values()]
        return types.ServerResult(types.ListResourcesResult(resources=resources))

    async def list_resource_templates(self, request: types.ListResourceTemplatesRequest) -> types.ServerResult:
        templates = [template.to_wire() for template in self._registry.resource_templates.values()]
        return types.ServerResult(types.ListResourceTemplatesResult(resourceTemplates=templates))

    async def read_resource(self, request: types.ReadResourceRequest) -> types.ServerResult:
        uri = str(request.params.uri)

        resource = self._registry.resource(uri)
        if resource is not None:
            result = await self._load_resource(uri, resource.load)
            contents = stamp_resource_contents(
                result, uri=resource.uri, name=resource.name, mime_type=resource.mime_type
            )
            return types.ServerResult(types.ReadResourceResult(contents=contents))

        matched = self._registry.match_resource_template(uri)
        if matched is None:
            _fail(types.METHOD_NOT_FOUND, f"Unknown resource: {uri}")

        template, variables = matched
        result = await self._load_resource(uri, template.load, variables)
        canonical = template.matcher.expand(variables)
        contents = stamp_resource_contents(result, uri=canonical, name=template.name, mime_type=template.mime_type)
        return types.ServerResult(types.ReadResourceResult(contents=contents))

    async def _load_resource(self, uri: str, load: Any, *args: Any) -> Any:
        try:
            return await maybe_await_with_args(load, *args)
        except McpError:
            raise
        except Exception as exc:
            self._logger.error("Error reading resource %s", uri, exc_info=True)
            _fail(types.INTERNAL_ERROR, f"Error reading resource: {exc}", {"uri": uri})

    # //////////////////////////////////////////////////////////////////
    # Prompts
    # //////////////////////////////////////////////////////////////////

    async def list_prompts(self, request: types.ListPromptsRequest) -> types.ServerResult:
        prompts = [prompt.to_wire() for prompt in self._registry.prompts.values()]
        return types.ServerResult(types.ListPromptsResult(prompts=prompts))

    async def get_prompt(self, request: types.GetPromptRequest) -> types.ServerResult:
        name = request.params.name
        prompt = self._registry.prompt(name)
        if prompt is None:
            _fail(types.METHOD_NOT_FOUND, f"Unknown prompt: {name}")

        arguments = dict(request.params.arguments or {})
        missing = prompt.missing_arguments(arguments)
        if missing:
            _fail(types.INVALID_REQUEST, f"Missing required argument: {missing[0]}")

        try:
            text = await maybe_await_with_args(prompt.load, arguments)
        except McpError:
            raise
        except Exception as exc:
            self._logger.error("Error loading prompt %s", name, exc_info=True)
            _fail(types.INTERNAL_ERROR, f"Error loading prompt: {exc}")

        message = types.PromptMessage(role="user", content=types.TextContent(type="text", text=str(text)))
        return types.ServerResult(types.GetPromptResult(description=prompt.description, messages=[message]))

    # //////////////////////////////////////////////////////////////////
    # Completion
    # //////////////////////////////////////////////////////////////////

    async def complete(self, request: types.CompleteRequest) -> types.ServerResult:
        ref = request.params.ref
        argument = request.params.argument
        extras = {"request": request.model_dump(by_alias=True, mode="json", exclude_none=True)}

        if isinstance(ref, types.PromptReference):
            prompt = self._registry.prompt(ref.name)
            if prompt is None:
                raise UnexpectedStateError("Unknown prompt", extras)
            pending = prompt.complete(argument.name, argument.value)
        elif isinstance(ref, types.ResourceTemplateReference):
            template = self._registry.resource_template(ref.uri)
            if template is not None:
                pending = template.complete(argument.name, argument.value)
            else:
                resource = self._registry.resource(ref.uri)
                if resource is None:
                    raise UnexpectedStateError("Unknown resource", extras)
                if resource.complete is None:
                    raise UnexpectedStateError("Resource does not support completion", extras)
                pending = run_completer(resource.complete, argument.value)
        else:  # pragma: no cover - the schema only admits the two reference kinds
            raise UnexpectedStateError("Unexpected completion request", extras)

        try:
            completion = await pending
        except ValidationError as exc:
            self._logger.error("Completer for %s returned an invalid result", ref, exc_info=True)
            _fail(types.INTERNAL_ERROR, "Completion result does not match the completion shape", str(exc))
        return types.ServerResult(types.CompleteResult(completion=completion))

    # //////////////////////////////////////////////////////////////////
    # Logging and roots
    # //////////////////////////////////////////////////////////////////

    async def set_logging_level(self, request: types.SetLevelRequest) -> types.ServerResult:
        self._session.set_logging_level(request.params.level)
        return types.ServerResult(types.EmptyResult())

    async def roots_list_changed(self, notification: types.RootsListChangedNotification) -> None:
        self._session.schedule_roots_refresh()


def _error_result(text: str) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)], isError=True)


__all__ = ["RequestRouter"]
