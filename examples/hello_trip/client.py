# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Minimal MCP client exercising the hello-trip server over SSE.

Run after starting ``server.py`` in another shell.

    python examples/hello_trip/client.py
"""

from __future__ import annotations

import asyncio

from mcp.client.session import ClientSession
from mcp.client.sse import sse_client

from swiftmcp import types


SERVER_URL = "http://127.0.0.1:8080/sse"


async def on_progress(progress: float, total: float | None, message: str | None) -> None:
    print(f"  progress {progress}/{total}: {message}")


async def main() -> None:
    async with sse_client(SERVER_URL) as streams, ClientSession(*streams) as client:
        init = await client.initialize()
        print("Connected to", init.serverInfo.name, "protocol", init.protocolVersion)

        result = await client.call_tool(
            "plan_trip", {"destination": "Barcelona", "days": 5, "budget": 2500}, progress_callback=on_progress
        )
        print("plan_trip result:", result.content[0].text)

        tips = await client.read_resource("travel://tips/kyoto")
        print("Template read:", tips.contents[0].text)

        completion = await client.complete(
            types.PromptReference(type="ref/prompt", name="plan-vacation"), {"name": "destination", "value": "kyot"}
        )
        print("Completions:", completion.completion.values)

        prompt = await client.get_prompt("plan-vacation", {"destination": "Kyoto"})
        print("Prompt:", prompt.messages[0].content.text)


if __name__ == "__main__":
    asyncio.run(main())
