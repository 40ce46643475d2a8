# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Minimal end-to-end swiftmcp server demo.

Usage::

    python examples/hello_trip/server.py --transport sse --port 8080

The server exposes:

* Tool ``plan_trip``: summarizes a travel plan while reporting progress
* Resource ``travel://tips/barcelona``: static travel tips
* Resource template ``travel://tips/{city}``: tips for any city
* Prompt ``plan-vacation``: completes ``destination`` from a fixed list

Try it alongside ``client.py`` to see the full flow.
"""

from __future__ import annotations

import asyncio

from pydantic import BaseModel

from swiftmcp import (
    Context,
    MCPServer,
    PromptArgument,
    SSEOptions,
    TemplateArgument,
    get_context,
    prompt,
    resource,
    resource_template,
    tool,
)


DESTINATIONS = ["barcelona", "lisbon", "kyoto", "osaka", "reykjavik"]


class TripParams(BaseModel):
    destination: str
    days: int
    budget: float


server = MCPServer("hello-trip", instructions="Plan short trips.")

with server.binding():

    @tool(description="Summarize a travel plan", parameters=TripParams)
    async def plan_trip(args: TripParams, ctx: Context) -> str:
        await ctx.log.info("planning trip", {"destination": args.destination, "days": args.days})
        for step, label in enumerate(("Gathering highlights", "Estimating costs", "Summarising itinerary"), 1):
            await get_context().report_progress(step, 3, message=label)
            await asyncio.sleep(0)
        return f"Plan: {args.days} days in {args.destination} with budget ${args.budget:.2f}."

    @resource("travel://tips/barcelona", name="Barcelona Tips", mime_type="text/plain")
    def barcelona_tips() -> str:
        return "Visit Sagrada Familia, explore the Gothic Quarter, and enjoy tapas on La Rambla."

    @resource_template(
        "travel://tips/{city}",
        name="City Tips",
        mime_type="text/plain",
        arguments=[TemplateArgument(name="city", enum=DESTINATIONS)],
    )
    def city_tips(variables: dict[str, str]) -> str:
        return f"No tips for {variables['city'].title()} yet."

    @prompt(
        "plan-vacation",
        description="Guide the model through planning a trip",
        arguments=[PromptArgument(name="destination", required=True, enum=DESTINATIONS)],
    )
    def plan_vacation(arguments: dict[str, str]) -> str:
        return f"Plan a vacation to {arguments['destination']}. Call plan_trip once the itinerary is clear."


async def main(transport: str = "sse", port: int = 8080) -> None:
    await server.serve(transport, sse=SSEOptions(port=port) if transport == "sse" else None)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Run the hello-trip MCP server")
    parser.add_argument("--transport", default="sse", choices=["sse", "stdio"], help="Transport to use")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args()

    asyncio.run(main(args.transport, args.port))
