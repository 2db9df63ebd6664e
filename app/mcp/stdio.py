"""
MCP stdio server for the rag query tool.

Run from project root: python -m app.mcp.stdio
"""

import asyncio
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from app.core.app_state import new_http_client
from app.core.config import MCP_SERVER_NAME, load_settings
from app.mcp.server import RAG_QUERY_TOOL_NAME, SERVER_INSTRUCTIONS, ask_rag, rag_query_tool
from app.schemas.tool import ToolQuery

logger = logging.getLogger(__name__)

settings = load_settings()
server = Server(MCP_SERVER_NAME, instructions=SERVER_INSTRUCTIONS)


@server.list_tools()
async def list_tools() -> list[Tool]:
    return [rag_query_tool()]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls. Raised errors reach the client as MCP error results."""
    if name != RAG_QUERY_TOOL_NAME:
        raise ValueError(f"Unknown tool: {name}")
    tool_query = ToolQuery.model_validate(arguments or {})
    async with new_http_client(settings) as client:
        response = await ask_rag(tool_query, settings, client)
    return [TextContent(type="text", text=response.response)]


async def main() -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    # stdout carries the protocol; logs go to stderr.
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
