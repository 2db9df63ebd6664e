"""
MCP rag query tool: lets an LLM agent ask a RAG service through a standardized
tool interface instead of the raw /central/query endpoint.

The tool converts its arguments into a CentralQuery and runs the same dispatch
pipeline, against a registry holding only the configured tool backend
(KODABI_MCP_RAG_NAME / _IP / _PORT). Exposed over HTTP at POST /mcp/info and over
stdio by app.mcp.stdio.
"""

import logging

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from mcp.types import CallToolResult, TextContent, Tool

from app.core.app_state import get_http_client, get_settings
from app.core.config import Settings
from app.core.errors import ServiceError
from app.schemas.query import QueryResponse
from app.schemas.registry import BackendEntry, Registry
from app.schemas.tool import ToolQuery
from app.services.query_service import execute_central_query

logger = logging.getLogger(__name__)

RAG_QUERY_TOOL_NAME = "rag_query"

SERVER_INSTRUCTIONS = (
    "Provides LightRAG microservice capabilities: ask a named RAG service a question "
    "and get its answer as text."
)


def rag_query_tool() -> Tool:
    """MCP tool definition for discovery (tools/list)."""
    return Tool(
        name=RAG_QUERY_TOOL_NAME,
        description="Asks the software engineering RAG service via MCP to process a query",
        inputSchema=ToolQuery.model_json_schema(),
    )


def tool_registry(settings: Settings) -> Registry:
    """The single backend the tool is allowed to reach."""
    return Registry(
        services=[
            BackendEntry(
                rag_name=settings.mcp_rag_name,
                rag_ip=settings.mcp_rag_ip,
                rag_port=settings.mcp_rag_port,
            )
        ]
    )


async def ask_rag(tool_query: ToolQuery, settings: Settings, client: httpx.AsyncClient) -> QueryResponse:
    """Run the tool's query through the dispatcher. Raises ServiceError."""
    logger.info("MCP tool called: %s rag_name=%r", RAG_QUERY_TOOL_NAME, tool_query.rag_name)
    central = tool_query.to_central_query()
    return await execute_central_query(central, tool_registry(settings), client)


async def call_rag_tool(tool_query: ToolQuery, settings: Settings, client: httpx.AsyncClient) -> CallToolResult:
    """Tool call result: the answer text on success, an error result carrying the failure otherwise."""
    try:
        response = await ask_rag(tool_query, settings, client)
    except ServiceError as e:
        logger.warning("MCP tool %s failed: %s", RAG_QUERY_TOOL_NAME, e)
        return CallToolResult(content=[TextContent(type="text", text=str(e))], isError=True)
    logger.info("MCP tool %s answered response_len=%d", RAG_QUERY_TOOL_NAME, len(response.response))
    return CallToolResult(content=[TextContent(type="text", text=response.response)], isError=False)


def tool_result_text(result: CallToolResult) -> str:
    return "\n".join(c.text for c in result.content if isinstance(c, TextContent))


mcp_router = APIRouter(tags=["mcp"])


@mcp_router.post(
    "/info",
    summary="MCP tool: rag_query",
    description="This endpoint acts as an MCP tool server, allowing external agents to ask the RAG service "
    "through a standardized interface. Returns a tool call result; 500 with plain text on failure.",
)
async def mcp_info(body: ToolQuery, request: Request) -> Response:
    """
    Call the rag query tool over HTTP. A successful call returns the CallToolResult
    envelope; an error result is returned as a 500 with the error text.
    """
    result = await call_rag_tool(body, get_settings(request.app), get_http_client(request.app))
    if result.isError:
        return PlainTextResponse(tool_result_text(result), status_code=500)
    return JSONResponse(result.model_dump(mode="json", by_alias=True, exclude_none=True))
