"""
API route aggregator: register endpoints and delegate to handlers.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from app.api.handlers import handle_central_query, handle_service_health
from app.schemas.query import CentralQuery, QueryResponse

logger = logging.getLogger(__name__)
router = APIRouter()


# --- System ---

@router.get("/health", tags=["system"], response_class=PlainTextResponse)
def health() -> str:
    return "OK"


# --- Central query ---

@router.post(
    "/central/query",
    response_model=QueryResponse,
    tags=["query"],
    summary="Query a named RAG service",
    description="Resolve rag_name in the service registry and forward the query to its /query endpoint. "
    "query may be a full object or a bare string. Any failure returns 500 with a plain-text message.",
)
async def post_central_query(body: CentralQuery, request: Request) -> QueryResponse | Response:
    logger.info("[api:post_central_query] IN  rag_name=%r query=%r", body.rag_name, body.query.query)
    return await handle_central_query(body, request.app)


@router.get(
    "/central/services/{rag_name}/health",
    tags=["query"],
    summary="Probe a registered RAG service",
    description="Call the backend's /health. 404 if rag_name is not registered, 500 if the probe fails.",
)
async def get_service_health(rag_name: str, request: Request) -> Response:
    logger.info("[api:get_service_health] IN  rag_name=%r", rag_name)
    return await handle_service_health(rag_name, request.app)
