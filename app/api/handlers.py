"""
API handlers: obtain registry and HTTP client, call services, map results/errors to HTTP.

Every gateway error becomes a 500 with the error text as text/plain, so callers
cannot tell error kinds apart from the status code. The dispatcher and health
probe never see FastAPI request or response objects; this module does the translation.
"""

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from app.core.app_state import get_http_client, get_registry
from app.core.errors import ExternalCallError, GatewayError, NotFoundError
from app.schemas.query import CentralQuery, QueryResponse
from app.services.health_service import check_backend_health
from app.services.query_service import execute_central_query

logger = logging.getLogger(__name__)


def error_response(err: Exception) -> PlainTextResponse:
    return PlainTextResponse(str(err), status_code=500)


async def handle_central_query(body: CentralQuery, app: FastAPI) -> QueryResponse | Response:
    """Load the registry, dispatch the central query, return QueryResponse or a 500."""
    try:
        registry = get_registry(app)
        return await execute_central_query(body, registry, get_http_client(app))
    except GatewayError as e:
        logger.warning("[api:central_query] FAILED rag_name=%r error=%s", body.rag_name, e)
        return error_response(e)


async def handle_service_health(rag_name: str, app: FastAPI) -> Response:
    """Probe a registered backend's /health. 404 for unknown names, 500 for probe failures."""
    try:
        registry = get_registry(app)
    except GatewayError as e:
        return error_response(e)

    entry = registry.find_by_name(rag_name)
    if entry is None:
        return PlainTextResponse(str(NotFoundError(f"Service not found: {rag_name}")), status_code=404)

    try:
        status = await check_backend_health(entry, get_http_client(app))
    except ExternalCallError as e:
        logger.warning("[api:service_health] FAILED %s error=%s", entry.service_detail, e)
        return error_response(e)
    return JSONResponse({"rag_name": entry.rag_name, "address": entry.full_path, "status": status})
