"""
Central query dispatch: resolve a named RAG backend and proxy the query to it.

Responsibility: Validate the central query, look the backend up in the registry,
POST the query to http://{host}:{port}/query, and parse the reply into a
QueryResponse. Exactly one outbound attempt per call; no retries.
Called by the HTTP and MCP adapters; no FastAPI types here.
"""

import logging

import httpx
from pydantic import ValidationError

from app.core.errors import (
    HandlerError,
    HandlerValidationError,
    NotFoundError,
    ProcessError,
    QueryFailedError,
    ServiceValidationError,
)
from app.schemas.query import CentralQuery, QueryRequest, QueryResponse
from app.schemas.registry import BackendEntry, Registry

logger = logging.getLogger(__name__)


async def query_backend(
    entry: BackendEntry,
    request: QueryRequest,
    client: httpx.AsyncClient,
) -> QueryResponse:
    """
    Send one query to one backend and parse its reply.

    Raises HandlerValidationError when the entry has no host or port (before any I/O),
    ProcessError on transport, body read, or response parse failure.
    """
    if not entry.host or not entry.port:
        raise HandlerValidationError(
            f"Check service information {entry.name}={entry.host}:{entry.port}"
        )

    url = entry.query_url
    payload = request.to_payload()
    logger.info("[query:query_backend] IN  url=%s mode=%s query=%r", url, payload.get("mode"), request.query)

    try:
        async with client.stream("POST", url, json=payload) as response:
            try:
                await response.aread()
            except httpx.HTTPError as e:
                raise ProcessError(f"Failed to read response body: {e!r}") from e
            body = response.text
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise ProcessError(f"Query request failed: {e!r}") from e

    logger.info("[query:query_backend] status=%d body_len=%d", response.status_code, len(body))

    try:
        parsed = QueryResponse.model_validate_json(body)
    except ValidationError as e:
        raise ProcessError(f"Failed to deserialize response into QueryResponse: {e}") from e

    logger.info("[query:query_backend] OUT response_len=%d references=%d", len(parsed.response), len(parsed.references))
    return parsed


async def execute_central_query(
    central: CentralQuery,
    registry: Registry,
    client: httpx.AsyncClient,
) -> QueryResponse:
    """
    Pipeline: validate rag_name → resolve in registry → query backend → parsed response.

    Raises ServiceValidationError (empty rag_name), NotFoundError (unknown rag_name),
    QueryFailedError (anything that went wrong talking to the backend).
    """
    logger.info("[query:execute_central_query] IN  rag_name=%r", central.rag_name)
    if not central.rag_name:
        raise ServiceValidationError(f"Rag service is empty: {central.rag_name!r}")

    entry = registry.find_by_name(central.rag_name)
    if entry is None:
        raise NotFoundError(f"Service not found: {central.rag_name}")
    logger.info("[query:execute_central_query] resolved %s", entry.service_detail)

    try:
        response = await query_backend(entry, central.query, client)
    except HandlerError as e:
        raise QueryFailedError(f"{entry.name}: {e}") from e
    return response
