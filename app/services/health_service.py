"""
Backend health probing: GET http://{host}:{port}/health on a registered RAG service.

Independent of query dispatch; used by the service health endpoint.
"""

import logging
from typing import Any

import httpx

from app.core.errors import ExternalValidationError, HealthCheckError, ResponseError
from app.schemas.registry import BackendEntry

logger = logging.getLogger(__name__)


async def check_backend_health(entry: BackendEntry, client: httpx.AsyncClient) -> dict[str, Any]:
    """Return the backend's /health JSON body. Raises ExternalCallError subclasses on failure."""
    if not entry.host or not entry.port:
        raise ExternalValidationError(f"Check service information {entry.service_detail}")

    url = f"{entry.base_url}/health"
    logger.info("[health:check_backend_health] IN  url=%s", url)
    try:
        response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise HealthCheckError(f"{entry.service_detail} unreachable: {e!r}") from e

    if not response.is_success:
        raise ResponseError(f"{entry.service_detail} returned {response.status_code}: {response.text[:200]}")
    try:
        data = response.json()
    except ValueError as e:
        raise ResponseError(f"{entry.service_detail} returned a non-JSON body: {e}") from e

    logger.info("[health:check_backend_health] OUT status=%d", response.status_code)
    return data
