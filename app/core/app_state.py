"""
Process-wide gateway state kept on app.state: settings, the registry, and the
shared outbound HTTP client.

The lifespan in app.main fills these at startup. Settings and the registry are also
loaded on first use. The HTTP client is only opened by the lifespan, inside the
serving event loop, so its pooled connections are never bound to another loop.
"""

import logging

import httpx
from fastapi import FastAPI

from app.core.config import Settings, load_settings
from app.core.errors import HandlerError
from app.schemas.registry import Registry
from app.services.registry_service import load_registry

logger = logging.getLogger(__name__)


def new_http_client(settings: Settings) -> httpx.AsyncClient:
    """Outbound client for backend calls. Timeout None waits on the transport."""
    return httpx.AsyncClient(timeout=httpx.Timeout(settings.request_timeout))


def get_settings(app: FastAPI) -> Settings:
    settings = getattr(app.state, "settings", None)
    if settings is None:
        settings = load_settings()
        app.state.settings = settings
    return settings


def get_http_client(app: FastAPI) -> httpx.AsyncClient:
    """Shared client opened by init_state. Raises RuntimeError if the lifespan has not run."""
    client = getattr(app.state, "http_client", None)
    if client is None:
        raise RuntimeError("HTTP client is not open; start the app through its lifespan")
    return client


def get_registry(app: FastAPI) -> Registry:
    """
    Registry for /central/query. Cached after the first load unless
    settings.reload_registry_per_request is set, in which case every call re-reads the file.
    Raises ReadFileError / FileJsonParseError from load_registry.
    """
    settings = get_settings(app)
    if settings.reload_registry_per_request:
        return load_registry(settings.rag_services_config)
    registry = getattr(app.state, "registry", None)
    if registry is None:
        registry = load_registry(settings.rag_services_config)
        app.state.registry = registry
    return registry


async def init_state(app: FastAPI, settings: Settings) -> None:
    """Startup: remember settings, open the HTTP client, load the registry if present."""
    app.state.settings = settings
    app.state.http_client = new_http_client(settings)
    if settings.reload_registry_per_request:
        logger.info("[app_state:init_state] registry reloads per request from %s", settings.rag_services_config)
        return
    try:
        app.state.registry = load_registry(settings.rag_services_config)
    except HandlerError as e:
        # Left unset: /central/query retries the load and reports the error per request.
        logger.warning("Failed to load RAG registry at startup: %s", e)


async def close_state(app: FastAPI) -> None:
    """Shutdown: close the shared HTTP client."""
    client = getattr(app.state, "http_client", None)
    if client is not None:
        await client.aclose()
        app.state.http_client = None
