"""
Shared fixtures: stub RAG backends (httpx.MockTransport) and gateway app state.
"""

import json
from collections.abc import Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import app
from app.schemas.registry import BackendEntry, Registry

Handler = Callable[[httpx.Request], httpx.Response]


def stub_client(handler: Handler) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by handler instead of the network."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def echo_backend(body: dict, calls: list[httpx.Request] | None = None) -> Handler:
    """Backend that records each request and answers 200 with body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(200, json=body)

    return handler


def unreachable_backend(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("All connection attempts failed", request=request)


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content)


@pytest.fixture
def registry() -> Registry:
    return Registry(services=[BackendEntry(rag_name="svc", rag_ip="1.2.3.4", rag_port="80")])


@pytest.fixture
def gateway(registry: Registry) -> Iterator[Callable[[Handler], TestClient]]:
    """
    Factory: gateway(handler) returns a TestClient whose app uses the test registry
    and forwards backend calls to handler. App state is reset afterwards.
    """

    def make(handler: Handler, settings: Settings | None = None) -> TestClient:
        app.state.settings = settings or Settings()
        app.state.registry = registry
        app.state.http_client = stub_client(handler)
        return TestClient(app)

    yield make
    for attr in ("settings", "registry", "http_client"):
        if hasattr(app.state, attr):
            delattr(app.state, attr)
