"""
Tests for gateway state setup: the shared HTTP client only exists between
init_state and close_state.
"""

import asyncio
import json
from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI

from app.core.app_state import close_state, get_http_client, get_registry, init_state
from app.core.config import Settings


def test_http_client_not_created_outside_lifespan() -> None:
    with pytest.raises(RuntimeError, match="lifespan"):
        get_http_client(FastAPI())


def test_init_and_close_state(tmp_path: Path) -> None:
    path = tmp_path / "rag_config.json"
    path.write_text(json.dumps({"services": [{"rag_name": "svc", "rag_ip": "1.2.3.4", "rag_port": "80"}]}))
    app = FastAPI()

    async def lifecycle() -> httpx.AsyncClient:
        await init_state(app, Settings(rag_services_config=str(path)))
        client = get_http_client(app)
        assert get_registry(app).find_by_name("svc") is not None
        await close_state(app)
        return client

    client = asyncio.run(lifecycle())
    assert client.is_closed
    with pytest.raises(RuntimeError):
        get_http_client(app)


def test_init_state_tolerates_missing_registry(tmp_path: Path) -> None:
    app = FastAPI()

    async def lifecycle() -> None:
        await init_state(app, Settings(rag_services_config=str(tmp_path / "absent.json")))
        assert getattr(app.state, "registry", None) is None
        await close_state(app)

    asyncio.run(lifecycle())
