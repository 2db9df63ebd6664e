"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Settings are read once at process start into a Settings object and
passed explicitly to registry loading, the HTTP client, and the server.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# Gateway listener
DEFAULT_BASE_IP: str = "127.0.0.1"
DEFAULT_BASE_PORT: str = "9699"

# Registry document (JSON: {"services": [{"rag_name", "rag_ip", "rag_port"}]})
DEFAULT_RAG_SERVICES_CONFIG: str = "rag_config.json"

# Backend the MCP tool is scoped to
DEFAULT_MCP_RAG_NAME: str = "software engineering"
DEFAULT_MCP_RAG_IP: str = "host.docker.internal"
DEFAULT_MCP_RAG_PORT: str = "9621"

MCP_SERVER_NAME: str = "kodabi-rag-gateway"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once by load_settings()."""

    base_ip: str = DEFAULT_BASE_IP
    base_port: str = DEFAULT_BASE_PORT
    rag_services_config: str = DEFAULT_RAG_SERVICES_CONFIG
    # When set, /central/query reloads the registry from disk on every request.
    reload_registry_per_request: bool = False
    # Outbound timeout in seconds; None waits until the transport gives up.
    request_timeout: float | None = None
    mcp_rag_name: str = DEFAULT_MCP_RAG_NAME
    mcp_rag_ip: str = DEFAULT_MCP_RAG_IP
    mcp_rag_port: str = DEFAULT_MCP_RAG_PORT


def _env(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


def _env_timeout(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from e
    return value if value > 0 else None


def load_settings() -> Settings:
    """Read KODABI_* environment variables into a Settings object."""
    return Settings(
        base_ip=_env("KODABI_BASE_IP", DEFAULT_BASE_IP),
        base_port=_env("KODABI_BASE_PORT", DEFAULT_BASE_PORT),
        rag_services_config=_env("KODABI_RAG_SERVICES_CONFIG", DEFAULT_RAG_SERVICES_CONFIG),
        reload_registry_per_request=os.getenv("KODABI_RAG_RELOAD_PER_REQUEST", "").strip().lower() in _TRUTHY,
        request_timeout=_env_timeout("KODABI_RAG_REQUEST_TIMEOUT"),
        mcp_rag_name=_env("KODABI_MCP_RAG_NAME", DEFAULT_MCP_RAG_NAME),
        mcp_rag_ip=_env("KODABI_MCP_RAG_IP", DEFAULT_MCP_RAG_IP),
        mcp_rag_port=_env("KODABI_MCP_RAG_PORT", DEFAULT_MCP_RAG_PORT),
    )
