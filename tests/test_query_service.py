"""
Unit tests for the central query dispatcher, using stub backends instead of the network.
"""

import asyncio

import httpx
import pytest

from conftest import echo_backend, request_json, stub_client, unreachable_backend

from app.core.errors import (
    HandlerValidationError,
    NotFoundError,
    ProcessError,
    QueryFailedError,
    ServiceValidationError,
)
from app.schemas.query import CentralQuery, QueryRequest, QueryResponse
from app.schemas.registry import BackendEntry, Registry
from app.services.query_service import execute_central_query, query_backend

PONG = {"response": "pong", "references": [{"reference_id": "1", "file_path": "docs/a.md"}]}


def _run(coro):
    return asyncio.run(coro)


class _BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        raise httpx.ReadError("connection reset while reading body")
        yield b""  # pragma: no cover


class TestQueryBackend:
    """Tests for query_backend()."""

    def test_posts_query_and_parses_response(self) -> None:
        calls: list[httpx.Request] = []
        entry = BackendEntry(rag_name="svc", rag_ip="1.2.3.4", rag_port="80")
        result = _run(query_backend(entry, QueryRequest(query="ping"), stub_client(echo_backend(PONG, calls))))
        assert result == QueryResponse.model_validate(PONG)
        assert len(calls) == 1
        sent = calls[0]
        assert sent.method == "POST"
        assert str(sent.url) == "http://1.2.3.4:80/query"
        assert sent.headers["content-type"] == "application/json"
        assert request_json(sent) == QueryRequest(query="ping").to_payload()

    @pytest.mark.parametrize("ip,port", [("", "80"), ("1.2.3.4", ""), ("", "")])
    def test_empty_host_or_port_rejected_without_network(self, ip: str, port: str) -> None:
        calls: list[httpx.Request] = []
        entry = BackendEntry(rag_name="svc", rag_ip=ip, rag_port=port)
        with pytest.raises(HandlerValidationError) as exc_info:
            _run(query_backend(entry, QueryRequest(query="ping"), stub_client(echo_backend(PONG, calls))))
        assert "Check service information" in str(exc_info.value)
        assert calls == []

    def test_transport_failure(self) -> None:
        entry = BackendEntry(rag_name="svc", rag_ip="1.2.3.4", rag_port="80")
        with pytest.raises(ProcessError) as exc_info:
            _run(query_backend(entry, QueryRequest(query="ping"), stub_client(unreachable_backend)))
        assert "Query request failed" in str(exc_info.value)
        assert "All connection attempts failed" in str(exc_info.value)

    def test_body_read_failure(self) -> None:
        entry = BackendEntry(rag_name="svc", rag_ip="1.2.3.4", rag_port="80")
        client = stub_client(lambda request: httpx.Response(200, stream=_BrokenStream()))
        with pytest.raises(ProcessError) as exc_info:
            _run(query_backend(entry, QueryRequest(query="ping"), client))
        assert "Failed to read response body" in str(exc_info.value)

    @pytest.mark.parametrize(
        "body",
        [b"not json", b'{"answer": "pong"}', b'{"response": "pong"}', b"[]"],
        ids=["not-json", "wrong-keys", "missing-references", "array"],
    )
    def test_unparseable_response(self, body: bytes) -> None:
        entry = BackendEntry(rag_name="svc", rag_ip="1.2.3.4", rag_port="80")
        client = stub_client(lambda request: httpx.Response(200, content=body))
        with pytest.raises(ProcessError) as exc_info:
            _run(query_backend(entry, QueryRequest(query="ping"), client))
        assert "Failed to deserialize response into QueryResponse" in str(exc_info.value)

    def test_references_are_not_deduplicated(self) -> None:
        ref = {"reference_id": "1", "file_path": "a.md"}
        body = {"response": "pong", "references": [ref, ref]}
        entry = BackendEntry(rag_name="svc", rag_ip="1.2.3.4", rag_port="80")
        result = _run(query_backend(entry, QueryRequest(query="ping"), stub_client(echo_backend(body))))
        assert result.model_dump() == body


class TestExecuteCentralQuery:
    """Tests for execute_central_query()."""

    def test_resolves_and_returns_backend_response(self, registry: Registry) -> None:
        calls: list[httpx.Request] = []
        central = CentralQuery.model_validate({"rag_name": "svc", "query": "ping"})
        result = _run(execute_central_query(central, registry, stub_client(echo_backend(PONG, calls))))
        assert result.response == "pong"
        assert str(calls[0].url) == "http://1.2.3.4:80/query"

    def test_empty_rag_name(self, registry: Registry) -> None:
        central = CentralQuery(rag_name="", query="ping")
        with pytest.raises(ServiceValidationError) as exc_info:
            _run(execute_central_query(central, registry, stub_client(echo_backend(PONG))))
        assert str(exc_info.value).startswith("Validation failed: Rag service is empty")

    def test_unknown_rag_name(self, registry: Registry) -> None:
        central = CentralQuery(rag_name="missing", query="ping")
        with pytest.raises(NotFoundError) as exc_info:
            _run(execute_central_query(central, registry, stub_client(echo_backend(PONG))))
        assert str(exc_info.value) == "Not found: Service not found: missing"

    def test_empty_address_wrapped_without_network(self) -> None:
        calls: list[httpx.Request] = []
        registry = Registry(services=[BackendEntry(rag_name="svc", rag_ip="", rag_port="80")])
        central = CentralQuery(rag_name="svc", query="ping")
        with pytest.raises(QueryFailedError) as exc_info:
            _run(execute_central_query(central, registry, stub_client(echo_backend(PONG, calls))))
        assert "Validation failed: Check service information" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, HandlerValidationError)
        assert calls == []

    def test_transport_failure_wrapped(self, registry: Registry) -> None:
        central = CentralQuery(rag_name="svc", query="ping")
        with pytest.raises(QueryFailedError) as exc_info:
            _run(execute_central_query(central, registry, stub_client(unreachable_backend)))
        message = str(exc_info.value)
        assert message.startswith("Query failed: svc: Process failed: Query request failed")
        assert "All connection attempts failed" in message

    def test_single_attempt_on_failure(self, registry: Registry) -> None:
        attempts: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(QueryFailedError):
            _run(execute_central_query(CentralQuery(rag_name="svc", query="ping"), registry, stub_client(handler)))
        assert len(attempts) == 1

    def test_invalid_port_wrapped_as_query_failure(self) -> None:
        calls: list[httpx.Request] = []
        registry = Registry(services=[BackendEntry(rag_name="svc", rag_ip="1.2.3.4", rag_port="abc")])
        central = CentralQuery(rag_name="svc", query="ping")
        with pytest.raises(QueryFailedError) as exc_info:
            _run(execute_central_query(central, registry, stub_client(echo_backend(PONG, calls))))
        assert "Query request failed" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ProcessError)
        assert calls == []
