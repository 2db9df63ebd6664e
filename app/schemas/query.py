"""Schemas for the central query endpoint and the backend /query call."""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class QueryMode(str, Enum):
    """Retrieval mode understood by the RAG backend."""

    LOCAL = "local"
    GLOBAL = "global"
    HYBRID = "hybrid"
    NAIVE = "naive"
    MIX = "mix"
    BYPASS = "bypass"


class ConversationTurn(BaseModel):
    """One prior message sent along with the query."""

    role: Literal["user", "assistant"]
    content: str


class QueryRequest(BaseModel):
    """Query body forwarded to a backend's POST /query. Absent optional fields are not sent."""

    query: str = Field("", description="Free-text question.")
    mode: QueryMode = Field(QueryMode.HYBRID, description="Retrieval mode.")
    only_need_context: bool | None = None
    only_need_prompt: bool | None = None
    response_type: str = Field("Multiple Paragraphs", description="Answer format hint, e.g. 'Bullet Points'.")
    top_k: int = 40
    chunk_top_k: int = 20
    max_entity_tokens: int = 6000
    max_relation_tokens: int = 10000
    max_total_tokens: int = 30000
    conversation_history: list[ConversationTurn] | None = Field(
        None, description="Prior turns, oldest first: [{'role': 'user'|'assistant', 'content': ...}]."
    )
    user_prompt: str | None = None
    enable_rerank: bool | None = None
    include_references: bool = True
    stream: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the backend call."""
        return self.model_dump(mode="json", exclude_none=True)


def decode_query_request(value: Any) -> QueryRequest:
    """
    Build a QueryRequest from either shape accepted on the wire:
    a bare string (shorthand for QueryRequest(query=<string>)) or a full object.
    """
    if isinstance(value, QueryRequest):
        return value
    if isinstance(value, str):
        return QueryRequest(query=value)
    if isinstance(value, Mapping):
        return QueryRequest.model_validate(dict(value))
    raise ValueError("query must be a string or an object")


class CentralQuery(BaseModel):
    """Request body for POST /central/query: which backend to ask, and what."""

    rag_name: str = Field(..., description="Registry name of the target RAG backend.")
    query: QueryRequest = Field(..., description="Full query object, or a bare string for defaults.")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"rag_name": "software engineering", "query": "What is a monad?"},
                {"rag_name": "software engineering", "query": {"query": "What is a monad?", "mode": "local"}},
            ]
        }
    }

    @field_validator("query", mode="before")
    @classmethod
    def _decode_query(cls, value: Any) -> QueryRequest:
        return decode_query_request(value)


class QueryReference(BaseModel):
    """A source document the backend cited."""

    reference_id: str
    file_path: str


class QueryResponse(BaseModel):
    """Normalized backend answer, returned to callers unchanged."""

    response: str = Field(..., description="Answer text from the RAG backend.")
    references: list[QueryReference] = Field(..., description="Cited sources, in backend order.")
