"""Schemas for the MCP rag query tool."""

from pydantic import BaseModel, Field

from app.schemas.query import CentralQuery, ConversationTurn, QueryMode, QueryRequest


class ToolQuery(BaseModel):
    """Arguments an LLM passes to the rag query tool. Also the body of POST /mcp/info."""

    rag_name: str = Field(..., description="Name of the RAG service to ask.")
    query: str = Field(..., description="Question for the RAG service.")
    mode: QueryMode | None = Field(None, description="Retrieval mode; backend default (hybrid) when omitted.")
    user_prompt: str | None = Field(None, description="Extra instructions for how the answer is written.")
    history: list[ConversationTurn] | None = Field(None, description="Prior conversation turns, oldest first.")

    def to_central_query(self) -> CentralQuery:
        """Translate into the central query; fields not given keep QueryRequest defaults."""
        request = QueryRequest(query=self.query)
        if self.mode is not None:
            request.mode = self.mode
        if self.user_prompt is not None:
            request.user_prompt = self.user_prompt
        if self.history is not None:
            request.conversation_history = list(self.history)
        return CentralQuery(rag_name=self.rag_name, query=request)
