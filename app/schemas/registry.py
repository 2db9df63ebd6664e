"""Schemas for the RAG service registry document."""

from pydantic import BaseModel, ConfigDict, Field


class BackendEntry(BaseModel):
    """One RAG backend: name and network address, as stored in the registry file."""

    model_config = ConfigDict(frozen=True)

    rag_name: str = Field(..., description="Unique service name used by callers.")
    rag_ip: str = Field(..., description="Host or IP of the backend.")
    rag_port: str = Field(..., description="Port of the backend, kept as a string.")

    @property
    def name(self) -> str:
        return self.rag_name

    @property
    def host(self) -> str:
        return self.rag_ip

    @property
    def port(self) -> str:
        return self.rag_port

    @property
    def full_path(self) -> str:
        return f"{self.rag_ip}:{self.rag_port}"

    @property
    def service_detail(self) -> str:
        return f"{self.rag_name}: [{self.rag_ip}:{self.rag_port}]"

    @property
    def base_url(self) -> str:
        return f"http://{self.rag_ip}:{self.rag_port}"

    @property
    def query_url(self) -> str:
        return f"{self.base_url}/query"


class Registry(BaseModel):
    """Known backends in load order. Read-only once loaded."""

    services: list[BackendEntry]

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [{"services": [{"rag_name": "svc", "rag_ip": "1.2.3.4", "rag_port": "80"}]}]
        },
    )

    def find_by_name(self, name: str) -> BackendEntry | None:
        """First entry with this name, or None. Later duplicates are shadowed."""
        return next((s for s in self.services if s.rag_name == name), None)
