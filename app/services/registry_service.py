"""
Registry loading: read the RAG services document from disk and validate it.

Responsibility: Turn the JSON file at KODABI_RAG_SERVICES_CONFIG into a Registry.
A load either returns a complete Registry or raises; there is no partial result.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from app.core.errors import FileJsonParseError, ReadFileError
from app.schemas.registry import Registry

logger = logging.getLogger(__name__)


def load_registry(path: str | Path) -> Registry:
    """
    Load and parse the registry document at path.

    Raises ReadFileError if the file is missing or unreadable, FileJsonParseError if it
    is not JSON or does not match {"services": [{"rag_name", "rag_ip", "rag_port"}]}.
    """
    path = Path(path)
    logger.info("[registry:load_registry] IN  path=%s", path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadFileError(f"path: {path}, error: {e}") from e

    try:
        registry = Registry.model_validate_json(content)
    except ValidationError as e:
        raise FileJsonParseError(f"path: {path}, error: {e}") from e

    logger.info(
        "[registry:load_registry] OUT services=%d names=%s",
        len(registry.services),
        [s.rag_name for s in registry.services],
    )
    return registry
