"""
Documentation sources: local directories and git repositories.
"""

from typing import Optional

from knowledge_docs.connectors.base import DocumentSource, SourceError
from knowledge_docs.connectors.git import GitDocumentationSource
from knowledge_docs.connectors.local import LocalDocumentationSource
from knowledge_docs.shared.config import SourceConfig
from knowledge_docs.shared.observability import get_logger

logger = get_logger(__name__)


def create_source(
    config: SourceConfig, cache_dir: str = ".knowledge-docs-cache"
) -> Optional[DocumentSource]:
    """Build the source for a config entry; None for unsupported types."""
    if config.type == "local":
        return LocalDocumentationSource(config)
    if config.type == "git":
        return GitDocumentationSource(config, cache_dir=cache_dir)
    logger.warning("Unknown source type, skipping", source=config.name, type=config.type)
    return None


__all__ = [
    "DocumentSource",
    "SourceError",
    "LocalDocumentationSource",
    "GitDocumentationSource",
    "create_source",
]
