from typing import Optional

from knowledge_docs.services.documentation_provider import DocumentationProvider
from knowledge_docs.shared.config import Config, get_config, get_settings
from knowledge_docs.shared.observability import get_logger, setup_logging

logger = get_logger(__name__)


def create_provider(
    config: Optional[Config] = None, configure_logging: bool = True
) -> DocumentationProvider:
    """
    Build a provider from the global configuration; syncs sources when
    `provider.sync_on_start` is set.
    """
    if configure_logging:
        setup_logging(get_settings().log_level)
    config = config or get_config()

    logger.info(
        "Starting documentation knowledge provider",
        provider=config.provider.name,
        version=config.provider.version,
        source_count=len(config.sources),
        sources=[s.name for s in config.sources],
    )

    provider = DocumentationProvider(config)
    if config.provider.sync_on_start:
        provider.sync()
    return provider


__all__ = ["DocumentationProvider", "create_provider"]
