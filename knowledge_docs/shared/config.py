# Configuration loader with environment variable support

import json
import logging
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import KnowledgeBaseModel

logger = logging.getLogger(__name__)

DocumentCategory = Literal[
    "api-reference",
    "tutorial",
    "guide",
    "example",
    "concept",
    "troubleshooting",
    "changelog",
    "readme",
]

DEFAULT_PATTERNS = ["**/*.md", "**/*.mdx"]
DEFAULT_EXCLUDES = ["**/node_modules/**", "**/dist/**", "**/.git/**"]


class ChunkingConfig(BaseModel):
    """
    Chunker sizing. Sizes are measured in characters.

    ordering:
        text_first - all text chunks, then all code chunks
        document   - chunks re-keyed by start offset
    """

    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    ordering: Literal["text_first", "document"] = "text_first"

    @model_validator(mode="after")
    def validate_overlap(self):
        """Overlap must leave room for new text in every chunk"""
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self


class SourceConfig(BaseModel):
    name: str
    type: Literal["local", "git", "url"]
    path: str
    patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_PATTERNS))
    exclude_patterns: List[str] = Field(default_factory=list)
    default_category: Optional[DocumentCategory] = None
    default_language: Optional[str] = None
    default_framework: Optional[str] = None

    @field_validator("name", "path")
    def _not_blank(cls, value: str):
        if not value or not value.strip():
            raise ValueError("source name and path must not be empty")
        return value.strip()


class SearchConfig(BaseModel):
    max_results: int = Field(default=10, gt=0)
    min_score: float = Field(default=0.3, ge=0.0, le=1.0)
    bm25_k1: float = Field(default=1.2, gt=0)
    bm25_b: float = Field(default=0.75, ge=0.0, le=1.0)


class ProviderConfig(BaseModel):
    name: str = "knowledge-documentation"
    version: str = "0.1.0"
    sync_on_start: bool = True
    cache_dir: str = ".knowledge-docs-cache"


class Config(KnowledgeBaseModel):
    """Main configuration model"""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    sources: List[SourceConfig] = Field(default_factory=list)


class Settings(BaseSettings):
    """Environment-based settings"""

    env: str = Field(default="development", alias="ENV")
    config_path: Optional[str] = Field(default=None, alias="CONFIG_PATH")

    # Default local source
    docs_path: str = Field(default="./docs", alias="DOCS_PATH")
    docs_cache_dir: Optional[str] = Field(default=None, alias="DOCS_CACHE_DIR")
    # JSON list of extra SourceConfig objects
    docs_extra_sources: Optional[str] = Field(default=None, alias="DOCS_EXTRA_SOURCES")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


def default_source(settings: Settings) -> SourceConfig:
    return SourceConfig(
        name="local-docs",
        type="local",
        path=settings.docs_path,
        patterns=list(DEFAULT_PATTERNS),
        exclude_patterns=list(DEFAULT_EXCLUDES),
    )


def _config_file_path(settings: Settings) -> Path:
    if settings.config_path:
        return Path(settings.config_path)
    return Path(__file__).parent.parent.parent / "config" / f"{settings.env}.yaml"


def _extra_sources(settings: Settings) -> List[SourceConfig]:
    if not settings.docs_extra_sources:
        return []
    try:
        raw = json.loads(settings.docs_extra_sources)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse DOCS_EXTRA_SOURCES, ignoring: {e}")
        return []
    if not isinstance(raw, list):
        logger.warning("DOCS_EXTRA_SOURCES must be a JSON list, ignoring")
        return []
    return [SourceConfig(**item) for item in raw]


def load_config() -> tuple[Config, Settings]:
    """
    Load configuration from YAML file and environment variables.

    A missing YAML file is not an error: defaults apply, with a single local
    source rooted at DOCS_PATH.

    Returns:
        tuple: (Config, Settings) - YAML config and environment settings

    Raises:
        pydantic.ValidationError: If configuration validation fails
    """
    settings = Settings()
    config_path = _config_file_path(settings)

    config_dict = {}
    if config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}
    else:
        logger.info(f"No configuration file at {config_path}, using defaults")

    config = Config(**config_dict)

    if not config.sources:
        config.sources.append(default_source(settings))
    config.sources.extend(_extra_sources(settings))

    if settings.docs_cache_dir:
        config.provider.cache_dir = settings.docs_cache_dir

    return config, settings


# Global config instances (loaded once at startup)
_config: Optional[Config] = None
_settings: Optional[Settings] = None


def get_config() -> Config:
    """Get the global Config instance"""
    global _config
    if _config is None:
        init_config()
    return _config


def get_settings() -> Settings:
    """Get the global Settings instance"""
    global _settings
    if _settings is None:
        init_config()
    return _settings


def init_config() -> tuple[Config, Settings]:
    """Initialize and cache global config instances"""
    global _config, _settings
    _config, _settings = load_config()
    return _config, _settings


def reload_config() -> tuple[Config, Settings]:
    """Force reload of config/settings from disk and environment."""
    return init_config()
