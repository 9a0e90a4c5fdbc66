from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

MetadataValue = Union[str, int, float, bool, None, List[str]]


class KnowledgeBaseModel(BaseModel):
    model_config = ConfigDict(protected_namespaces=())


class Document(KnowledgeBaseModel):
    """A documentation file as handed over by a source; never mutated after."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    title: Optional[str] = None
    type: Literal["markdown", "text"] = "markdown"
    metadata: Dict[str, MetadataValue] = Field(default_factory=dict)


class Chunk(KnowledgeBaseModel):
    """Unit of retrieval produced by the documentation chunker."""

    model_config = ConfigDict(frozen=True)

    id: str
    document_id: str
    content: str
    start_offset: int
    end_offset: int
    metadata: Dict[str, MetadataValue] = Field(default_factory=dict)

    @property
    def chunk_type(self) -> str:
        return str(self.metadata.get("chunk_type", "text"))


class ScoredChunk(KnowledgeBaseModel):
    chunk: Chunk
    score: float


class SearchResult(KnowledgeBaseModel):
    chunks: List[ScoredChunk] = Field(default_factory=list)
    total_count: int = 0


class TopicDocumentation(KnowledgeBaseModel):
    overview: str
    code_examples: List[str] = Field(default_factory=list)
    related_topics: List[str] = Field(default_factory=list)


class CodeExample(KnowledgeBaseModel):
    code: str
    language: str
    source: Optional[Any] = None
    score: float


class CategoryCount(KnowledgeBaseModel):
    name: str
    document_count: int


class SyncReport(KnowledgeBaseModel):
    sources: int = 0
    documents: int = 0
    chunks: int = 0
    failures: int = 0
    sync_id: Optional[str] = None
