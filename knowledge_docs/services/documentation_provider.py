"""
Documentation knowledge provider.

Pulls documents from the configured sources, chunks them with the
Markdown-aware chunker and serves keyword search over the chunks:
- search with category / language / framework / tag filters
- topic overviews with code examples and related tags
- code example lookup
- category listing
"""

from collections import Counter
from typing import List, Optional, Sequence

from knowledge_docs.connectors import DocumentSource, SourceError, create_source
from knowledge_docs.ingestion.chunk_assembler import DocumentationChunker
from knowledge_docs.query.keyword_index import KeywordChunkIndex
from knowledge_docs.query.store import DocumentStore
from knowledge_docs.shared.chunk_utils import CODE_CHUNK
from knowledge_docs.shared.config import Config
from knowledge_docs.shared.models import (
    CategoryCount,
    Chunk,
    CodeExample,
    Document,
    SearchResult,
    SyncReport,
    TopicDocumentation,
)
from knowledge_docs.shared.observability import get_correlation_id, get_logger
from knowledge_docs.shared.observability.metrics import (
    chunking_duration_seconds,
    record_chunks,
    search_duration_seconds,
    search_requests_total,
    source_documents_loaded_total,
    source_sync_failures_total,
    timed,
)

logger = get_logger(__name__)

OVERVIEW_TEXT_CHUNKS = 3
TOPIC_CODE_EXAMPLES = 5
TOPIC_RELATED_TAGS = 10


class DocumentationProvider:
    def __init__(self, config: Config, sources: Optional[Sequence[DocumentSource]] = None):
        self.config = config
        self.chunker = DocumentationChunker.from_config(config.chunking)
        self.store = DocumentStore()
        self.index = KeywordChunkIndex(k1=config.search.bm25_k1, b=config.search.bm25_b)

        if sources is None:
            sources = [
                s
                for s in (
                    create_source(sc, cache_dir=config.provider.cache_dir)
                    for sc in config.sources
                )
                if s is not None
            ]
        self.sources: List[DocumentSource] = list(sources)

    # ---------- ingestion ----------

    def sync(self) -> SyncReport:
        """
        Connect every source and (re)index all of its documents.

        A failing source is logged and counted; the others still sync.
        """
        # Every log line of this run carries the same correlation id
        report = SyncReport(sources=len(self.sources), sync_id=get_correlation_id())
        logger.info("Documentation sync started", sources=report.sources)

        for source in self.sources:
            try:
                if not source.connected:
                    source.connect()
                documents = source.fetch_documents()
            except SourceError as e:
                report.failures += 1
                source_sync_failures_total.labels(source=source.name, stage="fetch").inc()
                logger.error("Source sync failed", source=source.name, error=str(e))
                continue

            source_documents_loaded_total.labels(source=source.name).inc(len(documents))
            for document in documents:
                report.chunks += self.index_document(document)
                report.documents += 1

        logger.info(
            "Documentation sync complete",
            sources=report.sources,
            documents=report.documents,
            chunks=report.chunks,
            failures=report.failures,
        )
        return report

    def close(self) -> None:
        for source in self.sources:
            source.disconnect()

    def index_document(self, document: Document) -> int:
        """Store, chunk and index a document; returns the chunk count."""
        if document.id in self.store:
            self.index.remove_document(document.id)
        self.store.add(document)

        with timed(chunking_duration_seconds):
            chunks = self.chunker.chunk_document(document.id, document.content, document.metadata)

        self.index.add_all(chunks)
        record_chunks(chunks)

        logger.debug(
            "Document indexed with enhanced chunking",
            document_id=document.id,
            chunk_count=len(chunks),
        )
        return len(chunks)

    def remove_document(self, document_id: str) -> bool:
        self.index.remove_document(document_id)
        return self.store.remove(document_id)

    # ---------- queries ----------

    def search_documentation(
        self,
        query: str,
        category: Optional[str] = None,
        language: Optional[str] = None,
        framework: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> SearchResult:
        limit = limit or self.config.search.max_results

        with timed(search_duration_seconds):
            hits = self.index.search(
                query,
                limit=limit,
                min_score=self.config.search.min_score,
                filters={"language": language},
                tags=tags,
            )

        if category or framework:
            hits = [
                hit
                for hit in hits
                if (not category or hit.chunk.metadata.get("category") == category)
                and (not framework or hit.chunk.metadata.get("framework") == framework)
            ]

        search_requests_total.labels(status="hit" if hits else "empty").inc()
        return SearchResult(chunks=hits, total_count=len(hits))

    def get_topic_documentation(
        self,
        topic: str,
        category: Optional[str] = None,
        language: Optional[str] = None,
        include_examples: bool = True,
    ) -> TopicDocumentation:
        result = self.search_documentation(
            topic, category=category, language=language, limit=10
        )

        text_chunks = [c.chunk for c in result.chunks if c.chunk.chunk_type != CODE_CHUNK]
        code_chunks = [c.chunk for c in result.chunks if c.chunk.chunk_type == CODE_CHUNK]

        related: List[str] = []
        for hit in result.chunks:
            for tag in hit.chunk.metadata.get("tags") or []:
                if tag not in related:
                    related.append(tag)

        return TopicDocumentation(
            overview="\n\n".join(c.content for c in text_chunks[:OVERVIEW_TEXT_CHUNKS]),
            code_examples=(
                [c.content for c in code_chunks[:TOPIC_CODE_EXAMPLES]] if include_examples else []
            ),
            related_topics=related[:TOPIC_RELATED_TAGS],
        )

    def find_examples(
        self, query: str, language: Optional[str] = None, limit: int = 5
    ) -> List[CodeExample]:
        result = self.search_documentation(query, language=language, limit=limit or 5)
        return [
            CodeExample(
                code=hit.chunk.content,
                language=str(hit.chunk.metadata.get("code_language") or "unknown"),
                source=hit.chunk.metadata.get("source"),
                score=hit.score,
            )
            for hit in result.chunks
            if hit.chunk.chunk_type == CODE_CHUNK
        ]

    def list_categories(self) -> List[CategoryCount]:
        counts = Counter(
            str(doc.metadata.get("category") or "uncategorized") for doc in self.store.all()
        )
        return [CategoryCount(name=name, document_count=n) for name, n in counts.items()]

    def get_chunks(self, document_id: str) -> List[Chunk]:
        document = self.store.get(document_id)
        if document is None:
            return []
        return self.chunker.chunk_document(document.id, document.content, document.metadata)
