# Prometheus metrics for documentation ingestion and search

import time
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

# ===== Chunking metrics =====
documents_chunked_total = Counter(
    "knowledge_docs_documents_chunked_total",
    "Total documents passed through the documentation chunker",
)

chunks_produced_total = Counter(
    "knowledge_docs_chunks_produced_total",
    "Total chunks produced by the documentation chunker",
    ["chunk_type"],
)

chunking_duration_seconds = Histogram(
    "knowledge_docs_chunking_duration_seconds",
    "Time spent chunking a single document",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

# ===== Source metrics =====
source_documents_loaded_total = Counter(
    "knowledge_docs_source_documents_loaded_total",
    "Documents loaded from documentation sources",
    ["source"],
)

source_sync_failures_total = Counter(
    "knowledge_docs_source_sync_failures_total",
    "Failures while syncing a documentation source",
    ["source", "stage"],
)

# ===== Search metrics =====
search_requests_total = Counter(
    "knowledge_docs_search_requests_total",
    "Documentation searches served",
    ["status"],
)

search_duration_seconds = Histogram(
    "knowledge_docs_search_duration_seconds",
    "Documentation search duration in seconds",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)


def record_chunks(chunks) -> None:
    """Count produced chunks per chunk_type."""
    documents_chunked_total.inc()
    for chunk in chunks:
        chunks_produced_total.labels(
            chunk_type=chunk.metadata.get("chunk_type", "text")
        ).inc()


@contextmanager
def timed(histogram: Histogram):
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.observe(time.perf_counter() - start)
