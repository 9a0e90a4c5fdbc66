from knowledge_docs.query.keyword_index import KeywordChunkIndex, tokenize
from knowledge_docs.query.store import DocumentStore

__all__ = ["DocumentStore", "KeywordChunkIndex", "tokenize"]
