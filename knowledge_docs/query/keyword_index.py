"""
In-memory keyword index over chunks.

Scoring is BM25 over lower-cased word tokens with stop words removed. Scores
are normalized by the best hit so `min_score` is comparable across queries.
"""

import math
import re
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from knowledge_docs.shared.models import Chunk, ScoredChunk
from knowledge_docs.shared.observability import get_logger

logger = get_logger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9_]+")

STOPWORDS = frozenset(
    """
    a an and are as at be by for from how i in is it of on or that the this
    to was what when where which who why with you your
    """.split()
)


def tokenize(text: str) -> List[str]:
    return [t for t in _TOKEN_RE.findall(text.lower()) if t not in STOPWORDS]


@dataclass
class _Entry:
    chunk: Chunk
    term_counts: Counter
    length: int


class KeywordChunkIndex:
    def __init__(self, k1: float = 1.2, b: float = 0.75):
        self.k1 = k1
        self.b = b
        self._entries: Dict[str, _Entry] = {}
        self._by_document: Dict[str, List[str]] = defaultdict(list)
        self._doc_freq: Counter = Counter()
        self._total_length = 0

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, chunk: Chunk) -> None:
        if chunk.id in self._entries:
            self._drop(chunk.id)

        tokens = tokenize(chunk.content)
        counts = Counter(tokens)
        self._entries[chunk.id] = _Entry(chunk=chunk, term_counts=counts, length=len(tokens))
        self._by_document[chunk.document_id].append(chunk.id)
        self._doc_freq.update(counts.keys())
        self._total_length += len(tokens)

    def add_all(self, chunks: Iterable[Chunk]) -> None:
        for chunk in chunks:
            self.add(chunk)

    def remove_document(self, document_id: str) -> int:
        """Drop every chunk of a document; returns how many were removed."""
        chunk_ids = self._by_document.pop(document_id, [])
        for chunk_id in chunk_ids:
            self._drop(chunk_id, detach=False)
        return len(chunk_ids)

    def _drop(self, chunk_id: str, detach: bool = True) -> None:
        entry = self._entries.pop(chunk_id, None)
        if entry is None:
            return
        self._doc_freq.subtract(entry.term_counts.keys())
        self._doc_freq += Counter()  # drop zero counts
        self._total_length -= entry.length
        if detach:
            ids = self._by_document.get(entry.chunk.document_id, [])
            if chunk_id in ids:
                ids.remove(chunk_id)

    def search(
        self,
        query: str,
        limit: int = 10,
        min_score: float = 0.0,
        filters: Optional[Mapping[str, object]] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> List[ScoredChunk]:
        """
        Args:
            query: Free-text query
            limit: Maximum number of hits
            min_score: Minimum normalized score (0..1)
            filters: Exact-match metadata filters, e.g. {"language": "python"}
            tags: Every tag must be present in the chunk's `tags` metadata
        """
        terms = tokenize(query)
        if not terms or not self._entries:
            return []

        n = len(self._entries)
        avg_length = (self._total_length / n) or 1.0
        raw: List[tuple] = []

        for entry in self._entries.values():
            if not self._matches(entry.chunk, filters, tags):
                continue
            score = 0.0
            for term in terms:
                tf = entry.term_counts.get(term, 0)
                if not tf:
                    continue
                df = self._doc_freq.get(term, 0)
                idf = math.log(1 + (n - df + 0.5) / (df + 0.5))
                norm = self.k1 * (1 - self.b + self.b * entry.length / avg_length)
                score += idf * tf * (self.k1 + 1) / (tf + norm)
            if score > 0:
                raw.append((score, entry.chunk))

        if not raw:
            return []

        best = max(score for score, _ in raw)
        # Ties keep insertion order (document order within a document)
        raw.sort(key=lambda item: item[0], reverse=True)
        hits = [
            ScoredChunk(chunk=chunk, score=round(score / best, 6))
            for score, chunk in raw
            if score / best >= min_score
        ]

        logger.debug(
            "Keyword search",
            terms=terms,
            candidates=len(raw),
            returned=min(len(hits), limit),
        )
        return hits[:limit]

    @staticmethod
    def _matches(
        chunk: Chunk,
        filters: Optional[Mapping[str, object]],
        tags: Optional[Sequence[str]],
    ) -> bool:
        meta = chunk.metadata
        for key, expected in (filters or {}).items():
            if expected is not None and meta.get(key) != expected:
                return False
        if tags:
            chunk_tags = {str(t).lower() for t in (meta.get("tags") or [])}
            if not all(str(t).lower() in chunk_tags for t in tags):
                return False
        return True
