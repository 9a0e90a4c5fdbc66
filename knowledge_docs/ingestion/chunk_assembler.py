# knowledge_docs/ingestion/chunk_assembler.py
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

from knowledge_docs.ingestion.code_blocks import (
    CodeSegment,
    TextSegment,
    extract_code_blocks,
    split_code_block_with_offsets,
)
from knowledge_docs.ingestion.text_splitter import RecursiveTextSplitter
from knowledge_docs.shared.chunk_utils import (
    CODE_CHUNK,
    TEXT_CHUNK,
    create_chunk_metadata,
    generate_chunk_id,
    render_code_fence,
)
from knowledge_docs.shared.config import ChunkingConfig
from knowledge_docs.shared.models import Chunk
from knowledge_docs.shared.observability import get_logger

log = get_logger(__name__)

# (content, start_offset, end_offset, code_language)
_Piece = Tuple[str, int, int, Optional[str]]


class DocumentationChunker:
    """
    Markdown-aware chunker for documentation.

    Fenced code blocks are cut out of the document first. Prose between them
    goes through the recursive splitter; each code block becomes one chunk, or
    several line-based chunks when its body exceeds twice the chunk size.

    Ordering:
      - "text_first" (default): every text chunk in document order, followed
        by every code chunk in document order. Code examples stay grouped at
        the end of a document's chunk list.
      - "document": all chunks sorted by start_offset, then renumbered.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        ordering: str = "text_first",
    ):
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.ordering = ordering
        self.splitter = RecursiveTextSplitter(chunk_size, chunk_overlap)

    @classmethod
    def from_config(cls, config: ChunkingConfig) -> "DocumentationChunker":
        return cls(config.chunk_size, config.chunk_overlap, config.ordering)

    def chunk_document(
        self,
        document_id: str,
        content: str,
        metadata: Optional[Mapping] = None,
    ) -> List[Chunk]:
        metadata = metadata or {}
        text_segments, code_segments = extract_code_blocks(content)

        pieces: List[Tuple[str, _Piece]] = []
        for segment in text_segments:
            pieces.extend((TEXT_CHUNK, p) for p in self._text_pieces(segment))
        for block in code_segments:
            pieces.extend((CODE_CHUNK, p) for p in self._code_pieces(block))

        if self.ordering == "document":
            # stable: equal offsets keep text-before-code
            pieces.sort(key=lambda item: item[1][1])

        chunks = self._build_chunks(document_id, pieces, metadata)

        log.debug(
            "Document chunked",
            document_id=document_id,
            text_segments=len(text_segments),
            code_blocks=len(code_segments),
            chunk_count=len(chunks),
        )
        return chunks

    # ---------- helpers ----------

    def _text_pieces(self, segment: TextSegment) -> List[_Piece]:
        pieces: List[_Piece] = []
        for position, text in self.splitter.split_text_with_offsets(segment.text):
            start = segment.start_offset + position
            pieces.append((text, start, start + len(text), None))
        return pieces

    def _code_pieces(self, block: CodeSegment) -> List[_Piece]:
        if len(block.code) <= self.chunk_size * 2:
            return [
                (
                    render_code_fence(block.language, block.code),
                    block.start_offset,
                    block.end_offset,
                    block.language,
                )
            ]

        pieces: List[_Piece] = []
        for position, code in split_code_block_with_offsets(block.code, self.chunk_size):
            start = block.code_offset + position
            pieces.append(
                (
                    render_code_fence(block.language, code),
                    start,
                    start + len(code),
                    block.language,
                )
            )
        return pieces

    def _build_chunks(
        self,
        document_id: str,
        pieces: List[Tuple[str, _Piece]],
        metadata: Mapping,
    ) -> List[Chunk]:
        chunks: List[Chunk] = []
        for index, (chunk_type, (text, start, end, language)) in enumerate(pieces):
            chunk_metadata: Dict = create_chunk_metadata(
                metadata, chunk_type, index, code_language=language
            )
            chunks.append(
                Chunk(
                    id=generate_chunk_id(document_id, chunk_type, index),
                    document_id=document_id,
                    content=text,
                    start_offset=start,
                    end_offset=end,
                    metadata=chunk_metadata,
                )
            )
        return chunks
