from knowledge_docs.ingestion.chunk_assembler import DocumentationChunker
from knowledge_docs.ingestion.code_blocks import (
    CodeSegment,
    TextSegment,
    extract_code_blocks,
    split_code_block,
    split_code_block_with_offsets,
)
from knowledge_docs.ingestion.text_splitter import DEFAULT_SEPARATORS, RecursiveTextSplitter

__all__ = [
    "DocumentationChunker",
    "RecursiveTextSplitter",
    "DEFAULT_SEPARATORS",
    "TextSegment",
    "CodeSegment",
    "extract_code_blocks",
    "split_code_block",
    "split_code_block_with_offsets",
]
