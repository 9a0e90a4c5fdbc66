"""
Chunk identity and metadata helpers shared by the chunk assembler and the index.
"""

from typing import Dict, Mapping, Optional

TEXT_CHUNK = "text"
CODE_CHUNK = "code"


def generate_chunk_id(document_id: str, chunk_type: str, index: int) -> str:
    """
    Deterministic chunk ID.

    Text and code chunks share one index space per document:
        guide.md-chunk-0, guide.md-chunk-1, guide.md-code-2
    """
    kind = "code" if chunk_type == CODE_CHUNK else "chunk"
    return f"{document_id}-{kind}-{index}"


def create_chunk_metadata(
    document_metadata: Mapping,
    chunk_type: str,
    chunk_index: int,
    code_language: Optional[str] = None,
) -> Dict:
    """Shallow copy of the document metadata overlaid with chunk fields."""
    metadata = dict(document_metadata)
    metadata["chunk_type"] = chunk_type
    metadata["chunk_index"] = chunk_index
    if chunk_type == CODE_CHUNK:
        metadata["code_language"] = code_language or "text"
    return metadata


def render_code_fence(language: str, code: str) -> str:
    return f"```{language}\n{code}\n```"
