"""
Recursive character splitting along Markdown-aware boundaries.

The splitter tries separators from the most to the least semantic one:
section headers, code fences, paragraphs, lines, sentences and words. Text
that no separator can break is cut by position as a last resort. Adjacent
chunks share a trailing overlap so context survives the cut.

Every chunk returned is a verbatim substring of the input, and
`split_text_with_offsets` reports where each one starts, which lets the chunk
assembler compute character offsets without searching.
"""

from typing import List, Optional, Sequence, Tuple

DEFAULT_SEPARATORS = (
    "\n## ",  # H2 headers
    "\n### ",  # H3 headers
    "\n#### ",  # H4 headers
    "\n```",  # code fences
    "\n\n",  # paragraphs
    "\n",  # lines
    ". ",  # sentences
    " ",  # words
)

# (start position in the input, chunk text)
Span = Tuple[int, str]


def _stripped_span(text: str, start: int) -> Optional[Span]:
    stripped = text.strip()
    if not stripped:
        return None
    return start + len(text) - len(text.lstrip()), stripped


class RecursiveTextSplitter:
    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: Optional[Sequence[str]] = None,
    ):
        # Configuration is validated upstream (ChunkingConfig); the splitter
        # only guarantees it terminates.
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = tuple(separators) if separators is not None else DEFAULT_SEPARATORS

    def split_text(self, text: str) -> List[str]:
        return [chunk for _, chunk in self.split_text_with_offsets(text)]

    def split_text_with_offsets(self, text: str) -> List[Span]:
        """Chunks of ``text`` paired with the index where each starts in ``text``."""
        return self._split(text, 0, 0)

    # ---------- recursion ----------

    def _split(self, text: str, separator_index: int, base: int) -> List[Span]:
        if len(text) <= self.chunk_size:
            span = _stripped_span(text, base)
            return [span] if span else []

        # Skip separators that do not occur in this text
        while separator_index < len(self.separators) and (
            self.separators[separator_index] not in text
        ):
            separator_index += 1

        if separator_index >= len(self.separators):
            return self._hard_split(text, base)

        separator = self.separators[separator_index]
        chunks: List[Span] = []
        buffer = ""
        buffer_start = base
        piece_start = base

        for i, part in enumerate(text.split(separator)):
            piece = separator + part if i > 0 else part

            if len(buffer) + len(piece) <= self.chunk_size:
                if not buffer:
                    buffer_start = piece_start
                buffer += piece
            else:
                span = _stripped_span(buffer, buffer_start)
                if span:
                    chunks.append(span)

                if len(piece) > self.chunk_size:
                    chunks.extend(self._split(piece, separator_index + 1, piece_start))
                    buffer = ""
                else:
                    # The overlap is a suffix of the buffer, which ends where piece starts
                    overlap = self.get_overlap(buffer, self.chunk_size - len(piece))
                    buffer = overlap + piece
                    buffer_start = piece_start - len(overlap)

            piece_start += len(piece)

        span = _stripped_span(buffer, buffer_start)
        if span:
            chunks.append(span)

        return chunks

    # ---------- fallbacks ----------

    def hard_split(self, text: str) -> List[str]:
        """
        Cut ``text`` into windows of ``chunk_size`` characters.

        A window ends at its last space when one exists past the window
        start. The next window starts ``chunk_overlap`` characters before the
        previous end, or at the end itself when that would not move forward.
        """
        return [chunk for _, chunk in self._hard_split(text, 0)]

    def _hard_split(self, text: str, base: int) -> List[Span]:
        chunks: List[Span] = []
        start = 0
        length = len(text)

        while start < length:
            end = min(start + self.chunk_size, length)
            if end < length:
                last_space = text.rfind(" ", start + 1, end + 1)
                if last_space > start:
                    end = last_space

            span = _stripped_span(text[start:end], base + start)
            if span:
                chunks.append(span)

            if end >= length:
                break

            next_start = end - self.chunk_overlap
            start = next_start if start < next_start < end else end

        return chunks

    def get_overlap(self, text: str, budget: Optional[int] = None) -> str:
        """
        Trailing context of ``text`` to prepend to the next chunk.

        Args:
            text: The chunk that was just completed
            budget: Upper bound on the overlap length; defaults to chunk_overlap
        """
        size = self.chunk_overlap if budget is None else min(self.chunk_overlap, budget)
        if size <= 0:
            return ""
        if len(text) <= size:
            return text

        # Prefer to start the overlap on a word boundary
        overlap_start = len(text) - size
        first_space = text.find(" ", overlap_start)
        if overlap_start < first_space < len(text):
            return text[first_space + 1 :]
        return text[overlap_start:]
