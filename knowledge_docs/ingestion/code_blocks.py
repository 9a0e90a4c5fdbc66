# Fenced code block handling for the documentation chunker

import re
from dataclasses import dataclass
from typing import List, Tuple

# ```lang\n ... ``` ; lazy body, the language tag is optional
_FENCE_RE = re.compile(r"```(\w+)?\n(.*?)```", re.DOTALL)

CODE_OVERLAP_LINES = 3


@dataclass(frozen=True)
class TextSegment:
    text: str
    start_offset: int

    @property
    def end_offset(self) -> int:
        return self.start_offset + len(self.text)


@dataclass(frozen=True)
class CodeSegment:
    language: str
    code: str  # trimmed body
    start_offset: int  # opening ``` of the fence
    end_offset: int  # just past the closing ```
    code_offset: int  # first character of the trimmed body


def extract_code_blocks(content: str) -> Tuple[List[TextSegment], List[CodeSegment]]:
    """
    Partition a document into text segments and fenced code segments.

    Segments are returned in document order and together cover every
    character of ``content`` exactly once. A fence without a closing marker
    is left inside the surrounding text segment. Two fences that touch do not
    produce an empty text segment between them.
    """
    text_segments: List[TextSegment] = []
    code_segments: List[CodeSegment] = []
    last_index = 0

    for match in _FENCE_RE.finditer(content):
        if match.start() > last_index:
            text_segments.append(
                TextSegment(text=content[last_index : match.start()], start_offset=last_index)
            )

        body = match.group(2)
        code_segments.append(
            CodeSegment(
                language=match.group(1) or "text",
                code=body.strip(),
                start_offset=match.start(),
                end_offset=match.end(),
                code_offset=match.start(2) + len(body) - len(body.lstrip()),
            )
        )
        last_index = match.end()

    if last_index < len(content):
        text_segments.append(TextSegment(text=content[last_index:], start_offset=last_index))

    return text_segments, code_segments


def _line_cost(line: str) -> int:
    # one newline counted per line
    return len(line) + 1


def split_code_block(code: str, chunk_size: int) -> List[str]:
    """
    Split a code body by whole lines into pieces of at most ``chunk_size``.

    Each piece after the first starts with up to the last three lines of the
    previous piece. Overlap lines are dropped from the front when keeping them
    would push the next piece past ``chunk_size``. A single line longer than
    ``chunk_size`` becomes its own oversized piece.
    """
    return [piece for _, piece in split_code_block_with_offsets(code, chunk_size)]


def split_code_block_with_offsets(code: str, chunk_size: int) -> List[Tuple[int, str]]:
    """Same pieces as `split_code_block`, each paired with its start index in ``code``."""
    lines = code.split("\n")
    line_starts: List[int] = []
    position = 0
    for line in lines:
        line_starts.append(position)
        position += len(line) + 1

    pieces: List[Tuple[int, str]] = []
    first = 0  # index of the first line in the current piece
    current: List[str] = []
    current_length = 0

    for index, line in enumerate(lines):
        if current and current_length + _line_cost(line) > chunk_size:
            pieces.append((line_starts[first], "\n".join(current)))

            overlap = current[-CODE_OVERLAP_LINES:]
            overlap_length = sum(_line_cost(ln) for ln in overlap)
            while overlap and overlap_length + _line_cost(line) > chunk_size:
                overlap_length -= _line_cost(overlap.pop(0))

            current = list(overlap)
            current_length = overlap_length
            first = index - len(overlap)

        current.append(line)
        current_length += _line_cost(line)

    if current:
        pieces.append((line_starts[first], "\n".join(current)))

    return pieces
