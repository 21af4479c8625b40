"""
Paragraph-aware text chunker.

Splits document text into size-bounded, overlapping passages. Paragraphs
(blank-line separated) are packed greedily; a paragraph larger than the
budget is split at whitespace near the limit. Each emitted chunk seeds the
next one with its trailing ``overlap_chars`` characters. A heading-only
paragraph travels with the paragraph after it.

Dependencies: restaurant_rag.models.chunk
System role: First stage of the ingestion pipeline
"""

import re

from restaurant_rag.core.exceptions import ValidationError
from restaurant_rag.models.chunk import TextChunk

PARAGRAPH_SEPARATOR = "\n\n"
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_HEADING = re.compile(r"^\s{0,3}#{1,6}\s+(.+?)\s*#*\s*$")


def chunk_text(text: str, max_chars: int, overlap_chars: int) -> list[TextChunk]:
    """
    Split text into ordered chunks of at most ``max_chars`` characters.

    Args:
        text: Raw document text
        max_chars: Upper bound on chunk length
        overlap_chars: Characters carried from the end of a chunk into the next

    Returns:
        list[TextChunk]: Chunks indexed 0..N-1 in source order (empty for blank text)

    Raises:
        ValidationError: If max_chars <= 0 or overlap_chars is outside [0, max_chars)
    """
    if max_chars <= 0:
        raise ValidationError("max_chars must be positive", field="max_chars")
    if overlap_chars < 0 or overlap_chars >= max_chars:
        raise ValidationError(
            "overlap_chars must be >= 0 and smaller than max_chars",
            field="overlap_chars",
            details={"max_chars": max_chars, "overlap_chars": overlap_chars},
        )

    stripped = text.strip()
    if not stripped:
        return []
    if len(stripped) <= max_chars:
        return [TextChunk(content=stripped, index=0)]

    builder = _ChunkBuilder(max_chars, overlap_chars)
    paragraphs = (p.strip() for p in _PARAGRAPH_BREAK.split(stripped))
    for paragraph in _attach_headings(p for p in paragraphs if p):
        builder.add_paragraph(paragraph)
    return [
        TextChunk(content=content, index=index, new_content_start=new_content_start)
        for index, (content, new_content_start) in enumerate(builder.finish())
    ]


def section_labels(chunks: list[TextChunk]) -> list[str | None]:
    """
    Label each chunk with the Markdown section its new content starts in.

    The label is the heading at or before the start of the chunk's new
    content: a heading opening that content, else the last heading of an
    earlier chunk. Overlap carried from the previous chunk is ignored.
    Chunks before the first heading get None.
    """
    labels: list[str | None] = []
    current: str | None = None
    for chunk in chunks:
        start = min(chunk.new_content_start, len(chunk.content))
        lines = chunk.content[start:].splitlines()
        # New content resuming a split line cannot open with a heading
        mid_line = start > 0 and chunk.content[start - 1] != "\n"
        opening = _HEADING.match(lines[0]) if lines and not mid_line else None
        labels.append(opening.group(1) if opening else current)
        for line in lines[1:] if mid_line else lines:
            match = _HEADING.match(line)
            if match:
                current = match.group(1)
    return labels


def _attach_headings(paragraphs):
    """Join each heading-only paragraph to the paragraph after it."""
    pending: list[str] = []
    for paragraph in paragraphs:
        pending.append(paragraph)
        if "\n" in paragraph or not _HEADING.match(paragraph):
            yield PARAGRAPH_SEPARATOR.join(pending)
            pending = []
    if pending:
        yield PARAGRAPH_SEPARATOR.join(pending)


class _ChunkBuilder:
    """Greedy accumulator behind ``chunk_text``."""

    def __init__(self, max_chars: int, overlap_chars: int) -> None:
        self.max_chars = max_chars
        self.overlap_chars = overlap_chars
        # (content, offset where its new content starts)
        self.chunks: list[tuple[str, int]] = []
        self._buffer = ""
        # False while the buffer only holds carried-over overlap
        self._has_new = False
        self._new_start = 0

    def add_paragraph(self, paragraph: str) -> None:
        if self._fits(paragraph, self._joiner(PARAGRAPH_SEPARATOR)):
            self._append(paragraph, self._joiner(PARAGRAPH_SEPARATOR))
            return
        if self._has_new:
            self._emit()
            if self._fits(paragraph, self._joiner(PARAGRAPH_SEPARATOR)):
                self._append(paragraph, self._joiner(PARAGRAPH_SEPARATOR))
                return
        self._split_paragraph(paragraph)

    def finish(self) -> list[tuple[str, int]]:
        if self._has_new:
            self._emit()
        return self.chunks

    def _split_paragraph(self, paragraph: str) -> None:
        joiner = self._joiner(PARAGRAPH_SEPARATOR)
        remaining = paragraph
        while remaining:
            room = self.max_chars - len(self._buffer) - len(joiner)
            if room <= 0:
                # Overlap leaves no space; start clean
                self._buffer = ""
                joiner = ""
                room = self.max_chars
            if len(remaining) <= room:
                self._append(remaining, joiner)
                return
            cut = _cut_point(remaining, room)
            piece = remaining[:cut].rstrip()
            rest = remaining[cut:]
            remaining = rest.lstrip()
            self._append(piece, joiner)
            self._emit()
            # Keep a line break at the cut so a heading after it still starts a line
            gap = rest[: len(rest) - len(remaining)]
            joiner = self._joiner("\n" if "\n" in gap else " ")

    def _fits(self, text: str, joiner: str) -> bool:
        return len(self._buffer) + len(joiner) + len(text) <= self.max_chars

    def _joiner(self, separator: str) -> str:
        return separator if self._buffer else ""

    def _append(self, text: str, joiner: str) -> None:
        if not self._has_new:
            self._new_start = len(self._buffer) + len(joiner)
        self._buffer = f"{self._buffer}{joiner}{text}"
        self._has_new = True

    def _emit(self) -> None:
        content = self._buffer.strip()
        if content:
            self.chunks.append((content, min(self._new_start, len(content))))
        carry = content[-self.overlap_chars:] if self.overlap_chars else ""
        self._buffer = carry.lstrip()
        self._has_new = False


def _cut_point(text: str, limit: int) -> int:
    """Index to cut ``text`` at: last whitespace past limit // 2, else ``limit``."""
    window = text[: limit + 1]
    for position in range(len(window) - 1, limit // 2, -1):
        if window[position].isspace():
            return position
    return limit
