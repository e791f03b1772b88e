"""Split document text into narration chunks."""

import re
from dataclasses import dataclass

MIN_CHUNK_LENGTH = 5

# A newline followed by one or more blank (or whitespace-only) lines.
_BLANK_LINES = re.compile(r"\n(?:[ \t]*\n)+")


@dataclass(frozen=True)
class Chunk:
    """A paragraph-sized unit of narration.

    Args:
        index: Zero-based position in the document
        text: Trimmed paragraph text, never empty
    """

    index: int
    text: str

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError("index cannot be negative")
        if not self.text or not self.text.strip():
            raise ValueError("text cannot be empty")


def segment(text: str | None) -> list[Chunk]:
    """Split text on blank-line boundaries into narration chunks.

    Fragments whose trimmed length is MIN_CHUNK_LENGTH characters or less are
    dropped. Indices are assigned after filtering, so they stay contiguous.

    Args:
        text: Document text, possibly empty or not yet fetched

    Returns:
        Ordered list of chunks, empty when there is nothing to narrate
    """
    if not text:
        return []

    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    paragraphs = (part.strip() for part in _BLANK_LINES.split(normalized))
    kept = [part for part in paragraphs if len(part) > MIN_CHUNK_LENGTH]
    return [Chunk(index=i, text=part) for i, part in enumerate(kept)]
