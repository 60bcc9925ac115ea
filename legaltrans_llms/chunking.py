"""Paragraph splitting and greedy chunk packing for long documents."""

from __future__ import annotations

import re

from legaltrans_llms.config import MAX_CHUNK_CHARS

PARAGRAPH_SEPARATOR = "\n\n"

_PARAGRAPH_SPLIT = re.compile(r"\n\n+")


def split_paragraphs(text: str) -> list[str]:
    """Non-empty paragraphs separated by one or more blank lines."""
    return [p.strip() for p in _PARAGRAPH_SPLIT.split(text or "") if p.strip()]


def split_into_chunks(text: str, max_chars: int = MAX_CHUNK_CHARS) -> list[str]:
    """Pack whole paragraphs into chunks of at most ``max_chars``.

    Paragraphs are added to the current chunk while the chunk, including
    the blank-line separator, stays within ``max_chars``. A paragraph
    longer than ``max_chars`` on its own becomes a single oversized
    chunk: paragraphs are never split.

    Example:
        >>> split_into_chunks("a" * 10 + "\\n\\n" + "b" * 10, max_chars=15)
        ['aaaaaaaaaa', 'bbbbbbbbbb']
    """
    chunks: list[str] = []
    current = ""
    for para in split_paragraphs(text):
        if not current:
            current = para
        elif len(current) + len(PARAGRAPH_SEPARATOR) + len(para) <= max_chars:
            current += PARAGRAPH_SEPARATOR + para
        else:
            chunks.append(current)
            current = para
    if current:
        chunks.append(current)
    return chunks
