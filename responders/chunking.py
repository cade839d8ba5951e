"""
Splits long replies into transport-sized chunks.

Breaks prefer paragraph boundaries, then line boundaries, then spaces.
Exactly one separator is dropped at every break, so walking the chunks
and re-inserting the separator found in the original text between them
rebuilds the input. A single word longer than the limit is kept whole.
"""
from __future__ import annotations

DISCORD_MESSAGE_LIMIT = 2000
SEPARATORS = ("\n\n", "\n", " ")


def _split(text: str, max_length: int, level: int) -> list[str]:
    if len(text) <= max_length or level >= len(SEPARATORS):
        return [text]

    separator = SEPARATORS[level]
    chunks: list[str] = []
    current: str | None = None

    for piece in text.split(separator):
        if current is not None and len(current) + len(separator) + len(piece) <= max_length:
            current += separator + piece
            continue
        if current is not None:
            chunks.append(current)
        if len(piece) > max_length:
            parts = _split(piece, max_length, level + 1)
            chunks.extend(parts[:-1])
            current = parts[-1]
        else:
            current = piece

    if current is not None:
        chunks.append(current)
    return chunks


def split_for_transport(text: str, max_length: int = DISCORD_MESSAGE_LIMIT) -> list[str]:
    """Split text into chunks of at most max_length characters."""
    if max_length < 1:
        raise ValueError("max_length must be at least 1")
    if not text:
        return []
    return _split(text, max_length, 0)
