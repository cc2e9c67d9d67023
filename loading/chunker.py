from __future__ import annotations

from typing import Tuple

# Characters per chunk
DEFAULT_CHUNK_SIZE = 10_000


def _check_chunk_size(chunk_size: int) -> None:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive.")


def count_chunks(length: int, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Number of chunks needed to cover ``length`` characters (ceiling division)."""
    _check_chunk_size(chunk_size)
    if length <= 0:
        return 0
    return -(-length // chunk_size)


def chunk_bounds(index: int, length: int, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Tuple[int, int]:
    """Return the half-open character range ``[start, end)`` covered by a chunk.

    Args:
        index: Chunk index.
        length: Total length of the text.
        chunk_size: Characters per chunk.

    Returns:
        Tuple of (start, end) offsets.

    Raises:
        ValueError: If chunk_size <= 0.
        IndexError: If index is outside ``[0, count_chunks(length))``.
    """
    total = count_chunks(length, chunk_size)
    if index < 0 or index >= total:
        raise IndexError(f"Chunk index {index} out of range (0..{total - 1}).")
    start = index * chunk_size
    end = min(start + chunk_size, length)
    return start, end


def slice_chunk(text: str, index: int, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    start, end = chunk_bounds(index, len(text), chunk_size)
    return text[start:end]

