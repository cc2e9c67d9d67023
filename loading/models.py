from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .chunker import DEFAULT_CHUNK_SIZE, count_chunks


class ReaderError(Exception):
    """Base class for errors raised by the loading package."""


class SourceUnavailableError(ReaderError):
    """Raised when a byte source cannot be opened or read."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


@dataclass(slots=True)
class Document:
    """Decoded, normalized text of one opened file."""

    text: str
    source: str = ""
    encoding: str = "utf-8"
    used_fallback: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def total_chunks(self) -> int:
        return count_chunks(len(self.text), self.chunk_size)


@dataclass(frozen=True, slots=True)
class ReaderState:
    """Snapshot of the observable fields of a ChunkStore.

    Attributes:
        content: Text of the visible chunk (empty when nothing is loaded).
        is_loading: True while a load is in flight.
        error: Last error message, or None.
        chunk_index: Index of the visible chunk.
        total_chunks: Number of chunks in the open document.
        generation: Load generation this snapshot belongs to.
    """

    content: str = ""
    is_loading: bool = False
    error: Optional[str] = None
    chunk_index: int = 0
    total_chunks: int = 0
    generation: int = 0

    @property
    def is_ready(self) -> bool:
        return not self.is_loading and self.error is None and self.total_chunks > 0
