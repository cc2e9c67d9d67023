from __future__ import annotations

import logging
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 5


class ChunkCache:
    """Bounded mapping of chunk index to chunk text.

    Eviction is by index, not by recency: once an insertion pushes the cache
    over ``max_entries``, the lowest indices are dropped until exactly
    ``max_entries`` remain.
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_SIZE):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive.")
        self.max_entries = max_entries
        self._chunks: Dict[int, str] = {}

    def get(self, index: int) -> Optional[str]:
        return self._chunks.get(index)

    def put(self, index: int, text: str) -> List[int]:
        """Insert a chunk and apply eviction.

        Returns:
            Indices evicted by this insertion, in ascending order.
        """
        self._chunks[index] = text
        if len(self._chunks) <= self.max_entries:
            return []

        evicted = sorted(self._chunks)[: len(self._chunks) - self.max_entries]
        for key in evicted:
            del self._chunks[key]
        logger.debug("Evicted chunks %s", evicted)
        return evicted

    def indices(self) -> List[int]:
        return sorted(self._chunks)

    def clear(self) -> None:
        self._chunks.clear()

    def __contains__(self, index: object) -> bool:
        return index in self._chunks

    def __len__(self) -> int:
        return len(self._chunks)
