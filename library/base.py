"""Protocol for the store that persists reading positions.

The reading session only needs ``get_position`` and ``save_position``, so any
object with those methods (the JSON-backed NovelLibrary, a platform settings
store, a test double) can be injected.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .models import ReadingPosition


@runtime_checkable
class PositionSink(Protocol):
    """Persists and recalls reading positions by novel id."""

    def get_position(self, novel_id: str) -> Optional[ReadingPosition]:
        """Return the saved position, or None if nothing was saved."""
        ...

    def save_position(self, novel_id: str, position: ReadingPosition) -> None:
        """Persist the position for later resume."""
        ...
