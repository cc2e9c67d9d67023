"""Novel library: reading position persistence and reader sessions."""

from .base import PositionSink
from .models import Novel, ReadingPosition
from .session import ReadingSession
from .storage import NovelLibrary, NovelNotFoundError

__all__ = [
    "Novel",
    "NovelLibrary",
    "NovelNotFoundError",
    "PositionSink",
    "ReadingPosition",
    "ReadingSession",
]
