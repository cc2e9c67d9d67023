from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict


@dataclass(frozen=True, slots=True)
class ReadingPosition:
    """Where a reader left off in a novel.

    Attributes:
        chunk_index: Index of the visible chunk.
        position: Coarse position scalar, ``int(progress * 1000) + int(scroll_offset)``.
        scroll_offset: Scroll offset inside the visible chunk.
    """

    chunk_index: int = 0
    position: int = 0
    scroll_offset: float = 0.0


@dataclass(slots=True)
class Novel:
    """Library entry for one imported text file."""

    title: str
    file_path: Path
    novel_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    last_read_position: int = 0
    last_chunk_index: int = 0
    last_scroll_position: float = 0.0
    added_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def reading_position(self) -> ReadingPosition:
        return ReadingPosition(
            chunk_index=self.last_chunk_index,
            position=self.last_read_position,
            scroll_offset=self.last_scroll_position,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["file_path"] = str(self.file_path)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Novel":
        return cls(
            title=data["title"],
            file_path=Path(data["file_path"]),
            novel_id=data["novel_id"],
            last_read_position=int(data.get("last_read_position", 0)),
            last_chunk_index=int(data.get("last_chunk_index", 0)),
            last_scroll_position=float(data.get("last_scroll_position", 0.0)),
            added_at=data.get("added_at", ""),
        )
