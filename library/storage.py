from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Dict, List, Optional

from .models import Novel, ReadingPosition

logger = logging.getLogger(__name__)


class NovelNotFoundError(KeyError):
    """Raised when a novel id is not in the library."""


class NovelLibrary:
    """JSON-backed list of imported novels and their reading positions.

    Imported files are copied into ``documents_dir`` so the library keeps
    working when the original file moves. On startup, entries whose file is
    gone are dropped and the cleaned list is written back.
    """

    def __init__(
        self,
        library_path: Path,
        documents_dir: Optional[Path] = None,
        prune_missing: bool = True,
    ):
        self.library_path = library_path
        self.documents_dir = documents_dir or library_path.parent / "novels"
        self.library_path.parent.mkdir(parents=True, exist_ok=True)
        self.documents_dir.mkdir(parents=True, exist_ok=True)
        self._novels = self._load_library()
        if prune_missing:
            self._prune_missing()

    def _load_library(self) -> Dict[str, Novel]:
        if not self.library_path.exists():
            return {}
        try:
            entries = json.loads(self.library_path.read_text(encoding="utf-8"))
            novels = [Novel.from_dict(entry) for entry in entries]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning("Library file %s corrupted; starting empty.", self.library_path)
            return {}
        return {novel.novel_id: novel for novel in novels}

    def _write_library(self) -> None:
        self.library_path.write_text(
            json.dumps([novel.to_dict() for novel in self._novels.values()], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    def _prune_missing(self) -> None:
        missing = [novel for novel in self._novels.values() if not novel.file_path.exists()]
        for novel in missing:
            logger.info("Removing novel with missing file: %s", novel.title)
            del self._novels[novel.novel_id]
        if missing:
            self._write_library()

    def add_novel(self, novel: Novel) -> Novel:
        self._novels[novel.novel_id] = novel
        self._write_library()
        return novel

    def import_file(self, source_path: Path, title: Optional[str] = None) -> Novel:
        """Copy a text file into the library and register it.

        Args:
            source_path: File to import.
            title: Display title; defaults to the file name without extension.

        Returns:
            The new Novel entry.

        Raises:
            FileNotFoundError: If source_path does not exist.
            OSError: If the copy fails (a partial copy is removed).
        """
        if not source_path.is_file():
            raise FileNotFoundError(f"No such file: {source_path}")

        novel = Novel(title=title or source_path.stem, file_path=source_path)
        # Each entry owns its own copy of the text.
        destination = self.documents_dir / f"{novel.novel_id}-{source_path.name}"

        try:
            shutil.copyfile(source_path, destination)
        except OSError:
            logger.error("Error copying %s to %s", source_path, destination)
            destination.unlink(missing_ok=True)
            raise

        novel.file_path = destination
        self.add_novel(novel)
        logger.info("Imported %s at %s", novel.title, destination)
        return novel

    def remove_novel(self, novel_id: str, delete_file: bool = True) -> Novel:
        novel = self.get(novel_id)
        if delete_file:
            novel.file_path.unlink(missing_ok=True)
        del self._novels[novel_id]
        self._write_library()
        return novel

    def update_novel(self, novel: Novel) -> None:
        if novel.novel_id not in self._novels:
            raise NovelNotFoundError(novel.novel_id)
        self._novels[novel.novel_id] = novel
        self._write_library()

    def get(self, novel_id: str) -> Novel:
        try:
            return self._novels[novel_id]
        except KeyError:
            raise NovelNotFoundError(novel_id) from None

    def list_novels(self) -> List[Novel]:
        return sorted(self._novels.values(), key=lambda novel: novel.added_at)

    def get_position(self, novel_id: str) -> Optional[ReadingPosition]:
        novel = self._novels.get(novel_id)
        return novel.reading_position if novel is not None else None

    def save_position(self, novel_id: str, position: ReadingPosition) -> None:
        novel = self.get(novel_id)
        novel.last_chunk_index = position.chunk_index
        novel.last_read_position = position.position
        novel.last_scroll_position = position.scroll_offset
        self._write_library()
        logger.debug("Saved position for %s: chunk %d", novel_id, position.chunk_index)

    def __len__(self) -> int:
        return len(self._novels)

    def __contains__(self, novel_id: object) -> bool:
        return novel_id in self._novels
