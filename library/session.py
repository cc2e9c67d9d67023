from __future__ import annotations

import logging
from concurrent.futures import Future
from pathlib import Path
from typing import Optional, Union

from loading.models import ReaderState
from loading.sources import ByteSource
from loading.store import ChunkStore

from .base import PositionSink
from .models import ReadingPosition

logger = logging.getLogger(__name__)


class ReadingSession:
    """One reader session over a ChunkStore, reporting positions to a sink.

    ``open`` loads the file and jumps back to the saved chunk. Each chunk
    navigation saves the new position, and ``close`` saves the final
    position before releasing the document.
    """

    def __init__(
        self,
        store: ChunkStore,
        sink: PositionSink,
        novel_id: str,
        source: Union[ByteSource, str, Path],
    ):
        self.store = store
        self.sink = sink
        self.novel_id = novel_id
        self.source = source
        self.scroll_offset = 0.0

    def open(self) -> "Future[Optional[ReaderState]]":
        """Load the file and restore the saved chunk.

        Returns:
            Future resolving to the visible state after the resume jump, or
            None if the load was superseded before it finished.
        """
        saved = self.sink.get_position(self.novel_id)
        self.scroll_offset = saved.scroll_offset if saved is not None else 0.0
        opened: Future = Future()

        def resume(load_future: Future) -> None:
            try:
                state = load_future.result()
            except Exception as e:  # pylint: disable=broad-except
                opened.set_exception(e)
                return
            if state is not None and state.error is None and saved is not None and saved.chunk_index > 0:
                if self.store.load_chunk(saved.chunk_index, generation=state.generation):
                    logger.info("Resumed %s at chunk %d", self.novel_id, saved.chunk_index)
                else:
                    logger.warning(
                        "Saved chunk %d not available for %s; staying at chunk 0",
                        saved.chunk_index,
                        self.novel_id,
                    )
                state = self.store.state
            opened.set_result(state)

        self.store.load(self.source).add_done_callback(resume)
        return opened

    def position(self) -> ReadingPosition:
        progress = self.store.progress()
        return ReadingPosition(
            chunk_index=self.store.current_chunk_index,
            position=int(progress * 1000) + int(self.scroll_offset),
            scroll_offset=self.scroll_offset,
        )

    def report(self) -> None:
        self.sink.save_position(self.novel_id, self.position())

    def _after_navigation(self, moved: bool) -> bool:
        if moved:
            self.scroll_offset = 0.0
            self.report()
        return moved

    def next_chunk(self) -> bool:
        return self._after_navigation(self.store.next_chunk())

    def previous_chunk(self) -> bool:
        return self._after_navigation(self.store.previous_chunk())

    def jump_to(self, index: int) -> bool:
        return self._after_navigation(self.store.load_chunk(index))

    def update_scroll(self, offset: float) -> None:
        """Record the scroll offset; persisted on the next report or on close."""
        self.scroll_offset = max(0.0, offset)

    def progress(self) -> float:
        return self.store.progress()

    def close(self) -> None:
        """Save the final position (if a document is open) and close the store."""
        try:
            if self.store.total_chunks > 0:
                self.report()
        finally:
            self.store.close()
