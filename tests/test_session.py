"""Tests for ReadingSession resume and position reporting."""
from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from library.models import ReadingPosition
from library.session import ReadingSession
from library.storage import NovelLibrary
from loading.config import ReaderConfig
from loading.sources import MemoryByteSource
from loading.store import ChunkStore

WAIT = 5


def make_text(chunks: int, chunk_size: int = 10) -> str:
    return "".join(chr(ord("a") + i % 26) * chunk_size for i in range(chunks))


@pytest.fixture
def store():
    store = ChunkStore(ReaderConfig(chunk_size=10))
    yield store
    store.shutdown()


@pytest.fixture
def sink():
    sink = MagicMock()
    sink.get_position.return_value = None
    return sink


def make_session(store: ChunkStore, sink, chunks: int = 5) -> ReadingSession:
    source = MemoryByteSource(make_text(chunks).encode("utf-8"), "novel")
    return ReadingSession(store, sink, "novel-1", source)


class TestOpen:
    """Tests for opening a session."""

    def test_open_without_saved_position(self, store: ChunkStore, sink):
        """Test a new novel opens at chunk 0."""
        state = make_session(store, sink).open().result(WAIT)

        assert state.chunk_index == 0
        sink.get_position.assert_called_once_with("novel-1")
        sink.save_position.assert_not_called()

    def test_open_resumes_saved_chunk(self, store: ChunkStore, sink):
        """Test the saved chunk and scroll offset are restored."""
        sink.get_position.return_value = ReadingPosition(chunk_index=3, position=780, scroll_offset=30.0)
        session = make_session(store, sink)

        state = session.open().result(WAIT)

        assert state.chunk_index == 3
        assert state.content == "d" * 10
        assert session.scroll_offset == 30.0

    def test_open_saved_chunk_out_of_range(self, store: ChunkStore, sink):
        """Test a saved chunk past the end of a shorter file is ignored."""
        sink.get_position.return_value = ReadingPosition(chunk_index=40)

        state = make_session(store, sink, chunks=2).open().result(WAIT)

        assert state.chunk_index == 0
        assert state.error is None

    def test_open_failure_reports_error(self, store: ChunkStore, sink, tmp_path: Path):
        """Test a missing file surfaces the store error and saves nothing."""
        session = ReadingSession(store, sink, "novel-1", tmp_path / "missing.txt")

        state = session.open().result(WAIT)
        session.close()

        assert state.error.startswith("Failed to open file:")
        sink.save_position.assert_not_called()


class TestNavigationReporting:
    """Tests for position reports after navigation."""

    def test_next_reports_position(self, store: ChunkStore, sink):
        """Test moving forward saves the new chunk index."""
        session = make_session(store, sink)
        session.open().result(WAIT)

        assert session.next_chunk() is True

        sink.save_position.assert_called_once_with(
            "novel-1", ReadingPosition(chunk_index=1, position=250, scroll_offset=0.0)
        )

    def test_boundary_does_not_report(self, store: ChunkStore, sink):
        """Test a no-op navigation saves nothing."""
        session = make_session(store, sink)
        session.open().result(WAIT)

        assert session.previous_chunk() is False
        sink.save_position.assert_not_called()

    def test_jump_resets_scroll(self, store: ChunkStore, sink):
        """Test changing chunk resets the scroll offset."""
        session = make_session(store, sink)
        session.open().result(WAIT)
        session.update_scroll(120.0)

        session.jump_to(4)

        assert session.scroll_offset == 0.0
        assert session.progress() == 1.0
        assert sink.save_position.call_args.args[1].position == 1000

    def test_close_saves_scroll_and_closes_store(self, store: ChunkStore, sink):
        """Test close persists position including scroll, then unloads."""
        session = make_session(store, sink)
        session.open().result(WAIT)
        session.jump_to(2)
        session.update_scroll(42.7)

        session.close()

        sink.save_position.assert_called_with(
            "novel-1", ReadingPosition(chunk_index=2, position=542, scroll_offset=42.7)
        )
        assert store.document is None

    def test_close_still_unloads_when_save_fails(self, store: ChunkStore, sink):
        """Test a failing save propagates but the store is closed anyway."""
        sink.save_position.side_effect = OSError("disk full")
        session = make_session(store, sink)
        session.open().result(WAIT)

        with pytest.raises(OSError, match="disk full"):
            session.close()

        assert store.document is None
        assert store.content == ""

    def test_negative_scroll_clamped(self, store: ChunkStore, sink):
        """Test negative scroll offsets are stored as zero."""
        session = make_session(store, sink)
        session.update_scroll(-5.0)
        assert session.scroll_offset == 0.0


class TestWithLibrary:
    """Tests for a session backed by the JSON library."""

    def test_resume_across_sessions(self, tmp_path: Path):
        """Test a position saved by one session is restored by the next."""
        novel_path = tmp_path / "book.txt"
        novel_path.write_text(make_text(6), encoding="utf-8")
        library = NovelLibrary(tmp_path / "library.json")
        novel = library.import_file(novel_path)

        with ChunkStore(ReaderConfig(chunk_size=10)) as store:
            session = ReadingSession(store, library, novel.novel_id, novel.file_path)
            session.open().result(WAIT)
            session.jump_to(4)
            session.close()

        reopened = NovelLibrary(tmp_path / "library.json")
        with ChunkStore(ReaderConfig(chunk_size=10)) as store:
            session = ReadingSession(store, reopened, novel.novel_id, novel.file_path)
            state = session.open().result(WAIT)

        assert state.chunk_index == 4
        assert state.content == "e" * 10
