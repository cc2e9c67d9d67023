"""Tests for the read_novel command line script."""
from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from library.storage import NovelLibrary
from scripts.read_novel import main


@pytest.fixture
def env(monkeypatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("READER_CHUNK_SIZE", "10")
    monkeypatch.chdir(tmp_path)
    return tmp_path / "library.json"


def import_novel(library_path: Path, tmp_path: Path, text: str) -> str:
    source = tmp_path / "story.txt"
    source.write_text(text, encoding="utf-8")
    assert main(["--library", str(library_path), "import", str(source)]) == 0
    return NovelLibrary(library_path).list_novels()[0].novel_id


class TestReadNovelCli:
    """Tests for the CLI commands."""

    def test_import_and_list(self, env: Path, tmp_path: Path, capsys):
        """Test an imported novel shows up in the list."""
        import_novel(env, tmp_path, "x" * 25)

        assert main(["--library", str(env), "list"]) == 0

        out = capsys.readouterr().out
        assert "story" in out
        assert "(chunk 0)" in out

    def test_read_next_saves_position(self, env: Path, tmp_path: Path, capsys):
        """Test reading with --next advances and persists the chunk."""
        novel_id = import_novel(env, tmp_path, "a" * 10 + "b" * 10 + "c" * 5)

        assert main(["--library", str(env), "read", novel_id, "--next"]) == 0

        out = capsys.readouterr().out
        assert "b" * 10 in out
        assert "chunk 2/3 (50%)" in out
        assert NovelLibrary(env).get(novel_id).last_chunk_index == 1

    def test_read_chunk_out_of_range(self, env: Path, tmp_path: Path, capsys):
        """Test an out-of-range --chunk exits non-zero."""
        novel_id = import_novel(env, tmp_path, "a" * 15)

        assert main(["--library", str(env), "read", novel_id, "--chunk", "9"]) == 1
        assert "out of range" in capsys.readouterr().err

    def test_unknown_novel(self, env: Path, capsys):
        """Test an unknown id exits non-zero."""
        assert main(["--library", str(env), "read", "missing"]) == 1
        assert "Unknown novel" in capsys.readouterr().err

    def test_remove(self, env: Path, tmp_path: Path):
        """Test remove drops the novel."""
        novel_id = import_novel(env, tmp_path, "text")

        assert main(["--library", str(env), "remove", novel_id]) == 0
        assert novel_id not in NovelLibrary(env)

    def test_invalid_config(self, env: Path, monkeypatch):
        """Test a bad environment value exits with status 2."""
        monkeypatch.setenv("READER_CHUNK_SIZE", "zero")
        assert main(["--library", str(env), "list"]) == 2

    def test_import_os_error(self, env: Path, tmp_path: Path, monkeypatch, capsys):
        """Test a failing copy exits non-zero with the error on stderr."""
        source = tmp_path / "story.txt"
        source.write_text("text", encoding="utf-8")
        monkeypatch.setattr(NovelLibrary, "import_file", MagicMock(side_effect=PermissionError("Permission denied")))

        assert main(["--library", str(env), "import", str(source)]) == 1
        assert "Permission denied" in capsys.readouterr().err
