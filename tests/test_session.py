"""Tests for rawedit.session -- editing, opening and saving."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from rawedit import persistence
from rawedit.rows import Document
from rawedit.session import EditorSession
from rawedit.view import Cursor, Viewport


class TestInsertChar:
    def test_typing_on_append_line_adds_row(self) -> None:
        session = EditorSession(document=Document.from_lines([b"ab", b"cd"]))
        session.cursor = Cursor(column=0, line=2)
        session.insert_char(ord("x"))
        assert session.document.row_count == 3
        assert bytes(session.document[2].content) == b"x"
        assert session.cursor == Cursor(column=1, line=2)

    def test_typing_advances_cursor(self) -> None:
        session = EditorSession()
        for ch in b"hey":
            session.insert_char(ch)
        assert session.document.lines() == [b"hey"]
        assert session.cursor == Cursor(column=3, line=0)

    def test_insert_in_middle(self) -> None:
        session = EditorSession(document=Document.from_lines([b"ac"]))
        session.cursor = Cursor(column=1, line=0)
        session.insert_char(ord("b"))
        assert session.document.lines() == [b"abc"]


class TestOpen:
    def test_open_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_bytes(b"one\r\ntwo\n")
        session = EditorSession.open(str(path))
        assert session.document.lines() == [b"one", b"two"]
        assert session.filename == str(path)
        assert session.last_save == ""

    def test_open_missing_file_starts_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "new.txt"
        session = EditorSession.open(str(path), Viewport(visible_rows=5, visible_cols=10))
        assert session.document.row_count == 0
        assert session.viewport.visible_rows == 5
        assert not path.exists()

    def test_open_directory_fails(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            EditorSession.open(str(tmp_path))


class TestSave:
    def test_save_writes_serialized_document(self, tmp_path: Path) -> None:
        path = tmp_path / "out.txt"
        session = EditorSession(document=Document.from_lines([b"a", b"bb"]), filename=str(path))
        assert session.save() is True
        assert path.read_bytes() == b"a\nbb\n"
        assert session.last_save != ""

    def test_save_truncates_longer_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.txt"
        path.write_bytes(b"a much longer original file\n" * 10)
        session = EditorSession.open(str(path))
        session.document = Document.from_lines([b"short"])
        session.save()
        assert path.read_bytes() == b"short\n"

    def test_save_without_filename_is_a_noop(self) -> None:
        session = EditorSession(document=Document.from_lines([b"a"]))
        assert session.save() is False
        assert session.last_save == ""

    def test_failed_save_is_absorbed(self, tmp_path: Path) -> None:
        path = tmp_path / "missing-dir" / "out.txt"
        session = EditorSession(document=Document.from_lines([b"keep"]), filename=str(path))
        assert session.save() is False
        assert session.last_save == ""
        assert session.document.lines() == [b"keep"]

    def test_write_error_keeps_previous_timestamp(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        session = EditorSession(document=Document.from_lines([b"x"]), filename=str(tmp_path / "f"))
        session.last_save = "earlier"

        def fail(path: str, data: bytes) -> None:
            raise OSError("disk full")

        monkeypatch.setattr(persistence, "write_all", fail)
        assert session.save() is False
        assert session.last_save == "earlier"

    def test_saved_file_has_default_mode(self, tmp_path: Path) -> None:
        path = tmp_path / "fresh.txt"
        old_umask = os.umask(0o022)
        try:
            EditorSession(document=Document.from_lines([b"x"]), filename=str(path)).save()
        finally:
            os.umask(old_umask)
        assert (path.stat().st_mode & 0o777) == 0o644


class TestMovementDelegates:
    def test_home_end_and_move(self) -> None:
        session = EditorSession(document=Document.from_lines([b"abc", b"de"]))
        session.end()
        assert session.cursor == Cursor(column=3, line=0)
        session.move("down")
        assert session.cursor == Cursor(column=2, line=1)
        session.home()
        assert session.cursor == Cursor(column=0, line=1)

    def test_paging_uses_viewport(self) -> None:
        doc = Document.from_lines([b"x"] * 40)
        session = EditorSession(document=doc, viewport=Viewport(visible_rows=10, visible_cols=80))
        session.page_down()
        assert session.cursor.line == 19
        session.scroll()
        session.page_up()
        assert session.cursor.line == 0
