"""Tests for rawedit.cli -- the click entry point, with a fake terminal."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

import rawedit
from rawedit import cli
from rawedit.config import EditorConfig
from rawedit.keys import ctrl_byte
from rawedit.terminal import TerminalError

from .virtual_terminal import VirtualTerminal

QUIT = bytes([ctrl_byte("q")])
SAVE = bytes([ctrl_byte("s")])


class FakeProcessTerminal(VirtualTerminal):
    """VirtualTerminal with the raw-mode lifecycle of ProcessTerminal."""

    script: bytes = QUIT
    size_error: bool = False
    instances: list[FakeProcessTerminal] = []

    def __init__(self) -> None:
        super().__init__(rows=8, columns=30, script=self.script)
        self.entered = 0
        self.restored = 0
        FakeProcessTerminal.instances.append(self)

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[FakeProcessTerminal]:
        self.entered += 1
        try:
            yield self
        finally:
            self.restored += 1

    def window_size(self) -> tuple[int, int]:
        if self.size_error:
            raise TerminalError("unexpected cursor position report: b''")
        return super().window_size()


@pytest.fixture
def fake_terminal(monkeypatch: pytest.MonkeyPatch) -> type[FakeProcessTerminal]:
    monkeypatch.setattr(FakeProcessTerminal, "instances", [])
    monkeypatch.setattr(cli, "ProcessTerminal", FakeProcessTerminal)
    return FakeProcessTerminal


def test_quit_without_file(fake_terminal, monkeypatch) -> None:
    monkeypatch.setattr(fake_terminal, "script", QUIT)
    result = CliRunner().invoke(cli.main, [])
    assert result.exit_code == 0
    (terminal,) = fake_terminal.instances
    assert (terminal.entered, terminal.restored) == (1, 1)
    assert terminal.writes[-1] == b"\x1b[2J\x1b[H"
    # The first frame shows the welcome banner.
    assert EditorConfig().welcome_message.encode() in terminal.writes[0]


def test_edit_and_save_file(fake_terminal, monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "doc.txt"
    path.write_bytes(b"first\n")
    monkeypatch.setattr(fake_terminal, "script", b"\x1b[B>" + SAVE + QUIT)
    result = CliRunner().invoke(cli.main, [str(path)])
    assert result.exit_code == 0
    assert path.read_bytes() == b"first\n>\n"


def test_new_file_is_created_on_save(fake_terminal, monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "new.txt"
    monkeypatch.setattr(fake_terminal, "script", b"x" + SAVE + QUIT)
    result = CliRunner().invoke(cli.main, [str(path)])
    assert result.exit_code == 0
    assert path.read_bytes() == b"x\n"


def test_terminal_failure_is_fatal(fake_terminal, monkeypatch) -> None:
    monkeypatch.setattr(fake_terminal, "size_error", True)
    result = CliRunner().invoke(cli.main, [])
    assert result.exit_code == 1
    assert "unexpected cursor position report" in result.output
    (terminal,) = fake_terminal.instances
    assert terminal.restored == 1
    assert terminal.output == b"\x1b[2J\x1b[H"


def test_directory_is_rejected(fake_terminal, tmp_path: Path) -> None:
    directory = tmp_path / "dir"
    directory.mkdir()
    # click.Path(dir_okay=False) rejects directories before the editor starts.
    result = CliRunner().invoke(cli.main, [str(directory)])
    assert result.exit_code == 2
    assert fake_terminal.instances == []


def test_read_error_restores_terminal(fake_terminal, monkeypatch, tmp_path: Path) -> None:
    def fail(path: str) -> bytes:
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr(rawedit.persistence, "read_all", fail)
    result = CliRunner().invoke(cli.main, [str(tmp_path / "locked.txt")])
    assert result.exit_code == 1
    assert "Permission denied" in result.output
    (terminal,) = fake_terminal.instances
    assert terminal.restored == 1


class TestLogging:
    def test_package_logger_is_silent_by_default(self) -> None:
        handlers = logging.getLogger("rawedit").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)

    def test_configure_without_path_is_a_noop(self, monkeypatch) -> None:
        calls: list[dict] = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        cli.configure_logging(EditorConfig())
        assert calls == []

    def test_configure_with_path(self, monkeypatch) -> None:
        calls: list[dict] = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        cli.configure_logging(EditorConfig(log_path="/tmp/r.log", log_level="debug"))
        assert calls[0]["filename"] == "/tmp/r.log"
        assert calls[0]["level"] == logging.DEBUG
