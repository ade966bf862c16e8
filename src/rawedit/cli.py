"""CLI entry point for rawedit. Uses Click for argument parsing."""

from __future__ import annotations

import logging

import click

from rawedit.config import LOG_FORMAT, EditorConfig, load_config
from rawedit.editor import Editor
from rawedit.session import EditorSession
from rawedit.terminal import CLEAR_SCREEN, CURSOR_HOME, ProcessTerminal, TerminalError
from rawedit.view import Viewport

logger = logging.getLogger(__name__)


def configure_logging(config: EditorConfig) -> None:
    """Send log records to the configured file, if any."""
    if not config.log_path:
        return
    logging.basicConfig(
        filename=config.log_path,
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def run_editor(
    terminal: ProcessTerminal,
    filename: str | None,
    config: EditorConfig,
) -> None:
    """Run one editing session with the terminal in raw mode."""
    with terminal.raw_mode():
        rows, cols = terminal.window_size()
        viewport = Viewport.for_terminal(rows, cols)
        logger.info("terminal is %dx%d", cols, rows)
        if filename is not None:
            session = EditorSession.open(filename, viewport)
        else:
            session = EditorSession(viewport=viewport)
        Editor(terminal, session, config).run()


@click.command()
@click.argument("filename", required=False, type=click.Path(dir_okay=False))
def main(filename):
    """Edit FILENAME in a minimal full-screen editor.

    Ctrl-S saves, Ctrl-Q quits.
    """
    config = load_config()
    configure_logging(config)

    terminal = ProcessTerminal()
    try:
        run_editor(terminal, filename, config)
    except (TerminalError, OSError, MemoryError) as e:
        terminal.write(CLEAR_SCREEN + CURSOR_HOME)
        logger.error("fatal: %s", e)
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()
