"""rawedit: a minimal full-screen terminal text editor."""

import logging

from rawedit.config import EditorConfig, load_config
from rawedit.editor import Editor
from rawedit.keys import Key, KeyDecoder, KeyEvent, decode
from rawedit.render import refresh_screen, render_frame
from rawedit.rows import Document, Row
from rawedit.session import EditorSession
from rawedit.terminal import ProcessTerminal, Terminal, TerminalError
from rawedit.view import Cursor, Viewport, move_cursor, scroll

# The screen belongs to the editor; log records go nowhere unless the CLI
# configures a log file.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Buffer
    "Row",
    "Document",
    # Cursor / viewport
    "Cursor",
    "Viewport",
    "move_cursor",
    "scroll",
    # Input
    "Key",
    "KeyEvent",
    "KeyDecoder",
    "decode",
    # Output
    "render_frame",
    "refresh_screen",
    # Terminal
    "Terminal",
    "ProcessTerminal",
    "TerminalError",
    # Session
    "EditorSession",
    "Editor",
    "EditorConfig",
    "load_config",
]
