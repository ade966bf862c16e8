"""Screen rendering.

:func:`render_frame` builds a complete frame (rows, status bar, cursor
placement) into one list of byte chunks; :func:`refresh_screen` scrolls,
renders and hands the joined frame to the terminal in a single write so the
redraw never tears.
"""

from __future__ import annotations

from rawedit.config import EditorConfig
from rawedit.session import EditorSession
from rawedit.terminal import (
    CLEAR_LINE,
    CURSOR_HOME,
    HIDE_CURSOR,
    RESET_VIDEO,
    REVERSE_VIDEO,
    SHOW_CURSOR,
    Terminal,
    cursor_position,
)

EMPTY_LINE_MARKER = b"~"
LINE_BREAK = b"\r\n"


def draw_rows(out: list[bytes], session: EditorSession, config: EditorConfig) -> None:
    document = session.document
    viewport = session.viewport
    cols = viewport.visible_cols

    for i in range(viewport.visible_rows):
        file_row = i + viewport.row_offset
        if file_row >= document.row_count:
            if document.row_count == 0 and i == viewport.visible_rows // 3:
                out.append(welcome_line(config.welcome_message, cols))
            else:
                out.append(EMPTY_LINE_MARKER)
        else:
            render = document[file_row].render
            out.append(render[viewport.col_offset : viewport.col_offset + cols])

        out.append(CLEAR_LINE)
        out.append(LINE_BREAK)


def welcome_line(message: str, cols: int) -> bytes:
    """Centre *message* in *cols* columns, keeping the ``~`` gutter."""
    msg = message.encode("utf-8")[:cols]
    padding = (cols - len(msg)) // 2
    line = b""
    if padding:
        line += EMPTY_LINE_MARKER
        padding -= 1
    return line + b" " * padding + msg


def status_text(session: EditorSession, config: EditorConfig) -> tuple[bytes, bytes]:
    """Left and right halves of the status bar."""
    name = session.filename if session.filename is not None else "unsaved"
    left = f" {name[: config.status_filename_width]} {session.last_save}"
    right = f"~{session.document.row_count * config.bytes_per_line} "
    return left.encode("utf-8", errors="replace"), right.encode("ascii")


def draw_status_bar(out: list[bytes], session: EditorSession, config: EditorConfig) -> None:
    cols = session.viewport.visible_cols
    left, right = status_text(session, config)
    left = left[:cols]

    out.append(REVERSE_VIDEO)
    out.append(left)
    gap = cols - len(left)
    # The right half is drawn only if it fits in full.
    if gap >= len(right):
        out.append(b" " * (gap - len(right)))
        out.append(right)
    else:
        out.append(b" " * gap)
    out.append(RESET_VIDEO)


def render_frame(session: EditorSession, config: EditorConfig) -> bytes:
    """Build one full frame for the current state (no scrolling)."""
    viewport = session.viewport
    cursor = session.cursor

    out: list[bytes] = [HIDE_CURSOR, CURSOR_HOME]
    draw_rows(out, session, config)
    draw_status_bar(out, session, config)
    out.append(
        cursor_position(
            cursor.line - viewport.row_offset + 1,
            cursor.column - viewport.col_offset + 1,
        )
    )
    out.append(SHOW_CURSOR)
    return b"".join(out)


def refresh_screen(terminal: Terminal, session: EditorSession, config: EditorConfig) -> None:
    """Scroll to the cursor and redraw the whole screen in one write."""
    session.scroll()
    terminal.write(render_frame(session, config))
