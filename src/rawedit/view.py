"""Cursor and viewport model.

The cursor lives in content space: ``line`` may be one past the last row
(the append line), ``column`` never exceeds the length of its row. The
viewport is the window of the document shown on screen; :func:`scroll`
moves it just far enough to keep the cursor visible.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from rawedit.rows import Document

Direction = Literal["up", "down", "left", "right"]


@dataclass
class Cursor:
    column: int = 0
    line: int = 0


@dataclass
class Viewport:
    row_offset: int = 0
    col_offset: int = 0
    visible_rows: int = 0
    visible_cols: int = 0

    @classmethod
    def for_terminal(cls, rows: int, cols: int) -> Viewport:
        """Viewport for a terminal of ``rows x cols``, minus the status bar."""
        return cls(visible_rows=max(rows - 1, 0), visible_cols=max(cols, 0))


def clamp_column(document: Document, cursor: Cursor) -> None:
    """Snap the column inward to the length of the cursor's row."""
    row_len = document.row_size(cursor.line)
    if cursor.column > row_len:
        cursor.column = row_len


def move_cursor(document: Document, cursor: Cursor, direction: Direction) -> None:
    """Move the cursor one step, wrapping across line ends horizontally."""
    on_row = cursor.line < document.row_count

    if direction == "left":
        if cursor.column != 0:
            cursor.column -= 1
        elif cursor.line > 0:
            cursor.line -= 1
            cursor.column = document.row_size(cursor.line)
    elif direction == "right":
        if on_row:
            if cursor.column < document.row_size(cursor.line):
                cursor.column += 1
            else:
                cursor.line += 1
                cursor.column = 0
    elif direction == "up":
        if cursor.line != 0:
            cursor.line -= 1
    elif direction == "down":
        if cursor.line < document.row_count:
            cursor.line += 1
    else:
        raise ValueError(f"unknown direction: {direction!r}")

    clamp_column(document, cursor)


def move_home(cursor: Cursor) -> None:
    cursor.column = 0


def move_end(document: Document, cursor: Cursor) -> None:
    if cursor.line < document.row_count:
        cursor.column = document.row_size(cursor.line)


def page_up(document: Document, cursor: Cursor, viewport: Viewport) -> None:
    """Jump to the top of the viewport, then up one screenful."""
    cursor.line = viewport.row_offset
    clamp_column(document, cursor)
    for _ in range(viewport.visible_rows):
        move_cursor(document, cursor, "up")


def page_down(document: Document, cursor: Cursor, viewport: Viewport) -> None:
    """Jump to the bottom of the viewport, then down one screenful."""
    cursor.line = max(
        min(viewport.row_offset + viewport.visible_rows - 1, document.row_count),
        0,
    )
    clamp_column(document, cursor)
    for _ in range(viewport.visible_rows):
        move_cursor(document, cursor, "down")


def scroll(viewport: Viewport, cursor: Cursor) -> None:
    """Shift the offsets by the minimum needed to keep the cursor visible."""
    if cursor.line < viewport.row_offset:
        viewport.row_offset = cursor.line
    if viewport.visible_rows > 0 and cursor.line >= viewport.row_offset + viewport.visible_rows:
        viewport.row_offset = cursor.line - viewport.visible_rows + 1

    if cursor.column < viewport.col_offset:
        viewport.col_offset = cursor.column
    if viewport.visible_cols > 0 and cursor.column >= viewport.col_offset + viewport.visible_cols:
        viewport.col_offset = cursor.column - viewport.visible_cols + 1
