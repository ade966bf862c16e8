"""Editing session state.

One :class:`EditorSession` holds everything a single edit needs: the
document, the cursor, the viewport and the file metadata shown in the status
bar. Every operation takes the session explicitly; there is no global state.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from rawedit import persistence
from rawedit.rows import Document
from rawedit.view import (
    Cursor,
    Direction,
    Viewport,
    move_cursor,
    move_end,
    move_home,
    page_down,
    page_up,
    scroll,
)

logger = logging.getLogger(__name__)

LAST_SAVE_FORMAT = "%c"


@dataclass
class EditorSession:
    document: Document = field(default_factory=Document)
    cursor: Cursor = field(default_factory=Cursor)
    viewport: Viewport = field(default_factory=Viewport)
    filename: str | None = None
    # Empty until a save succeeds.
    last_save: str = ""

    @classmethod
    def open(cls, filename: str, viewport: Viewport | None = None) -> EditorSession:
        """Load *filename*; a file that does not exist yet opens empty."""
        session = cls(filename=filename)
        if viewport is not None:
            session.viewport = viewport
        try:
            data = persistence.read_all(filename)
        except FileNotFoundError:
            logger.info("%s does not exist yet, starting empty", filename)
            return session
        session.document.load(data)
        logger.info("opened %s (%d rows)", filename, session.document.row_count)
        return session

    # -- editing ------------------------------------------------------------

    def insert_char(self, char: int) -> None:
        """Insert *char* at the cursor and step past it."""
        self.document.insert_char(self.cursor.line, self.cursor.column, char)
        self.cursor.column += 1

    # -- movement -----------------------------------------------------------

    def move(self, direction: Direction) -> None:
        move_cursor(self.document, self.cursor, direction)

    def home(self) -> None:
        move_home(self.cursor)

    def end(self) -> None:
        move_end(self.document, self.cursor)

    def page_up(self) -> None:
        page_up(self.document, self.cursor, self.viewport)

    def page_down(self) -> None:
        page_down(self.document, self.cursor, self.viewport)

    def scroll(self) -> None:
        scroll(self.viewport, self.cursor)

    # -- persistence --------------------------------------------------------

    def save(self) -> bool:
        """Write the document to :attr:`filename`.

        Failures are logged and otherwise ignored; the timestamp only moves
        after the whole buffer has been written.
        """
        if self.filename is None:
            logger.debug("save skipped: no filename")
            return False
        data = self.document.serialize()
        try:
            persistence.write_all(self.filename, data)
        except OSError as exc:
            logger.warning("save to %s failed: %s", self.filename, exc)
            return False
        self.last_save = time.strftime(LAST_SAVE_FORMAT)
        logger.info("saved %d bytes to %s", len(data), self.filename)
        return True
