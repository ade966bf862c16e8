"""The edit loop: draw, read a key, dispatch, repeat."""

from __future__ import annotations

import logging

from rawedit.config import EditorConfig
from rawedit.keys import Key, KeyDecoder, KeyEvent
from rawedit.render import refresh_screen
from rawedit.session import EditorSession
from rawedit.terminal import CLEAR_SCREEN, CURSOR_HOME, Terminal

logger = logging.getLogger(__name__)

QUIT_KEY = Key.ctrl("q")
SAVE_KEY = Key.ctrl("s")

_ARROWS = {
    Key.up: "up",
    Key.down: "down",
    Key.left: "left",
    Key.right: "right",
}


class Editor:
    """Drives one :class:`EditorSession` against a terminal."""

    def __init__(
        self,
        terminal: Terminal,
        session: EditorSession,
        config: EditorConfig | None = None,
    ) -> None:
        self.terminal = terminal
        self.session = session
        self.config = config or EditorConfig()
        self.decoder = KeyDecoder(terminal)
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def refresh_screen(self) -> None:
        refresh_screen(self.terminal, self.session, self.config)

    def run(self) -> None:
        """Loop until quit or until the terminal stops producing input."""
        self._running = True
        while self._running:
            self.refresh_screen()
            try:
                event = self.decoder.read_key()
            except EOFError:
                logger.info("input exhausted, leaving edit loop")
                break
            self.process_keypress(event)
        self._running = False

    def quit(self) -> None:
        self.terminal.write(CLEAR_SCREEN + CURSOR_HOME)
        self._running = False

    def process_keypress(self, event: KeyEvent) -> None:
        """Apply one key event to the session."""
        session = self.session
        key = event.key

        if event.is_char:
            session.insert_char(event.byte)
        elif key == QUIT_KEY:
            self.quit()
        elif key == SAVE_KEY:
            session.save()
        elif key in _ARROWS:
            session.move(_ARROWS[key])
        elif key == Key.home:
            session.home()
        elif key == Key.end:
            session.end()
        elif key == Key.page_up:
            session.page_up()
        elif key == Key.page_down:
            session.page_down()
        else:
            # enter, backspace, delete, escape and the remaining control
            # keys leave the buffer alone.
            logger.debug("ignored key %s", key)
