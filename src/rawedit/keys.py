"""Raw terminal input decoding.

Turns the byte stream coming from a raw-mode terminal into logical key
events. Escape sequences are decoded by a small explicit state machine
(``GROUND -> SAW_ESC -> SAW_BRACKET -> SAW_BRACKET_DIGIT`` plus ``SAW_O`` for
the SS3 encoding). Every decode starts fresh in ``GROUND``; anything the
tables do not recognise is absorbed as a single ``escape`` event.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

KeyId = str

ESC = 0x1B
BACKSPACE = 0x7F


# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants."""

    char = "char"
    escape = "escape"
    enter = "enter"
    backspace = "backspace"
    delete = "delete"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"


def ctrl_byte(letter: str) -> int:
    """Byte sent by the terminal for Ctrl plus *letter*."""
    return ord(letter) & 0x1F


# ---------------------------------------------------------------------------
# Decode tables
# ---------------------------------------------------------------------------

# ESC [ <letter>
CSI_LETTER_KEYS: dict[int, KeyId] = {
    ord("A"): Key.up,
    ord("B"): Key.down,
    ord("C"): Key.right,
    ord("D"): Key.left,
    ord("H"): Key.home,
    ord("F"): Key.end,
}

# ESC [ <digit> ~
CSI_TILDE_KEYS: dict[int, KeyId] = {
    ord("1"): Key.home,
    ord("3"): Key.delete,
    ord("4"): Key.end,
    ord("5"): Key.page_up,
    ord("6"): Key.page_down,
    ord("7"): Key.home,
    ord("8"): Key.end,
}

# ESC O <letter>
SS3_KEYS: dict[int, KeyId] = {
    ord("H"): Key.home,
    ord("F"): Key.end,
}

# Single control bytes with a name of their own.
CONTROL_KEYS: dict[int, KeyId] = {
    BACKSPACE: Key.backspace,
    0x08: Key.backspace,
    ord("\r"): Key.enter,
}


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """A decoded keypress: either a named key or a character byte."""

    key: KeyId
    byte: int | None = None

    @classmethod
    def character(cls, byte: int) -> KeyEvent:
        return cls(Key.char, byte)

    @property
    def is_char(self) -> bool:
        return self.key == Key.char

    def __repr__(self) -> str:
        if self.is_char:
            return f"KeyEvent.character({bytes([self.byte])!r})"
        return f"KeyEvent({self.key!r})"


ESCAPE_EVENT = KeyEvent(Key.escape)


def classify_byte(byte: int) -> KeyEvent:
    """Key event for a byte read outside an escape sequence."""
    named = CONTROL_KEYS.get(byte)
    if named is not None:
        return KeyEvent(named)
    if 1 <= byte <= 26 and byte != ord("\t"):
        return KeyEvent(Key.ctrl(chr(byte + ord("a") - 1)))
    return KeyEvent.character(byte)


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------


class ByteSource(Protocol):
    """Where the decoder gets its bytes from.

    ``read_byte`` returns the next byte, ``None`` when nothing arrived within
    the short read window, and raises ``EOFError`` once input is exhausted.
    """

    def read_byte(self) -> int | None: ...


class DecoderState(Enum):
    GROUND = "ground"
    SAW_ESC = "saw_esc"
    SAW_BRACKET = "saw_bracket"
    SAW_BRACKET_DIGIT = "saw_bracket_digit"
    SAW_O = "saw_o"


def _is_digit(byte: int) -> bool:
    return ord("0") <= byte <= ord("9")


class KeyDecoder:
    """Reads one logical key at a time from a :class:`ByteSource`."""

    def __init__(self, source: ByteSource) -> None:
        self._source = source
        self.state = DecoderState.GROUND

    def events(self) -> Iterator[KeyEvent]:
        """Lazily yield key events until the source is exhausted."""
        while True:
            try:
                event = self.read_key()
            except EOFError:
                return
            yield event

    def read_key(self) -> KeyEvent:
        """Block until a full key has been read.

        Raises ``EOFError`` if the source runs dry before the first byte.
        """
        self.state = DecoderState.GROUND
        byte = self._read_blocking()
        if byte != ESC:
            return classify_byte(byte)

        self.state = DecoderState.SAW_ESC
        digit = 0
        while True:
            nxt = self._read_follow_up()
            if nxt is None:
                return self._finish(ESCAPE_EVENT)

            if self.state is DecoderState.SAW_ESC:
                if nxt == ord("["):
                    self.state = DecoderState.SAW_BRACKET
                elif nxt == ord("O"):
                    self.state = DecoderState.SAW_O
                else:
                    return self._finish(ESCAPE_EVENT)

            elif self.state is DecoderState.SAW_BRACKET:
                if _is_digit(nxt):
                    digit = nxt
                    self.state = DecoderState.SAW_BRACKET_DIGIT
                else:
                    return self._finish(self._lookup(CSI_LETTER_KEYS, nxt))

            elif self.state is DecoderState.SAW_BRACKET_DIGIT:
                if nxt == ord("~"):
                    return self._finish(self._lookup(CSI_TILDE_KEYS, digit))
                return self._finish(ESCAPE_EVENT)

            elif self.state is DecoderState.SAW_O:
                return self._finish(self._lookup(SS3_KEYS, nxt))

    # -- helpers --------------------------------------------------------------

    def _finish(self, event: KeyEvent) -> KeyEvent:
        if event is ESCAPE_EVENT and self.state is not DecoderState.SAW_ESC:
            logger.debug("unrecognised escape sequence in state %s", self.state.value)
        self.state = DecoderState.GROUND
        return event

    @staticmethod
    def _lookup(table: dict[int, KeyId], byte: int) -> KeyEvent:
        key = table.get(byte)
        return KeyEvent(key) if key is not None else ESCAPE_EVENT

    def _read_blocking(self) -> int:
        while True:
            byte = self._source.read_byte()
            if byte is not None:
                return byte

    def _read_follow_up(self) -> int | None:
        try:
            return self._source.read_byte()
        except EOFError:
            return None


class BytesSource:
    """A :class:`ByteSource` over a fixed script of bytes.

    ``None`` entries in *script* stand for read windows in which nothing
    arrived.
    """

    def __init__(self, script: bytes | list[int | None]) -> None:
        self._script: list[int | None] = list(script)
        self._pos = 0

    def read_byte(self) -> int | None:
        if self._pos >= len(self._script):
            raise EOFError
        byte = self._script[self._pos]
        self._pos += 1
        return byte

    @property
    def remaining(self) -> int:
        return len(self._script) - self._pos


def decode(script: bytes | list[int | None]) -> list[KeyEvent]:
    """Decode a complete byte script into key events."""
    return list(KeyDecoder(BytesSource(script)).events())
