"""Row store: the editing buffer.

A :class:`Document` is an ordered list of :class:`Row` objects. Each row owns
its ``content`` bytes and a derived ``render`` form that is the only thing the
screen renderer ever draws. The two are kept in sync by :meth:`Row.update`,
which every mutation calls before returning.
"""

from __future__ import annotations

from collections.abc import Iterator


class Row:
    """One line of text, without its line terminator."""

    __slots__ = ("content", "render")

    def __init__(self, content: bytes = b"") -> None:
        self.content = bytearray(content)
        self.render = b""
        self.update()

    def __repr__(self) -> str:
        return f"Row({bytes(self.content)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self.content == other.content

    @property
    def size(self) -> int:
        return len(self.content)

    def update(self) -> None:
        """Re-derive ``render`` from ``content``."""
        # Identity for now; display-only expansion (tabs) belongs here.
        self.render = bytes(self.content)

    def insert_char(self, at: int, char: int) -> None:
        """Insert the byte *char* before position *at*.

        Out-of-range positions are clamped to the end of the row.
        """
        if at < 0 or at > len(self.content):
            at = len(self.content)
        self.content.insert(at, char)
        self.update()


class Document:
    """Ordered rows of the file being edited. Rows are only ever added."""

    def __init__(self) -> None:
        self._rows: list[Row] = []

    @classmethod
    def from_bytes(cls, data: bytes) -> Document:
        document = cls()
        document.load(data)
        return document

    @classmethod
    def from_lines(cls, lines: list[bytes]) -> Document:
        document = cls()
        for line in lines:
            document.append_row(line)
        return document

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, index: int) -> Row:
        return self._rows[index]

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._rows == other._rows

    def __repr__(self) -> str:
        return f"Document({self.lines()!r})"

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def lines(self) -> list[bytes]:
        return [bytes(row.content) for row in self._rows]

    def row_size(self, line: int) -> int:
        """Length of the row at *line*, or 0 on the append line."""
        if 0 <= line < len(self._rows):
            return self._rows[line].size
        return 0

    # -- mutation ------------------------------------------------------------

    def append_row(self, content: bytes = b"") -> Row:
        row = Row(content)
        self._rows.append(row)
        return row

    def insert_char(self, line: int, column: int, char: int) -> None:
        """Insert *char* at ``(line, column)``.

        Typing on the line just past the last row first appends an empty
        row there.
        """
        if line < 0 or line > len(self._rows):
            raise IndexError(
                f"line {line} outside document of {len(self._rows)} rows"
            )
        if line == len(self._rows):
            self.append_row(b"")
        self._rows[line].insert_char(column, char)

    # -- (de)serialization ---------------------------------------------------

    def serialize(self) -> bytes:
        """Join all rows, each followed by a single ``\\n``."""
        return b"".join(bytes(row.content) + b"\n" for row in self._rows)

    def load(self, data: bytes) -> None:
        """Append one row per line of *data*.

        Lines end at ``\\n``, ``\\r\\n`` or ``\\r``; terminators are dropped and
        the remaining bytes are kept as they are.
        """
        for line in data.splitlines():
            self.append_row(line)
