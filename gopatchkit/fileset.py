"""Source positions: compact positions, files with line tables and file sets."""

from __future__ import annotations

import bisect
from dataclasses import dataclass


class Pos(int):
    """A compact position inside a FileSet; zero means no position."""

    __slots__ = ()

    def is_valid(self) -> bool:
        """Report whether this is a real position."""
        return int(self) != 0

    def __add__(self, other):
        result = int.__add__(self, other)
        if result is NotImplemented:
            return result
        return Pos(result)

    __radd__ = __add__

    def __sub__(self, other):
        result = int.__sub__(self, other)
        if result is NotImplemented:
            return result
        return Pos(result)

    def __repr__(self) -> str:
        return f"Pos({int(self)})"


NO_POS = Pos(0)


@dataclass(frozen=True)
class Position:
    """Human-readable location: file name, byte offset, line and column."""

    filename: str = ""
    offset: int = 0
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        text = self.filename
        if self.line > 0:
            if text:
                text += ":"
            text += str(self.line)
            if self.column != 0:
                text += f":{self.column}"
        return text or "-"


@dataclass(frozen=True)
class _LineInfo:
    offset: int
    filename: str
    line: int
    column: int


class File:
    """A single source file registered in a FileSet."""

    def __init__(self, name: str, base: int, size: int) -> None:
        self.name = name
        self.base = base
        self.size = size
        self._lines: list[int] = [0]
        self._infos: list[_LineInfo] = []

    def __repr__(self) -> str:
        return f"File(name={self.name!r}, base={self.base}, size={self.size})"

    def pos(self, offset: int) -> Pos:
        """Return the Pos for a byte offset in this file."""
        if offset < 0 or offset > self.size:
            raise ValueError(f"invalid file offset {offset} (should be <= {self.size})")
        return Pos(self.base + offset)

    def offset(self, pos: int) -> int:
        """Return the byte offset of a Pos that lies in this file."""
        if pos < self.base or pos > self.base + self.size:
            raise ValueError(f"invalid Pos value {int(pos)} (should be in [{self.base}, {self.base + self.size}])")
        return int(pos) - self.base

    def line(self, pos: int) -> int:
        """Return the line number of a Pos."""
        return self.position(pos).line

    def set_lines_for_content(self, content: bytes | str) -> None:
        """Compute line starts from the file's contents."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        if not content:
            self._lines = []
            return
        size = len(content)
        self._lines = [0] + [
            index + 1 for index, byte in enumerate(content) if byte == 0x0A and index + 1 < size
        ]

    def add_line_column_info(self, offset: int, filename: str, line: int, column: int) -> None:
        """Record that the text at offset originates from filename:line:column.

        Entries must be added in increasing offset order; others are ignored.
        """
        if offset < self.size and (not self._infos or self._infos[-1].offset < offset):
            self._infos.append(_LineInfo(offset, filename, line, column))

    def position(self, pos: int) -> Position:
        """Return the Position of a Pos, honouring recorded line information."""
        if not pos:
            return Position()
        offset = self.offset(pos)
        filename, line, column = self._unpack(offset)
        return Position(filename=filename, offset=offset, line=line, column=column)

    def _unpack(self, offset: int) -> tuple[str, int, int]:
        filename = self.name
        line = column = 0
        index = bisect.bisect_right(self._lines, offset) - 1
        if index >= 0:
            line = index + 1
            column = offset - self._lines[index] + 1
        if self._infos:
            info_index = bisect.bisect_right(self._infos, offset, key=lambda info: info.offset) - 1
            if info_index >= 0:
                alt = self._infos[info_index]
                filename = alt.filename
                alt_line_index = bisect.bisect_right(self._lines, alt.offset) - 1
                if alt_line_index >= 0:
                    distance = line - (alt_line_index + 1)
                    line = alt.line + distance
                    if alt.column == 0:
                        column = 0
                    elif distance == 0:
                        column = alt.column + (offset - alt.offset)
        return filename, line, column


class FileSet:
    """A collection of files sharing one position space."""

    def __init__(self) -> None:
        self._base = 1
        self._files: list[File] = []

    @property
    def base(self) -> int:
        """The base the next added file will receive by default."""
        return self._base

    def add_file(self, filename: str, base: int, size: int) -> File:
        """Add a file; a negative base means the next free base."""
        if base < 0:
            base = self._base
        if base < self._base:
            raise ValueError(f"invalid base {base} (should be >= {self._base})")
        if size < 0:
            raise ValueError(f"invalid size {size} (should be >= 0)")
        new_file = File(filename, base, size)
        self._base = base + size + 1
        self._files.append(new_file)
        return new_file

    def file(self, pos: int | None) -> File | None:
        """Return the file containing pos, or None."""
        if not pos:
            return None
        index = bisect.bisect_right(self._files, pos, key=lambda f: f.base) - 1
        if index >= 0:
            candidate = self._files[index]
            if candidate.base <= pos <= candidate.base + candidate.size:
                return candidate
        return None

    def position(self, pos: int | None) -> Position:
        """Return the Position of pos, or an empty Position if unknown."""
        found = self.file(pos)
        if found is None:
            return Position()
        return found.position(pos)