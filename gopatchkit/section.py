"""Split a patch program into changes without parsing their contents."""

from __future__ import annotations

from dataclasses import dataclass, field

from .fileset import NO_POS, FileSet, Pos


class SplitError(ValueError):
    """Raised when a patch program cannot be split into changes."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


@dataclass(kw_only=True)
class Line:
    """A single line from the patch and where it starts."""

    start_pos: Pos = NO_POS
    text: bytes = b""

    def __post_init__(self) -> None:
        self.start_pos = Pos(self.start_pos)

    def pos(self) -> Pos:
        """Position at which this line begins."""
        return self.start_pos

    def end(self) -> Pos:
        """Position just past this line."""
        return self.start_pos + len(self.text)


@dataclass(kw_only=True)
class Change:
    """A single change of a program: header, metavariables and patch."""

    header_pos: Pos = NO_POS
    name: str = ""
    meta: list[Line] = field(default_factory=list)
    at_pos: Pos = NO_POS
    patch: list[Line] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.header_pos = Pos(self.header_pos)
        self.at_pos = Pos(self.at_pos)

    def pos(self) -> Pos:
        """Position at which this change begins."""
        return self.header_pos

    def end(self) -> Pos:
        """Position of the first character after this change."""
        if self.patch:
            return self.patch[-1].end()
        return self.at_pos + 2


@dataclass(frozen=True)
class LinePos:
    """Maps an offset in a buffer to the position the line came from."""

    offset: int
    pos: Pos


def _quote_str(text: str) -> str:
    escapes = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}
    return '"' + "".join(escapes.get(ch, ch) for ch in text) + '"'


def _quote_rune(ch: str) -> str:
    escapes = {"\\": "\\\\", "'": "\\'", "\n": "\\n", "\t": "\\t", "\r": "\\r"}
    return "'" + escapes.get(ch, ch) + "'"


def _is_comment(text: bytes) -> bool:
    return text.lstrip().startswith(b"#")


def _validate_change_name(name: str) -> tuple[int, str] | None:
    """Return the index and character of the first invalid character, if any."""
    for index, ch in enumerate(name):
        if ch.isalpha() or ch == "_":
            continue
        if index > 0 and ch.isdecimal():
            continue
        return index, ch
    return None


class _Splitter:
    def __init__(self, file, content: bytes) -> None:
        self.file = file
        self.content = content
        self.text = b""
        self.pos = NO_POS
        self.eof = False
        self.start_offset = 0
        self.offset = 0
        self.errors: list[str] = []

    def errf(self, offset: int, msg: str) -> None:
        position = self.file.position(self.file.pos(offset))
        self.errors.append(f"{position}: {msg}")

    def next(self) -> None:
        content = self.content
        while self.offset < len(content):
            self.start_offset = self.offset
            end = content.find(b"\n", self.offset)
            self.offset = len(content) if end < 0 else end
            self.text = content[self.start_offset:self.offset]
            self.pos = self.file.pos(self.start_offset)
            self.offset += 1
            if not _is_comment(self.text):
                return
        self.offset = min(self.offset, len(content))
        self.pos = NO_POS
        self.text = b""
        self.eof = True

    def read_program(self) -> list[Change]:
        program = []
        while not self.eof:
            program.append(self.read_change())
        if not program:
            self.errf(self.offset, "unexpected EOF, at least one change is required")
        return program

    def read_change(self) -> Change:
        header_pos = self.pos
        name = self.read_name()
        meta = self.read_meta()
        at_pos = self.pos
        patch = self.read_patch()
        return Change(header_pos=header_pos, name=name, meta=meta, at_pos=at_pos, patch=patch)

    def read_name(self) -> str:
        text = self.text.decode("utf-8", errors="replace")
        start = self.start_offset
        try:
            if text == "@@":
                return ""
            if len(text) > 2 and text[0] == "@" and text[-1] == "@":
                name = text[1:-1]
                stripped = name.lstrip()
                shift = 1 + len(name[: len(name) - len(stripped)].encode("utf-8"))
                name = stripped.rstrip()
                invalid = _validate_change_name(name)
                if invalid is None:
                    return name
                index, ch = invalid
                byte_index = len(name[:index].encode("utf-8"))
                self.errf(
                    start + shift + byte_index,
                    "invalid name: must be a valid Go identifier: "
                    f"unexpected character {_quote_rune(ch)}",
                )
            else:
                self.errf(start, f'unexpected {_quote_str(text)}, expected "@@" or "@ change_name @"')
            return ""
        finally:
            self.next()

    def read_meta(self) -> list[Line]:
        lines = []
        while not self.eof:
            if self.text == b"@@":
                return lines
            lines.append(Line(start_pos=self.pos, text=self.text))
            self.next()
        self.errf(self.offset, 'unexpected EOF, expected "@@"')
        return []

    def read_patch(self) -> list[Line]:
        self.next()
        lines = []
        while not self.eof:
            if self.text.startswith(b"@"):
                break
            lines.append(Line(start_pos=self.pos, text=self.text))
            self.next()
        return lines


def split(fset: FileSet, filename: str, content: bytes) -> list[Change]:
    """Split a patch program into its changes, raising SplitError on problems."""
    file = fset.add_file(filename, -1, len(content))
    file.set_lines_for_content(content)
    splitter = _Splitter(file, content)
    splitter.next()
    program = splitter.read_program()
    if splitter.errors:
        raise SplitError(splitter.errors)
    return program


def to_bytes(section: list[Line]) -> tuple[bytes, list[LinePos]]:
    """Join a section's lines and map each line's offset to its original position."""
    chunks = []
    lines = []
    size = 0
    for line in section:
        lines.append(LinePos(offset=size, pos=line.pos()))
        chunks.append(line.text + b"\n")
        size += len(line.text) + 1
    lines.sort(key=lambda lp: lp.offset)
    return b"".join(chunks), lines